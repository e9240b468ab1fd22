from datetime import datetime

from congregate.extensions import db
from congregate.models import Booking, Room
from congregate.utils.dates import format_date, format_time
from congregate.utils.db import commit_or_raise, get_or_404
from congregate.utils.pagination import paginate
from congregate.utils.validators import check_length

ROOM_FIELDS = ('name', 'size', 'description', 'exclusive', 'status')


class RoomService:

    @staticmethod
    def validate_room_data(data, partial=False):
        if not data:
            raise ValueError("No input data provided.")
        if not partial or 'name' in data:
            name = data.get('name')
            if not isinstance(name, str) or not name.strip():
                raise ValueError("Room name is required.")
        check_length(data, 'name', 100, label='Name')
        check_length(data, 'description', 500, label='Description')
        if data.get('description') is not None and not data['description'].strip():
            raise ValueError("Description cannot be blank.")
        size = data.get('size')
        if size is not None and (isinstance(size, bool) or not isinstance(size, int) or size <= 0):
            raise ValueError("Size must be a positive number.")
        for flag in ('exclusive', 'status'):
            if data.get(flag) is not None and not isinstance(data[flag], bool):
                raise ValueError(f"{flag} must be true or false.")

    @staticmethod
    def create_room(data):
        RoomService.validate_room_data(data)
        if Room.query.filter_by(name=data['name'].strip()).first():
            raise ValueError("Room name already exists.")

        room = Room(
            name=data['name'].strip(),
            size=data.get('size'),
            description=data.get('description'),
            exclusive=data.get('exclusive', False),
            status=data.get('status', True)
        )
        db.session.add(room)
        commit_or_raise()
        return room

    @staticmethod
    def list_rooms(page=1, page_size=10):
        return paginate(Room.query.order_by(Room.name), page, page_size)

    @staticmethod
    def find_next_booking(bookings, now=None):
        """Recurring bookings come first, then the earliest upcoming dated one."""
        now = now or datetime.now()
        today = now.date()
        current_time = now.time()

        upcoming = [
            b for b in bookings
            if b.repeat or (b.date and (b.date > today or (b.date == today and b.start_time > current_time)))
        ]
        if not upcoming:
            return None
        upcoming.sort(key=lambda b: (0 if b.repeat else 1, b.date or today, b.start_time))
        return upcoming[0]

    @staticmethod
    def get_room_details(room_id, now=None):
        room = get_or_404(Room, room_id, "Room not found.")
        bookings = Booking.query.filter(Booking.room_id == room.id).order_by(Booking.date).all()
        next_booking = RoomService.find_next_booking(bookings, now)

        data = room.to_dict()
        data['nextBooking'] = {
            'id': next_booking.id,
            'description': next_booking.description,
            'date': format_date(next_booking.date),
            'start_time': format_time(next_booking.start_time),
            'end_time': format_time(next_booking.end_time),
            'repeat': next_booking.repeat,
            'day_repeat': next_booking.day_repeat,
            'user': {
                'id': next_booking.user.id,
                'name': next_booking.user.name,
                'email': next_booking.user.email
            } if next_booking.user else None
        } if next_booking else None
        data['totalBookings'] = len(bookings)
        return data

    @staticmethod
    def update_room(room_id, data):
        room = get_or_404(Room, room_id, "Room not found.")
        RoomService.validate_room_data(data, partial=True)

        if 'name' in data:
            name = data['name'].strip()
            duplicate = Room.query.filter(Room.name == name, Room.id != room.id).first()
            if duplicate:
                raise ValueError("Room name already exists.")
            room.name = name
        for field in ROOM_FIELDS[1:]:
            if field in data:
                setattr(room, field, data[field])

        commit_or_raise()
        return room

    @staticmethod
    def delete_room(room_id):
        room = get_or_404(Room, room_id, "Room not found.")
        if room.bookings:
            raise ValueError("Cannot delete room: it still has bookings.")
        db.session.delete(room)
        commit_or_raise()

    @staticmethod
    def search_rooms(name):
        if not name or not name.strip():
            raise ValueError("Name is required for search.")
        return Room.query.filter(Room.name.ilike(f"%{name.strip()}%")).order_by(Room.name).all()
