import logging
from datetime import date, timedelta

from sqlalchemy import and_, or_
from congregate.extensions import db
from congregate.models import Booking, Room
from congregate.models.booking import REPEAT_CHOICES
from congregate.services.recurrence import resolve_month_day, resolve_weekday
from congregate.utils.dates import (
    MONTH_ABBR, WEEKDAY_ABBR, format_date, format_time, parse_date, parse_time, weekday_index
)
from congregate.utils.db import commit_or_raise, get_or_404
from congregate.utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = ('room', 'room_id', 'date', 'start_time', 'end_time', 'repeat', 'day_repeat')


class BookingService:

    @staticmethod
    def format_booking(booking: Booking) -> dict:
        """Shape a booking the way the list endpoints (and the calendar) consume it."""
        repeat_day = None
        if booking.day_repeat is not None:
            if booking.repeat in ('day', 'week') and 0 <= booking.day_repeat <= 6:
                repeat_day = WEEKDAY_ABBR[booking.day_repeat]
            elif booking.repeat == 'month':
                repeat_day = booking.day_repeat

        if booking.date:
            day_of_week = WEEKDAY_ABBR[weekday_index(booking.date)]
            month = MONTH_ABBR[booking.date.month - 1]
        else:
            day_of_week = repeat_day if booking.repeat in ('day', 'week') else None
            month = None

        room = booking.room
        user = booking.user
        return {
            'id': booking.id,
            'description': booking.description,
            'room': {'id': room.id, 'name': room.name, 'size': room.size} if room else None,
            'date': format_date(booking.date),
            'day_of_week': day_of_week,
            'month': month,
            'start_time': format_time(booking.start_time),
            'end_time': format_time(booking.end_time),
            'repeat': booking.repeat,
            'repeat_day': repeat_day,
            'day_repeat': booking.day_repeat,
            'user': {
                'id': user.id,
                'name': user.name,
                'email': user.email,
                'phone': user.phone
            } if user else None
        }

    @staticmethod
    def clean_booking_data(data: dict) -> dict:
        """Validate a booking payload and return column values ready to store.

        Recurring bookings keep no date: when one is sent, it only serves to
        derive ``day_repeat`` (weekday for day/week, day of month for month).
        """
        description = data.get('description')
        if not isinstance(description, str) or not description.strip():
            raise ValueError("Description is required.")
        if len(description) > 255:
            raise ValueError("Description must have at most 255 characters.")

        room_id = data.get('room_id', data.get('room'))
        if isinstance(room_id, dict):
            room_id = room_id.get('id')
        if room_id in (None, '') or (isinstance(room_id, str) and not room_id.strip()):
            raise ValueError("Room is required.")
        try:
            room_id = int(room_id)
        except (TypeError, ValueError):
            raise ValueError("Room must be a valid id.")
        if db.session.get(Room, room_id) is None:
            raise NotFoundError("Room not found.")

        if not data.get('start_time') or not data.get('end_time'):
            raise ValueError("Start and end times are required.")
        start_time = parse_time(data.get('start_time'))
        if start_time is None:
            raise ValueError("Invalid start time. Use HH:MM (e.g. 09:30, 14:00).")
        end_time = parse_time(data.get('end_time'))
        if end_time is None:
            raise ValueError("Invalid end time. Use HH:MM (e.g. 10:30, 15:00).")
        if start_time >= end_time:
            raise ValueError("Start time must be before end time.")

        repeat = data.get('repeat')
        if repeat in ('', 'none', 'null'):
            repeat = None
        if repeat is not None and repeat not in REPEAT_CHOICES:
            raise ValueError("Invalid repeat type. Use: none, day, week or month.")

        booking_date = None
        if data.get('date'):
            booking_date = parse_date(data['date'])
            if booking_date is None:
                raise ValueError("Date must be in DD/MM/YYYY or YYYY-MM-DD format.")

        day_repeat = None
        if repeat is None:
            if booking_date is None:
                raise ValueError("Date is required for non-recurring bookings.")
        elif repeat in ('day', 'week'):
            if booking_date is not None:
                day_repeat = weekday_index(booking_date)
            else:
                day_repeat = resolve_weekday(data.get('day_repeat'))
                if day_repeat is None:
                    raise ValueError("For daily/weekly repeats, day_repeat must be 0-6 (Sunday-Saturday).")
        else:
            if booking_date is not None:
                day_repeat = booking_date.day
            else:
                day_repeat = resolve_month_day(data.get('day_repeat'))
                if day_repeat is None:
                    raise ValueError("For monthly repeats, day_repeat must be 1-31 (day of month).")

        return {
            'description': description.strip(),
            'room_id': room_id,
            'date': None if repeat else booking_date,
            'start_time': start_time,
            'end_time': end_time,
            'repeat': repeat,
            'day_repeat': day_repeat
        }

    @staticmethod
    def find_conflict(values: dict, exclude_id=None):
        """Overlapping booking in the same room and slot, if any.

        (StartA < EndB) and (EndA > StartB), on the same date for one-time
        bookings or on the same repeat rule for recurring ones.
        """
        query = Booking.query.filter(
            Booking.room_id == values['room_id'],
            Booking.start_time < values['end_time'],
            Booking.end_time > values['start_time']
        )
        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        if values['repeat'] is None:
            query = query.filter(Booking.date == values['date'])
        else:
            query = query.filter(
                Booking.repeat == values['repeat'],
                Booking.day_repeat == values['day_repeat']
            )
        return query.first()

    @staticmethod
    def create_booking(user, data: dict) -> Booking:
        values = BookingService.clean_booking_data(data)

        if BookingService.find_conflict(values):
            raise ConflictError("Schedule conflict: there is already a booking in this interval.")

        booking = Booking(user_id=user.id, **values)
        db.session.add(booking)
        commit_or_raise()
        logger.info("Booking %s created by user %s in room %s", booking.id, user.id, booking.room_id)
        return booking

    @staticmethod
    def update_booking(booking_id, data: dict) -> Booking:
        booking = get_or_404(Booking, booking_id, "Booking not found.")

        merged = {
            'description': booking.description,
            'room_id': booking.room_id,
            'date': booking.date,
            'start_time': booking.start_time,
            'end_time': booking.end_time,
            'repeat': booking.repeat,
            'day_repeat': booking.day_repeat
        }
        if 'room' in data and 'room_id' not in data:
            merged['room_id'] = data['room']
        merged.update({k: v for k, v in data.items() if k in merged})
        # An explicit repeat day wins over the stored date
        if merged['repeat'] in REPEAT_CHOICES and 'day_repeat' in data and 'date' not in data:
            merged['date'] = None
        values = BookingService.clean_booking_data(merged)

        if any(field in data for field in SCHEDULE_FIELDS):
            if BookingService.find_conflict(values, exclude_id=booking.id):
                raise ConflictError("Schedule conflict: there is already a booking in this interval.")

        for key, value in values.items():
            setattr(booking, key, value)
        commit_or_raise()
        return booking

    @staticmethod
    def delete_booking(booking_id):
        booking = get_or_404(Booking, booking_id, "Booking not found.")
        db.session.delete(booking)
        commit_or_raise()
        logger.info("Booking %s deleted", booking_id)

    @staticmethod
    def get_booking(booking_id) -> Booking:
        return get_or_404(Booking, booking_id, "Booking not found.")

    @staticmethod
    def _ordered(query):
        return query.order_by(Booking.date, Booking.start_time, Booking.id).all()

    @staticmethod
    def list_bookings():
        return BookingService._ordered(Booking.query)

    @staticmethod
    def get_user_bookings(user_id):
        return BookingService._ordered(Booking.query.filter(Booking.user_id == user_id))

    @staticmethod
    def get_today_bookings(today: date = None):
        """Bookings happening today: dated today, or repeating onto today."""
        today = today or date.today()
        return BookingService._ordered(Booking.query.filter(or_(
            Booking.date == today,
            Booking.repeat == 'day',
            and_(Booking.repeat == 'week', Booking.day_repeat == weekday_index(today)),
            and_(Booking.repeat == 'month', Booking.day_repeat == today.day)
        )))

    @staticmethod
    def get_week_bookings(today: date = None):
        """Bookings in the current Sunday-to-Saturday week."""
        today = today or date.today()
        start_of_week = today - timedelta(days=weekday_index(today))
        end_of_week = start_of_week + timedelta(days=6)
        month_days = [(start_of_week + timedelta(days=i)).day for i in range(7)]
        return BookingService._ordered(Booking.query.filter(or_(
            Booking.date.between(start_of_week, end_of_week),
            Booking.repeat.in_(('day', 'week')),
            and_(Booking.repeat == 'month', Booking.day_repeat.in_(month_days))
        )))

    @staticmethod
    def get_month_bookings(today: date = None):
        today = today or date.today()
        start_of_month = today.replace(day=1)
        next_month = (start_of_month + timedelta(days=32)).replace(day=1)
        return BookingService._ordered(Booking.query.filter(or_(
            and_(Booking.date >= start_of_month, Booking.date < next_month),
            Booking.repeat.isnot(None)
        )))

    @staticmethod
    def search_by_description(text):
        if not text or not text.strip():
            raise ValueError("Description is required for search.")
        return BookingService._ordered(Booking.query.filter(Booking.description.ilike(f"%{text.strip()}%")))

    @staticmethod
    def filter_bookings(criteria: dict):
        query = Booking.query
        if criteria.get('user_id'):
            query = query.filter(Booking.user_id == criteria['user_id'])
        if criteria.get('date'):
            day = parse_date(criteria['date'])
            if day is None:
                raise ValueError("Date must be in DD/MM/YYYY or YYYY-MM-DD format.")
            query = query.filter(Booking.date == day)
        if criteria.get('room'):
            query = query.filter(Booking.room_id == criteria['room'])
        if criteria.get('repeat'):
            query = query.filter(Booking.repeat == criteria['repeat'])
        if criteria.get('day_repeat') is not None:
            query = query.filter(Booking.day_repeat == criteria['day_repeat'])
        return BookingService._ordered(query)
