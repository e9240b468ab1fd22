from flask import Blueprint, Response, request, jsonify
from congregate.services.booking_service import BookingService
from congregate.services.calendar_service import CalendarService, parse_room_filter
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response

bookings_bp = Blueprint('bookings', __name__)

def _formatted(bookings):
    return jsonify([BookingService.format_booking(b) for b in bookings])

@bookings_bp.route('/', methods=['POST'])
@token_required
def create_booking(current_user):
    try:
        booking = BookingService.create_booking(current_user, request.get_json(silent=True) or {})
    except ValueError as e:
        return error_response(e)
    return jsonify(booking.to_dict()), 201

@bookings_bp.route('/', methods=['GET'])
def list_bookings():
    return _formatted(BookingService.list_bookings())

@bookings_bp.route('/my', methods=['GET'])
@token_required
def get_my_bookings(current_user):
    return _formatted(BookingService.get_user_bookings(current_user.id))

@bookings_bp.route('/today', methods=['GET'])
def get_today_bookings():
    return _formatted(BookingService.get_today_bookings())

@bookings_bp.route('/week', methods=['GET'])
def get_week_bookings():
    return _formatted(BookingService.get_week_bookings())

@bookings_bp.route('/month', methods=['GET'])
def get_month_bookings():
    return _formatted(BookingService.get_month_bookings())

@bookings_bp.route('/search', methods=['GET'])
@token_required
def search_bookings(current_user):
    try:
        bookings = BookingService.search_by_description(request.args.get('description', ''))
    except ValueError as e:
        return error_response(e)
    return _formatted(bookings)

@bookings_bp.route('/filter', methods=['POST'])
@token_required
def filter_bookings(current_user):
    try:
        bookings = BookingService.filter_bookings(request.get_json(silent=True) or {})
    except ValueError as e:
        return error_response(e)
    return _formatted(bookings)

# --- CALENDAR ---

@bookings_bp.route('/occurrences', methods=['GET'])
def get_occurrences():
    _, occurrences = CalendarService.get_occurrences(parse_room_filter(request.args.get('rooms')))
    return jsonify([o.to_dict() for o in occurrences])

@bookings_bp.route('/calendar', methods=['GET'])
def get_calendar_events():
    templates, occurrences = CalendarService.get_occurrences(parse_room_filter(request.args.get('rooms')))
    return jsonify(CalendarService.to_events(templates, occurrences))

@bookings_bp.route('/calendar.ics', methods=['GET'])
def get_calendar_feed():
    templates, occurrences = CalendarService.get_occurrences(parse_room_filter(request.args.get('rooms')))
    return Response(
        CalendarService.to_ical(templates, occurrences),
        mimetype='text/calendar',
        headers={'Content-Disposition': 'attachment; filename=bookings.ics'}
    )

# --- SINGLE BOOKING ---

@bookings_bp.route('/<int:booking_id>', methods=['GET'])
def get_booking(booking_id):
    try:
        booking = BookingService.get_booking(booking_id)
    except ValueError as e:
        return error_response(e)
    return jsonify(BookingService.format_booking(booking))

@bookings_bp.route('/<int:booking_id>', methods=['PUT'])
@token_required
@admin_required
def update_booking(current_user, booking_id):
    try:
        booking = BookingService.update_booking(booking_id, request.get_json(silent=True) or {})
    except ValueError as e:
        return error_response(e)
    return jsonify(booking.to_dict()), 200

@bookings_bp.route('/<int:booking_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_booking(current_user, booking_id):
    try:
        BookingService.delete_booking(booking_id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Booking deleted'}), 200
