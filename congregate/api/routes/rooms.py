from flask import Blueprint, request, jsonify, current_app
from congregate.services.room_service import RoomService
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response
from congregate.utils.pagination import page_args

rooms_bp = Blueprint('rooms', __name__)

@rooms_bp.route('/', methods=['GET'])
def list_rooms():
    try:
        page, size = page_args(request.args, current_app.config['DEFAULT_PAGE_SIZE'], current_app.config['MAX_PAGE_SIZE'])
    except ValueError as e:
        return error_response(e)
    rooms, pagination = RoomService.list_rooms(page, size)
    return jsonify({'data': [r.to_dict() for r in rooms], **pagination})

@rooms_bp.route('/search', methods=['GET'])
def search_rooms():
    try:
        rooms = RoomService.search_rooms(request.args.get('name', ''))
    except ValueError as e:
        return error_response(e)
    return jsonify([r.to_dict() for r in rooms])

@rooms_bp.route('/<int:room_id>', methods=['GET'])
def get_room(room_id):
    try:
        return jsonify(RoomService.get_room_details(room_id))
    except ValueError as e:
        return error_response(e)

@rooms_bp.route('/', methods=['POST'])
@token_required
@admin_required
def create_room(current_user):
    try:
        room = RoomService.create_room(request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Room created', 'room': room.to_dict()}), 201

@rooms_bp.route('/<int:room_id>', methods=['PUT'])
@token_required
@admin_required
def update_room(current_user, room_id):
    try:
        room = RoomService.update_room(room_id, request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Room updated', 'room': room.to_dict()})

@rooms_bp.route('/<int:room_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_room(current_user, room_id):
    try:
        RoomService.delete_room(room_id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Room deleted'})
