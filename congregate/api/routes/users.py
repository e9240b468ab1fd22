from flask import Blueprint, request, jsonify, current_app
from congregate.services.user_service import UserService
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response
from congregate.utils.pagination import page_args

users_bp = Blueprint('users', __name__)

@users_bp.route('/', methods=['POST'])
@token_required
@admin_required
def create_user(current_user):
    try:
        user = UserService.create_user(request.get_json(silent=True) or {})
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'User created successfully', 'user': user.to_dict()}), 201

@users_bp.route('/', methods=['GET'])
@token_required
@admin_required
def list_users(current_user):
    try:
        page, size = page_args(request.args, current_app.config['DEFAULT_PAGE_SIZE'], current_app.config['MAX_PAGE_SIZE'])
    except ValueError as e:
        return error_response(e)
    users, pagination = UserService.list_users(page, size)
    return jsonify({'data': [u.to_dict() for u in users], **pagination})

@users_bp.route('/scale', methods=['GET'])
@token_required
@admin_required
def list_users_for_scale(current_user):
    return jsonify([u.to_dict() for u in UserService.list_all_users()])

@users_bp.route('/<int:user_id>', methods=['GET'])
@token_required
@admin_required
def show_user(current_user, user_id):
    try:
        user = UserService.get_user(user_id)
    except ValueError as e:
        return error_response(e)
    return jsonify(user.to_dict())

@users_bp.route('/<int:user_id>', methods=['PUT'])
@token_required
@admin_required
def update_user(current_user, user_id):
    try:
        user = UserService.update_user(user_id, request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'User updated', 'user': user.to_dict()})

@users_bp.route('/<int:user_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_user(current_user, user_id):
    try:
        UserService.delete_user(user_id, current_user=current_user)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'User deleted'})
