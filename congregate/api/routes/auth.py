from flask import Blueprint, request, jsonify, current_app
from congregate.services.user_service import UserService
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response
from congregate.utils.tokens import generate_token

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/register', methods=['POST'])
@token_required
@admin_required
def register(current_user):
    try:
        user = UserService.create_user(request.get_json(silent=True) or {})
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'User created successfully', 'user': user.to_dict()}), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = UserService.authenticate(data.get('email'), data.get('password'))

    if not user:
        current_app.logger.info("Failed login for %s", data.get('email'))
        return jsonify({'message': 'Invalid credentials'}), 401

    return jsonify({'token': generate_token(user), 'user': user.to_dict()})

@auth_bp.route('/profile', methods=['GET'])
@token_required
def profile(current_user):
    return jsonify(current_user.to_dict())

@auth_bp.route('/edit', methods=['PUT'])
@token_required
def edit_profile(current_user):
    try:
        user = UserService.update_user(current_user.id, request.get_json(silent=True), allowed=('name', 'phone'))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Profile updated', 'user': user.to_dict()})

@auth_bp.route('/delete', methods=['DELETE'])
@token_required
def delete_account(current_user):
    try:
        UserService.delete_user(current_user.id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Account deleted'})

@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout(current_user):
    # Tokens are stateless; the client just drops it
    return jsonify({'message': 'Logged out'})
