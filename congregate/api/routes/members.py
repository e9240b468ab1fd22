from flask import Blueprint, request, jsonify, current_app
from congregate.services.member_service import MemberService
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response
from congregate.utils.pagination import page_args

members_bp = Blueprint('members', __name__)

@members_bp.route('/', methods=['POST'])
@token_required
@admin_required
def create_member(current_user):
    try:
        member = MemberService.create_member(request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify(member.to_dict()), 201

@members_bp.route('/', methods=['GET'])
@token_required
@admin_required
def list_members(current_user):
    try:
        page, size = page_args(request.args, current_app.config['DEFAULT_PAGE_SIZE'], current_app.config['MAX_PAGE_SIZE'])
    except ValueError as e:
        return error_response(e)
    members, pagination = MemberService.list_members(page, size)
    return jsonify({'data': [m.to_dict() for m in members], **pagination})

@members_bp.route('/search', methods=['POST'])
@token_required
@admin_required
def search_members(current_user):
    data = request.get_json(silent=True) or {}
    try:
        members = MemberService.search_members(data.get('full_name'))
    except ValueError as e:
        return error_response(e)
    return jsonify([m.to_dict() for m in members])

@members_bp.route('/filter', methods=['POST'])
@token_required
@admin_required
def filter_members(current_user):
    data = request.get_json(silent=True) or {}
    try:
        members = MemberService.filter_members(data.get('field'), data.get('value'), data.get('operator'))
    except ValueError as e:
        return error_response(e)
    return jsonify([m.to_dict() for m in members])

@members_bp.route('/<int:member_id>', methods=['GET'])
@token_required
@admin_required
def get_member(current_user, member_id):
    try:
        member = MemberService.get_member(member_id)
    except ValueError as e:
        return error_response(e)
    return jsonify(member.to_dict())

@members_bp.route('/<int:member_id>', methods=['PUT'])
@token_required
@admin_required
def update_member(current_user, member_id):
    try:
        member = MemberService.update_member(member_id, request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify(member.to_dict())

@members_bp.route('/<int:member_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_member(current_user, member_id):
    try:
        MemberService.delete_member(member_id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Member deleted'})
