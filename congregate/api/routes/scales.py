from flask import Blueprint, request, jsonify, current_app
from congregate.services.scale_service import ScaleService
from congregate.utils.decorators import token_required, admin_required
from congregate.utils.errors import error_response
from congregate.utils.pagination import page_args

scales_bp = Blueprint('scales', __name__)

@scales_bp.route('/', methods=['POST'])
@token_required
@admin_required
def create_scale(current_user):
    try:
        scale = ScaleService.create_scale(request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Scale created', 'scale': scale.to_dict()}), 201

@scales_bp.route('/', methods=['GET'])
@token_required
def list_scales(current_user):
    try:
        page, size = page_args(
            request.args, current_app.config['SCALE_PAGE_SIZE'], current_app.config['MAX_PAGE_SIZE'], size_key='pageSize'
        )
    except ValueError as e:
        return error_response(e)
    scales, pagination = ScaleService.list_scales(page, size)
    return jsonify({'scales': [s.to_dict() for s in scales], 'pagination': pagination})

@scales_bp.route('/search', methods=['POST'])
@token_required
def search_scales(current_user):
    data = request.get_json(silent=True) or {}
    try:
        scales = ScaleService.search_scales(data.get('name'))
    except ValueError as e:
        return error_response(e)
    return jsonify([s.to_dict() for s in scales])

@scales_bp.route('/<int:scale_id>', methods=['GET'])
@token_required
def get_scale(current_user, scale_id):
    try:
        scale = ScaleService.get_scale(scale_id)
    except ValueError as e:
        return error_response(e)
    return jsonify(scale.to_dict())

@scales_bp.route('/<int:scale_id>', methods=['PUT'])
@token_required
@admin_required
def update_scale(current_user, scale_id):
    try:
        scale = ScaleService.update_scale(scale_id, request.get_json(silent=True))
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Scale updated', 'scale': scale.to_dict()})

@scales_bp.route('/<int:scale_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_scale(current_user, scale_id):
    try:
        ScaleService.delete_scale(scale_id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Scale deleted'})

@scales_bp.route('/<int:scale_id>/duplicate', methods=['POST'])
@token_required
@admin_required
def duplicate_scale(current_user, scale_id):
    try:
        scale = ScaleService.duplicate_scale(scale_id)
    except ValueError as e:
        return error_response(e)
    return jsonify({'message': 'Scale duplicated', 'scale': scale.to_dict()}), 201
