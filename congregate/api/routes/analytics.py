from flask import Blueprint, jsonify
from congregate.services.analytics_service import AnalyticsService
from congregate.services.member_service import MemberService
from congregate.utils.decorators import token_required, admin_required

analytics_bp = Blueprint('analytics', __name__)

@analytics_bp.route('/', methods=['GET'])
@token_required
@admin_required
def get_stats(current_user):
    return jsonify(AnalyticsService.get_stats())

@analytics_bp.route('/members', methods=['GET'])
@token_required
@admin_required
def get_member_analytics(current_user):
    return jsonify(MemberService.get_analytics())
