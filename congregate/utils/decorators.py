from functools import wraps
from flask import request, jsonify, current_app
import jwt
from congregate.extensions import db
from congregate.models import User
from congregate.utils.tokens import decode_token, extract_token

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = extract_token(request.headers.get('Authorization'))

        if not token:
            return jsonify({'message': 'Token is missing!'}), 401

        try:
            data = decode_token(token)
        except jwt.InvalidTokenError as e:
            current_app.logger.info("Rejected token: %s", e)
            return jsonify({'message': 'Token is invalid or expired!'}), 401

        current_user = db.session.get(User, data.get('user_id'))
        if not current_user:
            return jsonify({'message': 'Token is invalid!', 'error': 'User not found'}), 401

        return f(current_user, *args, **kwargs)

    return decorated

def admin_required(f):
    # Stack under token_required, which passes current_user as the first argument:
    # @token_required
    # @admin_required
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = args[0]
        if not current_user.is_admin:
            return jsonify({'message': 'Admin privilege required'}), 403
        return f(*args, **kwargs)
    return decorated
