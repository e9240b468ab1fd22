import logging

from werkzeug.security import check_password_hash, generate_password_hash
from congregate.extensions import db
from congregate.models import User
from congregate.utils.db import commit_or_raise, get_or_404
from congregate.utils.pagination import paginate
from congregate.utils.validators import check_choice, check_email, check_length, check_phone, require_fields

logger = logging.getLogger(__name__)

ROLES = ('user', 'admin')


class UserService:

    @staticmethod
    def validate_user_data(data, partial=False):
        if not data:
            raise ValueError("No input data provided.")
        if not partial:
            require_fields(data, ('name', 'email', 'phone', 'password'))
        if 'name' in data:
            check_length(data, 'name', 100, min_len=1, label='Name')
        if 'email' in data:
            check_email(data['email'])
        if 'phone' in data and data['phone'] is not None:
            check_phone(data['phone'])
        if data.get('password'):
            password = data['password']
            if len(password) < 6 or len(password) > 50:
                raise ValueError("Password must have between 6 and 50 characters.")
        check_choice(data, 'role', ROLES, label='Role')

    @staticmethod
    def create_user(data):
        UserService.validate_user_data(data)
        if User.query.filter_by(email=data['email']).first():
            raise ValueError("A user with this email already exists.")

        user = User(
            name=data['name'].strip(),
            email=data['email'],
            phone=data['phone'],
            password_hash=generate_password_hash(data['password']),
            role=data.get('role') or 'user'
        )
        db.session.add(user)
        commit_or_raise()
        logger.info("User %s created with role %s", user.id, user.role)
        return user

    @staticmethod
    def authenticate(email, password):
        """The matching user, or None for unknown email / wrong password."""
        if not email or not password:
            return None
        user = User.query.filter_by(email=email).first()
        if not user or not user.password_hash or not check_password_hash(user.password_hash, password):
            return None
        return user

    @staticmethod
    def get_user(user_id):
        return get_or_404(User, user_id, "User not found.")

    @staticmethod
    def list_users(page=1, page_size=10):
        return paginate(User.query.order_by(User.name), page, page_size)

    @staticmethod
    def list_all_users():
        # For volunteer pickers, unpaginated
        return User.query.order_by(User.name).all()

    @staticmethod
    def update_user(user_id, data, allowed=('name', 'phone', 'email', 'role', 'password')):
        user = get_or_404(User, user_id, "User not found.")
        data = {k: v for k, v in (data or {}).items() if k in allowed}
        UserService.validate_user_data(data, partial=True)

        if data.get('email') and data['email'] != user.email:
            if User.query.filter(User.email == data['email'], User.id != user.id).first():
                raise ValueError("A user with this email already exists.")
            user.email = data['email']
        if data.get('name'):
            user.name = data['name'].strip()
        if 'phone' in data:
            user.phone = data['phone']
        if data.get('role'):
            user.role = data['role']
        if data.get('password'):
            user.password_hash = generate_password_hash(data['password'])

        commit_or_raise()
        return user

    @staticmethod
    def delete_user(user_id, current_user=None):
        user = get_or_404(User, user_id, "User not found.")
        if current_user is not None and user.id == current_user.id:
            raise ValueError("Cannot delete yourself.")
        db.session.delete(user)
        commit_or_raise()
        logger.info("User %s deleted", user_id)
