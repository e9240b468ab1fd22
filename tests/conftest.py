import pytest
from werkzeug.security import generate_password_hash
from congregate import create_app, db
from congregate.config import TestingConfig
from congregate.models import User, Room
from congregate.utils.tokens import generate_token

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def init_data(app):
    admin = User(name='Admin', email='admin@test.com', phone='(11) 99999-0000',
                 password_hash=generate_password_hash('secret123'), role='admin')
    user = User(name='Test', email='test@test.com', phone='(11) 98888-0000',
                password_hash=generate_password_hash('secret123'), role='user')
    temple = Room(name='Templo', size=300)
    kids = Room(name='Sala Kids', size=30)
    db.session.add_all([admin, user, temple, kids])
    db.session.commit()
    return admin, user, temple, kids

@pytest.fixture
def admin_headers(init_data):
    admin = init_data[0]
    return {'Authorization': f'Bearer {generate_token(admin)}'}

@pytest.fixture
def user_headers(init_data):
    user = init_data[1]
    return {'Authorization': f'Bearer {generate_token(user)}'}
