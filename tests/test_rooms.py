from datetime import date, datetime, time
from congregate.extensions import db
from congregate.models import Booking, Room
from congregate.services.room_service import RoomService

def test_create_room(client, admin_headers):
    response = client.post('/api/rooms/', json={'name': 'Sala de Oração', 'size': 20, 'description': 'Segundo andar'},
                           headers=admin_headers)
    assert response.status_code == 201
    room = response.get_json()['room']
    assert room['name'] == 'Sala de Oração'
    assert room['status'] is True
    assert room['exclusive'] is False

def test_create_room_requires_admin(client, user_headers):
    response = client.post('/api/rooms/', json={'name': 'Estúdio'}, headers=user_headers)
    assert response.status_code == 403
    assert response.get_json()['message'] == 'Admin privilege required'

def test_create_room_validation(client, admin_headers):
    response = client.post('/api/rooms/', json={'name': 'Templo'}, headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Room name already exists.'

    response = client.post('/api/rooms/', json={'name': 'Nova', 'size': -3}, headers=admin_headers)
    assert response.status_code == 400

    response = client.post('/api/rooms/', json={'size': 10}, headers=admin_headers)
    assert response.get_json()['error'] == 'Room name is required.'

def test_list_and_search_rooms_are_public(client, init_data):
    response = client.get('/api/rooms/?limit=1&page=2')
    assert response.status_code == 200
    data = response.get_json()
    assert [r['name'] for r in data['data']] == ['Templo']
    assert data['page'] == 2
    assert data['hasPrev'] is True
    assert data['hasNext'] is False

    response = client.get('/api/rooms/search?name=kids')
    assert [r['name'] for r in response.get_json()] == ['Sala Kids']

    assert client.get('/api/rooms/search').status_code == 400

def test_room_details_include_next_booking(client, init_data):
    _, user, temple, _ = init_data
    db.session.add(Booking(description='Culto', user_id=user.id, room_id=temple.id,
                           date=date(2099, 1, 1), start_time=time(19), end_time=time(21)))
    db.session.commit()

    response = client.get(f'/api/rooms/{temple.id}')
    assert response.status_code == 200
    data = response.get_json()
    assert data['totalBookings'] == 1
    assert data['nextBooking']['date'] == '01/01/2099'
    assert data['nextBooking']['user']['name'] == 'Test'

    assert client.get('/api/rooms/999').status_code == 404

def test_find_next_booking_prefers_recurring(app, init_data):
    _, user, temple, _ = init_data
    now = datetime(2025, 3, 10, 12, 0)
    past = Booking(description='Passado', user_id=user.id, room_id=temple.id,
                   date=date(2025, 3, 10), start_time=time(8), end_time=time(9))
    later = Booking(description='Hoje à noite', user_id=user.id, room_id=temple.id,
                    date=date(2025, 3, 10), start_time=time(19), end_time=time(20))
    weekly = Booking(description='Semanal', user_id=user.id, room_id=temple.id,
                     repeat='week', day_repeat=0, start_time=time(9), end_time=time(11))

    assert RoomService.find_next_booking([past, later], now) is later
    assert RoomService.find_next_booking([past, later, weekly], now) is weekly
    assert RoomService.find_next_booking([past], now) is None

def test_update_room(client, init_data, admin_headers):
    _, _, temple, kids = init_data
    response = client.put(f'/api/rooms/{kids.id}', json={'size': 40, 'status': False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['room']['size'] == 40
    assert response.get_json()['room']['status'] is False

    response = client.put(f'/api/rooms/{kids.id}', json={'name': 'Templo'}, headers=admin_headers)
    assert response.status_code == 400

def test_delete_room_with_bookings_is_refused(client, init_data, admin_headers):
    _, user, temple, kids = init_data
    db.session.add(Booking(description='Culto', user_id=user.id, room_id=temple.id,
                           date=date(2099, 1, 1), start_time=time(19), end_time=time(21)))
    db.session.commit()

    response = client.delete(f'/api/rooms/{temple.id}', headers=admin_headers)
    assert response.status_code == 400

    assert client.delete(f'/api/rooms/{kids.id}', headers=admin_headers).status_code == 200
    assert Room.query.count() == 1
