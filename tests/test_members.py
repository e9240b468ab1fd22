import pytest
from datetime import date
from congregate.services.member_service import MemberService, calculate_age

def member_data(**overrides):
    data = {
        'full_name': 'João da Silva',
        'birth_date': '10/05/1990',
        'gender': 'Masculino',
        'phone': '(11) 97777-1111',
        'email': 'joao@test.com',
        'city': 'São Paulo',
        'state': 'SP',
        'marital_status': 'Casado',
        'has_children': True,
        'children_count': 2,
    }
    data.update(overrides)
    return data

def test_create_member(client, admin_headers):
    response = client.post('/api/members/', json=member_data(cpf='123.456.789-01'), headers=admin_headers)
    assert response.status_code == 201
    member = response.get_json()
    assert member['birth_date'] == '10/05/1990'
    assert member['cpf'] == '12345678901'
    assert member['phone'] == '(11)97777-1111'

def test_members_are_admin_only(client, user_headers):
    assert client.get('/api/members/', headers=user_headers).status_code == 403
    assert client.post('/api/members/', json=member_data(), headers=user_headers).status_code == 403

@pytest.mark.parametrize('overrides,message', [
    ({'full_name': None}, 'Missing required fields: full_name'),
    ({'birth_date': '1990-05-10'}, 'DD/MM/YYYY'),
    ({'birth_date': '10/05/2999'}, 'cannot be in the future'),
    ({'gender': 'X'}, 'Gender must be one of'),
    ({'phone': '123'}, 'Invalid phone format'),
    ({'cpf': '123'}, 'CPF must have 11 digits'),
    ({'cep': '0100-000'}, 'CEP must have 8 digits'),
    ({'children_count': 30}, 'Children count must be between 0 and 20'),
])
def test_invalid_member_data(app, overrides, message):
    with pytest.raises(ValueError, match=message):
        MemberService.create_member(member_data(**overrides))

def test_duplicate_cpf_is_translated(app):
    MemberService.create_member(member_data(cpf='12345678901'))
    with pytest.raises(ValueError, match='Duplicate record'):
        MemberService.create_member(member_data(full_name='Outro', cpf='12345678901'))

def test_list_search_and_filter(client, admin_headers):
    MemberService.create_member(member_data())
    MemberService.create_member(member_data(full_name='Maria Souza', gender='Feminino', email='maria@test.com',
                                            city='Campinas', has_children=False, children_count=0))

    response = client.get('/api/members/?limit=1', headers=admin_headers)
    data = response.get_json()
    assert data['total'] == 2
    assert [m['full_name'] for m in data['data']] == ['João da Silva']

    response = client.post('/api/members/search', json={'full_name': 'souza'}, headers=admin_headers)
    assert [m['full_name'] for m in response.get_json()] == ['Maria Souza']

    response = client.post('/api/members/filter', json={'field': 'city', 'value': 'Campinas', 'operator': 'eq'},
                           headers=admin_headers)
    assert [m['full_name'] for m in response.get_json()] == ['Maria Souza']

    response = client.post('/api/members/filter', json={'field': 'cpf', 'value': '1', 'operator': 'eq'},
                           headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Field not allowed for search.'

    response = client.post('/api/members/filter', json={'field': 'city', 'value': 'x', 'operator': 'in'},
                           headers=admin_headers)
    assert response.status_code == 400

def test_update_and_delete_member(client, admin_headers):
    member = MemberService.create_member(member_data())

    response = client.put(f'/api/members/{member.id}', json={'city': 'Santos'}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['city'] == 'Santos'

    assert client.put(f'/api/members/{member.id}', json={}, headers=admin_headers).status_code == 400

    response = client.put(f'/api/members/{member.id}', json={'full_name': None}, headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Missing required fields: full_name.'
    assert client.delete(f'/api/members/{member.id}', headers=admin_headers).status_code == 200
    assert client.get(f'/api/members/{member.id}', headers=admin_headers).status_code == 404

def test_calculate_age():
    assert calculate_age(date(1990, 5, 10), today=date(2025, 5, 9)) == 34
    assert calculate_age(date(1990, 5, 10), today=date(2025, 5, 10)) == 35

def test_member_analytics(client, admin_headers):
    MemberService.create_member(member_data(birth_date='10/05/1990'))
    MemberService.create_member(member_data(full_name='Maria Souza', gender='Feminino', email='maria@test.com',
                                            birth_date='01/01/2000', marital_status=None, children_count=0))

    analytics = MemberService.get_analytics(today=date(2025, 6, 1))
    gender = {item['label']: item for item in analytics['gender']}
    assert gender['Masculino']['value'] == 1
    assert gender['Masculino']['percentage'] == '50.00'
    assert {item['label'] for item in analytics['marital']} == {'Casado', 'Não informado'}
    assert {item['label'] for item in analytics['children']} == {'2 filhos', '0 filhos'}

    ages = {item['label']: item['value'] for item in analytics['age']}
    assert ages == {'18-25': 1, '26-35': 1, '36-45': 0, '46-55': 0, '56+': 0}
    assert analytics['city'] == [{'label': 'São Paulo', 'value': 2, 'percentage': '100.00', 'fill': '#FF6384'}]

    response = client.get('/api/analytics/members', headers=admin_headers)
    assert response.status_code == 200
    assert set(response.get_json()) == {'marital', 'gender', 'children', 'age', 'city', 'state'}
