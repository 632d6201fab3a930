import pytest

from clinicsync.extensions import db
from clinicsync.models.user_models import User
from clinicsync.utils.decorators import extract_bearer_token
from clinicsync.exceptions import MissingOrMalformedAuth
from clinicsync.utils.token_service import token_service


def test_login_returns_token_for_matching_credentials(app, client, make_doctor):
    user_id = make_doctor()
    response = client.post('/login', json={'UserName': 'dr1', 'Password': 'pw'})

    assert response.status_code == 200
    token = response.get_json()['token']
    with app.app_context():
        assert token_service.verify(token) == user_id


def test_login_accepts_lowercase_field_names(client, make_doctor):
    make_doctor()
    response = client.post('/login', json={'username': 'dr1', 'password': 'pw'})
    assert response.status_code == 200


@pytest.mark.parametrize('body', [
    {'UserName': 'dr1', 'Password': 'wrong'},
    {'UserName': 'nobody', 'Password': 'pw'},
])
def test_login_rejects_bad_credentials(client, make_doctor, body):
    make_doctor()
    response = client.post('/login', json=body)

    assert response.status_code == 401
    assert response.get_json() == {'error': 'Invalid credentials'}


@pytest.mark.parametrize('kwargs', [
    {'json': {'UserName': 'dr1'}},
    {'json': ['dr1', 'pw']},
    {'data': 'UserName=dr1', 'content_type': 'text/plain'},
])
def test_login_requires_username_and_password(client, make_doctor, kwargs):
    make_doctor()
    response = client.post('/login', **kwargs)
    assert response.status_code == 400


@pytest.mark.parametrize('body', [
    {'UserName': 'dr1', 'Password': 123},
    {'UserName': {'$ne': ''}, 'Password': 'pw'},
    {'UserName': ['dr1'], 'Password': 'pw'},
    {'UserName': 'dr1', 'Password': None},
])
def test_login_rejects_non_string_credentials(client, make_doctor, body):
    make_doctor()
    response = client.post('/login', json=body)

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Username and password required'}


def test_password_is_stored_hashed(app, make_doctor):
    user_id = make_doctor()
    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.password_hash != 'pw'
        assert user.check_password('pw')
        assert not user.check_password('PW')


def test_current_user(client, doctor_headers):
    response = client.get('/user', headers=doctor_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body['UserName'] == 'dr1'
    assert body['doctorID'] == 'D1'
    assert body['name'] == 'Dr. One'
    assert 'password_hash' not in body
    assert 'Password' not in body


@pytest.mark.parametrize('header', [None, 'Token abc', 'Bearer', 'Bearer    ', 'bearer abc'])
def test_missing_or_malformed_authorization_is_401(client, header):
    headers = {'Authorization': header} if header is not None else {}
    response = client.get('/user', headers=headers)

    assert response.status_code == 401
    assert response.get_json() == {'error': 'Authorization token missing or invalid'}


def test_invalid_token_is_403(client):
    response = client.get('/user', headers={'Authorization': 'Bearer not.a.token'})

    assert response.status_code == 403
    assert response.get_json() == {'error': 'Token verification failed'}


def test_current_user_deleted_out_of_band_is_404(app, client, doctor_headers):
    with app.app_context():
        db.session.delete(User.find_by_username('dr1'))
        db.session.commit()

    response = client.get('/user', headers=doctor_headers)
    assert response.status_code == 404


def test_extract_bearer_token():
    assert extract_bearer_token('Bearer abc.def') == 'abc.def'
    with pytest.raises(MissingOrMalformedAuth):
        extract_bearer_token('Basic abc')


def test_reset_own_password(client, doctor_headers):
    response = client.post('/reset-password/D1', json={'newPassword': 'new-secret'},
                           headers=doctor_headers)

    assert response.status_code == 200
    assert response.get_json() == {'message': 'Password reset successful'}
    assert client.post('/login', json={'UserName': 'dr1', 'Password': 'pw'}).status_code == 401
    assert client.post('/login', json={'UserName': 'dr1', 'Password': 'new-secret'}).status_code == 200


def test_reset_password_requires_auth(client, make_doctor):
    make_doctor()
    response = client.post('/reset-password/D1', json={'newPassword': 'x'})
    assert response.status_code == 401


def test_reset_password_of_another_doctor_is_forbidden(client, make_doctor, doctor_headers):
    make_doctor(username='dr2', doctor_id='D2')
    response = client.post('/reset-password/D2', json={'newPassword': 'hijack'},
                           headers=doctor_headers)

    assert response.status_code == 403
    assert client.post('/login', json={'UserName': 'dr2', 'Password': 'pw'}).status_code == 200


def test_reset_password_unknown_doctor_is_404(client, doctor_headers):
    response = client.post('/reset-password/NOPE', json={'newPassword': 'x'},
                           headers=doctor_headers)
    assert response.status_code == 404


@pytest.mark.parametrize('body', [{}, {'newPassword': ''}, {'newPassword': '   '}, {'newPassword': 5}])
def test_reset_password_requires_new_password(client, doctor_headers, body):
    response = client.post('/reset-password/D1', json=body, headers=doctor_headers)
    assert response.status_code == 400


def test_passwords_longer_than_72_bytes_are_fully_checked(client, doctor_headers):
    long_password = 'x' * 100
    response = client.post('/reset-password/D1', json={'newPassword': long_password},
                           headers=doctor_headers)

    assert response.status_code == 200
    assert client.post('/login', json={'UserName': 'dr1', 'Password': long_password}).status_code == 200
    assert client.post('/login', json={'UserName': 'dr1', 'Password': 'x' * 80}).status_code == 401


def test_long_password_hash_round_trip(app):
    with app.app_context():
        user = User(name='Dr. Long', username='long', doctor_id='L1')
        user.set_password('é' * 50)

        assert user.check_password('é' * 50)
        assert not user.check_password('é' * 49 + 'e')
        assert not user.check_password(None)
