import pytest

from clinicsync import create_app
from clinicsync.extensions import db, socketio
from clinicsync.models.user_models import User


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_doctor(app):
    def _make_doctor(username='dr1', password='pw', doctor_id='D1', name='Dr. One'):
        with app.app_context():
            user = User(name=name, username=username, doctor_id=doctor_id)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_doctor


@pytest.fixture
def login(client):
    def _login(username='dr1', password='pw'):
        response = client.post('/login', json={'UserName': username, 'Password': password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()['token']
    return _login


@pytest.fixture
def doctor_headers(make_doctor, login):
    make_doctor()
    return {'Authorization': f'Bearer {login()}'}


@pytest.fixture
def observer(app):
    """Connects Socket.IO observers; all are disconnected after the test."""
    clients = []

    def _observer(token=None, **kwargs):
        if token is not None:
            kwargs.setdefault('auth', {'token': token})
        socket_client = socketio.test_client(app, **kwargs)
        clients.append(socket_client)
        return socket_client

    yield _observer
    for socket_client in clients:
        if socket_client.is_connected():
            socket_client.disconnect()


def events_named(socket_client, name):
    return [event for event in socket_client.get_received() if event['name'] == name]
