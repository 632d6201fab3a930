from sqlalchemy.exc import OperationalError

from clinicsync.extensions import db
from clinicsync.models.record_models import PatientRecord
from clinicsync.models.user_models import User
from tests.conftest import events_named


def test_delete_account_removes_user_and_their_patients(app, client, doctor_headers, make_doctor, login, observer):
    make_doctor(username='dr2', password='pw2', doctor_id='D2')
    other_headers = {'Authorization': f'Bearer {login("dr2", "pw2")}'}
    ids = [client.post('/patients', json={'name': n}, headers=doctor_headers).get_json()['id']
           for n in ('A', 'B')]
    client.post('/patients', json={'name': 'Kept'}, headers=other_headers)
    socket_client = observer(other_headers['Authorization'].split(' ', 1)[1])

    response = client.post('/delete-account', json={'confirm': 'DELETE'}, headers=doctor_headers)

    assert response.status_code == 200
    assert response.get_json()['deletedPatients'] == 2
    with app.app_context():
        assert User.find_by_username('dr1') is None
        assert PatientRecord.query.filter_by(doctor_id='D1').count() == 0
        assert PatientRecord.query.filter_by(doctor_id='D2').count() == 1

    deleted = sorted(e['args'][0]['id'] for e in events_named(socket_client, 'delete-patient'))
    assert deleted == sorted(ids)
    assert client.get('/user', headers=doctor_headers).status_code == 404


def test_delete_account_requires_confirmation(app, client, doctor_headers):
    response = client.post('/delete-account', json={'confirm': 'yes'}, headers=doctor_headers)

    assert response.status_code == 400
    with app.app_context():
        assert User.find_by_username('dr1') is not None


def test_delete_account_requires_auth(client):
    assert client.post('/delete-account', json={'confirm': 'DELETE'}).status_code == 401


def test_failed_account_deletion_keeps_everything(app, client, doctor_headers, monkeypatch, observer):
    client.post('/patients', json={'name': 'A'}, headers=doctor_headers)
    socket_client = observer(doctor_headers['Authorization'].split(' ', 1)[1])

    def failing_commit():
        raise OperationalError('COMMIT', {}, Exception('connection lost'))

    monkeypatch.setattr(db.session, 'commit', failing_commit)
    response = client.post('/delete-account', json={'confirm': 'DELETE'}, headers=doctor_headers)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Internal server error'}
    with app.app_context():
        assert User.find_by_username('dr1') is not None
        assert PatientRecord.query.filter_by(doctor_id='D1').count() == 1
    assert events_named(socket_client, 'delete-patient') == []
