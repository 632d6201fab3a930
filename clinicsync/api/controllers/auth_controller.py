from flask import jsonify, current_app
from clinicsync.extensions import db
from clinicsync.exceptions import (
    Forbidden, InvalidCredentials, NotFound, ValidationFailure
)
from clinicsync.models.user_models import User
from clinicsync.models.record_models import PatientRecord
from clinicsync.utils.broadcaster import broadcaster
from clinicsync.utils.token_service import token_service
from .common import get_current_user, get_json_body


def _first_present(data, *keys):
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def login_user():
    """Exchanges a username and password for a bearer token."""
    data = get_json_body()
    username = _first_present(data, 'UserName', 'username')
    password = _first_present(data, 'Password', 'password')
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationFailure('Username and password required')

    user = User.find_by_username(username)
    if not user or not user.check_password(password):
        current_app.logger.info(f"Failed login for username '{username}'")
        raise InvalidCredentials()

    # Only the user id goes into the token; the client asks /user for details.
    return jsonify({'token': token_service.issue(user.id)}), 200


def get_current_user_details():
    return jsonify(get_current_user().to_dict()), 200


def reset_password(doctor_id):
    """Sets a new password for the caller's own doctor account."""
    data = get_json_body()
    new_password = data.get('newPassword')
    if not isinstance(new_password, str) or not new_password.strip():
        raise ValidationFailure('newPassword is required')

    user = User.find_by_doctor_id(doctor_id)
    if not user:
        raise NotFound('User not found')
    if user.id != get_current_user().id:
        raise Forbidden('You may only reset your own password')

    user.set_password(new_password)
    db.session.commit()
    return jsonify({'message': 'Password reset successful'}), 200


def delete_account():
    """
    Removes the caller's account and every patient record it owns.

    Both deletions happen in one transaction: either the account and all of
    its records are gone, or nothing is. Observers get one delete-patient
    event per removed record once the transaction has committed.
    """
    data = get_json_body()
    if data.get('confirm') != 'DELETE':
        raise ValidationFailure('You must type DELETE to confirm.')

    user = get_current_user()
    user_id = user.id
    patients = PatientRecord.query.filter_by(doctor_id=user.doctor_id).all()
    deleted_ids = [patient.id for patient in patients]

    try:
        for patient in patients:
            db.session.delete(patient)
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(f"Deleted account {user_id} and {len(deleted_ids)} patient record(s)")
    for patient_id in deleted_ids:
        broadcaster.broadcast('delete-patient', {'id': patient_id})

    return jsonify({
        'message': 'Your account and all related data have been permanently deleted.',
        'deletedPatients': len(deleted_ids)
    }), 200
