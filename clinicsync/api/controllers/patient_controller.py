from flask import request, jsonify, current_app
from sqlalchemy.orm.exc import StaleDataError
from clinicsync.extensions import db
from clinicsync.exceptions import Conflict, Forbidden, NotFound
from clinicsync.models.record_models import PatientRecord
from clinicsync.utils.broadcaster import broadcaster
from .common import get_current_user, get_json_body


MAX_UPDATE_ATTEMPTS = 3


def _get_owned_patient(patient_id, doctor, for_update=False):
    patient = db.session.get(PatientRecord, patient_id, with_for_update=True if for_update else None)
    if patient is None:
        raise NotFound('Patient not found')
    if patient.doctor_id != doctor.doctor_id:
        raise Forbidden('Patient is not assigned to you')
    return patient


def _check_doctor_scope(requested_doctor_id, doctor):
    if requested_doctor_id not in (None, '') and requested_doctor_id != doctor.doctor_id:
        raise Forbidden('You may only manage your own patients')


def register_patient():
    """Registers a patient under the caller's doctor identifier."""
    doctor = get_current_user()
    data = get_json_body()
    _check_doctor_scope(data.get('doctorID'), doctor)

    patient = PatientRecord.create(doctor.doctor_id, data)
    db.session.add(patient)
    db.session.commit()

    document = patient.to_dict()
    broadcaster.broadcast('new-patient', document)
    return jsonify(document), 201


def get_patients_for_doctor():
    """Lists the caller's patients, oldest first."""
    doctor = get_current_user()
    requested = request.args.get('doctorID')
    _check_doctor_scope(requested, doctor)

    patients = (PatientRecord.query
                .filter_by(doctor_id=doctor.doctor_id)
                .order_by(PatientRecord.created_at, PatientRecord.id)
                .all())
    return jsonify([p.to_dict() for p in patients]), 200


def update_patient(patient_id):
    """
    Merges the body into the patient's intake fields.

    The row is locked while it is read and merged. If another writer still
    got in between, the version check rejects our UPDATE and the merge is
    redone on the fresh row.
    """
    doctor = get_current_user()
    data = get_json_body()
    _check_doctor_scope(data.get('doctorID'), doctor)

    for attempt in range(1, MAX_UPDATE_ATTEMPTS + 1):
        patient = _get_owned_patient(patient_id, doctor, for_update=True)
        try:
            if patient.apply_update(data):
                db.session.commit()
            break
        except StaleDataError:
            db.session.rollback()
            current_app.logger.warning(f"Concurrent update of patient {patient_id} (attempt {attempt})")
    else:
        raise Conflict()

    document = patient.to_dict()
    broadcaster.broadcast('update-patient', document)
    return jsonify({'message': 'Patient updated successfully', 'updatedPatient': document}), 200


def delete_patient(patient_id):
    doctor = get_current_user()
    patient = _get_owned_patient(patient_id, doctor)

    db.session.delete(patient)
    db.session.commit()

    broadcaster.broadcast('delete-patient', {'id': patient_id})
    return '', 204
