# /clinicsync/api/routes.py

from . import api_bp
from clinicsync.extensions import limiter
from clinicsync.utils.decorators import audit_log, auth_required
from .controllers import auth_controller, patient_controller, drug_controller


# --- Authentication Endpoints ---
@api_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
@audit_log("USER_LOGIN", "authentication")
def login():
    return auth_controller.login_user()

@api_bp.route('/user', methods=['GET'])
@audit_log("VIEW_OWN_PROFILE", "users")
@auth_required
def get_current_user_route():
    return auth_controller.get_current_user_details()

@api_bp.route('/reset-password/<string:doctor_id>', methods=['POST'])
@limiter.limit("5 per hour")
@audit_log("PASSWORD_RESET", "users")
@auth_required
def reset_password_route(doctor_id):
    return auth_controller.reset_password(doctor_id)

@api_bp.route('/delete-account', methods=['POST'])
@limiter.limit("5 per hour")
@audit_log("ACCOUNT_DELETION", "users")
@auth_required
def delete_account_route():
    return auth_controller.delete_account()


# --- Patient Endpoints ---
@api_bp.route('/patients', methods=['POST'])
@audit_log("PATIENT_REGISTRATION", "patients")
@auth_required
def register_patient_route():
    return patient_controller.register_patient()

@api_bp.route('/patients', methods=['GET'])
@audit_log("VIEW_PATIENTS", "patients")
@auth_required
def get_patients_route():
    return patient_controller.get_patients_for_doctor()

@api_bp.route('/patients/<string:patient_id>', methods=['PUT'])
@audit_log("UPDATE_PATIENT", "patients")
@auth_required
def update_patient_route(patient_id):
    return patient_controller.update_patient(patient_id)

@api_bp.route('/patients/<string:patient_id>', methods=['DELETE'])
@audit_log("DELETE_PATIENT", "patients")
@auth_required
def delete_patient_route(patient_id):
    return patient_controller.delete_patient(patient_id)


# --- Drug Catalog Endpoints ---
@api_bp.route('/drugs', methods=['POST'])
@audit_log("ADD_DRUG", "drugs")
@auth_required
def add_drug_route():
    return drug_controller.add_drug()

@api_bp.route('/drugs', methods=['GET'])
@audit_log("VIEW_DRUGS", "drugs")
def get_drugs_route():
    return drug_controller.get_all_drugs()
