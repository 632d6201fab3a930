from functools import wraps
from flask import request, current_app, g, make_response
from clinicsync.exceptions import ClinicError, InvalidToken, MissingOrMalformedAuth
from clinicsync.utils.token_service import token_service

BEARER_PREFIX = 'Bearer '


def extract_bearer_token(header_value) -> str:
    """Returns the token from an ``Authorization: Bearer <token>`` header."""
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        raise MissingOrMalformedAuth()
    token = header_value[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingOrMalformedAuth()
    return token


def auth_required(f):
    """
    Rejects the request unless it carries a valid bearer token.

    On success the token's user id is available as ``g.current_user_id``.
    The user record itself is not loaded here.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = extract_bearer_token(request.headers.get('Authorization'))
        user_id = token_service.verify(token)
        if user_id is None:
            raise InvalidToken()
        g.current_user_id = user_id
        return f(*args, **kwargs)
    return decorated_function


def get_current_user_id():
    return g.get('current_user_id')


def audit_log(action, resource):
    """Writes one audit line per API call to the audit logger."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            ip_address = request.remote_addr
            resource_id = kwargs.get('patient_id') or kwargs.get('doctor_id')

            try:
                response = make_response(f(*args, **kwargs))
            except ClinicError as e:
                current_app.audit_logger.warning(
                    f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', "
                    f"UserID='{get_current_user_id()}', IP='{ip_address}', Success='False', "
                    f"Status='{e.status_code}'"
                )
                raise
            except Exception as e:
                current_app.audit_logger.error(
                    f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', "
                    f"UserID='{get_current_user_id()}', IP='{ip_address}', Success='False', "
                    f"Details='An error occurred: {e.__class__.__name__}'"
                )
                raise

            success = response.status_code < 400
            current_app.audit_logger.info(
                f"Action='{action}', Resource='{resource}', ResourceID='{resource_id}', "
                f"UserID='{get_current_user_id()}', IP='{ip_address}', Success='{success}', "
                f"Status='{response.status_code}'"
            )
            return response
        return decorated_function
    return decorator
