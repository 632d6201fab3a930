from flask import request
from clinicsync.extensions import db
from clinicsync.exceptions import NotFound, ValidationFailure
from clinicsync.models.user_models import User
from clinicsync.utils.decorators import get_current_user_id


def get_json_body() -> dict:
    """The request body, which must be a JSON object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailure('Request body must be a JSON object')
    return data


def get_current_user() -> User:
    """Loads the user resolved by the auth gate."""
    user = db.session.get(User, get_current_user_id())
    if user is None:
        raise NotFound('User not found')
    return user
