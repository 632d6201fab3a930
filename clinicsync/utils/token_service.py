# /clinicsync/utils/token_service.py
import secrets
from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError


class TokenService:
    """
    Issues and verifies bearer tokens bound to a user id.

    Tokens are HS256 access tokens signed with ``JWT_SECRET_KEY``. When no key
    is configured, ``init_app`` generates a 256-bit key that lives only as long
    as the application instance, so a restart invalidates every token it
    issued. The key is never rotated while the instance is running.
    """
    def __init__(self, app=None):
        if app:
            self.init_app(app)

    def init_app(self, app):
        if not app.config.get('JWT_SECRET_KEY'):
            app.config['JWT_SECRET_KEY'] = secrets.token_hex(32)
            app.logger.warning(
                'JWT_SECRET_KEY not configured; using an ephemeral signing key. '
                'Tokens will not survive a restart.'
            )

    def issue(self, user_id, expires_delta: timedelta = None) -> str:
        """Signs a token carrying only the user id as its subject."""
        if expires_delta is None:
            return create_access_token(identity=str(user_id))
        return create_access_token(identity=str(user_id), expires_delta=expires_delta)

    def verify(self, token) -> str | None:
        """Returns the user id for a valid token, None for anything else."""
        if not token or not isinstance(token, str):
            return None
        try:
            decoded = decode_token(token)
        except (PyJWTError, JWTExtendedException) as e:
            current_app.logger.info(f"Token rejected: {e.__class__.__name__}")
            return None

        if decoded.get('type') != 'access':
            return None
        user_id = decoded.get('sub')
        if not isinstance(user_id, str) or not user_id:
            return None
        return user_id


token_service = TokenService()
