class ClinicError(Exception):
    """Base error carrying the HTTP status and client-facing message."""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message: str = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationFailure(ClinicError):
    status_code = 400
    message = 'Invalid request body'


class AuthFailure(ClinicError):
    status_code = 401
    message = 'Authentication failed'


class MissingOrMalformedAuth(AuthFailure):
    message = 'Authorization token missing or invalid'


class InvalidToken(AuthFailure):
    status_code = 403
    message = 'Token verification failed'


class InvalidCredentials(AuthFailure):
    message = 'Invalid credentials'


class Forbidden(ClinicError):
    status_code = 403
    message = 'You are not allowed to access this record'


class NotFound(ClinicError):
    status_code = 404
    message = 'Resource not found'


class StoreFailure(ClinicError):
    """Persistence error; details go to the log, never to the client."""
    status_code = 500
    message = 'Internal server error'


class Conflict(ClinicError):
    status_code = 409
    message = 'The record was modified concurrently, please retry'
