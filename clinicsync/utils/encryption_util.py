# /clinicsync/utils/encryption_util.py
import json

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app


class Encryptor:
    """
    Encrypts patient intake payloads at rest.
    It must be initialized with the Flask app to load the key.
    """
    def __init__(self, app=None):
        self.fernet = None
        if app:
            self.init_app(app)

    def init_app(self, app):
        """Initializes the Fernet suite with the key from the app's config."""
        key = app.config.get('RECORD_ENCRYPTION_KEY')
        if not key:
            raise ValueError("RECORD_ENCRYPTION_KEY not set in the Flask application config.")

        self.fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, data: str) -> str:
        """Encrypts a string."""
        if self.fernet is None:
            raise RuntimeError("Encryptor has not been initialized with an app.")

        if not isinstance(data, str):
            data = str(data)

        encrypted_data = self.fernet.encrypt(data.encode('utf-8'))
        return encrypted_data.decode('utf-8')

    def decrypt(self, token: str) -> str | None:
        """Decrypts an encrypted token string."""
        if self.fernet is None:
            raise RuntimeError("Encryptor has not been initialized with an app.")

        if not token:
            return None

        try:
            decrypted_data = self.fernet.decrypt(token.encode('utf-8'))
            return decrypted_data.decode('utf-8')
        except InvalidToken:
            current_app.logger.error("Decryption failed: Invalid token provided.")
            return None

    def encrypt_json(self, data: dict) -> str:
        return self.encrypt(json.dumps(data, sort_keys=True))

    def decrypt_json(self, token: str) -> dict:
        """Returns an empty dict when the payload cannot be decrypted."""
        plaintext = self.decrypt(token)
        if plaintext is None:
            return {}
        return json.loads(plaintext)


# Create a single, uninitialized instance to be imported by other modules.
encryptor = Encryptor()
