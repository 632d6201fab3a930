import uuid
from datetime import datetime
from clinicsync.extensions import db, bcrypt


def generate_id() -> str:
    return uuid.uuid4().hex


class User(db.Model):
    """A doctor account. Created out of band, never through the API."""
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(255))
    username = db.Column(db.String(150), unique=True, nullable=False, index=True)
    doctor_id = db.Column(db.String(100), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    password_changed_at = db.Column(db.DateTime, default=datetime.utcnow)

    @classmethod
    def find_by_username(cls, username):
        return cls.query.filter_by(username=username).first()

    @classmethod
    def find_by_doctor_id(cls, doctor_id):
        return cls.query.filter_by(doctor_id=doctor_id).first()

    def set_password(self, password: str) -> None:
        """Hashes and sets the user's password."""
        if not isinstance(password, str) or not password.strip():
            raise ValueError("Password must not be empty")
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')
        self.password_changed_at = datetime.utcnow()

    def check_password(self, password: str) -> bool:
        if not isinstance(password, str) or not password or not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Serializes the User for API responses, never including the hash."""
        return {
            'id': self.id,
            'name': self.name,
            'UserName': self.username,
            'doctorID': self.doctor_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
