from datetime import datetime
from clinicsync.extensions import db
from clinicsync.exceptions import ValidationFailure
from clinicsync.models.user_models import generate_id
from clinicsync.utils.encryption_util import encryptor

# Keys owned by the server; never taken from a client body.
RESERVED_FIELDS = frozenset({'id', '_id', 'doctorID', 'createdAt', 'updatedAt'})


def clean_fields(data: dict) -> dict:
    return {key: value for key, value in data.items() if key not in RESERVED_FIELDS}


def check_required(fields: dict, required) -> None:
    missing = [name for name in required if fields.get(name) in (None, '')]
    if missing:
        raise ValidationFailure(f"Missing required fields: {', '.join(missing)}")


class PatientRecord(db.Model):
    """
    A patient registration owned by one doctor identifier.

    Intake fields are free-form and stored as an encrypted JSON document.
    ``doctor_id`` is kept in clear text so records can be filtered by owner.
    """
    __tablename__ = 'patient_records'

    REQUIRED_FIELDS = ('name',)

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    doctor_id = db.Column(db.String(100), nullable=False, index=True)
    encrypted_payload = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    # Bumped on every write; a stale read fails its UPDATE instead of
    # overwriting a concurrent change.
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    @property
    def fields(self) -> dict:
        return encryptor.decrypt_json(self.encrypted_payload)

    @fields.setter
    def fields(self, value: dict) -> None:
        self.encrypted_payload = encryptor.encrypt_json(value)

    @classmethod
    def create(cls, doctor_id, data):
        fields = clean_fields(data)
        check_required(fields, cls.REQUIRED_FIELDS)
        record = cls(doctor_id=doctor_id)
        record.fields = fields
        return record

    def apply_update(self, data) -> bool:
        """Merges ``data`` into the intake fields; returns False if nothing changed."""
        current = self.fields
        merged = {**current, **clean_fields(data)}
        check_required(merged, self.REQUIRED_FIELDS)
        if merged == current:
            return False
        self.fields = merged
        return True

    def to_dict(self):
        return {
            **self.fields,
            'id': self.id,
            'doctorID': self.doctor_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


class DrugRecord(db.Model):
    """A drug catalog entry, shared by all doctors."""
    __tablename__ = 'drug_records'

    REQUIRED_FIELDS = ('name',)

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    payload = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @classmethod
    def create(cls, data):
        fields = clean_fields(data)
        check_required(fields, cls.REQUIRED_FIELDS)
        return cls(payload=fields)

    def to_dict(self):
        return {
            **(self.payload or {}),
            'id': self.id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
