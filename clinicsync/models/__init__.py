from clinicsync.models.user_models import User
from clinicsync.models.record_models import PatientRecord, DrugRecord

__all__ = ['User', 'PatientRecord', 'DrugRecord']
