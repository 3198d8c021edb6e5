# backend/vetclinic/db/models/__init__.py

from vetclinic.db.models.user import User
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.pet import Pet, Species

from vetclinic.db.models.diagnosis import DiagnosisInfo
from vetclinic.db.models.surgery import SurgeryInfo
from vetclinic.db.models.laboratory import Laboratory, MatchRecordLab
from vetclinic.db.models.record import RecordInfo
from vetclinic.db.models.vaccination import ImmunizationRecord, Vaccine
