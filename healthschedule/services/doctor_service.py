"""Doctor service - doctor profiles and patient lists"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import AuthorizationError, UserRole
from ..models.doctor import Doctor
from ..models.user import User
from ..repositories.medical_record import MedicalRecordRepository
from ..repositories.user import DoctorRepository, UserRepository
from ..schemas.doctor import DoctorCreate, DoctorUpdate

logger = logging.getLogger(__name__)


class DoctorService:

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.repo = DoctorRepository()
        self.log = log or logger

    def list_doctors(self, specialty: Optional[str] = None) -> List[Doctor]:
        return self.repo.list(self.db, specialty)

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.repo.get(self.db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    def create_profile(self, user: User, data: DoctorCreate) -> Doctor:
        """Onboard a doctor account; doctors onboard themselves, admins anyone."""
        if user.role == UserRole.ADMIN:
            if data.id is None:
                raise BadRequestError("id of the doctor account is required")
            account = UserRepository.get(self.db, data.id)
        elif user.role == UserRole.DOCTOR:
            if data.id not in (None, user.id):
                raise AuthorizationError("Doctors can only create their own profile")
            account = user
        else:
            raise AuthorizationError("Only doctors and admins can create doctor profiles")

        if not account or account.role != UserRole.DOCTOR:
            raise NotFoundError("Doctor account not found")
        if self.repo.get(self.db, account.id):
            raise ConflictError("Doctor profile already exists")

        with transaction(self.db):
            doctor = self.repo.add(
                self.db,
                account.id,
                **data.model_dump(exclude={"id"}),
            )
        self.log.info(f"Created doctor profile id={doctor.id} specialty={doctor.specialty}")
        return self.get_doctor(doctor.id)

    def update_profile(self, user: User, doctor_id: int, data: DoctorUpdate) -> Doctor:
        doctor = self.get_doctor(doctor_id)
        if user.role != UserRole.ADMIN and user.id != doctor_id:
            raise AuthorizationError("Not authorized to update this profile")

        updates = data.model_dump(exclude_unset=True)
        if updates.get("specialty", "") is None:
            del updates["specialty"]

        with transaction(self.db):
            self.repo.update(self.db, doctor, **updates)
        self.db.refresh(doctor)
        return doctor

    def list_patients(self, user: User, doctor_id: int) -> List[User]:
        """Patients the doctor has treated, via doctor-patient links."""
        self.get_doctor(doctor_id)
        if user.role != UserRole.ADMIN and user.id != doctor_id:
            raise AuthorizationError("Not authorized to view this doctor's patients")
        patient_ids = MedicalRecordRepository.patient_ids_for_doctor(self.db, doctor_id)
        return UserRepository.list_by_ids(self.db, patient_ids)
