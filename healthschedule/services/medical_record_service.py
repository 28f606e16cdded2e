"""Medical record service - records written by doctors and their lab results"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.exceptions import NotFoundError
from ..core.security import AuthorizationError, UserRole
from ..models.medical_record import LabResult, MedicalRecord
from ..models.user import User
from ..repositories.appointment import AppointmentRepository
from ..repositories.medical_record import LabResultRepository, MedicalRecordRepository
from ..repositories.user import DoctorRepository, UserRepository
from ..schemas.medical_record import (
    LabResultCreate, MedicalRecordCreate, MedicalRecordUpdate
)

logger = logging.getLogger(__name__)


class MedicalRecordService:
    """Access rules:

    * admins read and write everything;
    * patients read their own records and lab results;
    * doctors read records they wrote, and a patient's full history once a
      doctor-patient link exists; only the authoring doctor edits a record or
      attaches lab results to it.
    """

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.records = MedicalRecordRepository()
        self.labs = LabResultRepository()
        self.log = log or logger

    # Records

    def get_record(self, user: User, record_id: int) -> MedicalRecord:
        record = self.records.get(self.db, record_id)
        if not record:
            raise NotFoundError("Medical record not found")
        if not self._can_read(user, record):
            raise AuthorizationError("Not authorized to access this record")
        return record

    def list_patient_records(self, user: User, patient_id: int) -> List[MedicalRecord]:
        allowed = (
            user.role == UserRole.ADMIN
            or user.id == patient_id
            or (user.role == UserRole.DOCTOR
                and self.records.is_linked(self.db, user.id, patient_id))
        )
        if not allowed:
            raise AuthorizationError("Not authorized to access these records")
        return self.records.list_for_patient(self.db, patient_id)

    def list_doctor_records(self, user: User, doctor_id: int) -> List[MedicalRecord]:
        if user.role != UserRole.ADMIN and user.id != doctor_id:
            raise AuthorizationError("Not authorized to access these records")
        return self.records.list_for_doctor(self.db, doctor_id)

    def create_record(self, user: User, data: MedicalRecordCreate) -> MedicalRecord:
        if user.role == UserRole.DOCTOR:
            if data.doctor_id != user.id:
                raise AuthorizationError("Doctors can only create records with their own ID")
        elif user.role != UserRole.ADMIN:
            raise AuthorizationError("Only doctors can create medical records")

        if not DoctorRepository.get(self.db, data.doctor_id):
            raise NotFoundError("Doctor not found")
        patient = UserRepository.get(self.db, data.patient_id)
        if not patient or patient.role != UserRole.PATIENT:
            raise NotFoundError("Patient not found")
        if data.appointment_id is not None:
            appointment = AppointmentRepository.get(self.db, data.appointment_id)
            if (not appointment
                    or appointment.patient_id != data.patient_id
                    or appointment.doctor_id != data.doctor_id):
                raise NotFoundError("Appointment not found for this patient and doctor")

        with transaction(self.db):
            record = self.records.add(self.db, **data.model_dump())
            if not self.records.is_linked(self.db, data.doctor_id, data.patient_id):
                self.records.link_doctor_patient(
                    self.db, data.doctor_id, data.patient_id, data.appointment_id
                )
        self.db.refresh(record)
        self.log.info(
            f"Created medical record id={record.id} doctor_id={record.doctor_id} "
            f"patient_id={record.patient_id}"
        )
        return record

    def update_record(self, user: User, record_id: int, data: MedicalRecordUpdate) -> MedicalRecord:
        record = self.records.get(self.db, record_id)
        if not record:
            raise NotFoundError("Medical record not found")
        if user.role != UserRole.ADMIN and user.id != record.doctor_id:
            raise AuthorizationError("Only the doctor who created this record can update it")

        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("prescription", "notes")
        }
        with transaction(self.db):
            self.records.update(self.db, record, **updates)
        self.db.refresh(record)
        return record

    # Lab results

    def list_lab_results(self, user: User, record_id: int) -> List[LabResult]:
        record = self.get_record(user, record_id)
        return self.labs.list_for_record(self.db, record.id)

    def get_lab_result(self, user: User, result_id: int) -> LabResult:
        result = self.labs.get(self.db, result_id)
        if not result:
            raise NotFoundError("Lab result not found")
        self.get_record(user, result.medical_record_id)
        return result

    def create_lab_result(self, user: User, data: LabResultCreate) -> LabResult:
        if user.role not in (UserRole.DOCTOR, UserRole.ADMIN):
            raise AuthorizationError("Only medical staff can create lab results")

        record = self.records.get(self.db, data.medical_record_id)
        if not record:
            raise NotFoundError("Associated medical record not found")
        if user.role == UserRole.DOCTOR and record.doctor_id != user.id:
            raise AuthorizationError(
                "Doctors can only add lab results to their own patients' records"
            )

        with transaction(self.db):
            result = self.labs.add(self.db, **data.model_dump())
        self.db.refresh(result)
        return result

    def _can_read(self, user: User, record: MedicalRecord) -> bool:
        if user.role == UserRole.ADMIN or user.id in (record.patient_id, record.doctor_id):
            return True
        return user.role == UserRole.DOCTOR and self.records.is_linked(
            self.db, user.id, record.patient_id
        )
