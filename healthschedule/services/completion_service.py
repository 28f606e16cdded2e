"""
Appointment completion.

Completing a visit writes three things: the medical record with the doctor's
findings, a doctor-patient link for the doctor's patient list, and the
``completed`` status on the appointment. All three are flushed inside one
database transaction and committed together, so a failure at any step leaves
no trace. The appointment's version column turns a concurrent completion by
another session into a ConflictError instead of a silent overwrite.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.exceptions import NotFoundError
from ..core.security import AuthorizationError
from ..models.appointment import Appointment
from ..models.medical_record import DoctorPatient, MedicalRecord
from ..models.user import User
from ..repositories.appointment import AppointmentRepository
from ..repositories.medical_record import MedicalRecordRepository
from ..schemas.appointment import AppointmentComplete
from .appointment_status import AppointmentAction, resolve_action

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    appointment: Appointment
    medical_record: MedicalRecord
    doctor_patient: DoctorPatient


class AppointmentCompletionService:

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.appointments = AppointmentRepository()
        self.records = MedicalRecordRepository()
        self.log = log or logger

    def complete(self, user: User, appointment_id: int,
                 data: AppointmentComplete) -> CompletionResult:
        appointment = self.appointments.get(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        if appointment.doctor_id != user.id:
            self.log.warning(
                f"User id={user.id} tried to complete appointment id={appointment_id} "
                f"owned by doctor id={appointment.doctor_id}"
            )
            raise AuthorizationError("You are not authorized to complete this appointment")

        new_status = resolve_action(appointment.status, AppointmentAction.COMPLETE)

        try:
            with transaction(self.db):
                record = self.records.add(
                    self.db,
                    appointment_id=appointment.id,
                    doctor_id=appointment.doctor_id,
                    patient_id=appointment.patient_id,
                    date=appointment.date,
                    diagnosis=data.diagnosis,
                    prescription=data.prescription,
                    notes=data.notes,
                )
                link = self.records.link_doctor_patient(
                    self.db,
                    doctor_id=appointment.doctor_id,
                    patient_id=appointment.patient_id,
                    appointment_id=appointment.id,
                )
                self.appointments.update(self.db, appointment, status=new_status)
        except Exception:
            self.log.exception(f"Completing appointment id={appointment_id} failed; rolled back")
            raise

        for obj in (appointment, record, link):
            self.db.refresh(obj)

        self.log.info(
            f"Completed appointment id={appointment.id}: medical record id={record.id}, "
            f"doctor_id={appointment.doctor_id} patient_id={appointment.patient_id}"
        )
        return CompletionResult(
            appointment=appointment, medical_record=record, doctor_patient=link
        )
