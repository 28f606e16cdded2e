"""Appointment service - booking, role-scoped reads and status actions"""

import logging
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.database import transaction
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import AuthorizationError, UserRole
from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..repositories.appointment import AppointmentRepository
from ..repositories.user import DoctorRepository, UserRepository
from ..schemas.appointment import (
    AppointmentCreate, AppointmentReschedule, AppointmentUpdate
)
from .appointment_status import AppointmentAction, check_transition, resolve_action

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.repo = AppointmentRepository()
        self.log = log or logger

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_for(self, user: User) -> List[Appointment]:
        """Admins see everything, doctors their own book, patients their own visits."""
        if user.role == UserRole.ADMIN:
            return self.repo.list(self.db)
        if user.role == UserRole.DOCTOR:
            return self.repo.list(self.db, doctor_id=user.id)
        return self.repo.list(self.db, patient_id=user.id)

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def get_for(self, user: User, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        if user.role != UserRole.ADMIN and user.id not in (
            appointment.patient_id, appointment.doctor_id
        ):
            raise AuthorizationError("Not authorized to view this appointment")
        return appointment

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, user: User, data: AppointmentCreate) -> Appointment:
        if user.role == UserRole.PATIENT:
            patient_id = user.id
        elif user.role == UserRole.ADMIN:
            if data.patient_id is None:
                raise BadRequestError("patientId is required when booking for a patient")
            patient_id = data.patient_id
            patient = UserRepository.get(self.db, patient_id)
            if not patient or patient.role != UserRole.PATIENT:
                raise NotFoundError("Patient not found")
        else:
            raise AuthorizationError("Only patients and admins can book appointments")

        if not DoctorRepository.get(self.db, data.doctor_id):
            raise NotFoundError("Doctor not found")

        with transaction(self.db):
            appointment = self.repo.add(
                self.db,
                patient_id=patient_id,
                doctor_id=data.doctor_id,
                date=data.date,
                start_time=data.start_time,
                end_time=data.end_time,
                reason=data.reason,
                notes=data.notes,
                status=AppointmentStatus.PENDING,
            )
        self.db.refresh(appointment)
        self.log.info(
            f"Created appointment id={appointment.id} patient_id={patient_id} "
            f"doctor_id={data.doctor_id} date={data.date}"
        )
        return appointment

    def update(self, user: User, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        appointment = self.get(appointment_id)
        self._require_owner_or_admin(user, appointment)

        updates = data.model_dump(exclude_unset=True, exclude={"status"})
        if "reason" in updates and updates["reason"] is None:
            del updates["reason"]

        if data.status is not None:
            if data.status == AppointmentStatus.COMPLETED:
                raise ConflictError("Appointments are completed through the completion workflow")
            if data.status == AppointmentStatus.CONFIRMED and user.role != UserRole.ADMIN:
                raise AuthorizationError("Doctors confirm through the accept action; only admins set confirmed directly")
            updates["status"] = check_transition(appointment.status, data.status)

        with transaction(self.db):
            self.repo.update(self.db, appointment, **updates)
        self.db.refresh(appointment)
        return appointment

    def delete(self, user: User, appointment_id: int) -> None:
        appointment = self.get(appointment_id)
        self._require_owner_or_admin(user, appointment)
        if appointment.status == AppointmentStatus.COMPLETED:
            # The visit's medical record stays tied to it
            raise ConflictError("Completed appointments cannot be deleted")
        with transaction(self.db):
            self.repo.delete(self.db, appointment)
        self.log.info(f"Deleted appointment id={appointment_id} by user id={user.id}")

    # ------------------------------------------------------------------
    # Status actions
    # ------------------------------------------------------------------

    def accept(self, user: User, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        self._require_doctor_or_admin(user, appointment)
        return self._apply(appointment, AppointmentAction.ACCEPT, user)

    def decline(self, user: User, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        self._require_doctor_or_admin(user, appointment)
        return self._apply(appointment, AppointmentAction.DECLINE, user)

    def cancel(self, user: User, appointment_id: int) -> Appointment:
        appointment = self.get_for(user, appointment_id)
        return self._apply(appointment, AppointmentAction.CANCEL, user)

    def reschedule(self, user: User, appointment_id: int,
                   data: AppointmentReschedule) -> Appointment:
        appointment = self.get(appointment_id)
        self._require_owner_or_admin(user, appointment)
        return self._apply(
            appointment,
            AppointmentAction.RESCHEDULE,
            user,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
        )

    def _apply(self, appointment: Appointment, action: AppointmentAction,
               user: User, **changes) -> Appointment:
        previous = appointment.status
        new_status = resolve_action(previous, action)
        with transaction(self.db):
            self.repo.update(self.db, appointment, status=new_status, **changes)
        self.db.refresh(appointment)
        self.log.info(
            f"Appointment id={appointment.id} {action.value}: "
            f"{previous.value} -> {new_status.value} by user id={user.id}"
        )
        return appointment

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_owner_or_admin(user: User, appointment: Appointment) -> None:
        if user.role != UserRole.ADMIN and user.id != appointment.patient_id:
            raise AuthorizationError("Not authorized to modify this appointment")

    @staticmethod
    def _require_doctor_or_admin(user: User, appointment: Appointment) -> None:
        if user.role != UserRole.ADMIN and user.id != appointment.doctor_id:
            raise AuthorizationError("Only the appointment's doctor can do this")

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def system_stats(self, today: date = None) -> dict:
        """Today's appointment count and doctors on duty.

        Wait time and efficiency are configured sample values; nothing in the
        system measures them.
        """
        today = today or date.today()
        return {
            "total_appointments": self.repo.count_on(self.db, today),
            "doctors_on_duty": self.repo.count_doctors_on(self.db, today),
            "average_wait_time": settings.STATS_AVERAGE_WAIT_TIME,
            "efficiency": settings.STATS_EFFICIENCY,
        }
