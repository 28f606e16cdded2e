"""Appointment repository - appointment reads and writes"""

from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.appointment import Appointment, AppointmentStatus


class AppointmentRepository:
    """Repository for appointments"""

    @staticmethod
    def get(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.get(Appointment, appointment_id)

    @staticmethod
    def list(
        db: Session,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        query = db.query(Appointment)
        if patient_id is not None:
            query = query.filter(Appointment.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(Appointment.doctor_id == doctor_id)
        if status is not None:
            query = query.filter(Appointment.status == status)
        return query.order_by(
            Appointment.date.desc(), Appointment.start_time.desc()
        ).all()

    @staticmethod
    def add(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def update(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        db.flush()
        return appointment

    @staticmethod
    def delete(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.flush()

    @staticmethod
    def count_on(db: Session, day: date) -> int:
        return db.query(func.count(Appointment.id)).filter(Appointment.date == day).scalar()

    @staticmethod
    def count_doctors_on(db: Session, day: date) -> int:
        return (
            db.query(func.count(func.distinct(Appointment.doctor_id)))
            .filter(Appointment.date == day)
            .scalar()
        )
