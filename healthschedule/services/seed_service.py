"""Initial admin account and demo data for local runs."""

import logging
import secrets
from datetime import date, time, timedelta

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.security import UserRole, get_password_hash
from ..models.appointment import AppointmentStatus
from ..models.doctor import Doctor
from ..models.user import User
from ..repositories.appointment import AppointmentRepository
from ..repositories.schedule import ScheduleRepository
from ..repositories.user import DoctorRepository, UserRepository

logger = logging.getLogger(__name__)

SAMPLE_PATIENT = {
    "username": "patient1",
    "email": "patient1@example.com",
    "full_name": "Jane Smith",
    "phone": "555-123-4567",
    "password": "patient123",
}

SAMPLE_DOCTORS = [
    {
        "username": "drjohnson",
        "email": "johnson@healthschedule.com",
        "full_name": "Dr. Robert Johnson",
        "phone": "555-987-6543",
        "password": "doctor123",
        "profile": {
            "specialty": "Cardiology",
            "bio": "Board-certified cardiologist with over 15 years of experience "
                   "in treating cardiovascular diseases.",
            "education": "MD, Harvard Medical School",
            "languages": "English, Spanish",
            "rating": 4.8,
            "review_count": 42,
        },
        # (day_of_week, start, end)
        "schedules": [(1, time(9), time(17)), (3, time(9), time(17)), (5, time(9), time(15))],
    },
    {
        "username": "drchen",
        "email": "chen@healthschedule.com",
        "full_name": "Dr. Emily Chen",
        "phone": "555-456-7890",
        "password": "doctor123",
        "profile": {
            "specialty": "Pediatrics",
            "bio": "Specializes in pediatric care with a focus on newborn care "
                   "and childhood development.",
            "education": "MD, Johns Hopkins University",
            "languages": "English, Mandarin",
            "rating": 4.9,
            "review_count": 56,
        },
        "schedules": [(2, time(8), time(16)), (4, time(8), time(16))],
    },
]


def create_initial_admin(db: Session, email: str, password: str = None) -> User:
    """Create the ``admin`` account unless it already exists.

    When no password is configured a random one is generated and logged once.
    """
    existing = UserRepository.get_by_username_or_email(db, "admin", email)
    if existing:
        return existing

    if not password:
        password = secrets.token_urlsafe(12)
        logger.warning(f"Generated initial admin password: {password}")

    with transaction(db):
        admin = UserRepository.add(
            db,
            username="admin",
            email=email,
            full_name="System Administrator",
            role=UserRole.ADMIN,
            password_hash=get_password_hash(password),
        )
    logger.info(f"Created initial admin user id={admin.id}")
    return admin


def seed_sample_data(db: Session) -> bool:
    """Insert demo doctors, schedules, a patient and two appointments.

    Returns False without writing anything if doctors already exist.
    """
    if db.query(Doctor.id).first() is not None:
        logger.info("Sample data already present; skipping")
        return False

    with transaction(db):
        patient = _add_user(db, SAMPLE_PATIENT, UserRole.PATIENT)

        doctors = []
        for sample in SAMPLE_DOCTORS:
            account = _add_user(db, sample, UserRole.DOCTOR)
            doctor = DoctorRepository.add(db, account.id, **sample["profile"])
            for day_of_week, start, end in sample["schedules"]:
                ScheduleRepository.add(
                    db,
                    doctor_id=doctor.id,
                    day_of_week=day_of_week,
                    start_time=start,
                    end_time=end,
                    is_available=True,
                )
            doctors.append(doctor)

        today = date.today()
        AppointmentRepository.add(
            db,
            patient_id=patient.id,
            doctor_id=doctors[0].id,
            date=today + timedelta(days=1),
            start_time=time(10),
            end_time=time(10, 30),
            reason="Annual checkup",
            status=AppointmentStatus.CONFIRMED,
        )
        AppointmentRepository.add(
            db,
            patient_id=patient.id,
            doctor_id=doctors[1].id,
            date=today + timedelta(days=7),
            start_time=time(14),
            end_time=time(14, 30),
            reason="Followup consultation",
            notes="Bring previous test results",
            status=AppointmentStatus.PENDING,
        )

    logger.info(f"Seeded {len(SAMPLE_DOCTORS)} doctors, 1 patient and 2 appointments")
    return True


def _add_user(db: Session, sample: dict, role: UserRole) -> User:
    return UserRepository.add(
        db,
        username=sample["username"],
        email=sample["email"],
        full_name=sample["full_name"],
        phone=sample["phone"],
        role=role,
        password_hash=get_password_hash(sample["password"]),
    )
