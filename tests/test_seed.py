from datetime import date, timedelta

from healthschedule.core.security import UserRole, verify_password
from healthschedule.models.appointment import Appointment, AppointmentStatus
from healthschedule.models.doctor import Doctor
from healthschedule.models.schedule import Schedule
from healthschedule.models.user import User
from healthschedule.services.seed_service import create_initial_admin, seed_sample_data

def test_initial_admin_is_created_once(db):
    admin = create_initial_admin(db, "root@example.com", "RootPassword1")
    assert admin.role == UserRole.ADMIN
    assert verify_password("RootPassword1", admin.password_hash)

    again = create_initial_admin(db, "root@example.com", "Different123")
    assert again.id == admin.id
    assert db.query(User).filter(User.role == UserRole.ADMIN).count() == 1

def test_initial_admin_gets_generated_password(db):
    admin = create_initial_admin(db, "root@example.com")
    assert admin.password_hash

def test_sample_data(db):
    assert seed_sample_data(db) is True

    doctors = db.query(Doctor).order_by(Doctor.id).all()
    assert [d.specialty for d in doctors] == ["Cardiology", "Pediatrics"]
    assert [s.day_of_week for s in doctors[0].schedules] == [1, 3, 5]
    assert db.query(Schedule).count() == 5

    appointments = db.query(Appointment).order_by(Appointment.date).all()
    assert [a.status for a in appointments] == [AppointmentStatus.CONFIRMED, AppointmentStatus.PENDING]
    assert appointments[0].date == date.today() + timedelta(days=1)

def test_sample_data_is_not_duplicated(db):
    seed_sample_data(db)
    assert seed_sample_data(db) is False
    assert db.query(Doctor).count() == 2

def test_seeded_patient_can_log_in(client, db):
    seed_sample_data(db)
    response = client.post(
        "/api/auth/login", json={"email": "patient1@example.com", "password": "patient123"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "patient"
