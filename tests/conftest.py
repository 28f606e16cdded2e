import os
from datetime import date, time, timedelta

# Set testing environment before the application reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from healthschedule.main import app
from healthschedule.core.database import Base, engine, get_db, get_redis
from healthschedule.core.security import UserRole, create_token_pair, get_password_hash
from healthschedule.models.appointment import AppointmentStatus
from healthschedule.repositories.appointment import AppointmentRepository
from healthschedule.repositories.user import DoctorRepository, UserRepository

PASSWORD = "Password123"
# Hashed once for every test account
PASSWORD_HASH = get_password_hash(PASSWORD)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)

@pytest.fixture
def client(test_db, redis_client):
    app.dependency_overrides[get_redis] = lambda: redis_client
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def db(test_db):
    """Session for arranging data and checking what the API wrote."""
    session = TestingSessionLocal()
    yield session
    session.close()

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def create_user(db):
    def _create(username, role=UserRole.PATIENT, **fields):
        user = UserRepository.add(
            db,
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            full_name=fields.pop("full_name", username.title()),
            role=role,
            password_hash=PASSWORD_HASH,
            **fields
        )
        db.commit()
        db.refresh(user)
        return user
    return _create

@pytest.fixture
def create_doctor(db, create_user):
    def _create(username, specialty="Cardiology"):
        user = create_user(username, role=UserRole.DOCTOR, full_name=f"Dr. {username.title()}")
        DoctorRepository.add(db, user.id, specialty=specialty)
        db.commit()
        return user
    return _create

@pytest.fixture
def create_appointment(db):
    def _create(patient, doctor, status=AppointmentStatus.PENDING, day=None):
        appointment = AppointmentRepository.add(
            db,
            patient_id=patient.id,
            doctor_id=doctor.id,
            date=day or date.today() + timedelta(days=3),
            start_time=time(10, 0),
            end_time=time(10, 30),
            reason="Checkup",
            status=status,
        )
        db.commit()
        db.refresh(appointment)
        return appointment
    return _create

@pytest.fixture
def auth_headers():
    def _headers(user):
        tokens = create_token_pair(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {tokens.access_token}"}
    return _headers

# ---------------------------------------------------------------------------
# Common accounts
# ---------------------------------------------------------------------------

@pytest.fixture
def admin(create_user):
    return create_user("admin", role=UserRole.ADMIN)

@pytest.fixture
def patient(create_user):
    return create_user("patient1")

@pytest.fixture
def other_patient(create_user):
    return create_user("patient2")

@pytest.fixture
def doctor(create_doctor):
    return create_doctor("drjohnson")

@pytest.fixture
def other_doctor(create_doctor):
    return create_doctor("drchen", specialty="Pediatrics")
