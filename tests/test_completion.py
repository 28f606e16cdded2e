import pytest

from healthschedule.core.exceptions import ConflictError
from healthschedule.models.appointment import Appointment, AppointmentStatus
from healthschedule.models.medical_record import DoctorPatient, MedicalRecord
from healthschedule.models.user import User
from healthschedule.repositories.medical_record import MedicalRecordRepository
from healthschedule.schemas.appointment import AppointmentComplete
from healthschedule.services.appointment_service import AppointmentService
from healthschedule.services.completion_service import AppointmentCompletionService

from .conftest import TestingSessionLocal

findings = {
    "diagnosis": "Hypertension",
    "prescription": "Lisinopril 10mg daily",
    "notes": "Recheck in three months"
}

def counts(db):
    db.expire_all()
    return db.query(MedicalRecord).count(), db.query(DoctorPatient).count()

def stored_status(db, appointment_id):
    db.expire_all()
    return db.get(Appointment, appointment_id).status

def test_complete_writes_record_link_and_status(client, db, patient, doctor,
                                                create_appointment, auth_headers):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)

    response = client.post(
        f"/api/appointments/{appointment.id}/complete",
        json=findings,
        headers=auth_headers(doctor)
    )
    assert response.status_code == 200
    data = response.json()
    assert data["appointment"]["status"] == "completed"
    assert data["medicalRecord"]["diagnosis"] == "Hypertension"
    assert data["medicalRecord"]["appointmentId"] == appointment.id
    assert data["medicalRecord"]["patientId"] == patient.id
    assert data["medicalRecord"]["date"] == appointment.date.isoformat()
    assert data["doctorPatient"]["doctorId"] == doctor.id
    assert data["doctorPatient"]["patientId"] == patient.id

    assert counts(db) == (1, 1)
    assert stored_status(db, appointment.id) == AppointmentStatus.COMPLETED

def test_complete_twice_is_rejected(client, db, patient, doctor, create_appointment, auth_headers):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)
    url = f"/api/appointments/{appointment.id}/complete"

    assert client.post(url, json=findings, headers=auth_headers(doctor)).status_code == 200
    response = client.post(url, json=findings, headers=auth_headers(doctor))
    assert response.status_code == 409
    assert counts(db) == (1, 1)

def test_wrong_doctor_writes_nothing(client, db, patient, doctor, other_doctor,
                                     create_appointment, auth_headers):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)

    response = client.post(
        f"/api/appointments/{appointment.id}/complete",
        json=findings,
        headers=auth_headers(other_doctor)
    )
    assert response.status_code == 403
    assert counts(db) == (0, 0)
    assert stored_status(db, appointment.id) == AppointmentStatus.CONFIRMED

@pytest.mark.parametrize("user_fixture", ["patient", "admin"])
def test_only_the_doctor_completes(request, client, db, patient, doctor,
                                   create_appointment, auth_headers, user_fixture):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)
    user = request.getfixturevalue(user_fixture)

    response = client.post(
        f"/api/appointments/{appointment.id}/complete",
        json=findings,
        headers=auth_headers(user)
    )
    assert response.status_code == 403
    assert counts(db) == (0, 0)

def test_pending_cannot_be_completed(client, db, patient, doctor, create_appointment, auth_headers):
    appointment = create_appointment(patient, doctor)

    response = client.post(
        f"/api/appointments/{appointment.id}/complete",
        json=findings,
        headers=auth_headers(doctor)
    )
    assert response.status_code == 409
    assert counts(db) == (0, 0)
    assert stored_status(db, appointment.id) == AppointmentStatus.PENDING

def test_missing_appointment(client, doctor, auth_headers):
    response = client.post("/api/appointments/999/complete", json=findings, headers=auth_headers(doctor))
    assert response.status_code == 404

def test_diagnosis_is_required(client, patient, doctor, create_appointment, auth_headers):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)
    response = client.post(
        f"/api/appointments/{appointment.id}/complete",
        json={"diagnosis": ""},
        headers=auth_headers(doctor)
    )
    assert response.status_code == 400

def test_failure_mid_completion_rolls_everything_back(db, patient, doctor, create_appointment,
                                                      monkeypatch):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)

    def broken_link(*args, **kwargs):
        raise RuntimeError("link table unavailable")

    monkeypatch.setattr(MedicalRecordRepository, "link_doctor_patient", staticmethod(broken_link))

    service = AppointmentCompletionService(db)
    with pytest.raises(RuntimeError):
        service.complete(doctor, appointment.id, AppointmentComplete(**findings))

    assert counts(db) == (0, 0)
    assert stored_status(db, appointment.id) == AppointmentStatus.CONFIRMED

def test_concurrent_change_is_a_conflict(db, patient, doctor, create_appointment):
    appointment = create_appointment(patient, doctor, status=AppointmentStatus.CONFIRMED)

    other = TestingSessionLocal()
    try:
        # The second session reads before the completion commits
        other.get(Appointment, appointment.id)
        other_patient_user = other.get(User, patient.id)

        AppointmentCompletionService(db).complete(
            doctor, appointment.id, AppointmentComplete(**findings)
        )

        with pytest.raises(ConflictError):
            AppointmentService(other).cancel(other_patient_user, appointment.id)
    finally:
        other.close()

    assert stored_status(db, appointment.id) == AppointmentStatus.COMPLETED
