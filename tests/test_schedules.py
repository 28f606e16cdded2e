from healthschedule.core.security import UserRole
from healthschedule.models.schedule import Schedule
from healthschedule.repositories.user import DoctorRepository

def window(doctor, day=2, start="09:00", end="17:00", **extra):
    return {"doctorId": doctor.id, "dayOfWeek": day, "startTime": start, "endTime": end, **extra}

def test_admin_creates_schedule(client, admin, doctor, auth_headers):
    response = client.post("/api/schedules", json=window(doctor), headers=auth_headers(admin))
    assert response.status_code == 201
    data = response.json()
    assert data["doctorId"] == doctor.id
    assert data["dayOfWeek"] == 2
    assert data["startTime"] == "09:00:00"
    assert data["isAvailable"] is True

def test_doctor_manages_own_schedule(client, doctor, auth_headers):
    response = client.post("/api/schedules", json=window(doctor, day=4), headers=auth_headers(doctor))
    assert response.status_code == 201

def test_doctor_cannot_manage_another_doctor(client, doctor, other_doctor, auth_headers):
    response = client.post("/api/schedules", json=window(other_doctor), headers=auth_headers(doctor))
    assert response.status_code == 403

def test_patient_cannot_create(client, patient, doctor, auth_headers):
    response = client.post("/api/schedules", json=window(doctor), headers=auth_headers(patient))
    assert response.status_code == 403

def test_one_schedule_per_day(client, db, admin, doctor, auth_headers):
    headers = auth_headers(admin)
    assert client.post("/api/schedules", json=window(doctor), headers=headers).status_code == 201

    response = client.post(
        "/api/schedules", json=window(doctor, start="10:00", end="12:00"), headers=headers
    )
    assert response.status_code == 409
    assert "Tuesday" in response.json()["error"]
    assert db.query(Schedule).filter(Schedule.doctor_id == doctor.id).count() == 1

def test_same_day_for_different_doctors(client, admin, doctor, other_doctor, auth_headers):
    headers = auth_headers(admin)
    assert client.post("/api/schedules", json=window(doctor), headers=headers).status_code == 201
    assert client.post("/api/schedules", json=window(other_doctor), headers=headers).status_code == 201

def test_rejects_bad_day_and_window(client, admin, doctor, auth_headers):
    headers = auth_headers(admin)
    assert client.post("/api/schedules", json=window(doctor, day=7), headers=headers).status_code == 400
    assert client.post("/api/schedules", json=window(doctor, day=-1), headers=headers).status_code == 400
    response = client.post(
        "/api/schedules", json=window(doctor, start="17:00", end="09:00"), headers=headers
    )
    assert response.status_code == 400

def test_unknown_doctor(client, admin, auth_headers):
    response = client.post(
        "/api/schedules",
        json={"doctorId": 999, "dayOfWeek": 1, "startTime": "09:00", "endTime": "17:00"},
        headers=auth_headers(admin)
    )
    assert response.status_code == 404

def test_update_schedule(client, doctor, auth_headers):
    headers = auth_headers(doctor)
    schedule_id = client.post("/api/schedules", json=window(doctor), headers=headers).json()["id"]

    response = client.put(
        f"/api/schedules/{schedule_id}",
        json={"endTime": "13:00", "isAvailable": False},
        headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["startTime"] == "09:00:00"
    assert data["endTime"] == "13:00:00"
    assert data["isAvailable"] is False

def test_update_checks_merged_window(client, doctor, auth_headers):
    headers = auth_headers(doctor)
    schedule_id = client.post("/api/schedules", json=window(doctor), headers=headers).json()["id"]

    # Only the end is sent; it falls before the stored start
    response = client.put(f"/api/schedules/{schedule_id}", json={"endTime": "08:00"}, headers=headers)
    assert response.status_code == 400

def test_update_by_other_doctor(client, doctor, other_doctor, auth_headers):
    schedule_id = client.post(
        "/api/schedules", json=window(doctor), headers=auth_headers(doctor)
    ).json()["id"]
    response = client.put(
        f"/api/schedules/{schedule_id}",
        json={"isAvailable": False},
        headers=auth_headers(other_doctor)
    )
    assert response.status_code == 403

def test_update_missing(client, admin, auth_headers):
    response = client.put("/api/schedules/999", json={"isAvailable": False}, headers=auth_headers(admin))
    assert response.status_code == 404

def test_doctor_schedules_listed_by_day(client, admin, doctor, auth_headers):
    headers = auth_headers(admin)
    for day in (5, 1, 3):
        client.post("/api/schedules", json=window(doctor, day=day), headers=headers)

    response = client.get(f"/api/doctors/{doctor.id}/schedules")
    assert response.status_code == 200
    assert [s["dayOfWeek"] for s in response.json()] == [1, 3, 5]

def test_schedules_of_unknown_doctor(client):
    response = client.get("/api/doctors/999/schedules")
    assert response.status_code == 404

def test_doctor_seven_tuesday_conflict(client, db, admin, create_user, auth_headers):
    account = create_user("drseven", role=UserRole.DOCTOR, id=7)
    DoctorRepository.add(db, account.id, specialty="Oncology")
    db.commit()

    body = {"doctorId": 7, "dayOfWeek": 2, "startTime": "08:00", "endTime": "12:00"}
    headers = auth_headers(admin)
    assert client.post("/api/schedules", json=body, headers=headers).status_code == 201
    assert client.post("/api/schedules", json=body, headers=headers).status_code == 409
