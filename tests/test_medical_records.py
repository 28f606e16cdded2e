from datetime import date

import pytest

from healthschedule.models.appointment import AppointmentStatus

def record_data(doctor, patient, **overrides):
    data = {
        "doctorId": doctor.id,
        "patientId": patient.id,
        "date": date.today().isoformat(),
        "diagnosis": "Seasonal allergies",
        "prescription": "Cetirizine 10mg"
    }
    data.update(overrides)
    return data

@pytest.fixture
def record(client, patient, doctor, auth_headers):
    response = client.post(
        "/api/medical-records", json=record_data(doctor, patient), headers=auth_headers(doctor)
    )
    assert response.status_code == 201
    return response.json()

class TestRecords:
    def test_doctor_writes_record(self, record, patient, doctor):
        assert record["doctorId"] == doctor.id
        assert record["patientId"] == patient.id
        assert record["diagnosis"] == "Seasonal allergies"

    def test_doctor_cannot_write_as_someone_else(self, client, patient, doctor, other_doctor,
                                                 auth_headers):
        response = client.post(
            "/api/medical-records",
            json=record_data(doctor, patient),
            headers=auth_headers(other_doctor)
        )
        assert response.status_code == 403

    def test_patient_cannot_write(self, client, patient, doctor, auth_headers):
        response = client.post(
            "/api/medical-records", json=record_data(doctor, patient), headers=auth_headers(patient)
        )
        assert response.status_code == 403

    def test_appointment_must_belong_to_patient(self, client, patient, other_patient, doctor,
                                                create_appointment, auth_headers):
        appointment = create_appointment(other_patient, doctor)
        response = client.post(
            "/api/medical-records",
            json=record_data(doctor, patient, appointmentId=appointment.id),
            headers=auth_headers(doctor)
        )
        assert response.status_code == 404

    def test_appointment_must_belong_to_doctor(self, client, patient, doctor, other_doctor,
                                               create_appointment, auth_headers):
        appointment = create_appointment(patient, doctor)
        headers = auth_headers(other_doctor)
        response = client.post(
            "/api/medical-records",
            json=record_data(other_doctor, patient, appointmentId=appointment.id),
            headers=headers
        )
        assert response.status_code == 404

        # No doctor-patient link was created, so the history stays closed
        response = client.get(f"/api/medical-records/patient/{patient.id}", headers=headers)
        assert response.status_code == 403

    def test_patient_reads_own_history(self, client, record, patient, auth_headers):
        response = client.get(f"/api/medical-records/patient/{patient.id}", headers=auth_headers(patient))
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [record["id"]]

        response = client.get(f"/api/medical-records/{record['id']}", headers=auth_headers(patient))
        assert response.status_code == 200

    def test_other_patient_is_refused(self, client, record, patient, other_patient, auth_headers):
        headers = auth_headers(other_patient)
        assert client.get(f"/api/medical-records/patient/{patient.id}", headers=headers).status_code == 403
        assert client.get(f"/api/medical-records/{record['id']}", headers=headers).status_code == 403

    def test_unlinked_doctor_is_refused(self, client, record, patient, other_doctor, auth_headers):
        response = client.get(
            f"/api/medical-records/patient/{patient.id}", headers=auth_headers(other_doctor)
        )
        assert response.status_code == 403

    def test_linked_doctor_sees_full_history(self, client, record, patient, other_doctor,
                                             create_appointment, auth_headers):
        appointment = create_appointment(patient, other_doctor, status=AppointmentStatus.CONFIRMED)
        headers = auth_headers(other_doctor)
        client.post(
            f"/api/appointments/{appointment.id}/complete",
            json={"diagnosis": "Sprained ankle"},
            headers=headers
        )

        response = client.get(f"/api/medical-records/patient/{patient.id}", headers=headers)
        assert response.status_code == 200
        assert len(response.json()) == 2
        assert client.get(f"/api/medical-records/{record['id']}", headers=headers).status_code == 200

    def test_doctor_records(self, client, record, doctor, other_doctor, auth_headers):
        response = client.get(f"/api/medical-records/doctor/{doctor.id}", headers=auth_headers(doctor))
        assert [r["id"] for r in response.json()] == [record["id"]]

        response = client.get(
            f"/api/medical-records/doctor/{doctor.id}", headers=auth_headers(other_doctor)
        )
        assert response.status_code == 403

    def test_author_updates_record(self, client, record, doctor, other_doctor, auth_headers):
        url = f"/api/medical-records/{record['id']}"
        response = client.put(url, json={"notes": "Improving"}, headers=auth_headers(doctor))
        assert response.status_code == 200
        assert response.json()["notes"] == "Improving"
        assert response.json()["diagnosis"] == "Seasonal allergies"

        response = client.put(url, json={"notes": "Mine now"}, headers=auth_headers(other_doctor))
        assert response.status_code == 403

    def test_missing_record(self, client, admin, auth_headers):
        response = client.get("/api/medical-records/999", headers=auth_headers(admin))
        assert response.status_code == 404

class TestLabResults:
    def lab(self, record, **overrides):
        data = {
            "medicalRecordId": record["id"],
            "testName": "Complete Blood Count",
            "testDate": date.today().isoformat(),
            "results": {"wbc": "6.1", "rbc": "4.9"},
            "normalRange": {"wbc": "4.5-11.0", "rbc": "4.5-5.9"}
        }
        data.update(overrides)
        return data

    def test_author_adds_lab_result(self, client, record, doctor, auth_headers):
        response = client.post("/api/lab-results", json=self.lab(record), headers=auth_headers(doctor))
        assert response.status_code == 201
        data = response.json()
        assert data["medicalRecordId"] == record["id"]
        assert data["results"] == {"wbc": "6.1", "rbc": "4.9"}

    def test_free_text_results(self, client, record, doctor, auth_headers):
        response = client.post(
            "/api/lab-results",
            json=self.lab(record, results="No abnormalities", normalRange=None),
            headers=auth_headers(doctor)
        )
        assert response.status_code == 201
        assert response.json()["results"] == "No abnormalities"

    def test_other_doctor_cannot_add(self, client, record, other_doctor, auth_headers):
        response = client.post(
            "/api/lab-results", json=self.lab(record), headers=auth_headers(other_doctor)
        )
        assert response.status_code == 403

    def test_patient_cannot_add(self, client, record, patient, auth_headers):
        response = client.post("/api/lab-results", json=self.lab(record), headers=auth_headers(patient))
        assert response.status_code == 403

    def test_record_must_exist(self, client, record, doctor, auth_headers):
        response = client.post(
            "/api/lab-results", json=self.lab(record, medicalRecordId=999), headers=auth_headers(doctor)
        )
        assert response.status_code == 404

    def test_patient_reads_results(self, client, record, patient, other_patient, doctor, auth_headers):
        result_id = client.post(
            "/api/lab-results", json=self.lab(record), headers=auth_headers(doctor)
        ).json()["id"]

        response = client.get(
            f"/api/lab-results/medical-record/{record['id']}", headers=auth_headers(patient)
        )
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [result_id]

        assert client.get(f"/api/lab-results/{result_id}", headers=auth_headers(patient)).status_code == 200
        response = client.get(f"/api/lab-results/{result_id}", headers=auth_headers(other_patient))
        assert response.status_code == 403

    def test_missing_lab_result(self, client, admin, auth_headers):
        response = client.get("/api/lab-results/999", headers=auth_headers(admin))
        assert response.status_code == 404
