from datetime import date, datetime, time
from typing import List, Optional

from pydantic import Field, model_validator

from ..models.appointment import AppointmentStatus
from .base import CamelModel, check_time_window
from .medical_record import DoctorPatientResponse, MedicalRecordResponse


class AppointmentCreate(CamelModel):
    doctor_id: int
    # Required when an admin books on behalf of a patient; ignored for patients
    patient_id: Optional[int] = None
    date: date
    start_time: time
    end_time: time
    reason: str = Field(min_length=1)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def valid_window(self):
        check_time_window(self.start_time, self.end_time)
        return self


class AppointmentUpdate(CamelModel):
    reason: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None


class AppointmentReschedule(CamelModel):
    date: date
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def valid_window(self):
        check_time_window(self.start_time, self.end_time)
        return self


class AppointmentComplete(CamelModel):
    diagnosis: str = Field(min_length=1)
    prescription: Optional[str] = None
    notes: Optional[str] = None


class AppointmentResponse(CamelModel):
    id: int
    doctor_id: int
    patient_id: int
    date: date
    start_time: time
    end_time: time
    reason: str
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatsResponse(CamelModel):
    total_appointments: int
    doctors_on_duty: int
    average_wait_time: int
    efficiency: int
    # Fields carrying configured sample values rather than computed metrics
    sample_fields: List[str] = ["averageWaitTime", "efficiency"]


class AppointmentCompletionResponse(CamelModel):
    appointment: AppointmentResponse
    medical_record: MedicalRecordResponse
    doctor_patient: DoctorPatientResponse
