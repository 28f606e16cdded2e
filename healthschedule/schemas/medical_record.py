import datetime as dt
from datetime import date, datetime
from typing import Dict, Optional, Union

from pydantic import Field

from .base import CamelModel

LabValues = Union[Dict[str, str], str]


class MedicalRecordCreate(CamelModel):
    doctor_id: int
    patient_id: int
    appointment_id: Optional[int] = None
    date: date
    diagnosis: str = Field(min_length=1)
    prescription: Optional[str] = None
    notes: Optional[str] = None


class MedicalRecordUpdate(CamelModel):
    date: Optional[dt.date] = None
    diagnosis: Optional[str] = Field(default=None, min_length=1)
    prescription: Optional[str] = None
    notes: Optional[str] = None


class MedicalRecordResponse(CamelModel):
    id: int
    doctor_id: int
    patient_id: int
    appointment_id: Optional[int] = None
    date: date
    diagnosis: str
    prescription: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LabResultCreate(CamelModel):
    medical_record_id: int
    test_name: str = Field(min_length=1, max_length=255)
    test_date: date
    results: LabValues
    normal_range: Optional[LabValues] = None
    interpretation: Optional[str] = None
    performed_by: Optional[str] = Field(default=None, max_length=255)


class LabResultResponse(CamelModel):
    id: int
    medical_record_id: int
    test_name: str
    test_date: date
    results: LabValues
    normal_range: Optional[LabValues] = None
    interpretation: Optional[str] = None
    performed_by: Optional[str] = None
    created_at: Optional[datetime] = None


class DoctorPatientResponse(CamelModel):
    id: int
    appointment_id: Optional[int] = None
    doctor_id: int
    patient_id: int
    added_at: Optional[datetime] = None
