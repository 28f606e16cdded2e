from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_user, get_doctor_user
from ...services.medical_record_service import MedicalRecordService
from ...schemas.medical_record import (
    LabResultCreate, LabResultResponse, MedicalRecordCreate,
    MedicalRecordResponse, MedicalRecordUpdate
)
from ...models.user import User

router = APIRouter(tags=["Medical Records"])

def get_record_service(db: Session = Depends(get_db)) -> MedicalRecordService:
    return MedicalRecordService(db)

# Medical records

@router.get("/medical-records/patient/{patient_id}", response_model=List[MedicalRecordResponse])
async def get_patient_records(
    patient_id: int,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.list_patient_records(current_user, patient_id)

@router.get("/medical-records/doctor/{doctor_id}", response_model=List[MedicalRecordResponse])
async def get_doctor_records(
    doctor_id: int,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.list_doctor_records(current_user, doctor_id)

@router.get("/medical-records/{record_id}", response_model=MedicalRecordResponse)
async def get_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.get_record(current_user, record_id)

@router.post("/medical-records", response_model=MedicalRecordResponse,
             status_code=status.HTTP_201_CREATED)
async def create_record(
    record: MedicalRecordCreate,
    current_user: User = Depends(get_doctor_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    """Write a record outside the completion flow."""
    return service.create_record(current_user, record)

@router.put("/medical-records/{record_id}", response_model=MedicalRecordResponse)
async def update_record(
    record_id: int,
    record: MedicalRecordUpdate,
    current_user: User = Depends(get_doctor_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.update_record(current_user, record_id, record)

# Lab results

@router.get("/lab-results/medical-record/{record_id}", response_model=List[LabResultResponse])
async def get_record_lab_results(
    record_id: int,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.list_lab_results(current_user, record_id)

@router.get("/lab-results/{result_id}", response_model=LabResultResponse)
async def get_lab_result(
    result_id: int,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.get_lab_result(current_user, result_id)

@router.post("/lab-results", response_model=LabResultResponse,
             status_code=status.HTTP_201_CREATED)
async def create_lab_result(
    result: LabResultCreate,
    current_user: User = Depends(get_current_user),
    service: MedicalRecordService = Depends(get_record_service)
):
    return service.create_lab_result(current_user, result)
