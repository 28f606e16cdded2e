from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_user
from ...services.doctor_service import DoctorService
from ...services.schedule_service import ScheduleService
from ...schemas.auth import UserResponse
from ...schemas.doctor import DoctorCreate, DoctorResponse, DoctorUpdate, ScheduleResponse
from ...models.user import User

router = APIRouter(prefix="/doctors", tags=["Doctors"])

def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    return DoctorService(db)

@router.get("", response_model=List[DoctorResponse])
async def list_doctors(
    specialty: Optional[str] = None,
    service: DoctorService = Depends(get_doctor_service)
):
    """List doctors, optionally by specialty."""
    return service.list_doctors(specialty)

@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor_profile(
    profile: DoctorCreate,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service)
):
    """Onboard a doctor profile for a doctor account."""
    return service.create_profile(current_user, profile)

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: int,
    service: DoctorService = Depends(get_doctor_service)
):
    return service.get_doctor(doctor_id)

@router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor_profile(
    doctor_id: int,
    profile: DoctorUpdate,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service)
):
    return service.update_profile(current_user, doctor_id, profile)

@router.get("/{doctor_id}/schedules", response_model=List[ScheduleResponse])
async def get_doctor_schedules(
    doctor_id: int,
    db: Session = Depends(get_db)
):
    """Weekly availability, ordered Sunday to Saturday."""
    return ScheduleService(db).list_doctor_schedules(doctor_id)

@router.get("/{doctor_id}/patients", response_model=List[UserResponse])
async def get_doctor_patients(
    doctor_id: int,
    current_user: User = Depends(get_current_user),
    service: DoctorService = Depends(get_doctor_service)
):
    """Patients this doctor has treated."""
    return service.list_patients(current_user, doctor_id)
