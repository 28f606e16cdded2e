from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_user
from ...services.appointment_service import AppointmentService
from ...services.completion_service import AppointmentCompletionService
from ...schemas.appointment import (
    AppointmentComplete, AppointmentCompletionResponse, AppointmentCreate,
    AppointmentReschedule, AppointmentResponse, AppointmentUpdate
)
from ...models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])

def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)

# ============================================================================
# CRUD
# ============================================================================

@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Admins see all appointments; everyone else sees only their own."""
    return service.list_for(current_user)

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Book an appointment; new bookings always start as pending."""
    return service.create(current_user, appointment)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return service.get_for(current_user, appointment_id)

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    appointment: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Edit reason or notes; a status change must be a valid transition."""
    return service.update(current_user, appointment_id, appointment)

@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    service.delete(current_user, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ============================================================================
# STATUS ACTIONS
# ============================================================================

@router.post("/{appointment_id}/accept", response_model=AppointmentResponse)
async def accept_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """pending -> confirmed (the appointment's doctor or an admin)."""
    return service.accept(current_user, appointment_id)

@router.post("/{appointment_id}/decline", response_model=AppointmentResponse)
async def decline_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """pending -> cancelled (the appointment's doctor or an admin)."""
    return service.decline(current_user, appointment_id)

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """pending or confirmed -> cancelled (either participant or an admin)."""
    return service.cancel(current_user, appointment_id)

@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: int,
    slot: AppointmentReschedule,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Move a pending or confirmed appointment; it goes back to pending."""
    return service.reschedule(current_user, appointment_id, slot)

@router.post("/{appointment_id}/complete", response_model=AppointmentCompletionResponse)
async def complete_appointment(
    appointment_id: int,
    findings: AppointmentComplete,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record the visit and mark it completed (the appointment's doctor only)."""
    result = AppointmentCompletionService(db).complete(current_user, appointment_id, findings)
    return {
        "appointment": result.appointment,
        "medical_record": result.medical_record,
        "doctor_patient": result.doctor_patient,
    }
