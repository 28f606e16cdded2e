from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_doctor_user
from ...services.schedule_service import ScheduleService
from ...schemas.doctor import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from ...models.user import User

router = APIRouter(prefix="/schedules", tags=["Schedules"])

@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule: ScheduleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Add a weekly window; one per doctor and day."""
    return ScheduleService(db).create_schedule(current_user, schedule)

@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    schedule: ScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Change a window's hours or availability."""
    return ScheduleService(db).update_schedule(current_user, schedule_id, schedule)
