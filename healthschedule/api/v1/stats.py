from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import StatsResponse
from ...models.user import User

router = APIRouter(prefix="/stats", tags=["Dashboard"])

@router.get("", response_model=StatsResponse)
async def get_system_stats(
    db: Session = Depends(get_db),
    _: User = Depends(get_admin_user)
):
    """Admin dashboard figures for today.

    ``averageWaitTime`` and ``efficiency`` are configured sample values,
    listed in ``sampleFields``.
    """
    return AppointmentService(db).system_stats()
