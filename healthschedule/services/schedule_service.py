"""Schedule service - a doctor's weekly availability windows"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.database import transaction
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import AuthorizationError, UserRole
from ..models.schedule import Schedule
from ..models.user import User
from ..repositories.schedule import ScheduleRepository
from ..repositories.user import DoctorRepository
from ..schemas.base import check_time_window
from ..schemas.doctor import ScheduleCreate, ScheduleUpdate

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class ScheduleService:

    def __init__(self, db: Session, log: logging.Logger = None):
        self.db = db
        self.repo = ScheduleRepository()
        self.log = log or logger

    def list_doctor_schedules(self, doctor_id: int) -> List[Schedule]:
        if not DoctorRepository.get(self.db, doctor_id):
            raise NotFoundError("Doctor not found")
        return self.repo.list_for_doctor(self.db, doctor_id)

    def create_schedule(self, user: User, data: ScheduleCreate) -> Schedule:
        self._require_manager(user, data.doctor_id)

        if not DoctorRepository.get(self.db, data.doctor_id):
            raise NotFoundError("Doctor not found")

        # The unique constraint backs this check up under concurrent creates
        if self.repo.get_for_day(self.db, data.doctor_id, data.day_of_week):
            raise ConflictError(
                f"Doctor {data.doctor_id} already has a schedule for "
                f"{DAY_NAMES[data.day_of_week]}"
            )

        with transaction(self.db):
            schedule = self.repo.add(
                self.db,
                doctor_id=data.doctor_id,
                day_of_week=data.day_of_week,
                start_time=data.start_time,
                end_time=data.end_time,
                is_available=data.is_available,
            )
        self.db.refresh(schedule)
        self.log.info(
            f"Created schedule id={schedule.id} doctor_id={schedule.doctor_id} "
            f"day={DAY_NAMES[schedule.day_of_week]}"
        )
        return schedule

    def update_schedule(self, user: User, schedule_id: int, data: ScheduleUpdate) -> Schedule:
        schedule = self.repo.get(self.db, schedule_id)
        if not schedule:
            raise NotFoundError("Schedule not found")
        self._require_manager(user, schedule.doctor_id)

        start = data.start_time if data.start_time is not None else schedule.start_time
        end = data.end_time if data.end_time is not None else schedule.end_time
        try:
            check_time_window(start, end)
        except ValueError as exc:
            raise BadRequestError(str(exc))

        with transaction(self.db):
            self.repo.update(
                self.db,
                schedule,
                start_time=data.start_time,
                end_time=data.end_time,
                is_available=data.is_available,
            )
        self.db.refresh(schedule)
        return schedule

    @staticmethod
    def _require_manager(user: User, doctor_id: int) -> None:
        if user.role == UserRole.ADMIN:
            return
        if user.role == UserRole.DOCTOR and user.id == doctor_id:
            return
        raise AuthorizationError("Only admins or the doctor can manage this schedule")
