"""Schedule repository - weekly availability windows"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.schedule import Schedule


class ScheduleRepository:
    """Repository for doctor schedules"""

    @staticmethod
    def get(db: Session, schedule_id: int) -> Optional[Schedule]:
        return db.get(Schedule, schedule_id)

    @staticmethod
    def list_for_doctor(db: Session, doctor_id: int) -> List[Schedule]:
        return (
            db.query(Schedule)
            .filter(Schedule.doctor_id == doctor_id)
            .order_by(Schedule.day_of_week)
            .all()
        )

    @staticmethod
    def get_for_day(db: Session, doctor_id: int, day_of_week: int) -> Optional[Schedule]:
        return (
            db.query(Schedule)
            .filter(Schedule.doctor_id == doctor_id, Schedule.day_of_week == day_of_week)
            .first()
        )

    @staticmethod
    def add(db: Session, **schedule_data) -> Schedule:
        schedule = Schedule(**schedule_data)
        db.add(schedule)
        db.flush()
        return schedule

    @staticmethod
    def update(db: Session, schedule: Schedule, **updates) -> Schedule:
        for key, value in updates.items():
            if value is not None and hasattr(schedule, key):
                setattr(schedule, key, value)
        db.flush()
        return schedule
