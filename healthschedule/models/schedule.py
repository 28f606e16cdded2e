from sqlalchemy import (
    Column, Integer, ForeignKey, DateTime, Boolean, Time,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)

    # 0=Sunday, 1=Monday, ... 6=Saturday
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # One weekly window per doctor and day
    __table_args__ = (
        UniqueConstraint("doctor_id", "day_of_week", name="uq_schedule_doctor_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_day_of_week"),
    )

    doctor = relationship("Doctor", back_populates="schedules")

    def __repr__(self):
        return f"<Schedule(id={self.id}, doctor_id={self.doctor_id}, day_of_week={self.day_of_week})>"
