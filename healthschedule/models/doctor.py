from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Doctor(Base):
    __tablename__ = "doctors"

    # The profile shares its id with the doctor's user account
    id = Column(Integer, ForeignKey("users.id"), primary_key=True)

    # Professional information
    specialty = Column(String(100), nullable=False, index=True)
    bio = Column(Text, nullable=True)
    education = Column(String(255), nullable=True)
    languages = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Reviews
    rating = Column(Float, default=0)
    review_count = Column(Integer, default=0)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="doctor_profile")
    schedules = relationship(
        "Schedule", back_populates="doctor", order_by="Schedule.day_of_week"
    )

    @property
    def username(self):
        return self.user.username

    @property
    def full_name(self):
        return self.user.full_name

    @property
    def email(self):
        return self.user.email

    def __repr__(self):
        return f"<Doctor(id={self.id}, specialty='{self.specialty}')>"
