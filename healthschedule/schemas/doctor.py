from datetime import datetime, time
from typing import Optional

from pydantic import Field, model_validator

from .base import CamelModel, check_time_window


class DoctorCreate(CamelModel):
    # Admins onboard a doctor account by id; doctors onboard themselves
    id: Optional[int] = None
    specialty: str = Field(min_length=1, max_length=100)
    bio: Optional[str] = None
    education: Optional[str] = Field(default=None, max_length=255)
    languages: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=500)


class DoctorUpdate(CamelModel):
    specialty: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = None
    education: Optional[str] = Field(default=None, max_length=255)
    languages: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=500)


class DoctorResponse(CamelModel):
    id: int
    username: str
    full_name: str
    email: str
    specialty: str
    bio: Optional[str] = None
    education: Optional[str] = None
    languages: Optional[str] = None
    avatar_url: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None


class ScheduleCreate(CamelModel):
    doctor_id: int
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    end_time: time
    is_available: bool = True

    @model_validator(mode="after")
    def valid_window(self):
        check_time_window(self.start_time, self.end_time)
        return self


class ScheduleUpdate(CamelModel):
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_available: Optional[bool] = None

    @model_validator(mode="after")
    def valid_window(self):
        check_time_window(self.start_time, self.end_time)
        return self


class ScheduleResponse(CamelModel):
    id: int
    doctor_id: int
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
