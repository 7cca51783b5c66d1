"""
User settings schemas.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(value: Optional[str]) -> Optional[str]:
    if value is not None and not _TIME_PATTERN.match(value):
        raise ValueError("reminder_time must be HH:MM")
    return value


class UserSettings(BaseModel):
    """Persisted user preferences."""

    notifications: bool = True
    reminder_time: str = Field(default="19:00", description="Daily reminder time, HH:MM")
    daily_reminder: bool = True
    weekend_reminder: bool = False
    password_protection: bool = False
    auto_backup: bool = False

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, value: Optional[str]) -> Optional[str]:
        return _check_time(value)


class UserSettingsUpdate(BaseModel):
    """Partial settings update; password protection is changed via the auth routes."""

    notifications: Optional[bool] = None
    reminder_time: Optional[str] = None
    daily_reminder: Optional[bool] = None
    weekend_reminder: Optional[bool] = None
    auto_backup: Optional[bool] = None

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, value: Optional[str]) -> Optional[str]:
        return _check_time(value)
