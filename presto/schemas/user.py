"""
Schémas User et Préférences / User and Settings schemas.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from presto.services import holiday_service


# --- User ---
class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime


# --- Settings ---
class SettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    theme: str
    locale: str
    base_currency: str
    holiday_country: str


class SettingsUpdate(BaseModel):
    theme: Literal["light", "dark", "system"] | None = None
    locale: str | None = Field(default=None, min_length=2, max_length=5)
    base_currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    holiday_country: str | None = None

    @field_validator("holiday_country")
    @classmethod
    def check_holiday_country(cls, v: str | None) -> str | None:
        if v is not None and not holiday_service.is_supported_country(v):
            raise ValueError(f"Unsupported holiday country: {v}")
        return v
