"""Schémas Client / Client schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from presto.services import holiday_service


def _check_country(v: str | None) -> str | None:
    if v is not None and not holiday_service.is_supported_country(v):
        raise ValueError(f"Unsupported holiday country: {v}")
    return v


class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    business_id: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=20)
    currency: str = Field(default="EUR", pattern=r"^[A-Z]{3}$")
    holiday_country: str = "FR"

    @field_validator("holiday_country")
    @classmethod
    def check_holiday_country(cls, v: str) -> str:
        return _check_country(v)


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    business_id: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=20)
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    holiday_country: str | None = None

    @field_validator("holiday_country")
    @classmethod
    def check_holiday_country(cls, v: str | None) -> str | None:
        return _check_country(v)


class ClientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    email: str | None
    phone: str | None
    address: str | None
    business_id: str | None
    color: str | None
    currency: str
    holiday_country: str
    created_at: datetime
    updated_at: datetime


class ClientBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    color: str | None
    currency: str
