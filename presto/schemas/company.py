"""Schémas Société / Company schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CompanyBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    address: str | None = None
    business_id: str | None = Field(default=None, max_length=100)
    is_default: bool = False


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = None
    business_id: str | None = Field(default=None, max_length=100)
    is_default: bool | None = None


class CompanyRead(CompanyBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime
    updated_at: datetime
