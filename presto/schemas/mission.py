"""Schémas Mission / Mission schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from presto.schemas.client import ClientBrief


class CompanyBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str


class MissionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    client_id: int
    company_id: int | None = None  # défaut : société par défaut / default company
    daily_rate: float | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class MissionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    client_id: int | None = None
    company_id: int | None = None
    daily_rate: float | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class MissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    client_id: int
    company_id: int
    daily_rate: float | None
    start_date: date | None
    end_date: date | None
    is_active: bool
    client: ClientBrief
    company: CompanyBrief
    created_at: datetime
    updated_at: datetime
