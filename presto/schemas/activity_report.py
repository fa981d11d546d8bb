"""
Schémas Rapport d'activité / Activity report schemas.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from presto.config import settings
from presto.models.activity_report import ReportStatus
from presto.schemas.mission import MissionRead


class ReportCreate(BaseModel):
    mission_id: int
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=settings.MIN_YEAR, le=settings.MAX_YEAR)


class ReportUpdate(BaseModel):
    """Statut et/ou note / Status and/or note."""
    status: ReportStatus | None = None
    note: str | None = Field(default=None, max_length=2000)


class EntryUpdate(BaseModel):
    """Champ absent = inchangé ; note null = effacée / Omitted = untouched, null note = cleared."""
    id: int
    value: float | None = Field(default=None, ge=0, le=1)
    note: str | None = Field(default=None, max_length=1000)


class EntriesUpdate(BaseModel):
    entries: list[EntryUpdate] = Field(min_length=1, max_length=31)


class ReportEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    date: date
    value: float
    note: str | None
    is_weekend: bool
    is_holiday: bool
    holiday_name: str | None = None


class ActivityReportBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    month: int
    year: int
    status: ReportStatus
    total_days: float
    daily_rate: float | None
    mission_id: int
    updated_at: datetime


class ActivityReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    month: int
    year: int
    status: ReportStatus
    total_days: float
    note: str | None
    daily_rate: float | None
    holiday_country: str
    mission_id: int
    mission: MissionRead
    entries: list[ReportEntryRead]
    created_at: datetime
    updated_at: datetime
