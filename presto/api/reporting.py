"""Routes Reporting annuel / Yearly reporting routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user, get_exchange_rates
from presto.database import get_db
from presto.models.user import User
from presto.schemas.reporting import ReportingRead
from presto.services import reporting_service
from presto.services.exchange_rate_service import ExchangeRateService
from presto.services.report_service import validate_period
from presto.services.settings_service import get_or_create_settings

router = APIRouter()


@router.get("/", response_model=ReportingRead)
async def get_yearly_reporting(
    year: int | None = Query(None),
    currency: str | None = Query(None, pattern=r"^[A-Z]{3}$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    rates: ExchangeRateService = Depends(get_exchange_rates),
):
    """Reporting annuel (rapports COMPLETED uniquement) / Yearly reporting (COMPLETED reports only)."""
    if year is None:
        year = date.today().year
    validate_period(1, year)
    user_settings = await get_or_create_settings(db, user)
    return await reporting_service.compute_yearly_report(
        db,
        user.id,
        year,
        currency or user_settings.base_currency,
        rates.convert,
        user_settings.holiday_country,
    )
