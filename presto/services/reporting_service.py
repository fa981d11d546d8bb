"""
Service de reporting annuel / Yearly reporting service.

Agrège les rapports COMPLETED d'un utilisateur pour une année : totaux,
moyenne journalière, pivots par mois, client et société, comparaison N-1.
Les brouillons ne sont jamais pris en compte.
Aggregates a user's COMPLETED reports for one year. Drafts never count.

Devises : tout chiffre mélangeant plusieurs clients est exprimé dans la
devise de base ; seul `client_data[].revenue` reste dans la devise du client.
"""

import logging
from collections.abc import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from presto.models.activity_report import ActivityReport, ReportStatus
from presto.services import holiday_service

logger = logging.getLogger(__name__)

# convert(amount, from_currency, to_currency) -> amount
Converter = Callable[[float, str, str], float]


def report_daily_rate(report: ActivityReport) -> float:
    """TJM figé du rapport, sinon TJM courant de la mission / Snapshot rate, else mission's current rate."""
    if report.daily_rate is not None:
        return float(report.daily_rate)
    return float(report.mission.daily_rate or 0)


def report_revenue(report: ActivityReport) -> float:
    """CA dans la devise du client / Revenue in the client's currency."""
    return float(report.total_days or 0) * report_daily_rate(report)


def _average(revenue: float, days: float) -> float:
    return revenue / days if days > 0 else 0.0


def summarize_previous_year(
    reports: Sequence[ActivityReport],
    base_currency: str,
    convert: Converter,
) -> dict | None:
    """Résumé N-1, ou None sans rapport COMPLETED / Prior-year summary, None when there is no baseline."""
    if not reports:
        return None
    total_days = 0.0
    total_revenue = 0.0
    client_ids = set()
    for report in reports:
        client = report.mission.client
        total_days += float(report.total_days or 0)
        total_revenue += convert(report_revenue(report), client.currency, base_currency)
        client_ids.add(client.id)
    return {
        "total_days": total_days,
        "total_revenue": total_revenue,
        "average_daily_rate": _average(total_revenue, total_days),
        "client_count": len(client_ids),
    }


def aggregate_reports(
    year: int,
    reports: Sequence[ActivityReport],
    previous_reports: Sequence[ActivityReport],
    base_currency: str,
    convert: Converter,
    working_days_in_year: int,
) -> dict:
    """Construire les agrégats annuels en une passe / Build yearly aggregates in one pass.

    Les rapports reçus doivent déjà être filtrés (COMPLETED, année). Toute
    conversion impossible lève ConversionUnavailableError et annule le tout.
    """
    total_days = 0.0
    total_revenue = 0.0
    monthly = {month: {"month": month, "days": 0.0, "revenue": 0.0} for month in range(1, 13)}
    monthly_clients: dict[int, dict[int, dict]] = {month: {} for month in range(1, 13)}
    clients: dict[int, dict] = {}
    companies: dict[int, dict] = {}

    for report in reports:
        mission = report.mission
        client = mission.client
        company = mission.company
        days = float(report.total_days or 0)
        revenue = report_revenue(report)
        converted = convert(revenue, client.currency, base_currency)

        total_days += days
        total_revenue += converted

        monthly[report.month]["days"] += days
        monthly[report.month]["revenue"] += converted

        month_client = monthly_clients[report.month].setdefault(client.id, {
            "client_id": client.id,
            "client_name": client.name,
            "client_color": client.color,
            "days": 0.0,
            "revenue": 0.0,
        })
        month_client["days"] += days
        month_client["revenue"] += converted

        client_row = clients.setdefault(client.id, {
            "client_id": client.id,
            "client_name": client.name,
            "client_color": client.color,
            "currency": client.currency,
            "days": 0.0,
            "revenue": 0.0,
            "converted_revenue": 0.0,
        })
        client_row["days"] += days
        client_row["revenue"] += revenue
        client_row["converted_revenue"] += converted

        company_row = companies.setdefault(company.id, {
            "company_id": company.id,
            "company_name": company.name,
            "days": 0.0,
            "converted_revenue": 0.0,
        })
        company_row["days"] += days
        company_row["converted_revenue"] += converted

    return {
        "year": year,
        "base_currency": base_currency,
        "total_days": total_days,
        "total_revenue": total_revenue,
        "average_daily_rate": _average(total_revenue, total_days),
        "working_days_in_year": working_days_in_year,
        "monthly_data": [monthly[month] for month in range(1, 13)],
        "monthly_client_revenue": [
            {"month": month, "clients": list(monthly_clients[month].values())}
            for month in range(1, 13)
        ],
        "client_data": sorted(clients.values(), key=lambda row: row["converted_revenue"], reverse=True),
        "company_data": sorted(companies.values(), key=lambda row: row["converted_revenue"], reverse=True),
        "previous_year": summarize_previous_year(previous_reports, base_currency, convert),
    }


async def load_completed_reports(db: AsyncSession, user_id: int, year: int) -> list[ActivityReport]:
    """Rapports COMPLETED d'une année avec mission, client et société / Completed reports with their mission."""
    result = await db.execute(
        select(ActivityReport)
        .where(
            ActivityReport.user_id == user_id,
            ActivityReport.year == year,
            ActivityReport.status == ReportStatus.COMPLETED,
        )
        .options(selectinload(ActivityReport.mission))
        .order_by(ActivityReport.month, ActivityReport.id)
    )
    return list(result.scalars().all())


async def compute_yearly_report(
    db: AsyncSession,
    user_id: int,
    year: int,
    base_currency: str,
    convert: Converter,
    holiday_country: str,
) -> dict:
    """Reporting annuel complet d'un utilisateur / Full yearly report for one user."""
    reports = await load_completed_reports(db, user_id, year)
    previous_reports = await load_completed_reports(db, user_id, year - 1)
    data = aggregate_reports(
        year,
        reports,
        previous_reports,
        base_currency,
        convert,
        holiday_service.working_days_in_year(year, holiday_country),
    )
    logger.debug(
        "Yearly report user=%s year=%d: %d reports, total_days=%s",
        user_id, year, len(reports), data["total_days"],
    )
    return data
