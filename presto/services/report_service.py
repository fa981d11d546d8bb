"""
Service de rapprochement des entrées / Report entry reconciliation service.

Création des entrées journalières, mises à jour par lot, remplissage auto,
remise à zéro. Chaque mutation suit le même schéma : verrouiller le rapport,
modifier les entrées, puis recalculer `total_days` par un SUM SQL sur toutes
les entrées, dans la transaction de la requête.
Every mutation locks the report row, mutates entries, then recomputes
`total_days` from the full entry set inside the request transaction.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from presto.config import settings
from presto.exceptions import DuplicateReportError, NotFoundError, ValidationError
from presto.models.activity_report import ActivityReport, ReportStatus
from presto.models.mission import Mission
from presto.models.report_entry import ReportEntry
from presto.services import holiday_service

logger = logging.getLogger(__name__)

# Valeurs autorisées : absent, demi-journée, journée / Allowed values: none, half day, full day
ALLOWED_ENTRY_VALUES = frozenset({0.0, 0.5, 1.0})


def validate_period(month: int, year: int) -> None:
    """Vérifier mois et année / Check month and year bounds."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month} (expected 1-12)")
    if not settings.MIN_YEAR <= year <= settings.MAX_YEAR:
        raise ValidationError(f"Invalid year: {year} (expected {settings.MIN_YEAR}-{settings.MAX_YEAR})")


def validate_entry_value(value: Any) -> float:
    """Valeur dans {0, 0.5, 1} / Value must be one of {0, 0.5, 1}."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value not in ALLOWED_ENTRY_VALUES:
        raise ValidationError(f"Invalid entry value: {value!r} (expected 0, 0.5 or 1)")
    return float(value)


def build_entries(year: int, month: int, holiday_country: str) -> list[ReportEntry]:
    """Une entrée à 0 par jour du mois / One zero-valued entry per calendar day.

    Les drapeaux week-end/férié sont figés ici et jamais recalculés ensuite.
    """
    return [
        ReportEntry(
            date=day,
            value=0.0,
            note=None,
            is_weekend=holiday_service.is_weekend(day),
            is_holiday=holiday_service.holiday_name(day, holiday_country) is not None,
        )
        for day in holiday_service.month_dates(year, month)
    ]


async def get_owned_report(
    db: AsyncSession,
    report_id: int,
    user_id: int,
    *,
    for_update: bool = False,
) -> ActivityReport:
    """Charger un rapport de l'utilisateur avec ses entrées / Load a user's report with its entries.

    for_update=True pose un verrou de ligne (PostgreSQL) : les mutations
    concurrentes d'un même rapport sont sérialisées.
    """
    query = (
        select(ActivityReport)
        .where(ActivityReport.id == report_id, ActivityReport.user_id == user_id)
        .options(selectinload(ActivityReport.entries), selectinload(ActivityReport.mission))
    )
    if for_update:
        query = query.with_for_update()
    query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    report = result.scalar_one_or_none()
    if report is None:
        raise NotFoundError("Activity report", report_id)
    return report


async def create_report(
    db: AsyncSession,
    user_id: int,
    mission_id: int,
    month: int,
    year: int,
) -> ActivityReport:
    """Créer un rapport DRAFT et toutes ses entrées / Create a DRAFT report with all its entries."""
    validate_period(month, year)

    result = await db.execute(select(Mission).where(Mission.id == mission_id, Mission.user_id == user_id))
    mission = result.scalar_one_or_none()
    if mission is None:
        raise NotFoundError("Mission", mission_id)

    existing = await db.execute(
        select(ActivityReport.id).where(
            ActivityReport.mission_id == mission_id,
            ActivityReport.month == month,
            ActivityReport.year == year,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise DuplicateReportError(f"Activity report already exists for mission {mission_id} {year}-{month:02d}")

    holiday_country = mission.client.holiday_country
    report = ActivityReport(
        month=month,
        year=year,
        status=ReportStatus.DRAFT,
        total_days=0.0,
        daily_rate=mission.daily_rate,
        holiday_country=holiday_country,
        mission=mission,
        user_id=user_id,
        entries=build_entries(year, month, holiday_country),
    )
    db.add(report)
    try:
        await db.flush()
    except IntegrityError:
        # Course avec une création concurrente / Raced with a concurrent create
        raise DuplicateReportError(
            f"Activity report already exists for mission {mission_id} {year}-{month:02d}"
        ) from None

    logger.info(
        "Report %s created: mission=%s period=%d-%02d entries=%d",
        report.id, mission_id, year, month, len(report.entries),
    )
    return await get_owned_report(db, report.id, user_id)


async def recalculate_total_days(db: AsyncSession, report: ActivityReport) -> float:
    """Recalculer total_days = somme de toutes les entrées / Recompute total_days from all entries."""
    await db.flush()
    result = await db.execute(
        select(func.coalesce(func.sum(ReportEntry.value), 0)).where(ReportEntry.report_id == report.id)
    )
    total = float(result.scalar_one())
    report.total_days = total
    await db.flush()
    return total


async def apply_entry_updates(
    db: AsyncSession,
    report: ActivityReport,
    updates: Iterable[Mapping[str, Any]],
) -> ActivityReport:
    """Mise à jour partielle des entrées / Partial update of entries.

    Chaque update contient `id` et éventuellement `value` et/ou `note`.
    Un champ absent n'est pas modifié ; `note: None` efface la note.
    Tout est validé avant la première écriture : pas d'effet partiel.
    """
    updates = list(updates)
    entries_by_id = {entry.id: entry for entry in report.entries}

    foreign_ids = [u.get("id") for u in updates if u.get("id") not in entries_by_id]
    if foreign_ids:
        raise ValidationError(f"Entries {foreign_ids} do not belong to report {report.id}")

    planned: list[tuple[ReportEntry, dict[str, Any]]] = []
    for update in updates:
        fields: dict[str, Any] = {}
        if "value" in update:
            fields["value"] = validate_entry_value(update["value"])
        if "note" in update:
            fields["note"] = update["note"]
        planned.append((entries_by_id[update["id"]], fields))

    for entry, fields in planned:
        for key, value in fields.items():
            setattr(entry, key, value)

    total = await recalculate_total_days(db, report)
    logger.debug("Report %s: %d entries updated, total_days=%s", report.id, len(planned), total)
    return report


async def auto_fill(db: AsyncSession, report: ActivityReport) -> ActivityReport:
    """Mettre 1 sur chaque jour ouvré ; week-ends et fériés inchangés / Set 1 on workdays, leave others untouched."""
    for entry in report.entries:
        if entry.is_workday:
            entry.value = 1.0
    total = await recalculate_total_days(db, report)
    logger.debug("Report %s auto-filled, total_days=%s", report.id, total)
    return report


async def clear(db: AsyncSession, report: ActivityReport) -> ActivityReport:
    """Remettre toutes les entrées à 0 sans note / Reset every entry to 0 with no note."""
    for entry in report.entries:
        entry.value = 0.0
        entry.note = None
    await recalculate_total_days(db, report)
    logger.debug("Report %s cleared", report.id)
    return report
