"""
Routes Rapports d'activité / Activity report API routes.
Création, mises à jour des entrées, remplissage, remise à zéro, cycle de vie, export.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user
from presto.database import get_db
from presto.models.activity_report import ActivityReport, ReportStatus
from presto.models.user import User
from presto.schemas.activity_report import (
    ActivityReportBrief,
    ActivityReportRead,
    EntriesUpdate,
    ReportCreate,
    ReportUpdate,
)
from presto.services import holiday_service, report_lifecycle, report_service
from presto.services.export_service import ExportService

router = APIRouter()


def _to_read(report: ActivityReport) -> ActivityReportRead:
    """Sérialiser avec les noms de jours fériés / Serialize with holiday names resolved at read time."""
    data = ActivityReportRead.model_validate(report)
    for entry in data.entries:
        if entry.is_holiday:
            entry.holiday_name = holiday_service.holiday_name(entry.date, report.holiday_country)
    return data


@router.get("/", response_model=list[ActivityReportBrief])
async def list_reports(
    year: int | None = Query(None),
    month: int | None = Query(None, ge=1, le=12),
    mission_id: int | None = Query(None),
    status: ReportStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Lister les rapports / List reports."""
    query = select(ActivityReport).where(ActivityReport.user_id == user.id)
    if year is not None:
        query = query.where(ActivityReport.year == year)
    if month is not None:
        query = query.where(ActivityReport.month == month)
    if mission_id is not None:
        query = query.where(ActivityReport.mission_id == mission_id)
    if status is not None:
        query = query.where(ActivityReport.status == status)
    result = await db.execute(
        query.order_by(ActivityReport.year.desc(), ActivityReport.month.desc(), ActivityReport.id)
    )
    return result.scalars().all()


@router.get("/{report_id}", response_model=ActivityReportRead)
async def get_report(report_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Obtenir un rapport avec ses entrées / Get a report with its entries."""
    report = await report_service.get_owned_report(db, report_id, user.id)
    return _to_read(report)


@router.post("/", response_model=ActivityReportRead, status_code=201)
async def create_report(data: ReportCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Créer un rapport DRAFT et ses entrées / Create a DRAFT report and its entries."""
    report = await report_service.create_report(db, user.id, data.mission_id, data.month, data.year)
    await report_lifecycle.log_audit(db, report.id, "CREATE", user, {
        "mission_id": report.mission_id, "month": report.month, "year": report.year,
    })
    return _to_read(report)


@router.patch("/{report_id}", response_model=ActivityReportRead)
async def update_report(
    report_id: int,
    data: ReportUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Changer le statut et/ou la note / Change status and/or note."""
    report = await report_service.get_owned_report(db, report_id, user.id, for_update=True)
    await report_lifecycle.update_report(db, report, data.model_dump(exclude_unset=True), user)
    return _to_read(report)


@router.patch("/{report_id}/entries", response_model=ActivityReportRead)
async def update_entries(
    report_id: int,
    data: EntriesUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Mise à jour partielle des entrées / Partial entry updates."""
    report = await report_service.get_owned_report(db, report_id, user.id, for_update=True)
    updates = [entry.model_dump(exclude_unset=True) for entry in data.entries]
    await report_lifecycle.edit_entries(db, report, updates)
    return _to_read(report)


@router.patch("/{report_id}/fill", response_model=ActivityReportRead)
async def fill_report(report_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Remplir les jours ouvrés / Fill workdays with 1."""
    report = await report_service.get_owned_report(db, report_id, user.id, for_update=True)
    await report_lifecycle.fill_report(db, report)
    return _to_read(report)


@router.patch("/{report_id}/clear", response_model=ActivityReportRead)
async def clear_report(report_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Remettre toutes les entrées à 0 / Reset every entry to 0."""
    report = await report_service.get_owned_report(db, report_id, user.id, for_update=True)
    await report_lifecycle.clear_report(db, report)
    return _to_read(report)


@router.delete("/{report_id}", status_code=204)
async def delete_report(report_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Supprimer un brouillon / Delete a DRAFT report."""
    report = await report_service.get_owned_report(db, report_id, user.id, for_update=True)
    await report_lifecycle.delete_report(db, report, user)


@router.get("/{report_id}/export")
async def export_report(
    report_id: int,
    format: str = Query("xlsx", pattern="^(csv|xlsx)$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Exporter un rapport COMPLETED / Export a COMPLETED report to CSV or XLSX."""
    report = await report_service.get_owned_report(db, report_id, user.id)
    report_lifecycle.ensure_completed(report)
    content = ExportService.render(report, format)
    filename = ExportService.filename(report, format)
    return Response(
        content=content,
        media_type=ExportService.MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
