"""
Cycle de vie des rapports / Report lifecycle controller.

Machine à deux états DRAFT <-> COMPLETED. Un rapport COMPLETED est figé :
entrées, remplissage, remise à zéro, note et suppression sont refusés tant
qu'il n'est pas repassé en DRAFT. L'export n'est possible que COMPLETED.

| Opération / Operation        | DRAFT | COMPLETED                         |
|------------------------------|-------|-----------------------------------|
| entrées, fill, clear, delete | oui   | non                               |
| note                         | oui   | seulement avec status=DRAFT       |
| statut                       | oui   | oui                               |
| export                       | non   | oui                               |
"""

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from presto.database import utcnow
from presto.exceptions import StateConflictError
from presto.models.activity_report import ActivityReport, ReportStatus
from presto.models.audit import AuditLog
from presto.models.user import User
from presto.services import report_service

logger = logging.getLogger(__name__)


def ensure_draft(report: ActivityReport) -> None:
    """Refuser toute modification d'un rapport COMPLETED / Reject edits on a COMPLETED report."""
    if report.status == ReportStatus.COMPLETED:
        raise StateConflictError(
            "Cannot modify a completed report, revert it to draft first", code="REPORT_COMPLETED"
        )


def ensure_completed(report: ActivityReport) -> None:
    """Refuser l'export d'un brouillon / Reject export of a DRAFT report."""
    if report.status != ReportStatus.COMPLETED:
        raise StateConflictError("Cannot export a draft report, complete it first", code="REPORT_DRAFT")


async def log_audit(
    db: AsyncSession,
    report_id: int,
    action: str,
    user: User,
    changes: dict | None = None,
) -> None:
    """Enregistrer une action dans l'historique / Log an action to audit_logs."""
    db.add(AuditLog(
        entity_type="activity_report",
        entity_id=report_id,
        action=action,
        changes=json.dumps(changes, ensure_ascii=False) if changes else None,
        user=user.email,
        timestamp=utcnow().isoformat(timespec="seconds"),
    ))


async def edit_entries(
    db: AsyncSession, report: ActivityReport, updates: Iterable[Mapping[str, Any]]
) -> ActivityReport:
    ensure_draft(report)
    return await report_service.apply_entry_updates(db, report, updates)


async def fill_report(db: AsyncSession, report: ActivityReport) -> ActivityReport:
    ensure_draft(report)
    return await report_service.auto_fill(db, report)


async def clear_report(db: AsyncSession, report: ActivityReport) -> ActivityReport:
    ensure_draft(report)
    return await report_service.clear(db, report)


async def set_status(db: AsyncSession, report: ActivityReport, status: ReportStatus, user: User) -> ActivityReport:
    """Changer le statut (toujours permis) / Change status (always permitted).

    Aucun contrôle de contenu : un rapport à 0 jour peut être COMPLETED.
    """
    old_status = report.status
    if old_status == status:
        return report
    report.status = status
    action = "COMPLETE" if status == ReportStatus.COMPLETED else "REVERT_DRAFT"
    await log_audit(db, report.id, action, user, {
        "old_status": old_status.value, "new_status": status.value, "total_days": report.total_days,
    })
    await db.flush()
    logger.info("Report %s: %s -> %s", report.id, old_status.value, status.value)
    return report


async def update_report(
    db: AsyncSession,
    report: ActivityReport,
    changes: Mapping[str, Any],
    user: User,
) -> ActivityReport:
    """Mise à jour partielle statut/note / Partial status and note update.

    Une note sur un rapport COMPLETED n'est acceptée que si la même requête
    le repasse en DRAFT ; les deux changements s'appliquent ensemble.
    """
    new_status = changes.get("status")
    if new_status is not None:
        new_status = ReportStatus(new_status)

    if "note" in changes and new_status != ReportStatus.DRAFT:
        ensure_draft(report)

    if new_status is not None:
        await set_status(db, report, new_status, user)
    if "note" in changes:
        report.note = changes["note"]
    await db.flush()
    return report


async def delete_report(db: AsyncSession, report: ActivityReport, user: User) -> None:
    """Supprimer un brouillon et ses entrées / Delete a DRAFT report and its entries."""
    ensure_draft(report)
    await log_audit(db, report.id, "DELETE", user, {
        "mission_id": report.mission_id, "month": report.month, "year": report.year,
    })
    await db.delete(report)
    await db.flush()
    logger.info("Report %s deleted (mission=%s %d-%02d)", report.id, report.mission_id, report.year, report.month)
