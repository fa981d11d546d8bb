"""Tests du cycle de vie des rapports / Report lifecycle tests."""

import json

import pytest
from sqlalchemy import select

from presto.exceptions import StateConflictError
from presto.models import ActivityReport, AuditLog, ReportStatus
from presto.services import report_lifecycle, report_service


@pytest.fixture
async def report(db, user, mission):
    return await report_service.create_report(db, user.id, mission.id, 1, 2026)


async def test_complete_and_revert(db, user, report):
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)
    assert report.status == ReportStatus.COMPLETED
    await report_lifecycle.update_report(db, report, {"status": "DRAFT"}, user)
    assert report.status == ReportStatus.DRAFT


async def test_complete_empty_report_is_allowed(db, user, report):
    assert report.total_days == 0
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)
    assert report.is_completed


async def test_completed_report_is_frozen(db, user, report):
    entry = report.entries[5]
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)

    with pytest.raises(StateConflictError) as exc_info:
        await report_lifecycle.edit_entries(db, report, [{"id": entry.id, "value": 1}])
    assert exc_info.value.code == "REPORT_COMPLETED"
    with pytest.raises(StateConflictError):
        await report_lifecycle.fill_report(db, report)
    with pytest.raises(StateConflictError):
        await report_lifecycle.clear_report(db, report)
    with pytest.raises(StateConflictError):
        await report_lifecycle.delete_report(db, report, user)
    with pytest.raises(StateConflictError):
        await report_lifecycle.update_report(db, report, {"note": "late edit"}, user)
    assert entry.value == 0

    # Après retour en brouillon, tout repasse / After reverting, everything is allowed again
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.DRAFT}, user)
    await report_lifecycle.edit_entries(db, report, [{"id": entry.id, "value": 1}])
    await report_lifecycle.fill_report(db, report)
    await report_lifecycle.clear_report(db, report)
    await report_lifecycle.delete_report(db, report, user)

    remaining = await db.execute(select(ActivityReport).where(ActivityReport.id == report.id))
    assert remaining.scalar_one_or_none() is None


async def test_revert_and_note_in_one_update(db, user, report):
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED, "note": "v1"}, user)
    assert report.note == "v1"

    await report_lifecycle.update_report(db, report, {"status": ReportStatus.DRAFT, "note": "v2"}, user)
    assert report.status == ReportStatus.DRAFT
    assert report.note == "v2"


async def test_note_on_draft(db, user, report):
    await report_lifecycle.update_report(db, report, {"note": "draft note"}, user)
    assert report.note == "draft note"
    await report_lifecycle.update_report(db, report, {"note": None}, user)
    assert report.note is None


async def test_export_requires_completed(db, user, report):
    with pytest.raises(StateConflictError) as exc_info:
        report_lifecycle.ensure_completed(report)
    assert exc_info.value.code == "REPORT_DRAFT"

    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)
    report_lifecycle.ensure_completed(report)


async def test_transitions_are_audited(db, user, report):
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.COMPLETED}, user)
    await report_lifecycle.update_report(db, report, {"status": ReportStatus.DRAFT}, user)
    report_id = report.id
    await report_lifecycle.delete_report(db, report, user)
    await db.flush()

    result = await db.execute(
        select(AuditLog).where(AuditLog.entity_id == report_id).order_by(AuditLog.id)
    )
    logs = result.scalars().all()
    assert [log.action for log in logs] == ["COMPLETE", "REVERT_DRAFT", "DELETE"]
    assert json.loads(logs[0].changes)["new_status"] == "COMPLETED"
    assert all(log.user == user.email for log in logs)
