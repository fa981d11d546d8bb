"""Tests du rapprochement des entrées / Report entry reconciliation tests."""

from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from presto.database import Base
from presto.exceptions import DuplicateReportError, NotFoundError, ValidationError
from presto.models import Client, Company, Mission, ReportEntry, ReportStatus, User
from presto.services import report_service


def _sum(report):
    return sum(entry.value for entry in report.entries)


@pytest.mark.parametrize("year,month,days", [(2026, 2, 28), (2028, 2, 29), (2026, 3, 31), (2026, 4, 30)])
def test_build_entries_covers_the_month(year, month, days):
    entries = report_service.build_entries(year, month, "FR")
    assert len(entries) == days
    assert [e.date for e in entries] == [date(year, month, d) for d in range(1, days + 1)]
    assert all(e.value == 0 and e.note is None for e in entries)


def test_build_entries_flags():
    entries = {e.date: e for e in report_service.build_entries(2026, 1, "FR")}
    assert entries[date(2026, 1, 1)].is_holiday
    assert not entries[date(2026, 1, 1)].is_weekend
    assert entries[date(2026, 1, 3)].is_weekend
    assert entries[date(2026, 1, 5)].is_workday


@pytest.mark.parametrize("value", [0, 0.5, 1, 1.0])
def test_validate_entry_value_accepts(value):
    assert report_service.validate_entry_value(value) == float(value)


@pytest.mark.parametrize("value", [0.25, 2, -1, True, "1", None])
def test_validate_entry_value_rejects(value):
    with pytest.raises(ValidationError):
        report_service.validate_entry_value(value)


@pytest.mark.parametrize("month,year", [(0, 2026), (13, 2026), (1, 1999), (1, 2101)])
def test_validate_period_rejects(month, year):
    with pytest.raises(ValidationError):
        report_service.validate_period(month, year)


async def test_create_report_february_non_leap(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 2, 2026)
    assert report.status == ReportStatus.DRAFT
    assert len(report.entries) == 28
    assert all(e.value == 0 for e in report.entries)
    assert report.total_days == 0
    assert report.holiday_country == "FR"
    assert report.daily_rate == 500.0


async def test_create_report_february_leap(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 2, 2028)
    assert len(report.entries) == 29


async def test_create_report_duplicate(db, user, mission):
    await report_service.create_report(db, user.id, mission.id, 3, 2026)
    with pytest.raises(DuplicateReportError):
        await report_service.create_report(db, user.id, mission.id, 3, 2026)


async def test_create_report_unknown_mission(db, user):
    with pytest.raises(NotFoundError):
        await report_service.create_report(db, user.id, 9999, 3, 2026)


async def test_create_report_other_users_mission(db, user, mission, make_user):
    other = await make_user(email="other@presto.dev")
    with pytest.raises(NotFoundError):
        await report_service.create_report(db, other.id, mission.id, 3, 2026)


async def test_get_owned_report_is_scoped(db, user, mission, make_user):
    report = await report_service.create_report(db, user.id, mission.id, 3, 2026)
    other = await make_user(email="other@presto.dev")
    with pytest.raises(NotFoundError):
        await report_service.get_owned_report(db, report.id, other.id)


async def test_apply_entry_updates_total(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 3, 2026)
    entries = report.entries[:6]
    updates = [
        {"id": entries[0].id, "value": 1},
        {"id": entries[1].id, "value": 0.5},
        {"id": entries[2].id, "value": 0},
        {"id": entries[3].id, "value": 1},
    ]
    await report_service.apply_entry_updates(db, report, updates)
    assert report.total_days == 2.5
    assert report.total_days == _sum(report)

    # Rejouer les mêmes mises à jour ne change rien / Replaying is idempotent
    await report_service.apply_entry_updates(db, report, updates)
    assert report.total_days == 2.5


async def test_apply_entry_updates_partial_fields(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 3, 2026)
    entry = report.entries[0]
    await report_service.apply_entry_updates(db, report, [{"id": entry.id, "value": 1, "note": "kick-off"}])
    await report_service.apply_entry_updates(db, report, [{"id": entry.id, "value": 0.5}])
    assert entry.note == "kick-off"
    assert entry.value == 0.5

    await report_service.apply_entry_updates(db, report, [{"id": entry.id, "note": None}])
    assert entry.note is None
    assert entry.value == 0.5
    assert report.total_days == 0.5


async def test_apply_entry_updates_rejects_foreign_entry(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 3, 2026)
    other = await report_service.create_report(db, user.id, mission.id, 4, 2026)
    updates = [
        {"id": report.entries[0].id, "value": 1},
        {"id": other.entries[0].id, "value": 1},
    ]
    with pytest.raises(ValidationError):
        await report_service.apply_entry_updates(db, report, updates)
    assert report.entries[0].value == 0
    assert report.total_days == 0


async def test_apply_entry_updates_rejects_bad_value_without_partial_effect(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 3, 2026)
    updates = [
        {"id": report.entries[0].id, "value": 1},
        {"id": report.entries[1].id, "value": 0.3},
    ]
    with pytest.raises(ValidationError):
        await report_service.apply_entry_updates(db, report, updates)
    assert report.entries[0].value == 0


async def test_auto_fill_january(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 1, 2026)
    weekend = next(e for e in report.entries if e.is_weekend)
    await report_service.apply_entry_updates(db, report, [{"id": weekend.id, "value": 0.5}])

    await report_service.auto_fill(db, report)
    for entry in report.entries:
        if entry.is_workday:
            assert entry.value == 1
        elif entry is weekend:
            assert entry.value == 0.5
        else:
            assert entry.value == 0
    # 21 jours ouvrés en janvier 2026 (FR) + la demi-journée de week-end
    assert report.total_days == 21.5
    assert report.total_days == _sum(report)

    await report_service.auto_fill(db, report)
    assert report.total_days == 21.5


async def test_clear(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 1, 2026)
    await report_service.auto_fill(db, report)
    await report_service.apply_entry_updates(db, report, [{"id": report.entries[4].id, "note": "on site"}])

    await report_service.clear(db, report)
    assert report.total_days == 0
    assert all(e.value == 0 and e.note is None for e in report.entries)

    await report_service.clear(db, report)
    assert report.total_days == 0


async def test_total_persisted_matches_entries(db, user, mission):
    report = await report_service.create_report(db, user.id, mission.id, 5, 2026)
    await report_service.auto_fill(db, report)
    await report_service.apply_entry_updates(db, report, [{"id": report.entries[0].id, "value": 0.5}])

    reloaded = await report_service.get_owned_report(db, report.id, user.id)
    stored = await db.execute(select(ReportEntry.value).where(ReportEntry.report_id == report.id))
    assert reloaded.total_days == sum(stored.scalars().all())


async def test_concurrent_entry_updates_keep_total_consistent(tmp_path):
    """Deux sessions sur le même rapport / Two sessions editing the same report."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'presto.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with factory() as session:
            user = User(email="concurrent@presto.dev", hashed_password="x", first_name="A", last_name="B")
            session.add(user)
            await session.flush()
            mission = Mission(
                name="Mission Acme",
                client=Client(name="Acme", currency="EUR", holiday_country="FR", user_id=user.id),
                company=Company(name="My Company", is_default=True, user_id=user.id),
                user_id=user.id,
                daily_rate=500.0,
            )
            session.add(mission)
            await session.flush()
            report = await report_service.create_report(session, user.id, mission.id, 1, 2026)
            await session.commit()
            report_id, user_id = report.id, user.id
            first_id, second_id = report.entries[4].id, report.entries[5].id

        async with factory() as session_a, factory() as session_b:
            report_a = await report_service.get_owned_report(session_a, report_id, user_id)
            report_b = await report_service.get_owned_report(session_b, report_id, user_id)

            await report_service.apply_entry_updates(session_b, report_b, [{"id": first_id, "value": 1}])
            await session_b.commit()
            await report_service.apply_entry_updates(session_a, report_a, [{"id": second_id, "value": 1}])
            await session_a.commit()

        async with factory() as session:
            report = await report_service.get_owned_report(session, report_id, user_id)
            assert report.total_days == 2
            assert _sum(report) == 2
    finally:
        await engine.dispose()
