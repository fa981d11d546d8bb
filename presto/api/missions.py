"""Routes Missions / Mission API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user, get_owned
from presto.database import get_db
from presto.exceptions import DependencyConflictError, ValidationError
from presto.models.activity_report import ActivityReport
from presto.models.client import Client
from presto.models.company import Company
from presto.models.mission import Mission
from presto.models.user import User
from presto.schemas.mission import MissionCreate, MissionRead, MissionUpdate

router = APIRouter()


async def _default_company(db: AsyncSession, user: User) -> Company:
    result = await db.execute(
        select(Company).where(Company.user_id == user.id, Company.is_default.is_(True)).limit(1)
    )
    company = result.scalar_one_or_none()
    if company is None:
        raise ValidationError("No default company: create a company first")
    return company


@router.get("/", response_model=list[MissionRead])
async def list_missions(
    active: bool | None = Query(None),
    client_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Lister les missions / List missions."""
    query = select(Mission).where(Mission.user_id == user.id)
    if active is not None:
        query = query.where(Mission.is_active.is_(active))
    if client_id is not None:
        query = query.where(Mission.client_id == client_id)
    result = await db.execute(query.order_by(Mission.name))
    return result.scalars().all()


@router.get("/{mission_id}", response_model=MissionRead)
async def get_mission(mission_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Obtenir une mission par ID / Get mission by ID."""
    return await get_owned(db, Mission, mission_id, user, "Mission")


@router.post("/", response_model=MissionRead, status_code=201)
async def create_mission(data: MissionCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Créer une mission / Create a mission."""
    await get_owned(db, Client, data.client_id, user, "Client")
    if data.company_id is None:
        company = await _default_company(db, user)
    else:
        company = await get_owned(db, Company, data.company_id, user, "Company")

    mission = Mission(**data.model_dump(exclude={"company_id"}), company_id=company.id, user_id=user.id)
    db.add(mission)
    await db.flush()
    await db.refresh(mission, ["client", "company"])
    return mission


@router.patch("/{mission_id}", response_model=MissionRead)
async def update_mission(
    mission_id: int,
    data: MissionUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Modifier une mission / Update a mission.

    Le TJM des rapports existants reste celui figé à leur création.
    """
    mission = await get_owned(db, Mission, mission_id, user, "Mission")
    changes = data.model_dump(exclude_unset=True)
    if changes.get("client_id") is not None:
        await get_owned(db, Client, changes["client_id"], user, "Client")
    if changes.get("company_id") is not None:
        await get_owned(db, Company, changes["company_id"], user, "Company")

    for key, value in changes.items():
        if value is None and key in ("name", "client_id", "company_id", "is_active"):
            continue
        setattr(mission, key, value)
    if mission.start_date and mission.end_date and mission.end_date < mission.start_date:
        raise ValidationError("end_date must be on or after start_date")

    await db.flush()
    await db.refresh(mission, ["client", "company"])
    return mission


@router.delete("/{mission_id}", status_code=204)
async def delete_mission(mission_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Supprimer une mission sans rapport / Delete a mission with no reports."""
    mission = await get_owned(db, Mission, mission_id, user, "Mission")
    reports = (
        await db.execute(select(func.count(ActivityReport.id)).where(ActivityReport.mission_id == mission.id))
    ).scalar()
    if reports:
        raise DependencyConflictError("mission", "activity reports", reports)
    await db.delete(mission)
