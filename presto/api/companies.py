"""Routes Sociétés / Company API routes.

Exactement une société par défaut par utilisateur : la première créée est
forcée par défaut, en définir une nouvelle retire le drapeau des autres.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user, get_owned
from presto.database import get_db
from presto.exceptions import DependencyConflictError, ValidationError
from presto.models.company import Company
from presto.models.mission import Mission
from presto.models.user import User
from presto.schemas.company import CompanyCreate, CompanyRead, CompanyUpdate

router = APIRouter()


async def _unset_other_defaults(db: AsyncSession, user_id: int, keep_id: int | None = None) -> None:
    query = update(Company).where(Company.user_id == user_id, Company.is_default.is_(True))
    if keep_id is not None:
        query = query.where(Company.id != keep_id)
    await db.execute(query.values(is_default=False).execution_options(synchronize_session="fetch"))


@router.get("/", response_model=list[CompanyRead])
async def list_companies(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Lister les sociétés / List companies."""
    result = await db.execute(select(Company).where(Company.user_id == user.id).order_by(Company.name))
    return result.scalars().all()


@router.get("/{company_id}", response_model=CompanyRead)
async def get_company(company_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Obtenir une société par ID / Get company by ID."""
    return await get_owned(db, Company, company_id, user, "Company")


@router.post("/", response_model=CompanyRead, status_code=201)
async def create_company(data: CompanyCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Créer une société / Create a company."""
    count = (await db.execute(select(func.count(Company.id)).where(Company.user_id == user.id))).scalar()
    is_default = count == 0 or data.is_default
    if is_default and count:
        await _unset_other_defaults(db, user.id)

    company = Company(**data.model_dump(exclude={"is_default"}), is_default=is_default, user_id=user.id)
    db.add(company)
    await db.flush()
    await db.refresh(company)
    return company


@router.patch("/{company_id}", response_model=CompanyRead)
async def update_company(
    company_id: int,
    data: CompanyUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Modifier une société / Update a company."""
    company = await get_owned(db, Company, company_id, user, "Company")
    changes = data.model_dump(exclude_unset=True)

    if changes.get("is_default") is False and company.is_default:
        raise ValidationError("Cannot unset the only default company")
    if changes.get("is_default") is True:
        await _unset_other_defaults(db, user.id, keep_id=company.id)

    for key, value in changes.items():
        if value is None and key in ("name", "is_default"):
            continue
        setattr(company, key, value)
    await db.flush()
    await db.refresh(company)
    return company


@router.delete("/{company_id}", status_code=204)
async def delete_company(company_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Supprimer une société sans mission / Delete a company with no missions."""
    company = await get_owned(db, Company, company_id, user, "Company")
    missions = (await db.execute(select(func.count(Mission.id)).where(Mission.company_id == company.id))).scalar()
    if missions:
        raise DependencyConflictError("company", "missions", missions)

    was_default = company.is_default
    await db.delete(company)
    await db.flush()

    if was_default:
        # Promouvoir la plus ancienne / Promote the oldest remaining company
        result = await db.execute(
            select(Company).where(Company.user_id == user.id).order_by(Company.created_at, Company.id).limit(1)
        )
        successor = result.scalar_one_or_none()
        if successor is not None:
            successor.is_default = True
            await db.flush()
