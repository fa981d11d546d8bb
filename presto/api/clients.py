"""Routes Clients / Client API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user, get_owned
from presto.database import get_db
from presto.exceptions import DependencyConflictError
from presto.models.client import Client
from presto.models.mission import Mission
from presto.models.user import User
from presto.schemas.client import ClientCreate, ClientRead, ClientUpdate

router = APIRouter()

# Colonnes non nulles ignorées si envoyées à null / Non-nullable columns skipped when sent as null
_REQUIRED = {"name", "currency", "holiday_country"}


@router.get("/", response_model=list[ClientRead])
async def list_clients(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Lister les clients / List clients."""
    result = await db.execute(select(Client).where(Client.user_id == user.id).order_by(Client.name))
    return result.scalars().all()


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Obtenir un client par ID / Get client by ID."""
    return await get_owned(db, Client, client_id, user, "Client")


@router.post("/", response_model=ClientRead, status_code=201)
async def create_client(data: ClientCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Créer un client / Create a client."""
    client = Client(**data.model_dump(), user_id=user.id)
    db.add(client)
    await db.flush()
    await db.refresh(client)
    return client


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Modifier un client / Update a client.

    Les rapports existants gardent leur pays de jours fériés figé.
    """
    client = await get_owned(db, Client, client_id, user, "Client")
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in _REQUIRED:
            continue
        setattr(client, key, value)
    await db.flush()
    await db.refresh(client)
    return client


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: int, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Supprimer un client sans mission / Delete a client with no missions."""
    client = await get_owned(db, Client, client_id, user, "Client")
    missions = (await db.execute(select(func.count(Mission.id)).where(Mission.client_id == client.id))).scalar()
    if missions:
        raise DependencyConflictError("client", "missions", missions)
    await db.delete(client)
