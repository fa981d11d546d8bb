"""
Dépendances d'authentification / Authentication dependencies.
Injectées dans les routes via Depends().
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.database import get_db
from presto.exceptions import NotFoundError
from presto.models.user import User
from presto.services.exchange_rate_service import ExchangeRateService
from presto.utils.auth import ACCESS_TOKEN, decode_token

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extraire et valider l'utilisateur depuis le JWT / Extract and validate user from JWT."""
    user_id = decode_token(credentials.credentials, ACCESS_TOKEN)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


def get_exchange_rates(request: Request) -> ExchangeRateService:
    """Service de taux partagé par l'application / App-wide exchange rate service."""
    return request.app.state.exchange_rates


async def get_owned(db: AsyncSession, model, obj_id: int, user: User, label: str):
    """Charger un objet de l'utilisateur, 404 sinon / Load a user's object or raise not found."""
    result = await db.execute(select(model).where(model.id == obj_id, model.user_id == user.id))
    obj = result.scalar_one_or_none()
    if obj is None:
        raise NotFoundError(label, obj_id)
    return obj
