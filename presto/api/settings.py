"""Routes Préférences et configuration publique / Settings and public config routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from presto.api.deps import get_current_user
from presto.config import settings
from presto.database import get_db
from presto.models.user import User
from presto.schemas.user import SettingsRead, SettingsUpdate
from presto.services.settings_service import get_or_create_settings

router = APIRouter()
config_router = APIRouter()


@router.get("/", response_model=SettingsRead)
async def get_settings(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Préférences de l'utilisateur / Current user's settings."""
    return await get_or_create_settings(db, user)


@router.patch("/", response_model=SettingsRead)
async def update_settings(
    data: SettingsUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Modifier les préférences / Update settings."""
    user_settings = await get_or_create_settings(db, user)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user_settings, key, value)
    await db.flush()
    await db.refresh(user_settings)
    return user_settings


@config_router.get("/")
async def get_public_config():
    """Configuration publique / Public app configuration."""
    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "registration_enabled": settings.REGISTRATION_ENABLED,
        "default_theme": settings.DEFAULT_THEME,
        "default_locale": settings.DEFAULT_LOCALE,
        "default_base_currency": settings.DEFAULT_BASE_CURRENCY,
        "default_holiday_country": settings.DEFAULT_HOLIDAY_COUNTRY,
    }
