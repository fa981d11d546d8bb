"""Préférences utilisateur, créées à la première lecture / User settings, created on first read."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.config import settings
from presto.models.user import User, UserSettings


async def get_or_create_settings(db: AsyncSession, user: User) -> UserSettings:
    result = await db.execute(select(UserSettings).where(UserSettings.user_id == user.id))
    user_settings = result.scalar_one_or_none()
    if user_settings is None:
        user_settings = UserSettings(
            user_id=user.id,
            theme=settings.DEFAULT_THEME,
            locale=settings.DEFAULT_LOCALE,
            base_currency=settings.DEFAULT_BASE_CURRENCY,
            holiday_country=settings.DEFAULT_HOLIDAY_COUNTRY,
        )
        db.add(user_settings)
        await db.flush()
    return user_settings
