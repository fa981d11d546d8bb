"""
Seed de l'utilisateur par défaut / Default user seeding.
Crée un compte au premier démarrage si DEFAULT_USER_PASSWORD est défini et
qu'aucun utilisateur n'existe.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from presto.config import settings
from presto.models.user import User, UserSettings
from presto.utils.auth import hash_password

logger = logging.getLogger(__name__)


async def seed_default_user(session: AsyncSession) -> User | None:
    """Créer l'utilisateur par défaut si la base est vide / Create the default user on an empty database."""
    if not settings.DEFAULT_USER_PASSWORD:
        return None

    result = await session.execute(select(func.count(User.id)))
    count = result.scalar()
    if count:
        logger.info("%d existing user(s), seed skipped", count)
        return None

    user = User(
        email=settings.DEFAULT_USER_EMAIL,
        hashed_password=hash_password(settings.DEFAULT_USER_PASSWORD),
        first_name=settings.DEFAULT_USER_FIRST_NAME,
        last_name=settings.DEFAULT_USER_LAST_NAME,
        is_active=True,
        settings=UserSettings(
            theme=settings.DEFAULT_THEME,
            locale=settings.DEFAULT_LOCALE,
            base_currency=settings.DEFAULT_BASE_CURRENCY,
            holiday_country=settings.DEFAULT_HOLIDAY_COUNTRY,
        ),
    )
    session.add(user)
    await session.commit()
    logger.info("Default user created: %s", user.email)
    return user
