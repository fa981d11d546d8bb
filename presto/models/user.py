"""
Modèles Utilisateur et Préférences / User and Settings models.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from presto.database import Base, utcnow


class User(Base):
    """Utilisateur (freelance) de l'application / Application user (freelancer)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relations
    settings: Mapped["UserSettings | None"] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class UserSettings(Base):
    """Préférences utilisateur / User preferences (theme, locale, base currency, holiday country)."""

    __tablename__ = "user_settings"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    theme: Mapped[str] = mapped_column(String(10), nullable=False, default="light")
    locale: Mapped[str] = mapped_column(String(5), nullable=False, default="en")
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")  # ISO 4217
    holiday_country: Mapped[str] = mapped_column(String(3), nullable=False, default="FR")  # ISO 3166-1
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relations
    user: Mapped["User"] = relationship(back_populates="settings")

    def __repr__(self) -> str:
        return f"<UserSettings {self.user_id} {self.base_currency}>"
