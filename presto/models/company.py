"""Modèle Société / Company model (entité de facturation du freelance / freelancer's billing entity)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from presto.database import Base, utcnow


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(Text)
    business_id: Mapped[str | None] = mapped_column(String(100))
    # Exactement une société par défaut par utilisateur / Exactly one default company per user
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relations
    missions: Mapped[list["Mission"]] = relationship(back_populates="company")

    def __repr__(self) -> str:
        return f"<Company {self.name}{' (default)' if self.is_default else ''}>"
