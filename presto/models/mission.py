"""Modèle Mission / Mission model (engagement client avec TJM / client engagement with daily rate)."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from presto.database import Base, utcnow


class Mission(Base):
    __tablename__ = "missions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    daily_rate: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))  # TJM
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relations
    client: Mapped["Client"] = relationship(back_populates="missions", lazy="selectin")
    company: Mapped["Company"] = relationship(back_populates="missions", lazy="selectin")
    reports: Mapped[list["ActivityReport"]] = relationship(back_populates="mission")

    def __repr__(self) -> str:
        return f"<Mission {self.name}>"
