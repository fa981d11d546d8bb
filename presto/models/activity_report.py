"""Modèle Rapport d'activité (CRA) / Activity report model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from presto.database import Base, utcnow


class ReportStatus(str, enum.Enum):
    """Statut du rapport / Report status."""
    DRAFT = "DRAFT"
    COMPLETED = "COMPLETED"


class ActivityReport(Base):
    """Un rapport par (mission, mois, année) / One report per (mission, month, year)."""

    __tablename__ = "activity_reports"
    __table_args__ = (
        UniqueConstraint("mission_id", "month", "year", name="uq_activity_reports_mission_month_year"),
        Index("ix_activity_reports_user_year_month", "user_id", "year", "month"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-12
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(Enum(ReportStatus), default=ReportStatus.DRAFT, nullable=False)
    # Champ dérivé = somme des entrées, recalculé par report_service / Derived = sum of entries
    total_days: Mapped[float] = mapped_column(Numeric(5, 1, asdecimal=False), default=0, nullable=False)
    note: Mapped[str | None] = mapped_column(Text)
    # Instantanés figés à la création / Snapshots frozen at creation
    daily_rate: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    holiday_country: Mapped[str] = mapped_column(String(3), nullable=False)
    mission_id: Mapped[int] = mapped_column(ForeignKey("missions.id", ondelete="RESTRICT"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relations
    mission: Mapped["Mission"] = relationship(back_populates="reports")
    entries: Mapped[list["ReportEntry"]] = relationship(
        back_populates="report", cascade="all, delete-orphan", order_by="ReportEntry.date"
    )

    @property
    def is_completed(self) -> bool:
        return self.status == ReportStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<ActivityReport {self.year}-{self.month:02d} mission={self.mission_id} {self.status.value}>"
