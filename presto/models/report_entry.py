"""Modèle Entrée de rapport (un jour) / Report entry model (one calendar day)."""

import datetime

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from presto.database import Base


class ReportEntry(Base):
    __tablename__ = "report_entries"
    __table_args__ = (UniqueConstraint("report_id", "date", name="uq_report_entries_report_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    value: Mapped[float] = mapped_column(Numeric(3, 1, asdecimal=False), default=0, nullable=False)  # 0, 0.5, 1
    note: Mapped[str | None] = mapped_column(Text)
    # Figés à la création, jamais recalculés / Fixed at creation, never recomputed
    is_weekend: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_holiday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    report_id: Mapped[int] = mapped_column(ForeignKey("activity_reports.id", ondelete="CASCADE"), nullable=False)

    # Relations
    report: Mapped["ActivityReport"] = relationship(back_populates="entries")

    @property
    def is_workday(self) -> bool:
        return not self.is_weekend and not self.is_holiday

    def __repr__(self) -> str:
        return f"<ReportEntry {self.date.isoformat()} = {self.value}>"
