from __future__ import annotations

import datetime as dt

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from agendatop.db.base_class import Base


class WorkingHourSlot(Base):
    """
    Um slot de meia hora da grade semanal da empresa.
    A grade é sempre completa (7 dias x 33 slots); slots fechados ficam com is_active=False.
    """

    __tablename__ = "working_hours"
    __table_args__ = (
        UniqueConstraint(
            "company_id", "weekday", "time", name="uq_working_hours_company_day_time"
        ),
        CheckConstraint(
            "weekday >= 0 AND weekday <= 6", name="ck_working_hours_weekday"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), index=True, nullable=False
    )
    weekday: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=domingo ... 6=sábado
    time: Mapped[dt.time] = mapped_column(Time(), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def label(self) -> str:
        return f"{self.time.hour:02d}:{self.time.minute:02d}"
