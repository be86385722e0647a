from __future__ import annotations

import datetime as dt
import enum

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Time,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agendatop.db.base_class import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "pendente"
    CONFIRMED = "confirmado"
    DONE = "finalizado"
    CANCELLED = "cancelado"


# status que ocupam o slot
ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)

_ACTIVE_SLOT_WHERE = text("status IN ('pendente','confirmado')")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False
    )
    service_id: Mapped[int] = mapped_column(
        ForeignKey("services.id", ondelete="RESTRICT"), nullable=False
    )
    # data/hora civis (fuso do sistema), hora sempre alinhada em meia hora
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time(), nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(
            AppointmentStatus,
            name="appointment_status_enum",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
    )

    customer = relationship("Customer")
    service = relationship("Service")

    __table_args__ = (
        # no máximo um agendamento ativo por (empresa, data, hora)
        Index(
            "ux_appt_company_slot_active",
            "company_id",
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_WHERE,
            sqlite_where=_ACTIVE_SLOT_WHERE,
        ),
        Index("ix_appt_company_date", "company_id", "date"),
        Index("ix_appt_customer_id", "customer_id"),
    )

    @property
    def time_label(self) -> str:
        return f"{self.time.hour:02d}:{self.time.minute:02d}"

    @property
    def time_iso(self) -> str:
        return self.time.strftime("%H:%M:%S")
