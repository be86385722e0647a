from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, constr

from agendatop.models.appointment import Appointment, AppointmentStatus
from agendatop.utils.links import whatsapp_url

TimeStr = constr(pattern=r"^\d{2}:\d{2}(:\d{2})?$")  # "HH:MM" ou "HH:MM:SS"


class AppointmentCreateIn(BaseModel):
    customer_id: int = Field(..., ge=1)
    service_id: int = Field(..., ge=1)
    date: dt.date
    time: TimeStr  # type: ignore


class AppointmentEditIn(BaseModel):
    date: dt.date | None = None
    time: TimeStr | None = None  # type: ignore
    status: AppointmentStatus | None = None


class FinalizeIn(BaseModel):
    amount: Decimal | None = Field(None, gt=0)
    category_id: int | None = None
    note: str | None = None


class AppointmentOut(BaseModel):
    id: int
    company_id: int
    date: dt.date
    time: str  # "HH:MM:SS"
    status: AppointmentStatus
    customer_id: int
    customer_name: str
    customer_phone: str
    service_id: int
    service_name: str
    service_price: Decimal
    whatsapp_url: str | None = None

    @classmethod
    def from_model(cls, ap: Appointment) -> AppointmentOut:
        return cls(
            id=ap.id,
            company_id=ap.company_id,
            date=ap.date,
            time=ap.time_iso,
            status=ap.status,
            customer_id=ap.customer_id,
            customer_name=ap.customer.name,
            customer_phone=ap.customer.phone,
            service_id=ap.service_id,
            service_name=ap.service.name,
            service_price=ap.service.price,
            whatsapp_url=whatsapp_url(ap.customer.phone, None),
        )


class LedgerEntryBrief(BaseModel):
    id: int
    category_id: int
    description: str
    amount: Decimal
    entry_date: dt.date
    note: str | None = None


class FinalizeOut(BaseModel):
    appointment: AppointmentOut
    ledger_entry: LedgerEntryBrief
