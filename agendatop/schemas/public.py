from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, constr

from agendatop.models.appointment import AppointmentStatus

TimeStr = constr(pattern=r"^\d{2}:\d{2}$")  # "HH:MM"
PhoneStr = constr(min_length=10, max_length=32)


class PublicServiceOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    duration_minutes: int
    price: Decimal
    image_url: str | None = None


class PublicAddressOut(BaseModel):
    cep: str | None = None
    street: str | None = None
    number: str | None = None
    district: str | None = None
    city: str | None = None
    state: str | None = None
    reference: str | None = None


class PublicCompanyOut(BaseModel):
    name: str
    slug: str
    phone: str | None = None
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    address: PublicAddressOut | None = None
    services: list[PublicServiceOut]
    whatsapp_url: str | None = None
    maps_url: str | None = None


class AvailabilityOut(BaseModel):
    date: dt.date
    weekday: int  # 0=domingo
    slots: list[str]


class CustomerLookupIn(BaseModel):
    phone: PhoneStr  # type: ignore


class CustomerLookupOut(BaseModel):
    exists: bool
    name: str | None = None


class PublicBookingIn(BaseModel):
    service_id: int = Field(..., ge=1)
    date: dt.date
    time: TimeStr  # type: ignore
    phone: PhoneStr  # type: ignore
    name: constr(max_length=160) | None = None  # obrigatório só para cliente novo
    birth_date: dt.date | None = None


class PublicAppointmentOut(BaseModel):
    id: int
    date: dt.date
    time: str  # "HH:MM:SS"
    status: AppointmentStatus
    service_name: str
    service_price: Decimal


class MyAppointmentsIn(BaseModel):
    phone: PhoneStr  # type: ignore
