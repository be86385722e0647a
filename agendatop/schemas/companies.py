from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr

from agendatop.models.company import CompanyStatus

HexColor = constr(pattern=r"^#[0-9A-Fa-f]{6}$")


class CompanyCreateIn(BaseModel):
    name: constr(min_length=1, max_length=160)
    responsible_name: constr(min_length=1, max_length=160)
    email: EmailStr
    phone: constr(max_length=32) | None = None
    password: str = Field(..., min_length=6)


class CompanyUpdateIn(BaseModel):
    """Campos editáveis pelo admin master."""

    name: constr(min_length=1, max_length=160) | None = None
    responsible_name: constr(min_length=1, max_length=160) | None = None
    email: EmailStr | None = None
    phone: constr(max_length=32) | None = None
    status: CompanyStatus | None = None


class CompanySettingsIn(BaseModel):
    """Campos editáveis pelo dono da empresa."""

    name: constr(min_length=1, max_length=160) | None = None
    responsible_name: constr(min_length=1, max_length=160) | None = None
    email: EmailStr | None = None
    phone: constr(max_length=32) | None = None
    primary_color: HexColor | None = None  # type: ignore
    secondary_color: HexColor | None = None  # type: ignore


class CompanyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    owner_id: int | None = None
    responsible_name: str
    email: str
    phone: str | None = None
    status: CompanyStatus
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    created_at: dt.datetime


class AddressIn(BaseModel):
    cep: constr(max_length=9) | None = None
    street: constr(max_length=160) | None = None
    number: constr(max_length=20) | None = None
    district: constr(max_length=120) | None = None
    city: constr(max_length=120) | None = None
    state: constr(min_length=2, max_length=2) | None = None
    reference: constr(max_length=200) | None = None


class AddressOut(AddressIn):
    model_config = ConfigDict(from_attributes=True)

    company_id: int


class CepOut(BaseModel):
    cep: str
    street: str | None = None
    district: str | None = None
    city: str | None = None
    state: str | None = None
