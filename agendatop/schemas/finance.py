from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, constr

from agendatop.models.finance import EntryKind

HexColor = constr(pattern=r"^#[0-9A-Fa-f]{6}$")


class CategoryIn(BaseModel):
    name: constr(min_length=1, max_length=120)
    kind: EntryKind
    color: HexColor | None = None  # type: ignore
    is_active: bool = True


class CategoryUpdateIn(BaseModel):
    name: constr(min_length=1, max_length=120) | None = None
    kind: EntryKind | None = None
    color: HexColor | None = None  # type: ignore
    is_active: bool | None = None


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    kind: EntryKind
    color: str
    is_active: bool


class EntryIn(BaseModel):
    description: constr(min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    category_id: int = Field(..., ge=1)
    entry_date: dt.date
    kind: EntryKind | None = None  # padrão: tipo da categoria
    note: str | None = None


class EntryUpdateIn(BaseModel):
    description: constr(min_length=1, max_length=200) | None = None
    amount: Decimal | None = Field(None, gt=0)
    category_id: int | None = Field(None, ge=1)
    entry_date: dt.date | None = None
    kind: EntryKind | None = None
    note: str | None = None


class EntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    category_name: str | None = None
    appointment_id: int | None = None
    kind: EntryKind
    description: str
    amount: Decimal
    entry_date: dt.date
    note: str | None = None


class SummaryOut(BaseModel):
    income: Decimal
    expenses: Decimal
    balance: Decimal
