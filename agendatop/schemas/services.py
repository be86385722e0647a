from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, constr


class ServiceIn(BaseModel):
    name: constr(min_length=1, max_length=160)
    description: str | None = None
    duration_minutes: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    is_active: bool = True


class ServiceUpdateIn(BaseModel):
    name: constr(min_length=1, max_length=160) | None = None
    description: str | None = None
    duration_minutes: int | None = Field(None, gt=0)
    price: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: str
    description: str | None = None
    duration_minutes: int
    price: Decimal
    is_active: bool
    image_url: str | None = None
    created_at: dt.datetime
