from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    birth_date: dt.date | None = None
    created_at: dt.datetime
