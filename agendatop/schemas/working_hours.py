from __future__ import annotations

from pydantic import BaseModel, Field, constr

TimeStr = constr(pattern=r"^\d{2}:\d{2}$")  # "HH:MM"


class SlotStateIO(BaseModel):
    weekday: int = Field(..., ge=0, le=6, description="0=domingo ... 6=sábado")
    time: TimeStr  # type: ignore
    active: bool


class DayScheduleOut(BaseModel):
    weekday: int
    slots: list[SlotStateIO]


class DayToggleIn(BaseModel):
    active: bool


class SlotToggleIn(BaseModel):
    time: TimeStr  # type: ignore


class ReplaceScheduleIn(BaseModel):
    # slots ausentes ficam inativos
    slots: list[SlotStateIO]
