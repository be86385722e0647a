# agendatop/api/routes/working_hours.py
from itertools import groupby

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.db import get_db
from agendatop.deps import OwnedCompany, Staff
from agendatop.models.working_hours import WorkingHourSlot
from agendatop.schemas.working_hours import (
    DayScheduleOut,
    DayToggleIn,
    ReplaceScheduleIn,
    SlotStateIO,
    SlotToggleIn,
)
from agendatop.services import working_hours as wh

router = APIRouter(prefix="/companies/{company_id}/working-hours", tags=["working-hours"])


def _to_out(rows: list[WorkingHourSlot]) -> list[DayScheduleOut]:
    return [
        DayScheduleOut(
            weekday=weekday,
            slots=[SlotStateIO(weekday=r.weekday, time=r.label, active=r.is_active) for r in items],
        )
        for weekday, items in groupby(rows, key=lambda r: r.weekday)
    ]


@router.get("", response_model=list[DayScheduleOut])
def get_schedule(company: OwnedCompany, db: Session = Depends(get_db)):
    return _to_out(wh.get_schedule(db, company.id))


@router.put("", response_model=list[DayScheduleOut])
def replace_schedule(
    payload: ReplaceScheduleIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    wh.replace_all(
        db,
        company.id,
        (wh.SlotState(weekday=s.weekday, label=s.time, active=s.active) for s in payload.slots),
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="REPLACE",
        entity="working_hours",
        entity_id=None,
        autocommit=True,
    )
    return _to_out(wh.get_schedule(db, company.id))


@router.put("/{weekday}", status_code=status.HTTP_204_NO_CONTENT)
def set_day(
    weekday: int,
    payload: DayToggleIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    wh.set_day_active(db, company.id, weekday, payload.active)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="OPEN_DAY" if payload.active else "CLOSE_DAY",
        entity="working_hours",
        entity_id=weekday,
        autocommit=True,
    )
    return


@router.post("/{weekday}/toggle", response_model=SlotStateIO)
def toggle_slot(
    weekday: int,
    payload: SlotToggleIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    row = wh.toggle_slot(db, company.id, weekday, payload.time)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="TOGGLE",
        entity="working_hours",
        entity_id=row.id,
        autocommit=True,
    )
    return SlotStateIO(weekday=row.weekday, time=row.label, active=row.is_active)
