# agendatop/api/routes/appointments.py
import datetime as dt

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.db import get_db
from agendatop.deps import OwnedCompany, Staff
from agendatop.models.appointment import AppointmentStatus
from agendatop.models.user import User
from agendatop.schemas.appointments import (
    AppointmentCreateIn,
    AppointmentEditIn,
    AppointmentOut,
    FinalizeIn,
    FinalizeOut,
    LedgerEntryBrief,
)
from agendatop.schemas.public import AvailabilityOut
from agendatop.services import appointment_lifecycle as lifecycle
from agendatop.services.availability import available_slots, weekday_number
from agendatop.services.booking import create_appointment

router = APIRouter(prefix="/companies/{company_id}/appointments", tags=["appointments"])


def _audit(db: Session, request: Request, user: User, company_id: int, action: str, appt_id: int):
    record_audit(
        db,
        request=request,
        user_id=user.id,
        company_id=company_id,
        action=action,
        entity="appointment",
        entity_id=appt_id,
        autocommit=True,
    )


@router.get("", response_model=list[AppointmentOut])
def list_agenda(
    company: OwnedCompany,
    date: dt.date | None = Query(None),
    customer: str | None = Query(None, description="Nome ou telefone (contém)"),
    status: AppointmentStatus | None = Query(None),
    db: Session = Depends(get_db),
):
    rows = lifecycle.list_appointments(db, company.id, day=date, customer=customer, status=status)
    return [AppointmentOut.from_model(a) for a in rows]


@router.get("/availability", response_model=AvailabilityOut)
def agenda_availability(
    company: OwnedCompany,
    date: dt.date = Query(...),
    db: Session = Depends(get_db),
):
    return AvailabilityOut(
        date=date,
        weekday=weekday_number(date),
        slots=available_slots(db, company.id, date),
    )


@router.post("", response_model=AppointmentOut, status_code=201)
def create(
    payload: AppointmentCreateIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    ap = create_appointment(
        db, company.id, payload.customer_id, payload.service_id, payload.date, payload.time
    )
    _audit(db, request, current_user, company.id, "CREATE", ap.id)
    return AppointmentOut.from_model(ap)


@router.get("/{appointment_id}", response_model=AppointmentOut)
def get_one(appointment_id: int, company: OwnedCompany, db: Session = Depends(get_db)):
    return AppointmentOut.from_model(lifecycle.get_appointment(db, company.id, appointment_id))


@router.patch("/{appointment_id}", response_model=AppointmentOut)
def edit(
    appointment_id: int,
    payload: AppointmentEditIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    ap = lifecycle.edit(
        db,
        company.id,
        appointment_id,
        day=payload.date,
        label=payload.time,
        status=payload.status,
    )
    _audit(db, request, current_user, company.id, "UPDATE", ap.id)
    return AppointmentOut.from_model(ap)


@router.post("/{appointment_id}/confirm", response_model=AppointmentOut)
def confirm(
    appointment_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    ap = lifecycle.confirm(db, company.id, appointment_id)
    _audit(db, request, current_user, company.id, "CONFIRM", ap.id)
    return AppointmentOut.from_model(ap)


@router.post("/{appointment_id}/cancel", response_model=AppointmentOut)
def cancel(
    appointment_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    ap = lifecycle.cancel(db, company.id, appointment_id)
    _audit(db, request, current_user, company.id, "CANCEL", ap.id)
    return AppointmentOut.from_model(ap)


@router.post("/{appointment_id}/revert", response_model=AppointmentOut)
def revert(
    appointment_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    ap = lifecycle.revert_cancellation(db, company.id, appointment_id)
    _audit(db, request, current_user, company.id, "REVERT", ap.id)
    return AppointmentOut.from_model(ap)


@router.post("/{appointment_id}/finalize", response_model=FinalizeOut)
def finalize(
    appointment_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    payload: FinalizeIn | None = None,
    db: Session = Depends(get_db),
):
    payload = payload or FinalizeIn()
    ap, entry = lifecycle.finalize(
        db,
        company.id,
        appointment_id,
        amount=payload.amount,
        category_id=payload.category_id,
        note=payload.note,
    )
    _audit(db, request, current_user, company.id, "FINALIZE", ap.id)
    return FinalizeOut(
        appointment=AppointmentOut.from_model(ap),
        ledger_entry=LedgerEntryBrief(
            id=entry.id,
            category_id=entry.category_id,
            description=entry.description,
            amount=entry.amount,
            entry_date=entry.entry_date,
            note=entry.note,
        ),
    )
