"""Página pública da empresa (sem autenticação), endereçada pelo slug."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from agendatop.core.logging import bind_company
from agendatop.db import get_db
from agendatop.models.appointment import Appointment
from agendatop.models.company import Company
from agendatop.schemas.public import (
    AvailabilityOut,
    CustomerLookupIn,
    CustomerLookupOut,
    MyAppointmentsIn,
    PublicAddressOut,
    PublicAppointmentOut,
    PublicBookingIn,
    PublicCompanyOut,
    PublicServiceOut,
)
from agendatop.services.appointment_lifecycle import appointments_for_phone
from agendatop.services.availability import available_slots, weekday_number
from agendatop.services.booking import book
from agendatop.services.catalog import list_services
from agendatop.services.companies import get_company_by_slug
from agendatop.services.customer_identity import find_customer
from agendatop.utils.links import maps_search_url, whatsapp_url
from agendatop.utils.tz import today_local

router = APIRouter(prefix="/public/empresas", tags=["public"])


def _company(slug: str, db: Session = Depends(get_db)) -> Company:
    company = get_company_by_slug(db, slug)
    bind_company(company.id)
    return company


def _appointment_out(ap: Appointment) -> PublicAppointmentOut:
    return PublicAppointmentOut(
        id=ap.id,
        date=ap.date,
        time=ap.time_iso,
        status=ap.status,
        service_name=ap.service.name,
        service_price=ap.service.price,
    )


@router.get("/{slug}", response_model=PublicCompanyOut)
def company_page(company: Company = Depends(_company), db: Session = Depends(get_db)):
    addr = company.address
    return PublicCompanyOut(
        name=company.name,
        slug=company.slug,
        phone=company.phone,
        logo_url=company.logo_url,
        primary_color=company.primary_color,
        secondary_color=company.secondary_color,
        address=(
            PublicAddressOut(
                cep=addr.cep,
                street=addr.street,
                number=addr.number,
                district=addr.district,
                city=addr.city,
                state=addr.state,
                reference=addr.reference,
            )
            if addr
            else None
        ),
        services=[
            PublicServiceOut(
                id=s.id,
                name=s.name,
                description=s.description,
                duration_minutes=s.duration_minutes,
                price=s.price,
                image_url=s.image_url,
            )
            for s in list_services(db, company.id, only_active=True)
        ],
        whatsapp_url=whatsapp_url(company.phone),
        maps_url=(
            maps_search_url(
                f"{addr.street or ''} {addr.number or ''}".strip(),
                addr.district,
                addr.city,
                addr.state,
            )
            if addr
            else None
        ),
    )


@router.get("/{slug}/availability", response_model=AvailabilityOut)
def availability(
    date: dt.date = Query(..., description="AAAA-MM-DD"),
    company: Company = Depends(_company),
    db: Session = Depends(get_db),
):
    if date < today_local():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Data no passado")
    return AvailabilityOut(
        date=date,
        weekday=weekday_number(date),
        slots=available_slots(db, company.id, date),
    )


@router.post("/{slug}/customers/lookup", response_model=CustomerLookupOut)
def customer_lookup(
    payload: CustomerLookupIn,
    company: Company = Depends(_company),
    db: Session = Depends(get_db),
):
    customer = find_customer(db, company.id, payload.phone)
    if customer is None:
        return CustomerLookupOut(exists=False)
    return CustomerLookupOut(exists=True, name=customer.name)


@router.post("/{slug}/appointments", response_model=PublicAppointmentOut, status_code=201)
def public_booking(
    payload: PublicBookingIn,
    company: Company = Depends(_company),
    db: Session = Depends(get_db),
):
    if payload.date < today_local():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Data no passado")
    ap = book(
        db,
        company.id,
        payload.service_id,
        payload.date,
        payload.time,
        payload.phone,
        payload.name,
        payload.birth_date,
        only_offered=True,
    )
    return _appointment_out(ap)


@router.post("/{slug}/my-appointments", response_model=list[PublicAppointmentOut])
def my_appointments(
    payload: MyAppointmentsIn,
    company: Company = Depends(_company),
    db: Session = Depends(get_db),
):
    rows = appointments_for_phone(db, company.id, payload.phone)
    if not rows:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Nenhum agendamento encontrado")
    return [_appointment_out(ap) for ap in rows]
