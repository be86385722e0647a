"""
Gravação de agendamentos.

Concorrência: lock na linha da empresa (SELECT ... FOR UPDATE; no SQLite é
no-op), re-checagem do slot e, por fim, o índice único parcial
ux_appt_company_slot_active (empresa, data, hora) para pendente/confirmado.
"""

from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from agendatop.models.company import Company
from agendatop.models.customer import Customer
from agendatop.models.service import Service
from agendatop.services.availability import available_slots
from agendatop.services.customer_identity import resolve_or_create_customer
from agendatop.services.errors import NotFoundError, SlotUnavailableError, ValidationError
from agendatop.services.slot_grid import is_half_hour_aligned, label_to_time, time_to_label

log = get_logger(module="booking")


def parse_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"Data inválida: {value!r} (use AAAA-MM-DD)") from None


def parse_slot_time(value: time | str) -> time:
    t = value if isinstance(value, time) else label_to_time(value)
    if not is_half_hour_aligned(t):
        raise ValidationError("Horário deve ser em intervalos de 30 minutos")
    return t.replace(second=0, microsecond=0)


def lock_company(db: Session, company_id: int) -> Company:
    company = (
        db.query(Company).filter(Company.id == company_id).with_for_update().one_or_none()
    )
    if company is None:
        raise NotFoundError("Empresa não encontrada")
    return company


def slot_taken(
    db: Session,
    company_id: int,
    day: date,
    t: time,
    exclude_id: int | None = None,
) -> bool:
    q = db.query(Appointment.id).filter(
        Appointment.company_id == company_id,
        Appointment.date == day,
        Appointment.time == t,
        Appointment.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id is not None:
        q = q.filter(Appointment.id != exclude_id)
    return q.first() is not None


# Nome do índice no PostgreSQL; no SQLite a mensagem traz as colunas.
_SLOT_INDEX_MARKERS = (
    "ux_appt_company_slot_active",
    "appointments.company_id, appointments.date, appointments.time",
)


def is_slot_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _SLOT_INDEX_MARKERS)


def commit_or_conflict(db: Session) -> None:
    """Commit; violação do índice único parcial vira SlotUnavailableError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_slot_conflict(e):
            raise SlotUnavailableError() from e
        raise


def _add_appointment(
    db: Session,
    company_id: int,
    customer_id: int,
    service_id: int,
    day: date | str,
    label: time | str,
    only_offered: bool = False,
    now: datetime | None = None,
) -> Appointment:
    day = parse_day(day)
    t = parse_slot_time(label)

    customer = db.get(Customer, customer_id)
    if customer is None or customer.company_id != company_id:
        raise NotFoundError("Cliente não encontrado")
    service = db.get(Service, service_id)
    if service is None or service.company_id != company_id:
        raise NotFoundError("Serviço não encontrado")
    if not service.is_active:
        raise ValidationError("Serviço inativo")

    lock_company(db, company_id)
    if only_offered:
        # só vale horário que a página pública ofereceria agora
        if time_to_label(t) not in available_slots(db, company_id, day, now):
            raise SlotUnavailableError()
    elif slot_taken(db, company_id, day, t):
        raise SlotUnavailableError()

    appt = Appointment(
        company_id=company_id,
        customer_id=customer.id,
        service_id=service.id,
        date=day,
        time=t,
        status=AppointmentStatus.PENDING,
    )
    db.add(appt)
    return appt


def create_appointment(
    db: Session,
    company_id: int,
    customer_id: int,
    service_id: int,
    day: date | str,
    label: time | str,
) -> Appointment:
    try:
        appt = _add_appointment(db, company_id, customer_id, service_id, day, label)
    except Exception:
        db.rollback()
        raise
    commit_or_conflict(db)
    db.refresh(appt)
    log.info(
        "booking.created",
        company_id=company_id,
        appointment_id=appt.id,
        date=appt.date.isoformat(),
        time=appt.time_label,
    )
    return appt


def book(
    db: Session,
    company_id: int,
    service_id: int,
    day: date | str,
    label: time | str,
    phone: str,
    name: str | None,
    birth_date: date | None = None,
    *,
    only_offered: bool = False,
    now: datetime | None = None,
) -> Appointment:
    """
    Fluxo público: identifica (ou cria) o cliente pelo telefone e grava o
    agendamento. Tudo numa transação só; se o horário foi tomado, nem o
    cliente novo fica gravado.

    Com `only_offered`, o horário precisa estar entre os livres da data
    (grade ativa do dia, sem ocupação e, para hoje, ainda não passado).
    """
    try:
        customer = resolve_or_create_customer(
            db, company_id, phone, name, birth_date, commit=False
        )
        appt = _add_appointment(
            db, company_id, customer.id, service_id, day, label, only_offered, now
        )
    except Exception:
        db.rollback()
        raise
    commit_or_conflict(db)
    db.refresh(appt)
    log.info(
        "booking.created",
        company_id=company_id,
        appointment_id=appt.id,
        customer_id=appt.customer_id,
        date=appt.date.isoformat(),
        time=appt.time_label,
        public=True,
    )
    return appt
