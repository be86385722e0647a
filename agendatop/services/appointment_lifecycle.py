"""
Ciclo de vida do agendamento.

    pendente ──confirmar──> confirmado
    pendente|confirmado ──finalizar──> finalizado (gera receita)
    pendente|confirmado ──cancelar──> cancelado ──reverter──> pendente

finalizado é terminal.
"""

from __future__ import annotations

import unicodedata
from datetime import date, time
from decimal import Decimal, InvalidOperation

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from agendatop.core.logging import get_logger
from agendatop.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from agendatop.models.customer import Customer
from agendatop.models.finance import EntryKind, FinancialCategory, LedgerEntry
from agendatop.services.booking import (
    commit_or_conflict,
    lock_company,
    parse_day,
    parse_slot_time,
    slot_taken,
)
from agendatop.services.customer_identity import canonical_phone
from agendatop.services.errors import (
    InvalidTransitionError,
    NotCancelledError,
    NotFoundError,
    SlotUnavailableError,
    ValidationError,
)

log = get_logger(module="appointment_lifecycle")

EDITABLE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CANCELLED)
SERVICE_CATEGORY_HINT = "servico"


def get_appointment(db: Session, company_id: int, appointment_id: int) -> Appointment:
    appt = db.get(Appointment, appointment_id)
    if appt is None or appt.company_id != company_id:
        raise NotFoundError("Agendamento não encontrado")
    return appt


def confirm(db: Session, company_id: int, appointment_id: int) -> Appointment:
    appt = get_appointment(db, company_id, appointment_id)
    if appt.status == AppointmentStatus.CONFIRMED:
        return appt
    if appt.status != AppointmentStatus.PENDING:
        raise InvalidTransitionError("Só agendamentos pendentes podem ser confirmados")
    appt.status = AppointmentStatus.CONFIRMED
    db.commit()
    db.refresh(appt)
    log.info("appointment.confirmed", company_id=company_id, appointment_id=appt.id)
    return appt


def cancel(db: Session, company_id: int, appointment_id: int) -> Appointment:
    appt = get_appointment(db, company_id, appointment_id)
    if appt.status == AppointmentStatus.CANCELLED:
        return appt
    if appt.status == AppointmentStatus.DONE:
        raise InvalidTransitionError("Agendamento finalizado não pode ser cancelado")
    appt.status = AppointmentStatus.CANCELLED
    db.commit()
    db.refresh(appt)
    log.info("appointment.cancelled", company_id=company_id, appointment_id=appt.id)
    return appt


def revert_cancellation(db: Session, company_id: int, appointment_id: int) -> Appointment:
    appt = get_appointment(db, company_id, appointment_id)
    if appt.status != AppointmentStatus.CANCELLED:
        raise NotCancelledError()

    lock_company(db, company_id)
    if slot_taken(db, company_id, appt.date, appt.time, exclude_id=appt.id):
        db.rollback()
        raise SlotUnavailableError("O horário deste agendamento já foi ocupado por outro cliente.")
    appt.status = AppointmentStatus.PENDING
    commit_or_conflict(db)
    db.refresh(appt)
    log.info("appointment.reverted", company_id=company_id, appointment_id=appt.id)
    return appt


def _fold(value: str) -> str:
    return (
        unicodedata.normalize("NFKD", value or "")
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )


def default_service_category(db: Session, company_id: int) -> FinancialCategory | None:
    """Primeira categoria de receita ativa cujo nome contém 'serviço' (com ou sem acento)."""
    rows = (
        db.query(FinancialCategory)
        .filter(
            FinancialCategory.company_id == company_id,
            FinancialCategory.kind == EntryKind.INCOME,
            FinancialCategory.is_active == True,  # noqa: E712
        )
        .order_by(FinancialCategory.id.asc())
        .all()
    )
    for cat in rows:
        if SERVICE_CATEGORY_HINT in _fold(cat.name):
            return cat
    return None


def _resolve_category(
    db: Session, company_id: int, category_id: int | None
) -> FinancialCategory:
    if category_id is None:
        cat = default_service_category(db, company_id)
        if cat is None:
            raise ValidationError(
                "Nenhuma categoria de receita de serviço encontrada. Cadastre uma categoria 'Serviços'."
            )
        return cat
    cat = db.get(FinancialCategory, category_id)
    if cat is None or cat.company_id != company_id:
        raise NotFoundError("Categoria não encontrada")
    if cat.kind != EntryKind.INCOME:
        raise ValidationError("A categoria do atendimento deve ser de receita")
    return cat


def _to_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValidationError("Valor inválido") from None
    if amount <= 0:
        raise ValidationError("O valor deve ser maior que zero")
    return amount


def finalize(
    db: Session,
    company_id: int,
    appointment_id: int,
    amount: Decimal | float | str | None = None,
    category_id: int | None = None,
    note: str | None = None,
) -> tuple[Appointment, LedgerEntry]:
    """
    Marca como finalizado e lança a receita. Status e lançamento entram no
    mesmo commit: ou os dois ficam gravados ou nenhum.
    """
    appt = get_appointment(db, company_id, appointment_id)
    if appt.status not in ACTIVE_STATUSES:
        raise InvalidTransitionError(
            f"Agendamento com status '{appt.status.value}' não pode ser finalizado"
        )

    service = appt.service
    customer = appt.customer
    category = _resolve_category(db, company_id, category_id)
    value = _to_amount(service.price if amount is None else amount)

    try:
        appt.status = AppointmentStatus.DONE
        entry = LedgerEntry(
            company_id=company_id,
            category_id=category.id,
            appointment_id=appt.id,
            kind=EntryKind.INCOME,
            description=service.name,
            amount=value,
            entry_date=appt.date,
            note=note or f"Atendimento finalizado - Cliente: {customer.name}",
        )
        db.add(entry)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(appt)
    db.refresh(entry)
    log.info(
        "appointment.finalized",
        company_id=company_id,
        appointment_id=appt.id,
        ledger_entry_id=entry.id,
        amount=str(value),
    )
    return appt, entry


def edit(
    db: Session,
    company_id: int,
    appointment_id: int,
    day: date | str | None = None,
    label: time | str | None = None,
    status: AppointmentStatus | str | None = None,
) -> Appointment:
    """
    Edição direta pelo dono (data, hora, status pendente/cancelado). Não passa
    pelos horários de funcionamento; só o índice único barra conflito.
    """
    appt = get_appointment(db, company_id, appointment_id)
    if appt.status == AppointmentStatus.DONE:
        raise InvalidTransitionError("Agendamento finalizado não pode ser editado")

    if status is not None:
        try:
            status = AppointmentStatus(status)
        except ValueError:
            raise ValidationError(f"Status inválido: {status}") from None
        if status not in EDITABLE_STATUSES:
            raise ValidationError("Na edição o status só pode ser pendente ou cancelado")

    if day is not None:
        appt.date = parse_day(day)
    if label is not None:
        appt.time = parse_slot_time(label)
    if status is not None:
        appt.status = status
    commit_or_conflict(db)
    db.refresh(appt)
    log.info("appointment.edited", company_id=company_id, appointment_id=appt.id)
    return appt


def list_appointments(
    db: Session,
    company_id: int,
    day: date | None = None,
    customer: str | None = None,
    status: AppointmentStatus | str | None = None,
) -> list[Appointment]:
    q = (
        db.query(Appointment)
        .join(Customer, Customer.id == Appointment.customer_id)
        .options(joinedload(Appointment.customer), joinedload(Appointment.service))
        .filter(Appointment.company_id == company_id)
    )
    if day is not None:
        q = q.filter(Appointment.date == day)
    if customer:
        like = f"%{customer.strip()}%"
        q = q.filter(or_(Customer.name.ilike(like), Customer.phone.ilike(like)))
    if status:
        try:
            q = q.filter(Appointment.status == AppointmentStatus(status))
        except ValueError:
            raise ValidationError(f"Status inválido: {status}") from None
    return q.order_by(Appointment.date.asc(), Appointment.time.asc()).all()


def appointments_for_phone(db: Session, company_id: int, phone: str) -> list[Appointment]:
    """Agendamentos do cliente (página pública 'meus agendamentos'), mais recentes primeiro."""
    return (
        db.query(Appointment)
        .join(Customer, Customer.id == Appointment.customer_id)
        .options(joinedload(Appointment.service))
        .filter(
            Appointment.company_id == company_id,
            Customer.phone == canonical_phone(phone),
        )
        .order_by(Appointment.date.desc(), Appointment.time.desc())
        .all()
    )
