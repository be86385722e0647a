"""Identificação do cliente por (empresa, telefone)."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.models.customer import Customer
from agendatop.services.errors import ValidationError
from agendatop.utils.phone import InvalidPhoneError, normalize_phone

log = get_logger(module="customer_identity")


def canonical_phone(raw: str) -> str:
    try:
        return normalize_phone(raw)
    except InvalidPhoneError as e:
        raise ValidationError(str(e)) from e


def find_customer(db: Session, company_id: int, phone: str) -> Customer | None:
    """
    Cliente mais antigo com o telefone na empresa. Não há UNIQUE em
    (empresa, telefone); em caso de duplicata legada vence o primeiro id.
    """
    return (
        db.query(Customer)
        .filter(Customer.company_id == company_id, Customer.phone == canonical_phone(phone))
        .order_by(Customer.id.asc())
        .first()
    )


def resolve_or_create_customer(
    db: Session,
    company_id: int,
    phone: str,
    name_if_new: str | None,
    birth_date_if_new: date | None = None,
    commit: bool = True,
) -> Customer:
    phone = canonical_phone(phone)
    existing = find_customer(db, company_id, phone)
    if existing is not None:
        return existing

    name = (name_if_new or "").strip()
    if not name:
        raise ValidationError("Nome é obrigatório para novo cliente")

    customer = Customer(
        company_id=company_id,
        name=name,
        phone=phone,
        birth_date=birth_date_if_new,
    )
    db.add(customer)
    if commit:
        db.commit()
        db.refresh(customer)
    else:
        db.flush()
    log.info("customer.created", company_id=company_id, customer_id=customer.id)
    return customer
