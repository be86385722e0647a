from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from agendatop.models.customer import Customer
from agendatop.services.errors import NotFoundError


def list_customers(db: Session, company_id: int, q: str | None = None) -> list[Customer]:
    qs = db.query(Customer).filter(Customer.company_id == company_id)
    if q:
        like = f"%{q.strip()}%"
        qs = qs.filter(or_(Customer.name.ilike(like), Customer.phone.ilike(like)))
    return qs.order_by(Customer.created_at.desc(), Customer.id.desc()).all()


def get_customer(db: Session, company_id: int, customer_id: int) -> Customer:
    c = db.get(Customer, customer_id)
    if c is None or c.company_id != company_id:
        raise NotFoundError("Cliente não encontrado")
    return c
