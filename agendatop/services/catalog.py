from __future__ import annotations

from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.models.appointment import Appointment
from agendatop.models.service import Service
from agendatop.services.errors import ConflictError, NotFoundError, ValidationError

log = get_logger(module="catalog")


def _clean(fields: dict) -> dict:
    out = dict(fields)
    if "name" in out:
        out["name"] = (out["name"] or "").strip()
        if not out["name"]:
            raise ValidationError("Nome do serviço é obrigatório")
    if "description" in out and isinstance(out["description"], str):
        out["description"] = out["description"].strip() or None
    if "duration_minutes" in out:
        if out["duration_minutes"] is None or int(out["duration_minutes"]) <= 0:
            raise ValidationError("Duração deve ser maior que zero")
        out["duration_minutes"] = int(out["duration_minutes"])
    if "price" in out:
        try:
            price = Decimal(str(out["price"])).quantize(Decimal("0.01"))
        except (InvalidOperation, ValueError):
            raise ValidationError("Preço inválido") from None
        if price < 0:
            raise ValidationError("Preço não pode ser negativo")
        out["price"] = price
    return out


def list_services(
    db: Session, company_id: int, only_active: bool = False
) -> list[Service]:
    q = db.query(Service).filter(Service.company_id == company_id)
    if only_active:
        q = q.filter(Service.is_active == True)  # noqa: E712
        return q.order_by(Service.name.asc()).all()
    return q.order_by(Service.created_at.desc(), Service.id.desc()).all()


def get_service(db: Session, company_id: int, service_id: int) -> Service:
    svc = db.get(Service, service_id)
    if svc is None or svc.company_id != company_id:
        raise NotFoundError("Serviço não encontrado")
    return svc


def create_service(
    db: Session,
    company_id: int,
    *,
    name: str,
    duration_minutes: int,
    price: Decimal | float | str,
    description: str | None = None,
    is_active: bool = True,
    image_url: str | None = None,
) -> Service:
    data = _clean(
        {
            "name": name,
            "description": description,
            "duration_minutes": duration_minutes,
            "price": price,
        }
    )
    svc = Service(company_id=company_id, is_active=is_active, image_url=image_url, **data)
    db.add(svc)
    db.commit()
    db.refresh(svc)
    log.info("service.created", company_id=company_id, service_id=svc.id)
    return svc


def update_service(db: Session, company_id: int, service_id: int, **fields) -> Service:
    svc = get_service(db, company_id, service_id)
    allowed = {"name", "description", "duration_minutes", "price", "is_active", "image_url"}
    data = _clean({k: v for k, v in fields.items() if k in allowed and v is not None})
    for key, value in data.items():
        setattr(svc, key, value)
    db.commit()
    db.refresh(svc)
    return svc


def delete_service(db: Session, company_id: int, service_id: int) -> None:
    svc = get_service(db, company_id, service_id)
    in_use = db.query(Appointment.id).filter(Appointment.service_id == svc.id).first()
    if in_use is not None:
        raise ConflictError(
            "Serviço possui agendamentos e não pode ser excluído. Desative-o."
        )
    db.delete(svc)
    db.commit()
    log.info("service.deleted", company_id=company_id, service_id=service_id)
