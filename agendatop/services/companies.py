"""Empresas (tenants): cadastro pelo admin master, configurações e endereço."""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.core.security import hash_password, validate_password_policy
from agendatop.models.appointment import Appointment
from agendatop.models.company import Company, CompanyAddress, CompanyStatus
from agendatop.models.customer import Customer
from agendatop.models.finance import FinancialCategory, LedgerEntry
from agendatop.models.service import Service
from agendatop.models.user import Role, User
from agendatop.models.working_hours import WorkingHourSlot
from agendatop.services.errors import NotFoundError, ValidationError
from agendatop.utils.slug import slugify

log = get_logger(module="companies")

_UPDATABLE = (
    "name",
    "responsible_name",
    "email",
    "phone",
    "status",
    "primary_color",
    "secondary_color",
    "logo_url",
)
_ADDRESS_FIELDS = ("cep", "street", "number", "district", "city", "state", "reference")


def get_company(db: Session, company_id: int) -> Company:
    company = db.get(Company, company_id)
    if company is None:
        raise NotFoundError("Empresa não encontrada")
    return company


def get_company_by_slug(db: Session, slug: str) -> Company:
    """Só empresas ativas são visíveis pelo slug (página pública)."""
    company = (
        db.query(Company)
        .filter(Company.slug == slug, Company.status == CompanyStatus.ACTIVE)
        .one_or_none()
    )
    if company is None:
        raise NotFoundError("Empresa não encontrada")
    return company


def unique_slug(db: Session, name: str, exclude_id: int | None = None) -> str:
    base = slugify(name)
    candidate, n = base, 1
    while True:
        q = db.query(Company.id).filter(Company.slug == candidate)
        if exclude_id is not None:
            q = q.filter(Company.id != exclude_id)
        if q.first() is None:
            return candidate
        n += 1
        candidate = f"{base}-{n}"


def list_companies(db: Session) -> list[Company]:
    return db.query(Company).order_by(Company.created_at.desc(), Company.id.desc()).all()


def companies_owned_by(db: Session, user_id: int) -> list[Company]:
    return (
        db.query(Company)
        .filter(Company.owner_id == user_id)
        .order_by(Company.name.asc())
        .all()
    )


def create_company(
    db: Session,
    *,
    name: str,
    responsible_name: str,
    email: str,
    password: str,
    phone: str | None = None,
    commit: bool = True,
) -> Company:
    """
    Cria a empresa e o usuário dono (papel empresa_owner) na mesma transação.
    """
    name = (name or "").strip()
    responsible_name = (responsible_name or "").strip()
    email = (email or "").strip().lower()
    if not name:
        raise ValidationError("Nome da empresa é obrigatório")
    if not responsible_name:
        raise ValidationError("Nome do responsável é obrigatório")
    try:
        validate_password_policy(password)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ValidationError("Já existe um usuário com este e-mail")

    owner = User(
        name=responsible_name,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        role=Role.COMPANY_OWNER,
        is_active=True,
    )
    db.add(owner)
    db.flush()

    company = Company(
        name=name,
        slug=unique_slug(db, name),
        owner_id=owner.id,
        responsible_name=responsible_name,
        email=email,
        phone=phone,
        status=CompanyStatus.ACTIVE,
    )
    db.add(company)
    if commit:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError("Não foi possível criar a empresa (dados duplicados)") from e
        db.refresh(company)
        log.info("company.created", company_id=company.id, slug=company.slug)
    else:
        db.flush()
    return company


def update_company(db: Session, company_id: int, commit: bool = True, **fields) -> Company:
    company = get_company(db, company_id)
    for key, value in fields.items():
        if key not in _UPDATABLE or value is None:
            continue
        if key in ("name", "responsible_name", "email"):
            value = value.strip()
            if not value:
                raise ValidationError(f"Campo obrigatório: {key}")
        if key == "status":
            value = CompanyStatus(value)
        setattr(company, key, value)
    if commit:
        db.commit()
        db.refresh(company)
    return company


def delete_company(db: Session, company_id: int) -> None:
    """
    Remove a empresa e tudo que pertence a ela. A ordem respeita as FKs
    RESTRICT (lançamentos antes de categorias, agendamentos antes de
    clientes/serviços).
    """
    company = get_company(db, company_id)
    try:
        for model in (
            LedgerEntry,
            FinancialCategory,
            Appointment,
            WorkingHourSlot,
            Customer,
            Service,
            CompanyAddress,
        ):
            db.execute(delete(model).where(model.company_id == company_id))
        db.delete(company)
        db.commit()
    except Exception:
        db.rollback()
        raise
    log.info("company.deleted", company_id=company_id)


def get_address(db: Session, company_id: int) -> CompanyAddress | None:
    get_company(db, company_id)
    return (
        db.query(CompanyAddress)
        .filter(CompanyAddress.company_id == company_id)
        .one_or_none()
    )


def upsert_address(db: Session, company_id: int, commit: bool = True, **fields) -> CompanyAddress:
    addr = get_address(db, company_id)
    if addr is None:
        addr = CompanyAddress(company_id=company_id)
        db.add(addr)
    for key in _ADDRESS_FIELDS:
        if key in fields:
            value = fields[key]
            if isinstance(value, str):
                value = value.strip() or None
            setattr(addr, key, value)
    if addr.state:
        addr.state = addr.state.upper()
    if commit:
        db.commit()
        db.refresh(addr)
    else:
        db.flush()
    return addr
