# scripts/seed.py
from __future__ import annotations

import os
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from agendatop.core.security import hash_password
from agendatop.db import get_db
from agendatop.models.company import Company
from agendatop.models.finance import EntryKind, FinancialCategory
from agendatop.models.service import Service
from agendatop.models.user import Role, User
from agendatop.services import working_hours as wh
from agendatop.services.booking import book
from agendatop.services.companies import create_company, upsert_address
from agendatop.services.slot_grid import SLOT_LABELS
from agendatop.utils.tz import today_local, weekday_number

# ---------------- Configuráveis por ENV ----------------
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "secret123")
SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@agendatop.com.br")

# ---------------- Dados de Exemplo ----------------
COMPANY_DATA = {
    "name": "Studio Bela Vista",
    "responsible_name": "Tiara Lima",
    "email": "contato@belavista.com.br",
    "phone": "(11) 9 8765-4321",
}

ADDRESS_DATA = {
    "cep": "01310-100",
    "street": "Avenida Paulista",
    "number": "1000",
    "district": "Bela Vista",
    "city": "São Paulo",
    "state": "SP",
}

SERVICES_DATA = [
    {"name": "Corte", "duration_minutes": 30, "price": Decimal("50.00")},
    {"name": "Escova", "duration_minutes": 60, "price": Decimal("70.00")},
    {"name": "Manicure", "duration_minutes": 60, "price": Decimal("40.00")},
]

CATEGORIES_DATA = [
    ("Serviços", EntryKind.INCOME, "#22C55E"),
    ("Produtos", EntryKind.INCOME, "#3B82F6"),
    ("Aluguel", EntryKind.EXPENSE, "#EF4444"),
    ("Materiais", EntryKind.EXPENSE, "#F59E0B"),
]

# seg-sex 09:00-18:00, sáb 09:00-13:00
OPEN_HOURS = {
    1: ("09:00", "18:00"),
    2: ("09:00", "18:00"),
    3: ("09:00", "18:00"),
    4: ("09:00", "18:00"),
    5: ("09:00", "18:00"),
    6: ("09:00", "13:00"),
}


def get_session() -> Session:
    gen = get_db()
    return next(gen)  # type: ignore


def ensure_admin(db: Session) -> User:
    user = db.query(User).filter(User.email == SEED_ADMIN_EMAIL).one_or_none()
    if user:
        return user
    user = User(
        name="Admin Master",
        email=SEED_ADMIN_EMAIL,
        password_hash=hash_password(SEED_PASSWORD),
        role=Role.ADMIN_MASTER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    print(f"[Seed] Admin criado: {user.email}")
    return user


def ensure_company(db: Session) -> Company:
    company = (
        db.query(Company).filter(Company.email == COMPANY_DATA["email"]).one_or_none()
    )
    if company:
        return company
    company = create_company(db, password=SEED_PASSWORD, **COMPANY_DATA)
    upsert_address(db, company.id, **ADDRESS_DATA)
    print(f"[Seed] Empresa criada: {company.name} (/{company.slug})")
    return company


def ensure_services(db: Session, company: Company) -> list[Service]:
    out = []
    for data in SERVICES_DATA:
        svc = (
            db.query(Service)
            .filter(Service.company_id == company.id, Service.name == data["name"])
            .one_or_none()
        )
        if not svc:
            svc = Service(company_id=company.id, is_active=True, **data)
            db.add(svc)
            print(f"[Seed] Serviço criado: {data['name']}")
        out.append(svc)
    db.commit()
    return out


def ensure_categories(db: Session, company: Company) -> None:
    for name, kind, color in CATEGORIES_DATA:
        exists = (
            db.query(FinancialCategory.id)
            .filter(
                FinancialCategory.company_id == company.id,
                FinancialCategory.name == name,
            )
            .first()
        )
        if not exists:
            db.add(
                FinancialCategory(company_id=company.id, name=name, kind=kind, color=color)
            )
    db.commit()


def ensure_working_hours(db: Session, company: Company) -> None:
    slots = [
        wh.SlotState(weekday=wd, label=label, active=start <= label < end)
        for wd, (start, end) in OPEN_HOURS.items()
        for label in SLOT_LABELS
    ]
    wh.replace_all(db, company.id, slots)
    print("[Seed] Horários de funcionamento definidos.")


def ensure_sample_bookings(db: Session, company: Company, services: list[Service]) -> None:
    day = today_local() + timedelta(days=1)
    while weekday_number(day) not in OPEN_HOURS:
        day += timedelta(days=1)
    samples = [
        ("(11) 9 9111-2222", "Ana Paula", "10:00"),
        ("(11) 9 9333-4444", "Bruna Souza", "11:00"),
        ("(11) 9 9111-2222", "Ana Paula", "15:30"),
    ]
    for (phone, name, label), svc in zip(samples, services, strict=False):
        try:
            book(db, company.id, svc.id, day, label, phone, name)
        except Exception as e:  # já existe (seed repetido)
            print(f"[Seed] Agendamento {day} {label} ignorado: {e}")
    print(f"[Seed] Agendamentos de exemplo em {day.isoformat()}.")


def check_tables_exist(db: Session) -> bool:
    try:
        for table in ("users", "companies", "working_hours", "appointments"):
            db.execute(text(f"SELECT 1 FROM {table} LIMIT 1"))
        return True
    except (ProgrammingError, OperationalError):
        db.rollback()
        return False


def main():
    print("[Seed] Iniciando seed do banco de dados...")
    db = None
    try:
        db = get_session()
        if not check_tables_exist(db):
            print("[Seed] Erro: as tabelas ainda não foram criadas. Rode: alembic upgrade head")
            return

        ensure_admin(db)
        company = ensure_company(db)
        services = ensure_services(db, company)
        ensure_categories(db, company)
        ensure_working_hours(db, company)
        ensure_sample_bookings(db, company, services)

        print("\n[Seed] Concluído!")
        print("-------------------------------------------------")
        print(f"Senha padrão: '{SEED_PASSWORD}'")
        print(f"- {SEED_ADMIN_EMAIL} (Admin master)")
        print(f"- {COMPANY_DATA['email']} (Dono da empresa)")
        print(f"Página pública: /public/empresas/{company.slug}")
        print("-------------------------------------------------")
    except Exception as e:
        print(f"[Seed] Erro durante o seed: {e}")
        raise
    finally:
        if db:
            db.close()


if __name__ == "__main__":
    main()
