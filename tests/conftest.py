import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import agendatop.db.base  # noqa: F401  (registra todos os models)
from agendatop.core.security import create_access_token, hash_password
from agendatop.db.base_class import Base
from agendatop.models.customer import Customer
from agendatop.models.finance import EntryKind, FinancialCategory
from agendatop.models.service import Service
from agendatop.models.user import Role, User
from agendatop.services import working_hours as wh
from agendatop.services.companies import create_company
from agendatop.utils.tz import today_local

OWNER_PASSWORD = "Senha123"


# In-memory SQLite database shared by every session (StaticPool)
@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="session")
def TestingSessionLocal(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def _clean_tables(engine):
    """Zera todas as tabelas depois de cada teste."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def override_get_db(TestingSessionLocal):
    def _override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    return _override_get_db


@pytest.fixture
def db_session(TestingSessionLocal):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(override_get_db):
    """Test client with the database dependency pointing to the test engine."""
    from fastapi.testclient import TestClient

    from agendatop.db import get_db
    from agendatop.main import app

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    user = User(
        name="Admin Master",
        email="admin@example.com",
        password_hash=hash_password("Admin123"),
        role=Role.ADMIN_MASTER,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def company(db_session):
    return create_company(
        db_session,
        name="Salão da Tiara",
        responsible_name="Tiara Lima",
        email="tiara@example.com",
        phone="(11) 9 8765-4321",
        password=OWNER_PASSWORD,
    )


@pytest.fixture
def other_company(db_session):
    return create_company(
        db_session,
        name="Barbearia do Zé",
        responsible_name="José Souza",
        email="ze@example.com",
        password=OWNER_PASSWORD,
    )


@pytest.fixture
def owner_user(db_session, company):
    return db_session.get(User, company.owner_id)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(str(admin_user.id))}"}


@pytest.fixture
def owner_headers(company):
    return {"Authorization": f"Bearer {create_access_token(str(company.owner_id))}"}


@pytest.fixture
def service(db_session, company):
    s = Service(
        company_id=company.id,
        name="Corte",
        duration_minutes=30,
        price=Decimal("50.00"),
        is_active=True,
    )
    db_session.add(s)
    db_session.commit()
    db_session.refresh(s)
    return s


@pytest.fixture
def service_category(db_session, company):
    cat = FinancialCategory(company_id=company.id, name="Serviços", kind=EntryKind.INCOME)
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture
def customer(db_session, company):
    c = Customer(company_id=company.id, name="Ana Paula", phone="(11) 9 9111-2222")
    db_session.add(c)
    db_session.commit()
    db_session.refresh(c)
    return c


@pytest.fixture
def open_week(db_session, company):
    """Todos os dias da semana com a grade inteira ativa."""
    for weekday in range(7):
        wh.set_day_active(db_session, company.id, weekday, True)
    return company


@pytest.fixture
def future_day():
    return today_local() + timedelta(days=7)
