from datetime import date
from decimal import Decimal

import pytest

from agendatop.services import catalog
from agendatop.services.booking import create_appointment
from agendatop.services.errors import ConflictError, NotFoundError, ValidationError


def test_create_service_normalizes_price(db_session, company):
    svc = catalog.create_service(
        db_session, company.id, name="  Escova ", duration_minutes=45, price="70"
    )
    assert svc.name == "Escova"
    assert svc.price == Decimal("70.00")
    assert svc.is_active is True


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "", "duration_minutes": 30, "price": "10"},
        {"name": "Corte", "duration_minutes": 0, "price": "10"},
        {"name": "Corte", "duration_minutes": 30, "price": "-1"},
        {"name": "Corte", "duration_minutes": 30, "price": "dez"},
    ],
)
def test_create_service_validation(db_session, company, fields):
    with pytest.raises(ValidationError):
        catalog.create_service(db_session, company.id, **fields)


def test_only_active_listing(db_session, company):
    catalog.create_service(db_session, company.id, name="Manicure", duration_minutes=30, price=40)
    catalog.create_service(db_session, company.id, name="Barba", duration_minutes=30, price=30)
    hidden = catalog.create_service(
        db_session, company.id, name="Luzes", duration_minutes=90, price=200, is_active=False
    )
    assert [s.name for s in catalog.list_services(db_session, company.id, only_active=True)] == [
        "Barba",
        "Manicure",
    ]
    assert hidden.id in {s.id for s in catalog.list_services(db_session, company.id)}


def test_update_service_ignores_none(db_session, company, service):
    svc = catalog.update_service(db_session, company.id, service.id, price="55", name=None)
    assert svc.price == Decimal("55.00")
    assert svc.name == "Corte"


def test_service_from_other_company(db_session, other_company, service):
    with pytest.raises(NotFoundError):
        catalog.get_service(db_session, other_company.id, service.id)


def test_delete_service_in_use(db_session, company, customer, service):
    create_appointment(db_session, company.id, customer.id, service.id, date(2024, 3, 10), "09:00")
    with pytest.raises(ConflictError):
        catalog.delete_service(db_session, company.id, service.id)

    spare = catalog.create_service(db_session, company.id, name="Barba", duration_minutes=30, price=30)
    catalog.delete_service(db_session, company.id, spare.id)
    with pytest.raises(NotFoundError):
        catalog.get_service(db_session, company.id, spare.id)
