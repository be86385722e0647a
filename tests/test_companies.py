from datetime import date

import pytest
from fastapi import status

from agendatop.models.appointment import Appointment
from agendatop.models.company import Company, CompanyAddress, CompanyStatus
from agendatop.models.customer import Customer
from agendatop.models.user import Role, User
from agendatop.models.working_hours import WorkingHourSlot
from agendatop.services import companies as svc
from agendatop.services import working_hours as wh
from agendatop.services.booking import create_appointment
from agendatop.services.errors import NotFoundError, ValidationError

# ---------- serviço


def test_create_company_creates_owner(db_session, company):
    owner = db_session.get(User, company.owner_id)
    assert owner.role == Role.COMPANY_OWNER
    assert owner.email == "tiara@example.com"
    assert company.slug == "salao-da-tiara"
    assert company.status == CompanyStatus.ACTIVE


def test_slug_is_deduplicated(db_session, company):
    twin = svc.create_company(
        db_session,
        name="Salão da Tiara",
        responsible_name="Outra Tiara",
        email="tiara2@example.com",
        password="Senha123",
    )
    assert twin.slug == "salao-da-tiara-2"


def test_create_company_validation(db_session, company):
    with pytest.raises(ValidationError):
        svc.create_company(
            db_session, name="X", responsible_name="Y", email="y@example.com", password="fraca"
        )
    with pytest.raises(ValidationError):
        svc.create_company(
            db_session,
            name="X",
            responsible_name="Y",
            email="TIARA@example.com",
            password="Senha123",
        )


def test_inactive_company_hidden_by_slug(db_session, company):
    svc.update_company(db_session, company.id, status="inativo")
    with pytest.raises(NotFoundError):
        svc.get_company_by_slug(db_session, company.slug)


def test_upsert_address(db_session, company):
    addr = svc.upsert_address(db_session, company.id, cep="01310-100", city="São Paulo", state="sp")
    assert addr.state == "SP"
    again = svc.upsert_address(db_session, company.id, number="1000")
    assert again.id == addr.id
    assert again.city == "São Paulo"


def test_delete_company_removes_everything(db_session, company, other_company, customer, service):
    wh.set_day_active(db_session, company.id, 1, True)
    svc.upsert_address(db_session, company.id, city="São Paulo")
    create_appointment(db_session, company.id, customer.id, service.id, date(2024, 3, 10), "09:00")

    svc.delete_company(db_session, company.id)

    assert db_session.get(Company, company.id) is None
    assert db_session.query(Appointment).count() == 0
    assert db_session.query(Customer).count() == 0
    assert db_session.query(CompanyAddress).count() == 0
    assert (
        db_session.query(WorkingHourSlot).filter(WorkingHourSlot.company_id == company.id).count()
        == 0
    )
    assert db_session.get(Company, other_company.id) is not None


# ---------- API


def test_admin_creates_company(client, admin_headers):
    response = client.post(
        "/api/v1/admin/companies",
        headers=admin_headers,
        json={
            "name": "Espaço Zen",
            "responsible_name": "Carla Dias",
            "email": "carla@example.com",
            "password": "Zen12345",
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["slug"] == "espaco-zen"
    assert data["status"] == "ativo"

    listed = client.get("/api/v1/admin/companies", headers=admin_headers).json()
    assert [c["slug"] for c in listed] == ["espaco-zen"]


def test_admin_create_company_weak_password(client, admin_headers):
    response = client.post(
        "/api/v1/admin/companies",
        headers=admin_headers,
        json={
            "name": "Espaço Zen",
            "responsible_name": "Carla Dias",
            "email": "carla@example.com",
            "password": "semdigito",
        },
    )
    assert response.status_code == 422


def test_admin_updates_and_deletes_company(client, admin_headers, company):
    response = client.patch(
        f"/api/v1/admin/companies/{company.id}",
        headers=admin_headers,
        json={"status": "inativo"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "inativo"

    response = client.delete(f"/api/v1/admin/companies/{company.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    response = client.delete(f"/api/v1/admin/companies/{company.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_owner_cannot_use_admin_endpoints(client, owner_headers):
    response = client.get("/api/v1/admin/companies", headers=owner_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_endpoints_require_token(client):
    response = client.get("/api/v1/admin/companies")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_owner_settings(client, owner_headers, company):
    response = client.patch(
        f"/api/v1/companies/{company.id}",
        headers=owner_headers,
        json={"primary_color": "#112233", "phone": "(11) 3333-4444"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["primary_color"] == "#112233"

    response = client.patch(
        f"/api/v1/companies/{company.id}",
        headers=owner_headers,
        json={"primary_color": "azul"},
    )
    assert response.status_code == 422


def test_owner_cannot_touch_other_company(client, owner_headers, other_company):
    response = client.get(f"/api/v1/companies/{other_company.id}", headers=owner_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    response = client.get(
        f"/api/v1/companies/{other_company.id}/services", headers=owner_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_can_access_any_company(client, admin_headers, company):
    response = client.get(f"/api/v1/companies/{company.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK


def test_address_endpoints(client, owner_headers, company):
    assert client.get(f"/api/v1/companies/{company.id}/address", headers=owner_headers).json() is None
    response = client.put(
        f"/api/v1/companies/{company.id}/address",
        headers=owner_headers,
        json={"cep": "01310-100", "street": "Av. Paulista", "number": "1000", "state": "sp"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["state"] == "SP"
