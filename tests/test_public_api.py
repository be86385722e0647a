from datetime import timedelta

import pytest
from fastapi import status

from agendatop.services import companies as svc
from agendatop.services import working_hours as wh
from agendatop.services.catalog import create_service
from agendatop.utils.tz import today_local, weekday_number


def _url(company, path=""):
    return f"/public/empresas/{company.slug}{path}"


def test_company_page(client, db_session, company, service):
    create_service(
        db_session, company.id, name="Luzes", duration_minutes=90, price=200, is_active=False
    )
    svc.upsert_address(
        db_session, company.id, street="Av. Paulista", number="1000", city="São Paulo", state="SP"
    )

    response = client.get(_url(company))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Salão da Tiara"
    assert [s["name"] for s in data["services"]] == ["Corte"]
    assert data["services"][0]["price"] == "50.00"
    assert data["whatsapp_url"].startswith("https://wa.me/5511987654321?text=")
    assert data["maps_url"].startswith("https://www.google.com/maps/search/?api=1&query=")
    assert data["address"]["city"] == "São Paulo"


def test_inactive_or_unknown_company_is_404(client, db_session, company):
    assert client.get("/public/empresas/nao-existe").status_code == status.HTTP_404_NOT_FOUND
    svc.update_company(db_session, company.id, status="inativo")
    response = client.get(_url(company))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Empresa não encontrada"


def test_availability(client, open_week, future_day):
    response = client.get(_url(open_week, "/availability"), params={"date": future_day.isoformat()})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["slots"]) == 33
    assert data["slots"][0] == "06:00"


def test_availability_in_the_past(client, open_week):
    yesterday = today_local() - timedelta(days=1)
    response = client.get(_url(open_week, "/availability"), params={"date": yesterday.isoformat()})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Data no passado"


def test_customer_lookup(client, company, customer):
    response = client.post(_url(company, "/customers/lookup"), json={"phone": "11991112222"})
    assert response.json() == {"exists": True, "name": "Ana Paula"}

    response = client.post(_url(company, "/customers/lookup"), json={"phone": "11900000000"})
    assert response.json() == {"exists": False, "name": None}


def test_booking_then_slot_is_gone(client, open_week, service, future_day):
    payload = {
        "service_id": service.id,
        "date": future_day.isoformat(),
        "time": "09:00",
        "phone": "(11) 98888-7777",
        "name": "Marina",
    }
    response = client.post(_url(open_week, "/appointments"), json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "pendente"
    assert data["time"] == "09:00:00"
    assert data["service_name"] == "Corte"

    slots = client.get(
        _url(open_week, "/availability"), params={"date": future_day.isoformat()}
    ).json()["slots"]
    assert "09:00" not in slots

    payload["phone"] = "11977776666"
    payload["name"] = "Outra"
    response = client.post(_url(open_week, "/appointments"), json=payload)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "não está mais disponível" in response.json()["detail"]


def test_booking_new_customer_without_name(client, open_week, service, future_day):
    response = client.post(
        _url(open_week, "/appointments"),
        json={
            "service_id": service.id,
            "date": future_day.isoformat(),
            "time": "10:00",
            "phone": "11988887777",
        },
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Nome é obrigatório para novo cliente"


def test_booking_in_the_past(client, open_week, service):
    yesterday = today_local() - timedelta(days=1)
    response = client.post(
        _url(open_week, "/appointments"),
        json={
            "service_id": service.id,
            "date": yesterday.isoformat(),
            "time": "10:00",
            "phone": "11988887777",
            "name": "Marina",
        },
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_my_appointments(client, open_week, service, future_day):
    response = client.post(_url(open_week, "/my-appointments"), json={"phone": "11988887777"})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    client.post(
        _url(open_week, "/appointments"),
        json={
            "service_id": service.id,
            "date": future_day.isoformat(),
            "time": "11:30",
            "phone": "11988887777",
            "name": "Marina",
        },
    )
    response = client.post(_url(open_week, "/my-appointments"), json={"phone": "(11) 9 8888-7777"})
    assert response.status_code == status.HTTP_200_OK
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["time"] == "11:30:00"


def _booking(service, day, label):
    return {
        "service_id": service.id,
        "date": day.isoformat(),
        "time": label,
        "phone": "11988887777",
        "name": "Marina",
    }


def test_booking_on_closed_day_is_rejected(client, company, service, future_day):
    slots = client.get(_url(company, "/availability"), params={"date": future_day.isoformat()})
    assert slots.json()["slots"] == []

    response = client.post(_url(company, "/appointments"), json=_booking(service, future_day, "09:00"))
    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.post(_url(company, "/my-appointments"), json={"phone": "11988887777"}).status_code == 404


@pytest.mark.parametrize("label", ["03:00", "05:30", "22:30", "23:30"])
def test_booking_outside_grid_is_rejected(client, open_week, service, future_day, label):
    response = client.post(_url(open_week, "/appointments"), json=_booking(service, future_day, label))
    assert response.status_code == status.HTTP_409_CONFLICT


def test_booking_inactive_slot_is_rejected(client, db_session, open_week, service, future_day):
    wh.toggle_slot(db_session, open_week.id, weekday_number(future_day), "14:00")

    response = client.post(_url(open_week, "/appointments"), json=_booking(service, future_day, "14:00"))
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.post(_url(open_week, "/appointments"), json=_booking(service, future_day, "14:30"))
    assert response.status_code == status.HTTP_201_CREATED
