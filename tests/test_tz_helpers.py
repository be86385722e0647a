from datetime import UTC, date, datetime

import pytest

from agendatop.utils.links import maps_search_url, whatsapp_url
from agendatop.utils.phone import InvalidPhoneError, normalize_phone, phone_digits
from agendatop.utils.slug import slugify
from agendatop.utils.tz import CIVIL_TZ, now_local, weekday_number


@pytest.mark.parametrize(
    "d,expected",
    [
        (date(2024, 3, 10), 0),  # domingo
        (date(2024, 3, 11), 1),  # segunda
        (date(2024, 3, 16), 6),  # sábado
    ],
)
def test_weekday_number_sunday_is_zero(d, expected):
    assert weekday_number(d) == expected


def test_now_local_converts_aware_and_keeps_naive():
    aware = datetime(2024, 3, 10, 17, 10, tzinfo=UTC)
    local = now_local(aware)
    assert local.tzinfo == CIVIL_TZ
    assert (local.hour, local.minute) == (14, 10)  # UTC-3

    naive = datetime(2024, 3, 10, 14, 10)
    assert now_local(naive).hour == 14


@pytest.mark.parametrize(
    "raw",
    ["11987654321", "(11) 98765-4321", "+55 11 98765-4321", "5511987654321", "(11) 9 8765-4321"],
)
def test_normalize_phone_mobile_variants_collapse(raw):
    assert normalize_phone(raw) == "(11) 9 8765-4321"


def test_normalize_phone_landline():
    assert normalize_phone("1134567890") == "(11) 3456-7890"


@pytest.mark.parametrize("raw", ["", "12345", "119876543210000"])
def test_normalize_phone_rejects_wrong_length(raw):
    with pytest.raises(InvalidPhoneError):
        normalize_phone(raw)


def test_whatsapp_and_maps_links():
    assert phone_digits("(11) 9 8765-4321") == "11987654321"
    url = whatsapp_url("(11) 9 8765-4321")
    assert url.startswith("https://wa.me/5511987654321?text=")
    assert whatsapp_url("(11) 9 8765-4321", None) == "https://wa.me/5511987654321"
    assert whatsapp_url(None) is None
    assert maps_search_url("Av. Paulista 1000", None, "São Paulo") == (
        "https://www.google.com/maps/search/?api=1&query=Av.%20Paulista%201000%2C%20S%C3%A3o%20Paulo"
    )


def test_slugify():
    assert slugify("Salão da Tiara & Cia") == "salao-da-tiara-cia"
    assert slugify("!!!") == "empresa"
