"""Busca de endereço por CEP (API compatível com ViaCEP)."""

from __future__ import annotations

import re

import httpx

from agendatop.core.logging import get_logger
from agendatop.core.settings import settings

log = get_logger(module="postal")

_NON_DIGITS = re.compile(r"\D")


def format_cep(digits: str) -> str:
    return f"{digits[:5]}-{digits[5:]}"


def lookup_cep(cep: str, client: httpx.Client | None = None) -> dict | None:
    """
    Endereço do CEP no formato dos campos de CompanyAddress, ou None.
    Falha de rede, resposta != 200, {"erro": true} ou CEP malformado: None.
    """
    digits = _NON_DIGITS.sub("", cep or "")
    if len(digits) != 8:
        return None

    url = f"{settings.POSTAL_LOOKUP_URL.rstrip('/')}/{digits}/json/"
    own_client = client is None
    http = client or httpx.Client(timeout=settings.POSTAL_LOOKUP_TIMEOUT)
    try:
        resp = http.get(url)
        if resp.status_code != 200:
            log.warning("postal.lookup_failed", cep=digits, status_code=resp.status_code)
            return None
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        log.warning("postal.lookup_failed", cep=digits, error=str(e))
        return None
    finally:
        if own_client:
            http.close()

    if not isinstance(data, dict) or data.get("erro"):
        log.info("postal.not_found", cep=digits)
        return None

    return {
        "cep": format_cep(digits),
        "street": data.get("logradouro") or None,
        "district": data.get("bairro") or None,
        "city": data.get("localidade") or None,
        "state": data.get("uf") or None,
    }
