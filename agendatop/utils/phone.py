from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


class InvalidPhoneError(ValueError):
    pass


def phone_digits(raw: str | None) -> str:
    """Só os dígitos do telefone, sem o código do país (55)."""
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) in (12, 13) and digits.startswith("55"):
        digits = digits[2:]
    return digits


def normalize_phone(raw: str | None) -> str:
    """
    Forma canônica usada para gravar e buscar clientes.

    (11) 9 8765-4321 para celulares (11 dígitos) e (11) 3456-7890 para fixos (10 dígitos).
    Qualquer grafia do mesmo número produz a mesma string.
    """
    digits = phone_digits(raw)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2]} {digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    raise InvalidPhoneError("Telefone inválido: informe DDD + número (10 ou 11 dígitos).")
