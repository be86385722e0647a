from __future__ import annotations

from urllib.parse import quote

from agendatop.utils.phone import phone_digits

WHATSAPP_GREETING = (
    "Olá!\n Vim pelo link do sistema de agendamentos. "
    "Gostaria de informações e agendar um horário."
)


def whatsapp_url(phone: str | None, message: str | None = WHATSAPP_GREETING) -> str | None:
    """wa.me com DDI 55; sem mensagem, só abre a conversa."""
    digits = phone_digits(phone)
    if not digits:
        return None
    url = f"https://wa.me/55{digits}"
    if message:
        url += f"?text={quote(message)}"
    return url


def maps_search_url(*parts: str | None) -> str | None:
    query = ", ".join(p.strip() for p in parts if p and p.strip())
    if not query:
        return None
    return f"https://www.google.com/maps/search/?api=1&query={quote(query)}"
