from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from agendatop.core.settings import settings

CIVIL_TZ = ZoneInfo(settings.APP_TIMEZONE)


def now_local(now: datetime | None = None, tz: ZoneInfo | None = None) -> datetime:
    """
    Instante atual (ou o `now` informado) no fuso civil, timezone-aware.
    - Naive: assume que já está no fuso civil.
    - Aware: converte.
    """
    tz = tz or CIVIL_TZ
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def today_local(now: datetime | None = None, tz: ZoneInfo | None = None) -> date:
    return now_local(now, tz).date()


def weekday_number(d: date) -> int:
    """Dia da semana com 0=domingo ... 6=sábado (date.weekday() usa 0=segunda)."""
    return (d.weekday() + 1) % 7
