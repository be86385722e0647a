"""
Horários livres de uma empresa em uma data.

livres = (slots ativos do dia da semana) - (slots ocupados por agendamentos
pendente/confirmado), na ordem da grade. Para hoje, somem os horários que já
passaram no fuso civil.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Session

from agendatop.models.appointment import ACTIVE_STATUSES, Appointment
from agendatop.services.slot_grid import SLOT_LABELS, time_to_label
from agendatop.services.working_hours import active_slots_for
from agendatop.utils.tz import now_local, weekday_number

__all__ = ["available_slots", "occupied_labels", "weekday_number"]


def occupied_labels(db: Session, company_id: int, day: date) -> set[str]:
    rows = (
        db.query(Appointment.time)
        .filter(
            Appointment.company_id == company_id,
            Appointment.date == day,
            Appointment.status.in_(ACTIVE_STATUSES),
        )
        .all()
    )
    return {time_to_label(t) for (t,) in rows}


def available_slots(
    db: Session, company_id: int, day: date, now: datetime | None = None
) -> list[str]:
    local_now = now_local(now)
    today = local_now.date()
    if day < today:
        return []

    active = active_slots_for(db, company_id, weekday_number(day))
    if not active:
        return []
    occupied = occupied_labels(db, company_id, day)

    free = [label for label in SLOT_LABELS if label in active and label not in occupied]
    if day == today:
        current = f"{local_now.hour:02d}:{local_now.minute:02d}"
        # 14:10 descarta 14:00; exatamente 14:00 mantém 14:00
        free = [label for label in free if label >= current]
    return free
