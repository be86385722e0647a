"""
Grade fixa de meia em meia hora usada em horários de funcionamento e agendamentos.

33 inícios, de 06:00 a 22:00. A tela de horários do sistema anterior também
listava 22:30 como início (34 rótulos); aqui 22:30 é só o fim do último slot.
"""

from __future__ import annotations

from datetime import time

from agendatop.services.errors import ValidationError

GRID_START = time(6, 0)
GRID_END = time(22, 30)  # fim do último slot (22:00-22:30)
SLOT_MINUTES = 30
WEEKDAYS = range(7)  # 0=domingo ... 6=sábado


def slot_labels() -> list[str]:
    labels = []
    minutes = GRID_START.hour * 60 + GRID_START.minute
    end = GRID_END.hour * 60 + GRID_END.minute
    while minutes + SLOT_MINUTES <= end:
        labels.append(f"{minutes // 60:02d}:{minutes % 60:02d}")
        minutes += SLOT_MINUTES
    return labels


SLOT_LABELS: tuple[str, ...] = tuple(slot_labels())
SLOTS_PER_DAY = len(SLOT_LABELS)
_SLOT_SET = frozenset(SLOT_LABELS)


def time_to_label(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def label_to_time(label: str) -> time:
    """'14:30' (ou '14:30:00') -> time(14, 30). Formato inválido vira ValidationError."""
    raw = (label or "").strip()
    parts = raw.split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValidationError(f"Horário inválido: {label!r} (use HH:MM)")
    try:
        return time(*(int(p) for p in parts))
    except ValueError:
        raise ValidationError(f"Horário inválido: {label!r} (use HH:MM)") from None


def normalize_label(label: str) -> str:
    return time_to_label(label_to_time(label))


def is_half_hour_aligned(t: time) -> bool:
    return t.minute % SLOT_MINUTES == 0 and t.second == 0 and t.microsecond == 0


def is_grid_label(label: str) -> bool:
    return label in _SLOT_SET


def validate_weekday(weekday: int) -> int:
    if weekday not in WEEKDAYS:
        raise ValidationError(f"Dia da semana inválido: {weekday} (0=domingo ... 6=sábado)")
    return weekday
