"""
Horários de funcionamento por empresa.

A grade guardada é sempre completa: 7 dias x SLOTS_PER_DAY linhas por empresa,
com os slots fechados presentes e is_active=False.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import and_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.models.working_hours import WorkingHourSlot
from agendatop.services.companies import get_company
from agendatop.services.errors import NotFoundError, ValidationError
from agendatop.services.slot_grid import (
    SLOT_LABELS,
    SLOTS_PER_DAY,
    WEEKDAYS,
    is_grid_label,
    label_to_time,
    normalize_label,
    validate_weekday,
)

FULL_GRID_SIZE = len(WEEKDAYS) * SLOTS_PER_DAY

log = get_logger(module="working_hours")


@dataclass(frozen=True)
class SlotState:
    weekday: int
    label: str
    active: bool


def _load(db: Session, company_id: int) -> list[WorkingHourSlot]:
    return (
        db.query(WorkingHourSlot)
        .filter(WorkingHourSlot.company_id == company_id)
        .order_by(WorkingHourSlot.weekday.asc(), WorkingHourSlot.time.asc())
        .all()
    )


def _ensure_full_grid(db: Session, company_id: int) -> list[WorkingHourSlot]:
    rows = _load(db, company_id)
    if len(rows) >= FULL_GRID_SIZE:
        return rows

    get_company(db, company_id)
    present = {(r.weekday, r.label) for r in rows}
    missing = [
        WorkingHourSlot(
            company_id=company_id,
            weekday=wd,
            time=label_to_time(label),
            is_active=False,
        )
        for wd in WEEKDAYS
        for label in SLOT_LABELS
        if (wd, label) not in present
    ]
    db.add_all(missing)
    try:
        db.commit()
    except IntegrityError:
        # outra requisição inicializou a grade ao mesmo tempo; a UNIQUE barrou as duplicatas
        db.rollback()
        log.info("working_hours.init_race", company_id=company_id)
    else:
        log.info(
            "working_hours.initialized", company_id=company_id, created=len(missing)
        )
    return _load(db, company_id)


def get_schedule(db: Session, company_id: int) -> list[WorkingHourSlot]:
    """Grade completa da empresa (cria tudo inativo na primeira leitura)."""
    return _ensure_full_grid(db, company_id)


def set_day_active(db: Session, company_id: int, weekday: int, active: bool) -> None:
    """Liga/desliga todos os slots de um dia da semana."""
    validate_weekday(weekday)
    _ensure_full_grid(db, company_id)
    db.execute(
        update(WorkingHourSlot)
        .where(
            and_(
                WorkingHourSlot.company_id == company_id,
                WorkingHourSlot.weekday == weekday,
            )
        )
        .values(is_active=active)
    )
    db.commit()
    log.info(
        "working_hours.day_set", company_id=company_id, weekday=weekday, active=active
    )


def toggle_slot(
    db: Session, company_id: int, weekday: int, label: str
) -> WorkingHourSlot:
    validate_weekday(weekday)
    label = normalize_label(label)
    if not is_grid_label(label):
        raise ValidationError(f"Horário fora da grade: {label}")
    _ensure_full_grid(db, company_id)

    row = (
        db.query(WorkingHourSlot)
        .filter(
            WorkingHourSlot.company_id == company_id,
            WorkingHourSlot.weekday == weekday,
            WorkingHourSlot.time == label_to_time(label),
        )
        .one_or_none()
    )
    if row is None:
        raise NotFoundError("Horário não encontrado")
    row.is_active = not row.is_active
    db.commit()
    db.refresh(row)
    return row


def replace_all(db: Session, company_id: int, slots: Iterable[SlotState]) -> None:
    """
    Substitui a grade inteira. Slots não informados ficam inativos.
    DELETE + INSERT na mesma transação: leitores nunca veem a grade vazia.
    """
    get_company(db, company_id)

    active: set[tuple[int, str]] = set()
    seen: set[tuple[int, str]] = set()
    for s in slots:
        validate_weekday(s.weekday)
        label = normalize_label(s.label)
        if not is_grid_label(label):
            raise ValidationError(f"Horário fora da grade: {label}")
        key = (s.weekday, label)
        if key in seen:
            raise ValidationError(f"Horário duplicado: dia {s.weekday} {label}")
        seen.add(key)
        if s.active:
            active.add(key)

    try:
        db.query(WorkingHourSlot).filter(
            WorkingHourSlot.company_id == company_id
        ).delete()
        db.add_all(
            WorkingHourSlot(
                company_id=company_id,
                weekday=wd,
                time=label_to_time(label),
                is_active=(wd, label) in active,
            )
            for wd in WEEKDAYS
            for label in SLOT_LABELS
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    log.info("working_hours.replaced", company_id=company_id, active=len(active))


def active_slots_for(db: Session, company_id: int, weekday: int) -> set[str]:
    validate_weekday(weekday)
    rows = (
        db.query(WorkingHourSlot.time)
        .filter(
            WorkingHourSlot.company_id == company_id,
            WorkingHourSlot.weekday == weekday,
            WorkingHourSlot.is_active == True,  # noqa: E712
        )
        .all()
    )
    return {f"{t.hour:02d}:{t.minute:02d}" for (t,) in rows}
