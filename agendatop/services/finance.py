"""Categorias e lançamentos financeiros (receitas/despesas) por empresa."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from agendatop.core.logging import get_logger
from agendatop.models.finance import (
    DEFAULT_CATEGORY_COLOR,
    EntryKind,
    FinancialCategory,
    LedgerEntry,
)
from agendatop.services.errors import ConflictError, NotFoundError, ValidationError

log = get_logger(module="finance")

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LedgerFilters:
    date_from: date | None = None
    date_to: date | None = None
    category_id: int | None = None
    kind: EntryKind | None = None
    description: str | None = None


@dataclass(frozen=True)
class LedgerSummary:
    income: Decimal
    expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


def _kind(value) -> EntryKind:
    try:
        return EntryKind(value)
    except ValueError:
        raise ValidationError("Tipo deve ser 'receita' ou 'despesa'") from None


# ---------- categorias


def list_categories(
    db: Session, company_id: int, kind: EntryKind | str | None = None
) -> list[FinancialCategory]:
    q = db.query(FinancialCategory).filter(FinancialCategory.company_id == company_id)
    if kind:
        q = q.filter(FinancialCategory.kind == _kind(kind))
    return q.order_by(FinancialCategory.kind.asc(), FinancialCategory.name.asc()).all()


def get_category(db: Session, company_id: int, category_id: int) -> FinancialCategory:
    cat = db.get(FinancialCategory, category_id)
    if cat is None or cat.company_id != company_id:
        raise NotFoundError("Categoria não encontrada")
    return cat


def create_category(
    db: Session,
    company_id: int,
    *,
    name: str,
    kind: EntryKind | str,
    color: str | None = None,
    is_active: bool = True,
) -> FinancialCategory:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Nome da categoria é obrigatório")
    cat = FinancialCategory(
        company_id=company_id,
        name=name,
        kind=_kind(kind),
        color=color or DEFAULT_CATEGORY_COLOR,
        is_active=is_active,
    )
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


def update_category(
    db: Session, company_id: int, category_id: int, **fields
) -> FinancialCategory:
    cat = get_category(db, company_id, category_id)
    if fields.get("name") is not None:
        name = fields["name"].strip()
        if not name:
            raise ValidationError("Nome da categoria é obrigatório")
        cat.name = name
    if fields.get("kind") is not None:
        cat.kind = _kind(fields["kind"])
    if fields.get("color") is not None:
        cat.color = fields["color"]
    if fields.get("is_active") is not None:
        cat.is_active = bool(fields["is_active"])
    db.commit()
    db.refresh(cat)
    return cat


def delete_category(db: Session, company_id: int, category_id: int) -> None:
    cat = get_category(db, company_id, category_id)
    used = db.query(LedgerEntry.id).filter(LedgerEntry.category_id == cat.id).first()
    if used is not None:
        raise ConflictError(
            "Categoria possui lançamentos e não pode ser excluída. Desative-a."
        )
    db.delete(cat)
    db.commit()


# ---------- lançamentos


def _amount(value) -> Decimal:
    if value is None:
        raise ValidationError("Valor é obrigatório")
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValidationError("Valor inválido") from None
    if amount <= 0:
        raise ValidationError("O valor deve ser maior que zero")
    return amount


def _validate_entry(
    db: Session,
    company_id: int,
    description: str | None,
    amount,
    category_id: int | None,
    entry_date: date | None,
    kind: EntryKind | str | None,
) -> tuple[str, Decimal, FinancialCategory, date, EntryKind]:
    desc = (description or "").strip()
    if not desc:
        raise ValidationError("Descrição é obrigatória")
    value = _amount(amount)
    if category_id is None:
        raise ValidationError("Categoria é obrigatória")
    cat = get_category(db, company_id, category_id)
    if entry_date is None:
        raise ValidationError("Data é obrigatória")
    entry_kind = _kind(kind) if kind else cat.kind
    if entry_kind != cat.kind:
        raise ValidationError("Tipo do lançamento diferente do tipo da categoria")
    return desc, value, cat, entry_date, entry_kind


def get_entry(db: Session, company_id: int, entry_id: int) -> LedgerEntry:
    entry = db.get(LedgerEntry, entry_id)
    if entry is None or entry.company_id != company_id:
        raise NotFoundError("Lançamento não encontrado")
    return entry


def create_entry(
    db: Session,
    company_id: int,
    *,
    description: str,
    amount,
    category_id: int,
    entry_date: date,
    kind: EntryKind | str | None = None,
    note: str | None = None,
) -> LedgerEntry:
    desc, value, cat, day, entry_kind = _validate_entry(
        db, company_id, description, amount, category_id, entry_date, kind
    )
    entry = LedgerEntry(
        company_id=company_id,
        category_id=cat.id,
        kind=entry_kind,
        description=desc,
        amount=value,
        entry_date=day,
        note=(note or None),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    log.info(
        "ledger.created", company_id=company_id, entry_id=entry.id, kind=entry_kind.value
    )
    return entry


def update_entry(db: Session, company_id: int, entry_id: int, **fields) -> LedgerEntry:
    entry = get_entry(db, company_id, entry_id)
    desc, value, cat, day, entry_kind = _validate_entry(
        db,
        company_id,
        fields.get("description", entry.description),
        fields.get("amount", entry.amount),
        fields.get("category_id", entry.category_id),
        fields.get("entry_date", entry.entry_date),
        fields.get("kind"),
    )
    entry.description = desc
    entry.amount = value
    entry.category_id = cat.id
    entry.entry_date = day
    entry.kind = entry_kind
    if "note" in fields:
        entry.note = fields["note"] or None
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, company_id: int, entry_id: int) -> None:
    entry = get_entry(db, company_id, entry_id)
    db.delete(entry)
    db.commit()


def _filtered(q: Query, company_id: int, f: LedgerFilters) -> Query:
    q = q.filter(LedgerEntry.company_id == company_id)
    if f.date_from:
        q = q.filter(LedgerEntry.entry_date >= f.date_from)
    if f.date_to:
        q = q.filter(LedgerEntry.entry_date <= f.date_to)
    if f.category_id:
        q = q.filter(LedgerEntry.category_id == f.category_id)
    if f.kind:
        q = q.filter(LedgerEntry.kind == _kind(f.kind))
    if f.description:
        q = q.filter(LedgerEntry.description.ilike(f"%{f.description.strip()}%"))
    return q


def list_entries(
    db: Session, company_id: int, filters: LedgerFilters | None = None
) -> list[LedgerEntry]:
    q = _filtered(
        db.query(LedgerEntry).options(joinedload(LedgerEntry.category)),
        company_id,
        filters or LedgerFilters(),
    )
    return q.order_by(LedgerEntry.entry_date.desc(), LedgerEntry.id.desc()).all()


def summary(
    db: Session, company_id: int, filters: LedgerFilters | None = None
) -> LedgerSummary:
    q = _filtered(
        db.query(LedgerEntry.kind, func.coalesce(func.sum(LedgerEntry.amount), 0)),
        company_id,
        filters or LedgerFilters(),
    ).group_by(LedgerEntry.kind)
    totals = {kind: Decimal(str(total)).quantize(Decimal("0.01")) for kind, total in q.all()}
    return LedgerSummary(
        income=totals.get(EntryKind.INCOME, ZERO),
        expenses=totals.get(EntryKind.EXPENSE, ZERO),
    )
