# agendatop/api/routes/finance.py
import datetime as dt

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.db import get_db
from agendatop.deps import OwnedCompany, Staff
from agendatop.models.finance import EntryKind, LedgerEntry
from agendatop.schemas.finance import (
    CategoryIn,
    CategoryOut,
    CategoryUpdateIn,
    EntryIn,
    EntryOut,
    EntryUpdateIn,
    SummaryOut,
)
from agendatop.services import finance

router = APIRouter(prefix="/companies/{company_id}/finance", tags=["finance"])


def _entry_out(e: LedgerEntry) -> EntryOut:
    return EntryOut(
        id=e.id,
        category_id=e.category_id,
        category_name=e.category.name if e.category else None,
        appointment_id=e.appointment_id,
        kind=e.kind,
        description=e.description,
        amount=e.amount,
        entry_date=e.entry_date,
        note=e.note,
    )


def _filters(
    date_from: dt.date | None = Query(None),
    date_to: dt.date | None = Query(None),
    category_id: int | None = Query(None),
    kind: EntryKind | None = Query(None),
    description: str | None = Query(None, description="Descrição (contém)"),
) -> finance.LedgerFilters:
    return finance.LedgerFilters(
        date_from=date_from,
        date_to=date_to,
        category_id=category_id,
        kind=kind,
        description=description,
    )


# ---------- categorias


@router.get("/categories", response_model=list[CategoryOut])
def list_categories(
    company: OwnedCompany,
    kind: EntryKind | None = Query(None),
    db: Session = Depends(get_db),
):
    return [CategoryOut.model_validate(c) for c in finance.list_categories(db, company.id, kind)]


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryIn,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    return CategoryOut.model_validate(
        finance.create_category(db, company.id, **payload.model_dump())
    )


@router.patch("/categories/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdateIn,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    return CategoryOut.model_validate(
        finance.update_category(
            db, company.id, category_id, **payload.model_dump(exclude_unset=True)
        )
    )


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    finance.delete_category(db, company.id, category_id)
    return


# ---------- lançamentos


@router.get("/entries", response_model=list[EntryOut])
def list_entries(
    company: OwnedCompany,
    filters: finance.LedgerFilters = Depends(_filters),
    db: Session = Depends(get_db),
):
    return [_entry_out(e) for e in finance.list_entries(db, company.id, filters)]


@router.get("/summary", response_model=SummaryOut)
def get_summary(
    company: OwnedCompany,
    filters: finance.LedgerFilters = Depends(_filters),
    db: Session = Depends(get_db),
):
    s = finance.summary(db, company.id, filters)
    return SummaryOut(income=s.income, expenses=s.expenses, balance=s.balance)


@router.post("/entries", response_model=EntryOut, status_code=201)
def create_entry(
    payload: EntryIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    e = finance.create_entry(db, company.id, **payload.model_dump())
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="CREATE",
        entity="ledger_entry",
        entity_id=e.id,
        autocommit=True,
    )
    return _entry_out(e)


@router.patch("/entries/{entry_id}", response_model=EntryOut)
def update_entry(
    entry_id: int,
    payload: EntryUpdateIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    e = finance.update_entry(db, company.id, entry_id, **payload.model_dump(exclude_unset=True))
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPDATE",
        entity="ledger_entry",
        entity_id=e.id,
        autocommit=True,
    )
    return _entry_out(e)


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    finance.delete_entry(db, company.id, entry_id)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="DELETE",
        entity="ledger_entry",
        entity_id=entry_id,
        autocommit=True,
    )
    return
