# agendatop/api/routes/customers.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agendatop.db import get_db
from agendatop.deps import OwnedCompany
from agendatop.schemas.customers import CustomerOut
from agendatop.services import customers as svc

router = APIRouter(prefix="/companies/{company_id}/customers", tags=["customers"])


@router.get("", response_model=list[CustomerOut])
def list_customers(
    company: OwnedCompany,
    q: str | None = Query(None, description="Busca por nome/telefone (contém)"),
    db: Session = Depends(get_db),
):
    return [CustomerOut.model_validate(c) for c in svc.list_customers(db, company.id, q)]


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, company: OwnedCompany, db: Session = Depends(get_db)):
    return CustomerOut.model_validate(svc.get_customer(db, company.id, customer_id))
