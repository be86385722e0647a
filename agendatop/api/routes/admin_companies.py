# agendatop/api/routes/admin_companies.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.db import get_db
from agendatop.deps import AdminUser
from agendatop.schemas.companies import CompanyCreateIn, CompanyOut, CompanyUpdateIn
from agendatop.services import companies as svc

router = APIRouter(prefix="/admin/companies", tags=["admin"])


@router.get("", response_model=list[CompanyOut])
def list_companies(current_user: AdminUser, db: Session = Depends(get_db)):
    return [CompanyOut.model_validate(c) for c in svc.list_companies(db)]


@router.post("", response_model=CompanyOut, status_code=201)
def create_company(
    payload: CompanyCreateIn,
    request: Request,
    current_user: AdminUser,
    db: Session = Depends(get_db),
):
    company = svc.create_company(
        db,
        name=payload.name,
        responsible_name=payload.responsible_name,
        email=payload.email,
        phone=payload.phone,
        password=payload.password,
        commit=False,
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="CREATE",
        entity="company",
        entity_id=company.id,
    )
    db.commit()
    db.refresh(company)
    return CompanyOut.model_validate(company)


@router.patch("/{company_id}", response_model=CompanyOut)
def update_company(
    company_id: int,
    payload: CompanyUpdateIn,
    request: Request,
    current_user: AdminUser,
    db: Session = Depends(get_db),
):
    company = svc.update_company(
        db, company_id, commit=False, **payload.model_dump(exclude_unset=True)
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPDATE",
        entity="company",
        entity_id=company.id,
    )
    db.commit()
    db.refresh(company)
    return CompanyOut.model_validate(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: int,
    request: Request,
    current_user: AdminUser,
    db: Session = Depends(get_db),
):
    svc.delete_company(db, company_id)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company_id,
        action="DELETE",
        entity="company",
        entity_id=company_id,
        autocommit=True,
    )
    return
