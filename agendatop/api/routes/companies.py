# agendatop/api/routes/companies.py

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.db import get_db
from agendatop.deps import OwnedCompany, Staff
from agendatop.schemas.companies import (
    AddressIn,
    AddressOut,
    CepOut,
    CompanyOut,
    CompanySettingsIn,
)
from agendatop.services import companies as svc
from agendatop.services.postal import lookup_cep
from agendatop.services.storage import upload_company_file

router = APIRouter(tags=["companies"])


@router.get("/companies/{company_id}", response_model=CompanyOut)
def get_company(company: OwnedCompany):
    return CompanyOut.model_validate(company)


@router.patch("/companies/{company_id}", response_model=CompanyOut)
def update_settings(
    payload: CompanySettingsIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    updated = svc.update_company(
        db, company.id, commit=False, **payload.model_dump(exclude_unset=True)
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPDATE",
        entity="company_settings",
        entity_id=company.id,
    )
    db.commit()
    db.refresh(updated)
    return CompanyOut.model_validate(updated)


@router.get("/companies/{company_id}/address", response_model=AddressOut | None)
def get_address(company: OwnedCompany, db: Session = Depends(get_db)):
    addr = svc.get_address(db, company.id)
    return AddressOut.model_validate(addr) if addr else None


@router.put("/companies/{company_id}/address", response_model=AddressOut)
def upsert_address(
    payload: AddressIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    addr = svc.upsert_address(db, company.id, commit=False, **payload.model_dump())
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPDATE",
        entity="company_address",
        entity_id=addr.id,
    )
    db.commit()
    db.refresh(addr)
    return AddressOut.model_validate(addr)


@router.post("/companies/{company_id}/logo", response_model=CompanyOut)
async def upload_logo(
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    content = await file.read()
    url = upload_company_file(
        company.id, "logos", file.filename, content, file.content_type or ""
    )
    company.logo_url = url
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPLOAD",
        entity="company_logo",
        entity_id=company.id,
    )
    db.commit()
    db.refresh(company)
    return CompanyOut.model_validate(company)


@router.get("/postal/{cep}", response_model=CepOut)
def postal_lookup(cep: str, current_user: Staff):
    data = lookup_cep(cep)
    if data is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "CEP não encontrado")
    return CepOut(**data)
