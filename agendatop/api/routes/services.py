# agendatop/api/routes/services.py
from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.core.logging import get_logger
from agendatop.db import get_db
from agendatop.deps import OwnedCompany, Staff
from agendatop.schemas.services import ServiceIn, ServiceOut, ServiceUpdateIn
from agendatop.services import catalog
from agendatop.services.errors import DomainError
from agendatop.services.storage import upload_company_file

router = APIRouter(prefix="/companies/{company_id}/services", tags=["services"])
log = get_logger(module="routes.services")


@router.get("", response_model=list[ServiceOut])
def list_services(
    company: OwnedCompany,
    only_active: bool = Query(False),
    db: Session = Depends(get_db),
):
    return [ServiceOut.model_validate(s) for s in catalog.list_services(db, company.id, only_active)]


@router.post("", response_model=ServiceOut, status_code=201)
def create_service(
    payload: ServiceIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    s = catalog.create_service(db, company.id, **payload.model_dump())
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="CREATE",
        entity="service",
        entity_id=s.id,
        autocommit=True,
    )
    return ServiceOut.model_validate(s)


@router.post("/with-image", response_model=ServiceOut, status_code=201)
async def create_service_with_image(
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    name: str = Form(...),
    duration_minutes: int = Form(...),
    price: Decimal = Form(...),
    description: str | None = Form(None),
    is_active: bool = Form(True),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    image_url = None
    if image is not None:
        content = await image.read()
        try:
            image_url = upload_company_file(
                company.id, "services", image.filename, content, image.content_type or ""
            )
        except DomainError:
            raise
        except Exception:
            # o serviço é salvo mesmo sem a imagem
            log.exception("service.image_upload_failed", company_id=company.id)
    s = catalog.create_service(
        db,
        company.id,
        name=name,
        duration_minutes=duration_minutes,
        price=price,
        description=description,
        is_active=is_active,
        image_url=image_url,
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="CREATE",
        entity="service",
        entity_id=s.id,
        autocommit=True,
    )
    return ServiceOut.model_validate(s)


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(service_id: int, company: OwnedCompany, db: Session = Depends(get_db)):
    return ServiceOut.model_validate(catalog.get_service(db, company.id, service_id))


@router.patch("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    payload: ServiceUpdateIn,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    s = catalog.update_service(
        db, company.id, service_id, **payload.model_dump(exclude_unset=True)
    )
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="UPDATE",
        entity="service",
        entity_id=s.id,
        autocommit=True,
    )
    return ServiceOut.model_validate(s)


@router.post("/{service_id}/image", response_model=ServiceOut)
async def upload_service_image(
    service_id: int,
    company: OwnedCompany,
    current_user: Staff,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    catalog.get_service(db, company.id, service_id)
    content = await image.read()
    url = upload_company_file(
        company.id, "services", image.filename, content, image.content_type or ""
    )
    s = catalog.update_service(db, company.id, service_id, image_url=url)
    return ServiceOut.model_validate(s)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int,
    request: Request,
    company: OwnedCompany,
    current_user: Staff,
    db: Session = Depends(get_db),
):
    catalog.delete_service(db, company.id, service_id)
    record_audit(
        db,
        request=request,
        user_id=current_user.id,
        company_id=company.id,
        action="DELETE",
        entity="service",
        entity_id=service_id,
        autocommit=True,
    )
    return
