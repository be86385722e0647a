"""API router setup."""
from fastapi import APIRouter

from agendatop.api.routes import (
    admin_companies,
    appointments,
    auth,
    companies,
    customers,
    finance,
    public,
    services,
    working_hours,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(admin_companies.router)
api_router.include_router(companies.router)
api_router.include_router(services.router)
api_router.include_router(working_hours.router)
api_router.include_router(appointments.router)
api_router.include_router(customers.router)
api_router.include_router(finance.router)

# página pública fica fora do prefixo versionado
public_router = public.router
