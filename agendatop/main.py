from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import JSONResponse

import agendatop.db.base  # noqa: F401  (registra todos os models)
from agendatop.api.main import api_router, public_router
from agendatop.core.logging import configure_logging, get_logger
from agendatop.core.settings import Env, settings
from agendatop.middlewares.telemetry import RequestContextMiddleware
from agendatop.services.errors import DomainError
from agendatop.version import APP_VERSION, BUILD_TIME_UTC, GIT_SHA

configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)
log = get_logger(module="main")


def _cors_origins(hosts: str) -> list[str]:
    """ALLOWED_HOSTS aceita "dominio" ou "https://dominio"; sem esquema libera http e https."""
    origins: list[str] = []
    for raw in hosts.split(","):
        host = raw.strip()
        if not host:
            continue
        if host.startswith(("http://", "https://")):
            origins.append(host)
        else:
            origins += [f"http://{host}", f"https://{host}"]
    return origins


app = FastAPI(
    title="AgendaTOP",
    description="Agendamento online multiempresa",
    version=APP_VERSION,
    debug=settings.DEBUG,
)

app.add_middleware(RequestContextMiddleware)

_origins = _cors_origins(settings.ALLOWED_HOSTS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=(_origins or ["*"]) if settings.DEBUG else _origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.APP_ENV == Env.PROD:
    app.add_middleware(HTTPSRedirectMiddleware)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    if settings.APP_ENV == Env.PROD:
        response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    log.info(
        "domain.error",
        error=type(exc).__name__,
        detail=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


app.include_router(public_router)
app.include_router(api_router)


@app.get("/healthz", tags=["ops"])
def healthz():
    return {"status": "ok", "env": settings.APP_ENV.value, "version": APP_VERSION}


@app.get("/version", tags=["ops"])
def version():
    return {
        "version": APP_VERSION,
        "git_sha": GIT_SHA,
        "build_time_utc": BUILD_TIME_UTC,
        "env": settings.APP_ENV.value,
    }
