"""
Logs estruturados (structlog). Cada linha carrega o contexto da requisição:
request_id sempre e company_id quando a rota é de uma empresa.
"""

from __future__ import annotations

import contextvars
import logging
import sys
import uuid

import structlog

request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def _level(name: str) -> int:
    return getattr(logging, (name or "INFO").upper(), logging.INFO)


def configure_logging(json: bool = True, level: str = "INFO") -> None:
    lvl = _level(level)
    logging.basicConfig(level=lvl, stream=sys.stdout, format="%(message)s")
    # SQL só aparece com LOG_LEVEL=DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(max(lvl, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(lvl),
        cache_logger_on_first_use=True,
    )


def get_logger(**initial_values) -> structlog.BoundLogger:
    return structlog.get_logger(**initial_values)


def set_request_id(req_id: str | None) -> str:
    rid = (req_id or "").strip()[:64] or uuid.uuid4().hex
    request_id_ctx.set(rid)
    structlog.contextvars.bind_contextvars(request_id=rid)
    return rid


def bind_company(company_id: int) -> None:
    structlog.contextvars.bind_contextvars(company_id=company_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    structlog.contextvars.clear_contextvars()
