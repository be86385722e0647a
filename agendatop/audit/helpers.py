"""Trilha de auditoria das ações administrativas (quem, em qual empresa, o quê)."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import Request
from sqlalchemy.orm import Session

from agendatop.core.logging import get_logger
from agendatop.models.audit_log import AuditLog

log = get_logger(module="audit")


def get_client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip() or None
    return request.client.host if request.client else None


def record_audit(
    db: Session,
    *,
    request: Request,
    user_id: int | None,
    action: str,
    entity: str,
    entity_id: int | None,
    company_id: int | None = None,
    autocommit: bool = False,
) -> AuditLog:
    """
    Sem autocommit o registro vai junto no commit da própria operação.
    Com autocommit ele é gravado sozinho, para operações que já fizeram o
    commit delas (login, ações do ciclo de vida, exclusões); uma falha aqui
    é registrada no log e não derruba a requisição.
    """
    entry = AuditLog(
        user_id=user_id,
        company_id=company_id,
        action=action,
        entity=entity,
        entity_id=entity_id,
        timestamp_utc=datetime.now(UTC),
        ip=get_client_ip(request),
    )
    db.add(entry)
    if autocommit:
        try:
            db.commit()
        except Exception:
            db.rollback()
            log.exception("audit.write_failed", action=action, entity=entity, company_id=company_id)
    return entry
