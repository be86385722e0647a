from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from agendatop.audit.helpers import record_audit
from agendatop.core.logging import get_logger
from agendatop.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from agendatop.core.settings import settings
from agendatop.db import get_db
from agendatop.deps import bearer_or_cookie, get_current_user
from agendatop.models.user import User
from agendatop.schemas.auth import LoginIn, LoginOut, MeOut
from agendatop.services.companies import companies_owned_by

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger(module="auth")

_COOKIES = ("access_token", "refresh_token")


def _issue_tokens(user_id: int, response: Response) -> LoginOut:
    access = create_access_token(str(user_id))
    refresh = create_refresh_token(str(user_id))
    if settings.USE_COOKIE_AUTH:
        opts = dict(
            httponly=True,
            secure=bool(settings.SECURE_COOKIES),
            samesite="lax",
            path="/",
            domain=settings.COOKIE_DOMAIN or None,
        )
        response.set_cookie(
            "access_token", access, max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60, **opts
        )
        response.set_cookie(
            "refresh_token", refresh, max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400, **opts
        )
    return LoginOut(access_token=access, refresh_token=refresh, token_type="bearer")


@router.post("/login", response_model=LoginOut)
def api_login(
    payload: LoginIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginOut:
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).one_or_none()
    if user is None or not user.is_active or not verify_password(payload.password, user.password_hash):
        log.info("auth.login_failed", email=email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais inválidas")

    out = _issue_tokens(user.id, response)
    record_audit(
        db,
        request=request,
        user_id=user.id,
        action="LOGIN",
        entity="user",
        entity_id=user.id,
        autocommit=True,
    )
    log.info("auth.login", user_id=user.id, role=user.role.value)
    return out


@router.get("/me", response_model=MeOut)
def api_me(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> MeOut:
    """Usuário logado e, para o dono, as empresas que ele administra."""
    return MeOut(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        is_active=user.is_active,
        company_ids=[c.id for c in companies_owned_by(db, user.id)],
    )


@router.post("/logout")
def api_logout(response: Response):
    # JWT não tem estado no servidor; só apagamos os cookies
    for name in _COOKIES:
        response.delete_cookie(name, path="/")
    return {"ok": True}


@router.post("/refresh", response_model=LoginOut)
def api_refresh(request: Request, response: Response, db: Session = Depends(get_db)) -> LoginOut:
    token = bearer_or_cookie(request, "refresh_token")
    if not token:
        raise HTTPException(status_code=401, detail="Refresh token ausente")
    try:
        payload = decode_token(token, expected_type="refresh")
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Refresh token inválido") from e

    sub = str(payload.get("sub") or "")
    user = db.get(User, int(sub)) if sub.isdigit() else None
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Usuário inativo ou inexistente")
    return _issue_tokens(user.id, response)
