"""
Dependências de autenticação/autorização das rotas.

Dois papéis: admin_master (plataforma inteira) e empresa_owner (só as
empresas das quais é dono). Rotas de empresa recebem a Company já checada
via `OwnedCompany`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from agendatop.core.logging import bind_company
from agendatop.core.security import decode_token
from agendatop.core.settings import settings
from agendatop.db import get_db
from agendatop.models.company import Company
from agendatop.models.user import Role, User


def bearer_or_cookie(request: Request, cookie_name: str) -> str | None:
    """Token do header Authorization; sem header, do cookie (se cookies estiverem ligados)."""
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip() or None
    if settings.USE_COOKIE_AUTH:
        return request.cookies.get(cookie_name)
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:  # noqa: B008
    token = bearer_or_cookie(request, "access_token")
    if not token:
        raise _unauthorized("Não autenticado")

    try:
        payload = decode_token(token, expected_type="access")
    except ValueError as e:
        raise _unauthorized("Token inválido ou expirado") from e

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise _unauthorized("Token malformado")

    user = db.get(User, int(sub))
    if user is None or not user.is_active:
        raise _unauthorized("Usuário inativo ou inexistente")
    return user


def require_roles(*allowed: Role) -> Callable[..., User]:
    def checker(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Sem permissão")
        return user

    return checker


require_admin = require_roles(Role.ADMIN_MASTER)
require_staff = require_roles(Role.ADMIN_MASTER, Role.COMPANY_OWNER)


def get_owned_company(
    company_id: int,
    user: User = Depends(require_staff),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> Company:
    company = db.get(Company, company_id)
    if company is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Empresa não encontrada")
    if not user.is_admin and company.owner_id != user.id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Sem permissão")
    bind_company(company.id)
    return company


AdminUser = Annotated[User, Depends(require_admin)]
Staff = Annotated[User, Depends(require_staff)]
OwnedCompany = Annotated[Company, Depends(get_owned_company)]
