"""Senhas (passlib) e JWT de acesso/refresh (python-jose)."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from jose import JWTError, jwt
from passlib.context import CryptContext

from agendatop.core.settings import settings

TokenType = Literal["access", "refresh"]

pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

# mínimo 6 caracteres, ao menos uma letra e um dígito
_PASSWORD_RULE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).{6,}$")
PASSWORD_RULE_MESSAGE = "Senha fraca: mínimo 6 caracteres, com pelo menos uma letra e um dígito."


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def validate_password_policy(password: str | None) -> None:
    if not _PASSWORD_RULE.match(password or ""):
        raise ValueError(PASSWORD_RULE_MESSAGE)


def _lifetime(kind: TokenType) -> timedelta:
    if kind == "access":
        return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)


def create_token(sub: str, kind: TokenType) -> str:
    issued = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": sub,
        "type": kind,
        "iat": int(issued.timestamp()),
        "exp": int((issued + _lifetime(kind)).timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def create_access_token(sub: str) -> str:
    return create_token(sub, "access")


def create_refresh_token(sub: str) -> str:
    return create_token(sub, "refresh")


def decode_token(token: str, expected_type: TokenType) -> dict:
    """Claims do token; ValueError se assinatura, validade ou tipo não baterem."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as e:
        raise ValueError("Token inválido.") from e
    if claims.get("type") != expected_type:
        raise ValueError("Tipo de token inválido.")
    return claims
