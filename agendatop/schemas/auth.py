from __future__ import annotations

from pydantic import BaseModel, EmailStr

from agendatop.models.user import Role


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class LoginOut(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "bearer"


class MeOut(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: Role
    is_active: bool
    company_ids: list[int] = []
