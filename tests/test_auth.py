from fastapi import status
from sqlalchemy.orm import Session

from agendatop.core.security import create_refresh_token, hash_password
from agendatop.models.audit_log import AuditLog
from agendatop.models.user import Role, User


def test_login_success(client, company, db_session: Session):
    """Dono da empresa faz login com o e-mail cadastrado pelo admin."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "tiara@example.com", "password": "Senha123"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

    logins = db_session.query(AuditLog).filter(AuditLog.action == "LOGIN").all()
    assert len(logins) == 1
    assert logins[0].user_id == company.owner_id


def test_login_invalid_credentials(client, company):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "tiara@example.com", "password": "errada123"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Credenciais inválidas"


def test_login_nonexistent_user(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "ninguem@example.com", "password": "Senha123"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_inactive_user(client, db_session: Session):
    db_session.add(
        User(
            name="Inativo",
            email="inativo@example.com",
            password_hash=hash_password("Senha123"),
            role=Role.COMPANY_OWNER,
            is_active=False,
        )
    )
    db_session.commit()

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "inativo@example.com", "password": "Senha123"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_lists_owned_companies(client, company, owner_headers):
    response = client.get("/api/v1/auth/me", headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["email"] == "tiara@example.com"
    assert data["role"] == "empresa_owner"
    assert data["company_ids"] == [company.id]


def test_me_without_token(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_refresh_token(client, company):
    token = create_refresh_token(str(company.owner_id))
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_refresh_issues_new_pair(client, company):
    token = create_refresh_token(str(company.owner_id))
    response = client.post("/api/v1/auth/refresh", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["access_token"]


def test_refresh_without_token(client):
    response = client.post("/api/v1/auth/refresh")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
