from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(str, Enum):
    DEV = "dev"
    HML = "hml"
    PROD = "prod"


class Settings(BaseSettings):
    APP_ENV: Env = Env.DEV
    DEBUG: bool = False
    SECRET_KEY: str = "dev-change-me"

    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: str = "sqlite:///./agendatop.db"

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # If True, login will also set HttpOnly cookies (works with frontends that avoid localStorage)  # noqa: E501
    USE_COOKIE_AUTH: bool = True

    # Only set a domain in production (e.g., ".yourdomain.com"). Leave None in dev.
    COOKIE_DOMAIN: str | None = None

    # In prod, keep cookies secure-only
    SECURE_COOKIES: bool = False

    # Fuso civil único do sistema (não configurável por empresa)
    APP_TIMEZONE: str = "America/Sao_Paulo"

    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    # Consulta de CEP (API compatível com ViaCEP)
    POSTAL_LOOKUP_URL: str = "https://viacep.com.br/ws"
    POSTAL_LOOKUP_TIMEOUT: float = 5.0

    # Armazenamento de imagens (S3 compatível: AWS, R2, MinIO...)
    STORAGE_BUCKET: str = "agendatop"
    STORAGE_ENDPOINT_URL: str | None = None
    STORAGE_REGION: str | None = None
    STORAGE_ACCESS_KEY_ID: str | None = None
    STORAGE_SECRET_ACCESS_KEY: str | None = None
    STORAGE_PUBLIC_BASE_URL: str = "http://localhost:9000/agendatop"

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# cria instância global
settings = Settings()
