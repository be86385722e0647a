"""Upload de imagens (logo da empresa, foto de serviço) para bucket S3-compatível."""

from __future__ import annotations

import uuid

import boto3
from botocore.config import Config

from agendatop.core.logging import get_logger
from agendatop.core.settings import settings
from agendatop.services.errors import ValidationError

log = get_logger(module="storage")

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def get_s3_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION or "auto",
        config=Config(signature_version="s3v4"),
    )


def _extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext in {"jpg", "jpeg", "png", "webp", "gif"}:
            return ext
    return ALLOWED_IMAGE_TYPES[content_type]


def public_url(key: str) -> str:
    return f"{settings.STORAGE_PUBLIC_BASE_URL.rstrip('/')}/{key}"


def upload_company_file(
    company_id: int,
    folder: str,
    filename: str | None,
    content: bytes,
    content_type: str,
    client=None,
) -> str:
    """Grava em <folder>/<company_id>/<uuid>.<ext> e devolve a URL pública."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Formato de imagem não suportado (use JPG, PNG, WEBP ou GIF)")
    if not content:
        raise ValidationError("Arquivo vazio")
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationError("Imagem maior que 5 MB")

    key = f"{folder.strip('/')}/{company_id}/{uuid.uuid4().hex}.{_extension(filename, content_type)}"
    s3 = client or get_s3_client()
    s3.put_object(
        Bucket=settings.STORAGE_BUCKET,
        Key=key,
        Body=content,
        ContentType=content_type,
    )
    log.info("storage.uploaded", company_id=company_id, key=key)
    return public_url(key)
