"""boto3 client factory for card images and export files.

Works against AWS S3 and S3-compatible stores (MinIO locally, R2 in some
deployments) through ``S3_ENDPOINT_URL`` and ``S3_URL_STYLE``.
"""

from __future__ import annotations

import boto3
from botocore.client import BaseClient
from botocore.config import Config

from app.core.config import settings

ADDRESSING_STYLES = {"path", "virtual"}
MAX_ATTEMPTS = 3


def _addressing_style() -> str | None:
    style = (settings.S3_URL_STYLE or "").strip().lower()
    return style if style in ADDRESSING_STYLES else None


def _client_config() -> Config:
    s3_options = {}
    style = _addressing_style()
    if style:
        s3_options["addressing_style"] = style
    return Config(
        retries={"max_attempts": MAX_ATTEMPTS, "mode": "standard"},
        s3=s3_options or None,
    )


def get_s3_client(
    *,
    region: str | None = None,
    endpoint_url: str | None = None,
) -> BaseClient:
    """Return an S3 client; explicit arguments override settings."""
    endpoint = (endpoint_url or settings.S3_ENDPOINT_URL or "").rstrip("/") or None
    return boto3.client(
        "s3",
        region_name=region or settings.S3_REGION or None,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        endpoint_url=endpoint,
        config=_client_config(),
    )
