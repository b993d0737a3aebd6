"""Object storage operations for card images and export files.

Keys are plain S3 object keys. Values stored as ``placeholder:{name}`` are
demo assets served from a static path and never touch the bucket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.services.storage_client import get_s3_client

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "placeholder:"
# S3 DeleteObjects accepts at most 1000 keys per call
DELETE_BATCH_SIZE = 1000


@dataclass
class DeleteError:
    key: str
    message: str


@dataclass
class DeleteResult:
    """Outcome of a best-effort bulk delete."""

    deleted: int = 0
    errors: int = 0
    error_details: list[DeleteError] = field(default_factory=list)
    message: str = ""


def _bucket(bucket: str | None) -> str:
    selected = bucket or settings.S3_BUCKET
    if not selected:
        raise RuntimeError("S3_BUCKET is not configured")
    return selected


def is_placeholder_key(key: str | None) -> bool:
    """Placeholder assets are never stored in (or deleted from) the bucket."""
    if not key:
        return False
    return "placeholder" in key or "Placeholder" in key


def resolve_asset_url(value: str | None) -> str | None:
    """Map ``placeholder:{name}`` to its static path; other values are returned unchanged."""
    if value and value.startswith(PLACEHOLDER_PREFIX):
        name = value[len(PLACEHOLDER_PREFIX):]
        base = settings.PLACEHOLDER_ASSET_BASE_PATH.rstrip("/")
        return f"{base}/{name}.jpg"
    return value


def put_object(
    key: str,
    body: bytes,
    *,
    content_type: str,
    cache_control: str | None = None,
    bucket: str | None = None,
) -> None:
    """Upload bytes under ``key``. Errors propagate."""
    params = {
        "Bucket": _bucket(bucket),
        "Key": key,
        "Body": body,
        "ContentType": content_type,
    }
    if cache_control:
        params["CacheControl"] = cache_control
    get_s3_client().put_object(**params)
    logger.info("Stored object", extra={"key": key, "size_bytes": len(body)})


def get_object_bytes(key: str, *, bucket: str | None = None) -> bytes:
    """Download an object's bytes. Errors propagate."""
    response = get_s3_client().get_object(Bucket=_bucket(bucket), Key=key)
    return response["Body"].read()


def delete_object(key: str, *, bucket: str | None = None) -> bool:
    """
    Delete a single object.

    Returns False (without raising) for placeholders and failed deletes.
    """
    if not key or is_placeholder_key(key):
        return False
    try:
        get_s3_client().delete_object(Bucket=_bucket(bucket), Key=key)
        return True
    except (ClientError, BotoCoreError) as exc:
        logger.warning("Failed to delete object %s: %s", key, exc)
        return False


def batch_delete_objects(keys: list[str], *, bucket: str | None = None) -> DeleteResult:
    """
    Delete many objects in chunks of 1000.

    Best-effort cleanup: per-key and per-chunk failures are collected into
    the result rather than raised.
    """
    valid_keys = [k for k in keys if k and not is_placeholder_key(k)]
    if not valid_keys:
        return DeleteResult(message="No files to delete")

    result = DeleteResult()
    client = get_s3_client()
    bucket_name = _bucket(bucket)

    for start in range(0, len(valid_keys), DELETE_BATCH_SIZE):
        chunk = valid_keys[start:start + DELETE_BATCH_SIZE]
        try:
            response = client.delete_objects(
                Bucket=bucket_name,
                Delete={"Objects": [{"Key": k} for k in chunk], "Quiet": False},
            )
        except (ClientError, BotoCoreError) as exc:
            logger.warning("Bulk delete chunk failed (%d keys): %s", len(chunk), exc)
            result.errors += len(chunk)
            result.error_details.extend(DeleteError(key=k, message=str(exc)) for k in chunk)
            continue

        result.deleted += len(response.get("Deleted", []))
        for error in response.get("Errors", []):
            result.errors += 1
            result.error_details.append(
                DeleteError(
                    key=error.get("Key", ""),
                    message=error.get("Message") or error.get("Code") or "Unknown error",
                )
            )

    result.message = f"Deleted {result.deleted} files, {result.errors} errors"
    if result.errors:
        logger.warning(
            "Bulk delete finished with errors",
            extra={"deleted": result.deleted, "errors": result.errors},
        )
    return result


def list_objects_by_prefix(prefix: str, *, bucket: str | None = None) -> list[str]:
    """List every key under ``prefix``, following continuation tokens."""
    client = get_s3_client()
    bucket_name = _bucket(bucket)
    keys: list[str] = []
    token: str | None = None

    while True:
        params = {"Bucket": bucket_name, "Prefix": prefix}
        if token:
            params["ContinuationToken"] = token
        response = client.list_objects_v2(**params)
        keys.extend(obj["Key"] for obj in response.get("Contents", []))
        if not response.get("IsTruncated"):
            break
        token = response.get("NextContinuationToken")

    return keys


def delete_by_prefix(prefix: str, *, bucket: str | None = None) -> DeleteResult:
    """Delete every object under ``prefix`` (e.g. all of an organization's uploads)."""
    if not prefix:
        raise ValueError("Refusing to delete with an empty prefix")
    keys = list_objects_by_prefix(prefix, bucket=bucket)
    return batch_delete_objects(keys, bucket=bucket)
