"""Connect card export: CSV serialization and the export pipeline.

Serialization is deterministic; ordering and filtering happen in the query.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from app.core.config import settings
from app.core.data_scope import DataScope, apply_location_filter, can_access_location
from app.core.errors import ExportError, ValidationError
from app.db.enums import EXPORTABLE_CARD_STATUSES, ROLES_CAN_EXPORT, DataExportFormat
from app.db.models import ConnectCard, DataExport, Organization
from app.schemas.export import ExportFilters, ExportPreview, ExportResult
from app.services import storage_service
from app.services.export_formats import get_export_format

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"
PREVIEW_LIMIT = 5
# csv.writer ends rows with the excel dialect terminator; rows are joined with "\n"
_CSV_ROW_TERMINATOR = "\r\n"


# =============================================================================
# CSV serialization
# =============================================================================


def _csv_row(values: Iterable[str | None]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["" if value is None else value for value in values])
    return output.getvalue().removesuffix(_CSV_ROW_TERMINATOR)


def escape_csv_field(value: str | None) -> str:
    """Minimal RFC 4180 quoting: quote only fields with a comma, quote or newline."""
    if not value:
        return ""
    return _csv_row([value])


def generate_csv(cards: Iterable[Any], format: DataExportFormat | str) -> str:
    """Header row plus one row per card, joined with "\\n" (no trailing newline)."""
    export_format = get_export_format(format)
    lines = [_csv_row(export_format.headers)]
    lines.extend(_csv_row(export_format.row(card)) for card in cards)
    return "\n".join(lines)


def generate_export_filename(
    format: DataExportFormat | str, export_date: date | datetime | None = None
) -> str:
    """connect-cards-{format-id}-{YYYY-MM-DD}.csv"""
    if export_date is None:
        export_date = datetime.now(timezone.utc)
    if isinstance(export_date, datetime):
        export_date = export_date.date()
    format_id = get_export_format(format).id.lower().replace("_", "-")
    return f"connect-cards-{format_id}-{export_date.isoformat()}.csv"


def get_csv_byte_size(csv_content: str) -> int:
    return len(csv_content.encode("utf-8"))


def get_format_headers(format: DataExportFormat | str) -> list[str]:
    return get_export_format(format).headers


def get_preview_rows(
    cards: list[Any], format: DataExportFormat | str, limit: int = PREVIEW_LIMIT
) -> list[list[str]]:
    export_format = get_export_format(format)
    return [export_format.row(card) for card in cards[:limit]]


def list_export_formats() -> list[dict]:
    """Formats offered in the export UI, with their column headers."""
    formats = []
    for value in DataExportFormat:
        export_format = get_export_format(value)
        formats.append(
            {
                "id": export_format.id,
                "format": value,
                "name": export_format.name,
                "description": export_format.description,
                "headers": export_format.headers,
            }
        )
    return formats


# =============================================================================
# Export pipeline
# =============================================================================


def build_export_query(db: Session, scope: DataScope, filters: ExportFilters) -> Query:
    """Exportable cards in scope, newest scan first."""
    query = (
        db.query(ConnectCard)
        .options(joinedload(ConnectCard.location))
        .filter(
            ConnectCard.organization_id == scope.organization_id,
            ConnectCard.status.in_([s.value for s in EXPORTABLE_CARD_STATUSES]),
        )
    )
    query = apply_location_filter(query, ConnectCard.location_id, scope)

    if filters.location_id:
        if not can_access_location(scope, filters.location_id):
            raise ValidationError("You do not have access to this location")
        query = query.filter(ConnectCard.location_id == filters.location_id)
    if filters.date_from:
        query = query.filter(ConnectCard.scanned_at >= filters.date_from)
    if filters.date_to:
        query = query.filter(ConnectCard.scanned_at <= filters.date_to)
    if filters.only_new:
        query = query.filter(ConnectCard.last_exported_at.is_(None))

    return query.order_by(ConnectCard.scanned_at.desc(), ConnectCard.id)


def get_export_preview(
    db: Session,
    scope: DataScope,
    format: DataExportFormat,
    filters: ExportFilters,
) -> ExportPreview:
    query = build_export_query(db, scope, filters)
    total_count = query.order_by(None).with_entities(func.count(ConnectCard.id)).scalar() or 0
    cards = query.limit(PREVIEW_LIMIT).all()
    return ExportPreview(
        format=format,
        headers=get_format_headers(format),
        rows=get_preview_rows(cards, format),
        total_count=total_count,
    )


def _export_format_label(format: DataExportFormat) -> str:
    """Short label stamped on exported cards ("planning_center", "breeze", "generic")."""
    return format.value.lower().replace("_csv", "")


def create_export(
    db: Session,
    scope: DataScope,
    format: DataExportFormat,
    filters: ExportFilters,
    now: datetime | None = None,
) -> ExportResult:
    """
    Generate a CSV, upload it and record the export.

    Exported cards are stamped so "only new" exports skip them next time.

    Raises:
        ExportError: caller may not export, or nothing matches the filters
    """
    if scope.role not in ROLES_CAN_EXPORT:
        raise ExportError("You do not have permission to export data")

    org = db.get(Organization, scope.organization_id)
    if not org:
        raise ExportError("Organization not found")

    cards = build_export_query(db, scope, filters).all()
    if not cards:
        raise ExportError("No records match your filter criteria")

    now = now or datetime.now(timezone.utc)
    csv_content = generate_csv(cards, format)
    body = csv_content.encode("utf-8")
    file_name = generate_export_filename(format, now)
    file_key = f"exports/{org.slug}/{file_name}"

    storage_service.put_object(
        file_key,
        body,
        content_type=CSV_CONTENT_TYPE,
        cache_control=settings.EXPORT_CACHE_CONTROL,
        bucket=settings.export_bucket or None,
    )

    export = DataExport(
        organization_id=scope.organization_id,
        format=format.value,
        filters=filters.model_dump(mode="json", exclude_none=True),
        record_count=len(cards),
        file_name=file_name,
        file_key=file_key,
        file_size_bytes=len(body),
        exported_by_id=scope.user_id,
    )
    db.add(export)

    label = _export_format_label(format)
    for card in cards:
        card.last_exported_at = now
        card.last_exported_by_id = scope.user_id
        card.last_export_format = label

    db.commit()
    db.refresh(export)

    logger.info(
        "Export created",
        extra={
            "org_id": str(scope.organization_id),
            "export_id": str(export.id),
            "format": format.value,
            "record_count": len(cards),
        },
    )
    return ExportResult(
        export_id=export.id,
        file_name=file_name,
        record_count=len(cards),
        file_key=file_key,
    )


def get_export_history(db: Session, org_id: UUID, limit: int = 20) -> list[DataExport]:
    limit = max(1, min(limit, 100))
    return (
        db.query(DataExport)
        .filter(DataExport.organization_id == org_id)
        .order_by(DataExport.created_at.desc())
        .limit(limit)
        .all()
    )


def get_export_download(db: Session, org_id: UUID, export_id: UUID) -> tuple[str, bytes] | None:
    """Return (file name, CSV bytes) for an org's export, or None if not found."""
    export = (
        db.query(DataExport)
        .filter(DataExport.id == export_id, DataExport.organization_id == org_id)
        .first()
    )
    if not export:
        return None
    content = storage_service.get_object_bytes(
        export.file_key, bucket=settings.export_bucket or None
    )
    return export.file_name, content
