"""Exports router - connect card CSV exports for church management systems."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db, require_csrf_header, require_roles
from app.core.errors import ExportError, ValidationError
from app.core.rate_limit import limiter
from app.db.enums import ROLES_CAN_EXPORT
from app.schemas.auth import UserSession
from app.schemas.export import (
    DataExportRead,
    ExportFormatInfo,
    ExportPreview,
    ExportRequest,
    ExportResult,
)
from app.services import export_service

router = APIRouter()

_can_export = require_roles(list(ROLES_CAN_EXPORT))


@router.get("/formats", response_model=list[ExportFormatInfo])
def list_formats(session: UserSession = Depends(_can_export)):
    return export_service.list_export_formats()


@router.post("/preview", response_model=ExportPreview)
def preview_export(
    data: ExportRequest,
    session: UserSession = Depends(_can_export),
    db: Session = Depends(get_db),
):
    """First rows and total count for the chosen format and filters."""
    try:
        return export_service.get_export_preview(db, session.scope, data.format, data.filters)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "",
    response_model=ExportResult,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(settings.EXPORT_RATE_LIMIT)
def create_export(
    request: Request,
    data: ExportRequest,
    session: UserSession = Depends(_can_export),
    db: Session = Depends(get_db),
):
    """Generate the CSV, store it and stamp the exported cards."""
    try:
        return export_service.create_export(db, session.scope, data.format, data.filters)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[DataExportRead])
def list_exports(
    limit: int = Query(20, ge=1, le=100),
    session: UserSession = Depends(_can_export),
    db: Session = Depends(get_db),
):
    return export_service.get_export_history(db, session.org_id, limit)


@router.get("/{export_id}/download")
def download_export(
    export_id: UUID,
    session: UserSession = Depends(_can_export),
    db: Session = Depends(get_db),
) -> Response:
    result = export_service.get_export_download(db, session.org_id, export_id)
    if not result:
        raise HTTPException(status_code=404, detail="Export not found")
    file_name, content = result
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
