# workhub/api/v1/endpoints/documents.py
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import (
    APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Request, UploadFile, status,
)
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from workhub.api.deps import ensure_project_access, get_project_or_404, record_activity
from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import document as document_schema
from workhub.schemas.notification import NotificationEvent
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter()


def resolve_file_type(content_type: Optional[str], filename: str) -> Optional[str]:
    """
    "application/pdf" -> "pdf". Falls back to the extension for MIME types
    like the long OOXML ones. None when neither is an accepted type.
    """
    mime = content_type or "application/octet-stream"
    kind, _, subtype = mime.partition("/")
    candidate = (subtype or kind).lower()
    if candidate in models.DOCUMENT_TYPES:
        return candidate
    extension = Path(filename).suffix.lstrip(".").lower()
    if extension in models.DOCUMENT_TYPES:
        return extension
    return None


def normalize_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def _get_document_or_404(db: Session, document_id: int) -> models.Document:
    document = db.get(models.Document, document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


@router.post("", response_model=document_schema.Document, status_code=status.HTTP_201_CREATED)
def upload_document(
    request: Request,
    background_tasks: BackgroundTasks,
    project_id: Optional[int] = Form(default=None),
    tags: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """
    Stores an uploaded file against a project and tells the rest of the
    project team about it.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if project_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Project ID is required")

    project = get_project_or_404(db, project_id)
    ensure_project_access(project, current_user)

    file_type = resolve_file_type(file.content_type, file.filename)
    if file_type is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported file type")

    data = file.file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(data) > context.settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    key = context.storage.save(data, file.filename)
    document = models.Document(
        project_id=project.id,
        filename=key,
        original_name=file.filename,
        file_type=file_type,
        size=len(data),
        url=context.storage.url_for(key),
        uploaded_by=current_user.id,
        tags=normalize_tags(tags),
    )
    db.add(document)
    db.flush()
    record_activity(db, project.id, "document_uploaded", f"{document.original_name} uploaded")
    AuditService.log_action(
        db, action="upload", entity_type="document", entity_id=document.id, user_id=current_user.id,
        new_values={"original_name": document.original_name, "size": document.size}, request=request,
    )
    db.refresh(document)

    background_tasks.add_task(
        context.notifications.notify_project,
        project.id,
        NotificationEvent(
            type="project", action="updated",
            title="New document uploaded",
            message=f'"{document.original_name}" was uploaded to the project',
            entity_type="document", entity_id=str(document.id),
            icon="file", color="#10b981",
        ),
        current_user.id,
    )
    return document


@router.get("/project/{project_id}", response_model=List[document_schema.Document])
def list_project_documents(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Documents for a project, newest first. """
    project = get_project_or_404(db, project_id)
    ensure_project_access(project, current_user)
    return db.query(models.Document).filter(models.Document.project_id == project_id).order_by(
        models.Document.uploaded_at.desc(), models.Document.id.desc()
    ).all()


@router.get("/{document_id}", response_model=document_schema.Document)
def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    document = _get_document_or_404(db, document_id)
    ensure_project_access(document.project, current_user)
    return document


@router.get("/{document_id}/download")
def download_document(
    document_id: int,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    document = _get_document_or_404(db, document_id)
    ensure_project_access(document.project, current_user)
    if not context.storage.exists(document.filename):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(path=context.storage.path_for(document.filename), filename=document.original_name)


@router.delete("/{document_id}")
def delete_document(
    document_id: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Only the uploader or an admin may delete a document. """
    document = _get_document_or_404(db, document_id)
    if document.uploaded_by != current_user.id and current_user.role != models.Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")

    project_id = document.project_id
    name = document.original_name
    context.storage.delete(document.filename)
    db.delete(document)
    record_activity(db, project_id, "document_deleted", f"{name} deleted")
    AuditService.log_action(
        db, action="delete", entity_type="document", entity_id=document_id, user_id=current_user.id,
        old_values={"original_name": name}, request=request,
    )
    logger.info("Document %s deleted by user %s", document_id, current_user.id)

    background_tasks.add_task(
        context.notifications.notify_project,
        project_id,
        NotificationEvent(
            type="project", action="updated",
            title="Document deleted",
            message=f'"{name}" has been removed from the project',
            entity_type="document", entity_id=str(document_id),
            icon="file-x", color="#ef4444",
        ),
        current_user.id,
    )
    return {"success": True, "message": "Document deleted"}
