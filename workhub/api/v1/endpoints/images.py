# workhub/api/v1/endpoints/images.py
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas.user import AuthUser

router = APIRouter()


class ImageMeta(BaseModel):
    id: int
    filename: str
    mimetype: str
    uploaded_by: int
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


@router.post("", response_model=ImageMeta, status_code=status.HTTP_201_CREATED)
def upload_image(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """ Images are small enough to keep in the database as raw bytes. """
    mimetype = file.content_type or ""
    if not mimetype.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image uploads are allowed")
    data = file.file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(data) > context.settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    image = models.Image(filename=file.filename or "image", mimetype=mimetype, data=data, uploaded_by=current_user.id)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


@router.get("/{image_id}")
def get_image(image_id: int, db: Session = Depends(get_db)):
    image = db.get(models.Image, image_id)
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return Response(content=image.data, media_type=image.mimetype)
