# workhub/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import user as user_schema
from workhub.schemas.user import AuthUser

router = APIRouter()


@router.get("/me", response_model=user_schema.User)
def read_user_me(
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """
    Get the details for the currently logged-in user.
    """
    return db.get(models.User, current_user.id)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def update_user_password(
    passwords: user_schema.PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: AuthUser = Depends(security.get_current_user),
):
    """
    Allows a logged-in user to change their own password.
    """
    db_user = db.get(models.User, current_user.id)
    if not security.verify_password(passwords.current_password, db_user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Incorrect current password")

    db_user.hashed_password = security.get_password_hash(passwords.new_password)
    db.commit()
    return
