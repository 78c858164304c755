# workhub/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas import token as token_schema
from workhub.schemas import user as user_schema
from workhub.services.audit import AuditService
from workhub.utils.helpers import is_valid_email

router = APIRouter()


@router.post("/register", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
def register(user_in: user_schema.UserRegister, request: Request, db: Session = Depends(get_db)):
    """ Self-service sign-up. New accounts are always employees. """
    email = user_in.email.lower()
    if not is_valid_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email address")
    if db.query(models.User).filter(models.User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    db_user = models.User(
        email=email, name=user_in.name,
        hashed_password=security.get_password_hash(user_in.password),
        role=models.Role.EMPLOYEE.value,
    )
    db.add(db_user)
    db.flush()
    AuditService.log_action(
        db, action="register", entity_type="user", entity_id=db_user.id,
        user_id=db_user.id, new_values={"email": email}, request=request,
    )
    db.refresh(db_user)
    return db_user


@router.post("/token", response_model=token_schema.Token)
def login(
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    form_data: OAuth2PasswordRequestForm = Depends(),
):
    user = db.query(models.User).filter(models.User.email == form_data.username.lower()).first()
    if not user or not security.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")

    access_token = security.create_access_token(user, context.settings)
    return {"access_token": access_token, "token_type": "bearer"}
