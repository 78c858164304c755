# workhub/core/security.py
# Auth helpers and the role-checking dependencies.
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from workhub.core.config import Settings
from workhub.core.context import AppContext, get_context
from workhub.core.exceptions import ADMINS_ONLY, INSUFFICIENT_ROLE, ForbiddenError
from workhub.db import models
from workhub.db.session import get_db
from workhub.schemas.token import TokenData
from workhub.schemas.user import AuthUser
from workhub.utils.helpers import extract_bearer_token, has_role

# --- Password Hashing ---
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
def verify_password(plain: str, hashed: str) -> bool: return pwd_context.verify(plain, hashed)
def get_password_hash(pwd: str) -> str: return pwd_context.hash(pwd)

# --- JWT Creation ---
def create_access_token(user: models.User, settings: Settings) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenData(user_id=int(payload.get("sub")))
    except (JWTError, TypeError, ValueError):
        return None


# --- Current User ---
def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> Optional[AuthUser]:
    """Resolves the caller from the Authorization header, or None."""
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    token_data = decode_access_token(token, context.settings)
    if token_data is None:
        return None
    user = db.get(models.User, token_data.user_id)
    if user is None:
        return None
    return AuthUser.model_validate(user)


def get_current_user(current_user: Optional[AuthUser] = Depends(get_optional_user)) -> AuthUser:
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


# --- Role-Checking Dependencies ---
def require_admin(current_user: Optional[AuthUser] = Depends(get_optional_user)) -> AuthUser:
    # absent user, bad token and wrong role all look the same to the caller
    if current_user is None or current_user.role != models.Role.ADMIN:
        raise ForbiddenError(ADMINS_ONLY)
    return current_user


def require_roles(*roles: models.Role):
    allowed = [str(getattr(r, "value", r)).upper() for r in roles]

    def dependency(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not has_role({"role": current_user.role.value.upper()}, allowed):
            raise ForbiddenError(INSUFFICIENT_ROLE)
        return current_user

    return dependency
