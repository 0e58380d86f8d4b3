#homefix/utils/auth
from datetime import timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Optional
from uuid import UUID

from ..database import Backend, get_db
from ..config import get_settings
from ..models.auth import ProfileOut, Role
from ..queries.profile_queries import get_credentials, get_profile_by_id
from .models import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.service_role_key, algorithm=settings.algorithm)

async def authenticate_user(email: str, password: str, db: Backend) -> Optional[ProfileOut]:
    row = await get_credentials(db, email)
    if row and verify_password(password, row["password_hash"]):
        return ProfileOut.model_validate(row)
    return None

def credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

async def resolve_token(token: str, db: Backend) -> ProfileOut:
    """Look up the profile a session token was issued to"""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.service_role_key,
            algorithms=[settings.algorithm]
        )
        user_id = UUID(payload.get("sub") or "")
    except (JWTError, ValueError):
        raise credentials_exception()

    profile = await get_profile_by_id(db, user_id)
    if profile is None:
        raise credentials_exception()
    return profile

async def get_current_user(token: str = Depends(oauth2_scheme), db: Backend = Depends(get_db)) -> ProfileOut:
    """Get the current authenticated user from JWT token"""
    return await resolve_token(token, db)

def require_role(*roles: Role):
    async def checker(current_user: ProfileOut = Depends(get_current_user)) -> ProfileOut:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {' or '.join(r.value for r in roles)} users can access this endpoint"
            )
        return current_user
    return checker

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "resolve_token",
    "get_current_user",
    "require_role"
]
