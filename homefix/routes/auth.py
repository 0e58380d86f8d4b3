# homefix/routes/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from typing import Annotated

from ..database import Backend, get_db
from ..models.auth import ProfileOut, Token
from ..utils.auth import authenticate_user, create_access_token, get_current_user

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

@auth_router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Backend = Depends(get_db)
):
    user = await authenticate_user(form_data.username, form_data.password, db)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role
    }

@auth_router.get("/me", response_model=ProfileOut)
async def read_current_user(current_user: ProfileOut = Depends(get_current_user)):
    return current_user

__all__ = ["auth_router"]
