import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.database import get_db
from article_admin.repositories import user as user_repository
from article_admin.schemas import LoginDto, TokenResponse
from article_admin.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginDto, db: AsyncSession = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    user = await user_repository.find_one_by_username(db, data.username)
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Failed login for %r", data.username)
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse(token=create_access_token(user))
