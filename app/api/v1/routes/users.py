import logging

from fastapi import APIRouter, Depends

from app.core.middleware import require_authenticated_user
from app.models.user import User
from app.schemas.api import UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(require_authenticated_user)):
    """Get the caller's profile; the account is created on first sign-in"""
    logger.info(f"get_me: Entry - user: {user.id}")
    return user
