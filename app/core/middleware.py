from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.firebase import verify_firebase_token
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork, get_unit_of_work
from app.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

ADMIN = "Admin"
INSTRUCTOR = "Instructor"


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """
    Dependency to get current authenticated user from Firebase token.
    Protects routes that require authentication.
    """
    logger.info("get_current_user: Entry")

    try:
        token = credentials.credentials
        decoded_token = verify_firebase_token(token)
        user_id = decoded_token.get('uid')

        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials"
            )

        logger.info(f"get_current_user: Success - {user_id}")
        return {
            'uid': user_id,
            'email': decoded_token.get('email'),
            'token': decoded_token
        }
    except Exception as e:
        logger.error(f"get_current_user: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_authenticated_user(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> User:
    """Resolve the token's subject to a local user row"""
    claims = dict(current_user['token'], uid=current_user['uid'], email=current_user['email'])
    user = UserService(uow).get_or_provision(claims)
    if not user.is_active:
        logger.warning(f"require_authenticated_user: No active account - {current_user['uid']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No active account for this user"
        )
    return user


def require_roles(*role_names: str):
    """Build a dependency that admits users holding any of role_names"""
    allowed = set(role_names)

    def dependency(user: User = Depends(require_authenticated_user)) -> User:
        if not allowed & user.role_names:
            logger.warning(f"require_roles: Forbidden - user: {user.id}, needs one of {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return user

    return dependency


require_instructor = require_roles(INSTRUCTOR, ADMIN)
require_admin = require_roles(ADMIN)
