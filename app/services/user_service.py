import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.core.exceptions import EmailInUseError
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "User"


def _split_display_name(name: Optional[str], email: Optional[str]):
    if name and name.strip():
        parts = name.strip().split(" ", 1)
        return parts[0], parts[1] if len(parts) > 1 else ""
    local_part = (email or "").split("@", 1)[0]
    return local_part or "Member", ""


class UserService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.logger = logging.getLogger(__name__)

    def get_or_provision(self, claims: dict) -> User:
        """Return the local user for verified token claims, creating it on first sign-in"""
        user_id = claims['uid']
        user = self.uow.users.get_by_id(user_id)
        if user is not None:
            return user

        self.logger.info(f"get_or_provision: Entry - creating user: {user_id}")
        first_name, last_name = _split_display_name(claims.get('name'), claims.get('email'))
        user = User(
            id=user_id,
            email=claims.get('email') or f"{user_id}@users.invalid",
            first_name=first_name,
            last_name=last_name,
            profile_picture_url=claims.get('picture'),
            is_active=True,
        )
        role = self.uow.users.get_role(DEFAULT_ROLE)
        if role is not None:
            user.roles.append(role)
        self.uow.users.add(user)
        try:
            self.uow.save_changes()
        except IntegrityError:
            # A concurrent first request won the insert, or the email belongs to another UID
            self.uow.session.rollback()
            existing = self.uow.users.get_by_id(user_id)
            if existing is not None:
                self.logger.info(f"get_or_provision: Success - user: {user_id} provisioned concurrently")
                return existing
            self.logger.warning(f"get_or_provision: Failure - email already registered - user: {user_id}")
            raise EmailInUseError("This email is already registered to another account")

        self.logger.info(f"get_or_provision: Success - user: {user_id}")
        return user
