from typing import Optional

from app.models.user import Role, User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.first(User.email == email)

    def get_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[User]:
        if not stripe_customer_id:
            return None
        return self.first(User.stripe_customer_id == stripe_customer_id)

    def get_role(self, name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.name == name).first()
