"""
Tests for first sign-in provisioning
"""

from unittest.mock import patch

import pytest

from app.core.exceptions import EmailInUseError
from app.models.user import User
from app.services.user_service import UserService


def insert_user_elsewhere(session_factory, user_id, email):
    """Commit a user through a separate session, as a concurrent request would"""
    session = session_factory()
    try:
        session.add(User(id=user_id, email=email, first_name="Other", last_name="Request", is_active=True))
        session.commit()
    finally:
        session.close()


class TestGetOrProvision:
    """UserService.get_or_provision"""

    def test_existing_user_returned(self, uow, make_user):
        user = make_user(user_id="uid-known")

        assert UserService(uow).get_or_provision({"uid": "uid-known"}).id == user.id
        assert uow.users.count() == 1

    def test_first_sign_in_creates_member(self, uow, seeded_roles):
        user = UserService(uow).get_or_provision(
            {"uid": "uid-new", "email": "grace@example.com", "name": "Grace Hopper"})

        assert user.first_name == "Grace"
        assert user.last_name == "Hopper"
        assert user.role_names == {"User"}

    def test_missing_email_gets_placeholder(self, uow):
        user = UserService(uow).get_or_provision({"uid": "uid-phone"})

        assert user.email == "uid-phone@users.invalid"
        assert user.first_name == "Member"

    def test_concurrent_first_sign_in_returns_winner(self, uow, session_factory):
        insert_user_elsewhere(session_factory, "uid-racer", "racer@example.com")
        real_get_by_id = uow.users.get_by_id
        lookups = []

        def miss_first_lookup(user_id):
            lookups.append(user_id)
            return None if len(lookups) == 1 else real_get_by_id(user_id)

        with patch.object(uow.users, "get_by_id", side_effect=miss_first_lookup):
            user = UserService(uow).get_or_provision({"uid": "uid-racer", "email": "racer@example.com"})

        assert user.id == "uid-racer"
        assert user.first_name == "Other"
        assert uow.users.count() == 1

    def test_email_owned_by_another_uid(self, uow, make_user):
        make_user(user_id="uid-original", email="shared@example.com")

        with pytest.raises(EmailInUseError):
            UserService(uow).get_or_provision({"uid": "uid-second", "email": "shared@example.com"})

        assert uow.users.get_by_id("uid-second") is None
        assert uow.users.count() == 1
