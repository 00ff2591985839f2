"""
Tests for the admin CLI
"""

import pytest
from click.testing import CliRunner

from app.cli.admin import cli
from app.models.fitness_class import FitnessClass
from app.models.subscription_plan import SubscriptionPlan
from app.models.user import Role, User


@pytest.fixture
def runner(monkeypatch, db_engine, session_factory):
    monkeypatch.setattr("app.cli.admin.SessionLocal", session_factory)
    monkeypatch.setattr("app.cli.admin.engine", db_engine)
    return CliRunner()


def fresh_user(session_factory, user_id):
    session = session_factory()
    try:
        user = session.get(User, user_id)
        return user.role_names
    finally:
        session.close()


class TestSeedCommand:
    """seed creates roles and, optionally, demo data"""

    def test_seed_with_demo_data(self, runner, session_factory):
        result = runner.invoke(cli, ["seed", "--demo"])

        assert result.exit_code == 0
        session = session_factory()
        try:
            assert {r.name for r in session.query(Role).all()} == {"Admin", "Instructor", "User"}
            assert session.query(SubscriptionPlan).count() == 3
            assert session.query(FitnessClass).count() == 8
        finally:
            session.close()

    def test_seed_is_idempotent(self, runner, session_factory):
        runner.invoke(cli, ["seed", "--demo"])
        result = runner.invoke(cli, ["seed", "--demo"])

        assert result.exit_code == 0
        session = session_factory()
        try:
            assert session.query(Role).count() == 3
            assert session.query(SubscriptionPlan).count() == 3
        finally:
            session.close()

    def test_seed_without_demo_data(self, runner, session_factory):
        result = runner.invoke(cli, ["seed", "--no-demo"])

        assert result.exit_code == 0
        session = session_factory()
        try:
            assert session.query(Role).count() == 3
            assert session.query(SubscriptionPlan).count() == 0
        finally:
            session.close()


class TestRoleCommand:
    """role grants, revokes and lists roles"""

    def test_grant_and_revoke(self, runner, session_factory, make_user, seeded_roles):
        make_user(user_id="uid-coach", email="coach@example.com")

        granted = runner.invoke(cli, ["role", "--email", "coach@example.com", "--grant", "Instructor"])
        assert granted.exit_code == 0
        assert fresh_user(session_factory, "uid-coach") == {"Instructor"}

        revoked = runner.invoke(cli, ["role", "--id", "uid-coach", "--revoke", "Instructor"])
        assert revoked.exit_code == 0
        assert fresh_user(session_factory, "uid-coach") == set()

    def test_list_role_holders(self, runner, make_user, seeded_roles):
        make_user(user_id="uid-admin", email="boss@example.com", roles=("Admin",))

        result = runner.invoke(cli, ["role", "--list", "Admin"])

        assert result.exit_code == 0
        assert "boss@example.com" in result.output

    def test_unknown_user(self, runner, seeded_roles):
        result = runner.invoke(cli, ["role", "--email", "ghost@example.com", "--grant", "Admin"])

        assert result.exit_code == 1
        assert "User not found" in result.output

    def test_requires_target(self, runner):
        result = runner.invoke(cli, ["role", "--grant", "Admin"])

        assert result.exit_code == 1
