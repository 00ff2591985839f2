"""
Pytest configuration for testing
"""

import os
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set up environment variables for testing before any imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FIREBASE_PROJECT_ID"] = "test-project"
os.environ.pop("FIREBASE_CREDENTIALS_PATH", None)
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["DEBUG"] = "false"

from stripe_payloads import WEBHOOK_SECRET


@pytest.fixture
def mock_firebase_auth(monkeypatch):
    """Mock Firebase Admin auth to avoid network calls in tests"""
    mock_auth = MagicMock()
    monkeypatch.setattr("app.core.firebase.auth", mock_auth)
    yield mock_auth


@pytest.fixture(scope="function")
def db_engine():
    """Fresh in-memory database per test"""
    # Import after env vars are set
    from app.core.database import Base, configure_sqlite
    import app.models  # noqa: F401

    engine = configure_sqlite(create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test"""
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def uow(db_session):
    from app.repositories.unit_of_work import UnitOfWork
    return UnitOfWork(db_session)


@pytest.fixture
def seeded_roles(uow):
    from app.db.seed import seed_roles
    seed_roles(uow)
    return uow


@pytest.fixture
def make_user(db_session):
    from app.models.user import Role, User

    def _make_user(user_id=None, email=None, stripe_customer_id=None, roles=()):
        user_id = user_id or f"uid-{uuid.uuid4().hex[:12]}"
        user = User(
            id=user_id,
            email=email or f"{user_id}@example.com",
            first_name="Test",
            last_name="User",
            stripe_customer_id=stripe_customer_id,
            is_active=True,
        )
        for name in roles:
            role = db_session.query(Role).filter(Role.name == name).first()
            if role is None:
                role = Role(id=str(uuid.uuid4()), name=name)
                db_session.add(role)
            user.roles.append(role)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_plan(db_session):
    from app.models.subscription_plan import SubscriptionPlan

    def _make_plan(name="Premium", price="999", max_bookings=0, live=True, recorded=True,
                   stripe_price_id=None, is_active=True, stripe_product_id=None):
        plan = SubscriptionPlan(
            name=name,
            description=f"{name} plan",
            price=Decimal(price),
            duration_in_days=30,
            max_class_bookings_per_month=max_bookings,
            includes_live_classes=live,
            includes_recorded_classes=recorded,
            is_active=is_active,
            stripe_price_id=stripe_price_id,
            stripe_product_id=stripe_product_id,
        )
        db_session.add(plan)
        db_session.commit()
        return plan

    return _make_plan


@pytest.fixture
def make_class(db_session):
    from app.models.fitness_class import ClassCategory, ClassType, DifficultyLevel, FitnessClass

    def _make_class(title="Morning HIIT", class_type=ClassType.LIVE, max_participants=20,
                    scheduled_at=None, video_url=None, minimum_plan=None, description=None,
                    category=ClassCategory.HIIT, instructor=None, created_at=None):
        if scheduled_at is None and class_type == ClassType.LIVE:
            scheduled_at = datetime.utcnow() + timedelta(days=1)
        fitness_class = FitnessClass(
            title=title,
            description=description or f"{title} session",
            class_type=class_type,
            category=category,
            difficulty=DifficultyLevel.ALL_LEVELS,
            duration_minutes=45,
            max_participants=max_participants,
            scheduled_at=scheduled_at,
            is_live=class_type == ClassType.LIVE,
            video_url=video_url,
            minimum_plan_id=minimum_plan.id if minimum_plan else None,
            instructor_id=instructor.id if instructor else None,
        )
        if created_at is not None:
            fitness_class.created_at = created_at
        db_session.add(fitness_class)
        db_session.commit()
        return fitness_class

    return _make_class


@pytest.fixture
def make_subscription(db_session):
    from app.models.user_subscription import SubscriptionStatus, UserSubscription

    def _make_subscription(user, plan, status=SubscriptionStatus.ACTIVE, end_date=None,
                           stripe_subscription_id=None):
        now = datetime.utcnow()
        subscription = UserSubscription(
            user_id=user.id,
            plan_id=plan.id,
            stripe_subscription_id=stripe_subscription_id,
            start_date=now - timedelta(days=1),
            end_date=end_date or now + timedelta(days=29),
            status=status,
        )
        db_session.add(subscription)
        db_session.commit()
        return subscription

    return _make_subscription


@pytest.fixture
def stripe_client():
    """Mock of stripe.StripeClient; no network calls are made"""
    return MagicMock()


@pytest.fixture
def payment_service(uow, stripe_client):
    from app.services.payment_service import StripePaymentService
    return StripePaymentService(uow, stripe_client, webhook_secret=WEBHOOK_SECRET, webhook_tolerance=300)

