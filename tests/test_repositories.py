"""
Tests for the repository layer against an in-memory database
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.class_booking import BookingStatus, ClassBooking
from app.models.fitness_class import ClassCategory, ClassType
from app.models.payment_transaction import PaymentTransaction
from app.models.user_subscription import SubscriptionStatus


class TestSubscriptionPlanRepository:
    """Test plan queries"""

    def test_active_plans_cheapest_first(self, uow, make_plan):
        make_plan(name="Pro", price="1499")
        make_plan(name="Basic", price="499")
        make_plan(name="Premium", price="999")
        make_plan(name="Legacy", price="199", is_active=False)

        plans = uow.subscription_plans.get_active_plans()

        assert [p.name for p in plans] == ["Basic", "Premium", "Pro"]

    def test_get_by_stripe_price_id(self, uow, make_plan):
        plan = make_plan(stripe_price_id="price_abc")

        assert uow.subscription_plans.get_by_stripe_price_id("price_abc").id == plan.id
        assert uow.subscription_plans.get_by_stripe_price_id("price_missing") is None


class TestUserSubscriptionRepository:
    """Test subscription lookups"""

    def test_active_subscription_picks_latest_end_date(self, uow, make_user, make_plan, make_subscription):
        user = make_user()
        plan = make_plan()
        now = datetime.utcnow()
        make_subscription(user, plan, end_date=now + timedelta(days=5))
        later = make_subscription(user, plan, end_date=now + timedelta(days=40))

        active = uow.user_subscriptions.get_active_subscription_by_user_id(user.id)

        assert active.id == later.id

    def test_expired_or_cancelled_subscriptions_are_not_active(self, uow, make_user, make_plan, make_subscription):
        user = make_user()
        plan = make_plan()
        make_subscription(user, plan, end_date=datetime.utcnow() - timedelta(days=1))
        make_subscription(user, plan, status=SubscriptionStatus.CANCELLED)

        assert uow.user_subscriptions.get_active_subscription_by_user_id(user.id) is None
        assert uow.user_subscriptions.has_active_subscription(user.id) is False
        assert len(uow.user_subscriptions.get_subscriptions_by_user_id(user.id)) == 2

    def test_stripe_subscription_id_is_unique(self, db_session, make_user, make_plan, make_subscription):
        user = make_user()
        plan = make_plan()
        make_subscription(user, plan, stripe_subscription_id="sub_dup")

        with pytest.raises(IntegrityError):
            make_subscription(user, plan, stripe_subscription_id="sub_dup")

    def test_lookup_by_empty_stripe_id_returns_none(self, uow):
        assert uow.user_subscriptions.get_by_stripe_subscription_id("") is None
        assert uow.user_subscriptions.get_by_stripe_subscription_id(None) is None


class TestUserRepository:
    """Test user lookups"""

    def test_get_by_email_and_customer(self, uow, make_user):
        user = make_user(email="jane@example.com", stripe_customer_id="cus_jane")

        assert uow.users.get_by_email("jane@example.com").id == user.id
        assert uow.users.get_by_stripe_customer_id("cus_jane").id == user.id
        assert uow.users.get_by_stripe_customer_id("") is None

    def test_role_names(self, uow, make_user):
        user = make_user(roles=("Instructor",))

        assert uow.users.get_by_id(user.id).role_names == {"Instructor"}


class TestClassBookingRepository:
    """Test booking queries and constraints"""

    def test_booking_pair_is_unique(self, db_session, make_user, make_class):
        user = make_user()
        fitness_class = make_class()
        db_session.add(ClassBooking(user_id=user.id, class_id=fitness_class.id))
        db_session.commit()

        db_session.add(ClassBooking(user_id=user.id, class_id=fitness_class.id))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_monthly_count_ignores_cancelled_and_other_months(self, uow, db_session, make_user, make_class):
        user = make_user()
        now = datetime.utcnow()
        last_month = now.replace(day=1) - timedelta(days=1)
        classes = [make_class(title=f"Class {i}") for i in range(3)]
        db_session.add_all([
            ClassBooking(user_id=user.id, class_id=classes[0].id, booked_at=now),
            ClassBooking(user_id=user.id, class_id=classes[1].id, booked_at=now,
                         status=BookingStatus.CANCELLED),
            ClassBooking(user_id=user.id, class_id=classes[2].id, booked_at=last_month),
        ])
        db_session.commit()

        assert uow.class_bookings.get_user_booking_count_for_month(user.id, now.month, now.year) == 1
        assert uow.class_bookings.has_booking(user.id, classes[0].id) is True
        assert uow.class_bookings.has_booking(user.id, classes[1].id) is False


class TestFitnessClassRepository:
    """Test class listings"""

    def test_upcoming_live_classes_soonest_first(self, uow, make_class):
        now = datetime.utcnow()
        make_class(title="Later", scheduled_at=now + timedelta(days=3))
        make_class(title="Sooner", scheduled_at=now + timedelta(hours=2))
        make_class(title="Past", scheduled_at=now - timedelta(hours=2))
        make_class(title="Recording", class_type=ClassType.RECORDED, video_url="https://cdn/v.mp4")

        upcoming = uow.fitness_classes.get_upcoming_live_classes(count=10)

        assert [c.title for c in upcoming] == ["Sooner", "Later"]

    def test_recorded_classes_require_video(self, uow, make_class):
        make_class(title="With video", class_type=ClassType.RECORDED, video_url="https://cdn/v.mp4")
        make_class(title="No video", class_type=ClassType.RECORDED)

        recorded = uow.fitness_classes.get_recorded_classes(page=1, page_size=10)

        assert [c.title for c in recorded] == ["With video"]

    def test_search_is_case_insensitive(self, uow, make_class):
        make_class(title="Sunrise Yoga", description="gentle flow")
        make_class(title="Boxing", description="Power YOGA cooldown")
        make_class(title="Spin")

        titles = {c.title for c in uow.fitness_classes.search_classes("yoga")}

        assert titles == {"Sunrise Yoga", "Boxing"}

    def test_booking_count_excludes_cancelled(self, uow, db_session, make_user, make_class):
        fitness_class = make_class()
        first, second = make_user(), make_user()
        db_session.add_all([
            ClassBooking(user_id=first.id, class_id=fitness_class.id),
            ClassBooking(user_id=second.id, class_id=fitness_class.id, status=BookingStatus.CANCELLED),
        ])
        db_session.commit()

        assert uow.fitness_classes.get_booking_count(fitness_class.id) == 1

    def test_upcoming_live_classes_respects_count(self, uow, make_class):
        now = datetime.utcnow()
        make_class(title="Third", scheduled_at=now + timedelta(days=3))
        make_class(title="First", scheduled_at=now + timedelta(days=1))
        make_class(title="Second", scheduled_at=now + timedelta(days=2))

        upcoming = uow.fitness_classes.get_upcoming_live_classes(count=2)

        assert [c.title for c in upcoming] == ["First", "Second"]

    def test_recorded_classes_paginate_newest_first(self, uow, make_class):
        now = datetime.utcnow()
        for title, age in (("Oldest", 3), ("Middle", 2), ("Newest", 1)):
            make_class(title=title, class_type=ClassType.RECORDED, video_url=f"https://cdn/{title}.mp4",
                       created_at=now - timedelta(days=age))

        assert [c.title for c in uow.fitness_classes.get_recorded_classes(page=1, page_size=1)] == ["Newest"]
        assert [c.title for c in uow.fitness_classes.get_recorded_classes(page=2, page_size=1)] == ["Middle"]
        assert [c.title for c in uow.fitness_classes.get_recorded_classes(page=4, page_size=1)] == []

    def test_classes_by_category(self, uow, make_class):
        make_class(title="Flow", category=ClassCategory.YOGA)
        make_class(title="Sprint", category=ClassCategory.HIIT)

        assert [c.title for c in uow.fitness_classes.get_classes_by_category(ClassCategory.YOGA)] == ["Flow"]

    def test_classes_by_instructor_newest_first(self, uow, make_user, make_class):
        coach = make_user(roles=("Instructor",))
        now = datetime.utcnow()
        make_class(title="Earlier", instructor=coach, scheduled_at=now + timedelta(days=1))
        make_class(title="Later", instructor=coach, scheduled_at=now + timedelta(days=5))
        make_class(title="Someone else's")

        classes = uow.fitness_classes.get_classes_by_instructor(coach.id)

        assert [c.title for c in classes] == ["Later", "Earlier"]


class TestClassRoster:
    """Bookings listed per class"""

    def test_roster_in_booking_order(self, uow, db_session, make_user, make_class):
        fitness_class = make_class()
        early, late = make_user(), make_user()
        now = datetime.utcnow()
        db_session.add_all([
            ClassBooking(user_id=late.id, class_id=fitness_class.id, booked_at=now),
            ClassBooking(user_id=early.id, class_id=fitness_class.id, booked_at=now - timedelta(hours=1)),
        ])
        db_session.commit()

        roster = uow.class_bookings.get_bookings_by_class_id(fitness_class.id)

        assert [b.user_id for b in roster] == [early.id, late.id]


class TestPaymentTransactionRepository:
    """Payment lookups"""

    def test_transactions_by_subscription_newest_first(self, uow, db_session, make_user, make_plan,
                                                       make_subscription):
        user = make_user()
        subscription = make_subscription(user, make_plan())
        now = datetime.utcnow()
        db_session.add_all([
            PaymentTransaction(user_id=user.id, subscription_id=subscription.id, amount=Decimal("9.99"),
                               stripe_invoice_id="in_old", created_at=now - timedelta(days=30)),
            PaymentTransaction(user_id=user.id, subscription_id=subscription.id, amount=Decimal("9.99"),
                               stripe_invoice_id="in_new", created_at=now),
            PaymentTransaction(user_id=user.id, amount=Decimal("5.00"), stripe_invoice_id="in_other"),
        ])
        db_session.commit()

        payments = uow.payment_transactions.get_transactions_by_subscription_id(subscription.id)

        assert [p.stripe_invoice_id for p in payments] == ["in_new", "in_old"]
        assert uow.payment_transactions.get_by_stripe_invoice_id("in_other").amount == Decimal("5.00")
