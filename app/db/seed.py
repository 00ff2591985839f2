"""
Boot-time seed data.

Roles are matched by name. Plans and sample classes are only inserted when
their table is completely empty, so edited or deleted demo rows are never
recreated.
"""

import logging
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.fitness_class import (ClassCategory, ClassType, DifficultyLevel,
                                      FitnessClass)
from app.models.subscription_plan import SubscriptionPlan
from app.models.user import Role
from app.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

ROLE_NAMES = ("Admin", "Instructor", "User")


def seed_roles(uow: UnitOfWork) -> int:
    created = 0
    for name in ROLE_NAMES:
        if uow.users.get_role(name) is None:
            uow.session.add(Role(id=str(uuid.uuid4()), name=name))
            created += 1
    if created:
        uow.save_changes()
    logger.info(f"seed_roles: Success - created: {created}")
    return created


def seed_plans(uow: UnitOfWork) -> int:
    if uow.subscription_plans.count() > 0:
        logger.info("seed_plans: Skipped - plans already exist")
        return 0

    plans = [
        SubscriptionPlan(
            name="Basic",
            description="Access to recorded classes and basic features",
            price=Decimal("499"),
            duration_in_days=30,
            max_class_bookings_per_month=10,
            includes_live_classes=False,
            includes_recorded_classes=True,
            is_active=True,
        ),
        SubscriptionPlan(
            name="Premium",
            description="Unlimited access to live and recorded classes",
            price=Decimal("999"),
            duration_in_days=30,
            max_class_bookings_per_month=0,  # unlimited
            includes_live_classes=True,
            includes_recorded_classes=True,
            is_active=True,
        ),
        SubscriptionPlan(
            name="Pro",
            description="Premium features plus personal training sessions",
            price=Decimal("1499"),
            duration_in_days=30,
            max_class_bookings_per_month=0,  # unlimited
            includes_live_classes=True,
            includes_recorded_classes=True,
            is_active=True,
        ),
    ]
    uow.subscription_plans.add_range(plans)
    uow.save_changes()
    logger.info(f"seed_plans: Success - created: {len(plans)}")
    return len(plans)


def _sample_class(title, description, class_type, category, difficulty,
                  duration_minutes, max_participants, scheduled_at, instructor_name):
    return FitnessClass(
        title=title,
        description=description,
        class_type=class_type,
        category=category,
        difficulty=difficulty,
        duration_minutes=duration_minutes,
        max_participants=max_participants,
        scheduled_at=scheduled_at,
        is_live=class_type == ClassType.LIVE,
        instructor_name=instructor_name,
    )


def seed_classes(uow: UnitOfWork) -> int:
    if uow.fitness_classes.count() > 0:
        logger.info("seed_classes: Skipped - classes already exist")
        return 0

    now = datetime.utcnow()
    classes = [
        _sample_class(
            "Morning HIIT Blast",
            "High-intensity interval training to kickstart your day with energy and burn maximum calories.",
            ClassType.LIVE, ClassCategory.HIIT, DifficultyLevel.INTERMEDIATE,
            45, 30, now + timedelta(days=1, hours=7), "Coach Mike",
        ),
        _sample_class(
            "Yoga Flow & Relaxation",
            "A calming yoga session focusing on flexibility, balance, and mindfulness meditation.",
            ClassType.LIVE, ClassCategory.YOGA, DifficultyLevel.ALL_LEVELS,
            60, 25, now + timedelta(days=1, hours=9), "Sarah Chen",
        ),
        _sample_class(
            "Power Strength Training",
            "Build muscle and increase strength with targeted weight training exercises.",
            ClassType.LIVE, ClassCategory.STRENGTH, DifficultyLevel.INTERMEDIATE,
            50, 20, now + timedelta(days=2, hours=18), "Coach Marcus",
        ),
        _sample_class(
            "Cardio Dance Party",
            "Fun dance workout that doesn't feel like exercise! Great music, great moves, great results.",
            ClassType.RECORDED, ClassCategory.DANCE, DifficultyLevel.BEGINNER,
            45, 40, now + timedelta(days=2, hours=12), "Jessica Taylor",
        ),
        _sample_class(
            "Core Pilates Foundations",
            "Strengthen your core and improve posture with fundamental pilates exercises.",
            ClassType.LIVE, ClassCategory.PILATES, DifficultyLevel.BEGINNER,
            40, 20, now + timedelta(days=3, hours=10), "Emma Wilson",
        ),
        _sample_class(
            "Spin Cycle Challenge",
            "High-energy indoor cycling class with hill climbs, sprints, and endurance training.",
            ClassType.LIVE, ClassCategory.CYCLING, DifficultyLevel.ADVANCED,
            45, 25, now + timedelta(days=3, hours=17), "Coach David",
        ),
        _sample_class(
            "Beginner's Full Body Workout",
            "Perfect for fitness newcomers. Learn proper form and build a solid foundation.",
            ClassType.RECORDED, ClassCategory.STRENGTH, DifficultyLevel.BEGINNER,
            35, 15, now + timedelta(days=4, hours=11), "Lisa Johnson",
        ),
        _sample_class(
            "Advanced Boxing Conditioning",
            "Boxing-inspired workout combining cardio, strength, and agility training.",
            ClassType.LIVE, ClassCategory.BOXING, DifficultyLevel.ADVANCED,
            55, 20, now + timedelta(days=5, hours=19), "Coach Tony",
        ),
    ]
    uow.fitness_classes.add_range(classes)
    uow.save_changes()
    logger.info(f"seed_classes: Success - created: {len(classes)}")
    return len(classes)


def seed_all(session: Session, include_demo_data: bool = None) -> None:
    """Seed roles always; plans and sample classes when demo data is enabled"""
    if include_demo_data is None:
        include_demo_data = settings.seed_demo_data

    uow = UnitOfWork(session)
    seed_roles(uow)
    if include_demo_data:
        seed_plans(uow)
        seed_classes(uow)
