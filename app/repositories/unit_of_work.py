"""
Unit of Work over a single SQLAlchemy session.

Repositories are created lazily and memoised, so every repository handed out
by one UnitOfWork shares the same session and identity map. save_changes() is
the single point where staged changes reach the database.

Usage:
    >>> with UnitOfWork(SessionLocal()) as uow:
    ...     plan = uow.subscription_plans.get_by_id(1)
    ...     plan.is_active = False
    ...     uow.save_changes()

Explicit transactions:
    >>> uow.begin_transaction()
    >>> try:
    ...     uow.class_bookings.add(booking)
    ...     uow.save_changes()          # flushes only
    ...     uow.commit_transaction()
    ... except Exception:
    ...     uow.rollback_transaction()
    ...     raise
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from app.core.database import SessionLocal
from app.repositories.class_booking_repository import ClassBookingRepository
from app.repositories.fitness_class_repository import FitnessClassRepository
from app.repositories.payment_transaction_repository import PaymentTransactionRepository
from app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from app.repositories.user_repository import UserRepository
from app.repositories.user_subscription_repository import UserSubscriptionRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session: Session):
        self.session = session
        self._transaction: Optional[SessionTransaction] = None
        self._users: Optional[UserRepository] = None
        self._subscription_plans: Optional[SubscriptionPlanRepository] = None
        self._user_subscriptions: Optional[UserSubscriptionRepository] = None
        self._fitness_classes: Optional[FitnessClassRepository] = None
        self._class_bookings: Optional[ClassBookingRepository] = None
        self._payment_transactions: Optional[PaymentTransactionRepository] = None

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        try:
            if self._transaction is not None:
                logger.warning("UnitOfWork closed with an open transaction, rolling back")
                self.rollback_transaction()
        finally:
            self.session.close()
        return False

    # ------------------------------------------------------------------ #
    # Repositories
    # ------------------------------------------------------------------ #

    @property
    def users(self) -> UserRepository:
        if self._users is None:
            self._users = UserRepository(self.session)
        return self._users

    @property
    def subscription_plans(self) -> SubscriptionPlanRepository:
        if self._subscription_plans is None:
            self._subscription_plans = SubscriptionPlanRepository(self.session)
        return self._subscription_plans

    @property
    def user_subscriptions(self) -> UserSubscriptionRepository:
        if self._user_subscriptions is None:
            self._user_subscriptions = UserSubscriptionRepository(self.session)
        return self._user_subscriptions

    @property
    def fitness_classes(self) -> FitnessClassRepository:
        if self._fitness_classes is None:
            self._fitness_classes = FitnessClassRepository(self.session)
        return self._fitness_classes

    @property
    def class_bookings(self) -> ClassBookingRepository:
        if self._class_bookings is None:
            self._class_bookings = ClassBookingRepository(self.session)
        return self._class_bookings

    @property
    def payment_transactions(self) -> PaymentTransactionRepository:
        if self._payment_transactions is None:
            self._payment_transactions = PaymentTransactionRepository(self.session)
        return self._payment_transactions

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def save_changes(self) -> int:
        """Write staged changes and return how many rows were affected.

        Commits immediately unless an explicit transaction is open, in which
        case the changes are only flushed and commit_transaction() finishes
        the job.
        """
        changed = (
            len(self.session.new)
            + len(self.session.deleted)
            + sum(1 for obj in self.session.dirty if self.session.is_modified(obj))
        )
        try:
            if self._transaction is not None:
                self.session.flush()
            else:
                self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"save_changes: Failure - {e}")
            if self._transaction is None:
                self.session.rollback()
            raise
        logger.debug(f"save_changes: Success - {changed} rows")
        return changed

    def flush(self) -> None:
        self.session.flush()

    def savepoint(self) -> SessionTransaction:
        """Nested transaction for work that may fail without losing the outer one"""
        return self.session.begin_nested()

    def begin_transaction(self) -> None:
        if self._transaction is not None:
            logger.warning("begin_transaction: transaction already open")
            return
        # The session autobegins on first use; fall back to a savepoint then
        if self.session.in_transaction():
            self._transaction = self.session.begin_nested()
        else:
            self._transaction = self.session.begin()
        logger.debug("begin_transaction: Success")

    def commit_transaction(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        try:
            transaction.commit()
            if transaction.nested:
                self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"commit_transaction: Failure - {e}")
            self.session.rollback()
            raise
        logger.debug("commit_transaction: Success")

    def rollback_transaction(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        transaction.rollback()
        logger.debug("rollback_transaction: Success")

    @property
    def has_active_transaction(self) -> bool:
        return self._transaction is not None


def get_unit_of_work():
    """FastAPI dependency yielding a request-scoped UnitOfWork"""
    with UnitOfWork(SessionLocal()) as uow:
        yield uow
