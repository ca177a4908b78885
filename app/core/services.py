"""
Base service layer patterns for business logic encapsulation.

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.
    Services report failures by raising core.exceptions subclasses; the
    API layer renders them through core.exception_handler.

Store handle:
    Each service instance is bound to one database alias (``using``).
    Nothing in the service layer reaches for a process-wide connection,
    so tests and callers can point a service at any configured database.

Usage:
    from core.services import BaseService

    class DepositService(BaseService):
        def deposit(self, caller, account_id, amount):
            with self.atomic():
                ...
            self.get_logger().info("Deposit applied", extra={...})

    service = DepositService(using="default")
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import DEFAULT_DB_ALIAS, transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management bound to the service's store

    Attributes:
        using: Database alias every query and transaction is issued against
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Returns:
            Logger instance for this service
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @contextmanager
    def atomic(self) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction on the service's database. If any
        operation raises, all changes are rolled back before the
        exception leaves the block.

        Example:
            with self.atomic():
                Job.objects.using(self.using).filter(...).update(paid=True)
                Contract.objects.using(self.using).filter(...).update(...)
                # If the contract update fails, the job update is rolled back
        """
        with transaction.atomic(using=self.using):
            yield

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(using={self.using!r})"
