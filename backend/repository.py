"""
Record Repository
Persistence collaborator for the interchange service. Records are always
scoped to the owning user.
"""

import itertools
import logging
from dataclasses import replace
from typing import Optional

from models import Budget, Goal, Transaction, UserIdentity

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when a record cannot be stored."""
    pass


class RecordRepository:
    """Interface the service reads from and writes to."""

    def find_transactions(self, user: UserIdentity) -> list[Transaction]:
        raise NotImplementedError

    def find_budgets(self, user: UserIdentity) -> list[Budget]:
        raise NotImplementedError

    def find_goals(self, user: UserIdentity) -> list[Goal]:
        raise NotImplementedError

    def save_transaction(self, user: UserIdentity, transaction: Transaction) -> Transaction:
        raise NotImplementedError

    def save_budget(self, user: UserIdentity, budget: Budget) -> Budget:
        raise NotImplementedError

    def save_goal(self, user: UserIdentity, goal: Goal) -> Goal:
        raise NotImplementedError


class InMemoryRepository(RecordRepository):
    """
    Dictionary-backed repository.

    Each save is its own unit of work: a stored record stays stored regardless
    of what happens to later saves. Saved records get a fresh id.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._store: dict[str, dict[str, list]] = {}

    def _bucket(self, user: UserIdentity, kind: str) -> list:
        if not user or not user.username:
            raise RepositoryError("A user is required to access records")
        per_user = self._store.setdefault(user.username, {"transactions": [], "budgets": [], "goals": []})
        return per_user[kind]

    def _save(self, user: UserIdentity, kind: str, record):
        stored = replace(record, id=next(self._ids))
        self._bucket(user, kind).append(stored)
        logger.debug(f"Saved {kind[:-1]} #{stored.id} for {user.username}")
        return stored

    def find_transactions(self, user: UserIdentity) -> list[Transaction]:
        return list(self._bucket(user, "transactions"))

    def find_budgets(self, user: UserIdentity) -> list[Budget]:
        return list(self._bucket(user, "budgets"))

    def find_goals(self, user: UserIdentity) -> list[Goal]:
        return list(self._bucket(user, "goals"))

    def save_transaction(self, user: UserIdentity, transaction: Transaction) -> Transaction:
        return self._save(user, "transactions", transaction)

    def save_budget(self, user: UserIdentity, budget: Budget) -> Budget:
        return self._save(user, "budgets", budget)

    def save_goal(self, user: UserIdentity, goal: Goal) -> Goal:
        return self._save(user, "goals", goal)

    def count(self, user: Optional[UserIdentity] = None) -> int:
        """Number of stored records, for one user or overall."""
        users = [user.username] if user else list(self._store)
        return sum(
            len(records)
            for name in users
            for records in self._store.get(name, {}).values()
        )
