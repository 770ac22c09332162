"""Shared fixtures: a fixed reference day, a user and a seeded repository."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from main import InterchangeService
from models import Budget, Goal, Priority, RecordBatch, Transaction, TransactionType, UserIdentity
from repository import InMemoryRepository


@pytest.fixture
def today() -> date:
    return date(2024, 3, 15)


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2024, 3, 15, 9, 30)


@pytest.fixture
def user() -> UserIdentity:
    return UserIdentity(username="alice", email="alice@example.com")


@pytest.fixture
def sample_records() -> RecordBatch:
    return RecordBatch(
        transactions=[
            Transaction("Salary", Decimal("3000.00"), "Income", datetime(2024, 3, 1, 9, 0),
                        TransactionType.INCOME, "Bank Transfer", "USD"),
            Transaction("Coffee", Decimal("4.50"), "Food", datetime(2024, 3, 5, 8, 0),
                        TransactionType.EXPENSE, "Cash", "USD"),
            Transaction("Groceries", Decimal("120.25"), "Food", datetime(2024, 3, 10, 18, 30),
                        TransactionType.EXPENSE, "Credit Card", "USD"),
            Transaction("Electric bill", Decimal("85.00"), "Utilities", datetime(2024, 2, 20, 12, 0),
                        TransactionType.EXPENSE, None, "USD"),
        ],
        budgets=[
            Budget("Food", Decimal("100.00"), date(2024, 3, 1), date(2024, 3, 31)),
            Budget("Utilities", Decimal("80.00"), date(2024, 3, 1), date(2024, 3, 31)),
        ],
        goals=[
            Goal("Emergency Fund", Decimal("10000.00"), Decimal("5000.00"), "Savings",
                 date(2024, 12, 31), Priority.HIGH, date(2024, 1, 1)),
            Goal("New Laptop", Decimal("1500.00"), Decimal("300.00"), "Electronics",
                 None, Priority.LOW, date(2024, 2, 1)),
        ],
    )


@pytest.fixture
def repository(user, sample_records) -> InMemoryRepository:
    repo = InMemoryRepository()
    for t in sample_records.transactions:
        repo.save_transaction(user, t)
    for b in sample_records.budgets:
        repo.save_budget(user, b)
    for g in sample_records.goals:
        repo.save_goal(user, g)
    return repo


@pytest.fixture
def service(repository) -> InterchangeService:
    return InterchangeService(repository)


@pytest.fixture
def restore_service() -> InterchangeService:
    """Service over an empty repository, used as the import side of round trips."""
    return InterchangeService(InMemoryRepository())
