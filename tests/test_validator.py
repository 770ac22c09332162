from datetime import date, datetime
from decimal import Decimal

import pytest

from models import Budget, Goal, Transaction
from validators.record_validator import RecordValidator, ValidationError


@pytest.fixture
def validator():
    return RecordValidator()


class TestTransactions:

    def test_valid(self, validator):
        assert validator.validate_transaction(Transaction("Coffee", Decimal("4.50"), date=datetime(2024, 1, 5)))
        assert validator.last_error is None

    def test_empty_description(self, validator):
        assert not validator.validate_transaction(Transaction("  ", Decimal("4.50")))
        assert validator.last_error == "Invalid description: empty"

    def test_zero_amount(self, validator):
        assert not validator.validate_transaction(Transaction("Coffee", Decimal("0")))
        assert RecordValidator(allow_zero_amounts=True).validate_transaction(Transaction("Coffee", Decimal("0")))

    def test_missing_date(self, validator):
        transaction = Transaction("Coffee", Decimal("4.50"))
        transaction.date = None
        assert not validator.validate_transaction(transaction)


class TestBudgets:

    def test_valid(self, validator):
        assert validator.validate_budget(Budget("Food", Decimal("500"), date(2024, 3, 1), date(2024, 3, 31)))

    @pytest.mark.parametrize("budget", [
        Budget("", Decimal("500")),
        Budget("Food", Decimal("0")),
        Budget("Food", Decimal("-5")),
        Budget("Food", Decimal("500"), date(2024, 3, 31), date(2024, 3, 1)),
    ])
    def test_invalid(self, validator, budget):
        assert not validator.validate_budget(budget)


class TestGoals:

    def test_valid(self, validator):
        assert validator.validate_goal(Goal("Bike", Decimal("800"), Decimal("100")))

    @pytest.mark.parametrize("goal", [
        Goal("", Decimal("800")),
        Goal("Bike", Decimal("0")),
        Goal("Bike", Decimal("800"), Decimal("-1")),
    ])
    def test_invalid(self, validator, goal):
        assert not validator.validate_goal(goal)


def test_strict_mode_raises():
    validator = RecordValidator(strict_mode=True)
    with pytest.raises(ValidationError, match="Invalid target amount"):
        validator.validate_goal(Goal("Bike", Decimal("0")))


def test_stats(validator):
    validator.validate_transaction(Transaction("Coffee", Decimal("4.50")))
    validator.validate_budget(Budget("Food", Decimal("0")))
    validator.validate_goal(Goal("", Decimal("10")))

    stats = validator.get_stats()
    assert stats["total_validated"] == 3
    assert stats["valid"] == 1
    assert stats["invalid_budgets"] == 1
    assert stats["invalid_goals"] == 1

    validator.reset_stats()
    assert validator.get_stats()["total_validated"] == 0
