"""
Record Validator Module
Checks imported records against the domain invariants before they are stored.
"""

import logging
from typing import Optional

from models import Budget, Goal, Transaction

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class RecordValidator:
    """Validates transactions, budgets and goals."""

    def __init__(
        self,
        strict_mode: bool = False,
        allow_zero_amounts: bool = False
    ):
        """
        Initialize validator with configurable settings.

        Args:
            strict_mode: If True, raise exceptions on invalid data.
                        If False, log warnings and report the record as invalid.
            allow_zero_amounts: If True, allow transactions with 0 amount.
        """
        self.strict_mode = strict_mode
        self.allow_zero_amounts = allow_zero_amounts
        self.last_error: Optional[str] = None
        self.validation_stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict:
        return {
            "total_validated": 0,
            "valid": 0,
            "invalid": 0,
            "invalid_transactions": 0,
            "invalid_budgets": 0,
            "invalid_goals": 0,
        }

    def _finish(self, kind: str, error: Optional[str], record) -> bool:
        self.validation_stats["total_validated"] += 1
        self.last_error = error

        if error is None:
            self.validation_stats["valid"] += 1
            return True

        self.validation_stats["invalid"] += 1
        self.validation_stats[f"invalid_{kind}s"] += 1
        if self.strict_mode:
            raise ValidationError(error)
        logger.warning(f"{error} in {kind}: {record}")
        return False

    def validate_transaction(self, transaction: Transaction) -> bool:
        """
        Validate a single transaction.

        Args:
            transaction: Transaction to validate

        Returns:
            True if valid, False if invalid (reason in ``last_error``)

        Raises:
            ValidationError: If strict_mode is True and validation fails
        """
        error = None
        if not transaction.description or not transaction.description.strip():
            error = "Invalid description: empty"
        elif transaction.amount < 0:
            error = f"Invalid amount: {transaction.amount}"
        elif transaction.amount == 0 and not self.allow_zero_amounts:
            error = "Invalid amount: zero"
        elif transaction.date is None:
            error = "Invalid date: missing"
        return self._finish("transaction", error, transaction)

    def validate_budget(self, budget: Budget) -> bool:
        """Budgets need a category, a positive amount and an ordered period."""
        error = None
        if not budget.category or not budget.category.strip():
            error = "Invalid category: empty"
        elif budget.amount <= 0:
            error = f"Invalid budget amount: {budget.amount}"
        elif budget.start_date and budget.end_date and budget.end_date < budget.start_date:
            error = f"Invalid period: {budget.start_date} to {budget.end_date}"
        return self._finish("budget", error, budget)

    def validate_goal(self, goal: Goal) -> bool:
        """Goals need a name, a positive target and a non-negative balance."""
        error = None
        if not goal.name or not goal.name.strip():
            error = "Invalid goal name: empty"
        elif goal.target_amount <= 0:
            error = f"Invalid target amount: {goal.target_amount}"
        elif goal.current_amount < 0:
            error = f"Invalid current amount: {goal.current_amount}"
        return self._finish("goal", error, goal)

    def get_stats(self) -> dict:
        """Get validation statistics."""
        return self.validation_stats.copy()

    def reset_stats(self):
        """Reset validation statistics."""
        self.validation_stats = self._empty_stats()
