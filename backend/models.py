"""
Domain Models
Records exchanged by the exporters and importers, plus the per-call option and
outcome types.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Transaction kind. The sign of an amount is implied by its kind."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def resolve(cls, text: Optional[str]) -> "TransactionType":
        """Substring match against INCOME, anything else is an expense."""
        if text and "INCOME" in str(text).upper():
            return cls.INCOME
        return cls.EXPENSE


class Priority(str, Enum):
    """Goal priority."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def resolve(cls, text: Optional[str]) -> "Priority":
        if text:
            wanted = str(text).strip().lower()
            for priority in cls:
                if priority.value.lower() == wanted:
                    return priority
        return cls.MEDIUM


@dataclass
class Transaction:
    description: str
    amount: Decimal
    category: str = "Other"
    date: datetime = field(default_factory=datetime.now)
    type: TransactionType = TransactionType.EXPENSE
    payment_method: Optional[str] = None
    currency: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        # Stored unsigned; the kind carries the direction
        self.amount = abs(Decimal(self.amount))

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.INCOME else -self.amount


@dataclass
class Budget:
    category: str
    amount: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    id: Optional[int] = None


@dataclass
class Goal:
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0")
    category: str = "Savings"
    deadline: Optional[date] = None
    priority: Priority = Priority.MEDIUM
    created_at: date = field(default_factory=date.today)
    id: Optional[int] = None

    @property
    def progress(self) -> float:
        """Completion ratio, capped at 1.0."""
        if self.target_amount <= 0:
            return 0.0
        return min(float(self.current_amount / self.target_amount), 1.0)


@dataclass
class UserIdentity:
    """Authenticated owner of the records, supplied by the caller."""
    username: str
    email: Optional[str] = None


SECTION_NAMES = ("transactions", "budgets", "goals")


def _flag(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"Option '{name}' must be true or false, got {value!r}")


@dataclass
class SectionOptions:
    """Which record sections an export or import covers."""
    transactions: bool = True
    budgets: bool = True
    goals: bool = True

    @classmethod
    def parse(cls, value: Optional[str]) -> "SectionOptions":
        """
        Parse the query-string form: "all" or a comma-separated list of names.

        Args:
            value: e.g. "all", "transactions,goals"

        Returns:
            SectionOptions with only the named sections enabled
        """
        if value is None or not value.strip() or value.strip().lower() == "all":
            return cls()
        names = {part.strip().lower() for part in value.split(",") if part.strip()}
        return cls(
            transactions="transactions" in names,
            budgets="budgets" in names,
            goals="goals" in names,
        )

    @classmethod
    def from_mapping(cls, options: Optional[dict]) -> "SectionOptions":
        """
        Build from a {"transactions": bool, ...} mapping; missing keys stay enabled.

        Raises:
            ValueError: If a value is neither a boolean nor "true"/"false"
        """
        if not options:
            return cls()
        return cls(**{name: _flag(name, options.get(name, True)) for name in SECTION_NAMES})

    def enabled_names(self) -> list[str]:
        return [name for name in SECTION_NAMES if getattr(self, name)]

    def any_enabled(self) -> bool:
        return bool(self.enabled_names())


@dataclass
class RecordBatch:
    """Records read from one file (or gathered for one export)."""
    transactions: list[Transaction] = field(default_factory=list)
    budgets: list[Budget] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.transactions) + len(self.budgets) + len(self.goals)


@dataclass
class ImportOutcome:
    """Aggregate result of one import call."""
    success: bool
    message: str
    transactions_imported: int = 0
    budgets_imported: int = 0
    goals_imported: int = 0
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> "ImportOutcome":
        return cls(success=False, message=message)

    @property
    def total_imported(self) -> int:
        return self.transactions_imported + self.budgets_imported + self.goals_imported

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "transactionsImported": self.transactions_imported,
            "budgetsImported": self.budgets_imported,
            "goalsImported": self.goals_imported,
            "warnings": list(self.warnings),
        }
