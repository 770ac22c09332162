"""
Field Mapping Module
Builds records from loosely-typed field mappings (JSON objects, CSV rows).
Every field is read independently: a missing or malformed value falls back to
that field's default instead of failing the record.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from config import config
from extractors.primitives import month_bounds, parse_flexible_date
from models import Budget, Goal, Priority, Transaction, TransactionType

logger = logging.getLogger(__name__)


def normalize_keys(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Lower-case field names so "paymentMethod" and "paymentmethod" agree."""
    return {str(key).strip().lower(): value for key, value in fields.items() if key is not None}


def _text(fields: Mapping[str, Any], name: str, default: Optional[str] = None) -> Optional[str]:
    value = fields.get(name)
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


def _decimal(fields: Mapping[str, Any], name: str, default: Decimal = Decimal("0")) -> Decimal:
    value = fields.get(name)
    if value is None or value == "":
        return default
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.warning(f"Field '{name}' is not a number ({value!r}), using {default}")
        return default
    return amount if amount.is_finite() else default


def _datetime(fields: Mapping[str, Any], name: str) -> Optional[datetime]:
    value = _text(fields, name)
    if value is None:
        return None
    parsed, ok = parse_flexible_date(value)
    if not ok:
        logger.warning(f"Field '{name}' is not a date ({value!r}), using default")
    return parsed


def _date(fields: Mapping[str, Any], name: str) -> Optional[date]:
    parsed = _datetime(fields, name)
    return parsed.date() if parsed else None


def transaction_from_fields(fields: Mapping[str, Any], today: Optional[date] = None) -> Transaction:
    """
    Build a transaction from lower-cased field names.

    Args:
        fields: Mapping with id/description/amount/category/date/type/paymentmethod/currency
        today: Unused for transactions; missing dates default to now

    Returns:
        Transaction (amount made absolute)
    """
    return Transaction(
        description=_text(fields, "description", "Imported transaction"),
        amount=abs(_decimal(fields, "amount")),
        category=_text(fields, "category", config.DEFAULT_CATEGORY),
        date=_datetime(fields, "date") or datetime.now(),
        type=TransactionType.resolve(_text(fields, "type")),
        payment_method=_text(fields, "paymentmethod"),
        currency=_text(fields, "currency", config.DEFAULT_CURRENCY),
    )


def budget_from_fields(fields: Mapping[str, Any], today: Optional[date] = None) -> Budget:
    """Build a budget; a missing period defaults to the current month."""
    first, last = month_bounds(today or date.today())
    return Budget(
        category=_text(fields, "category", config.DEFAULT_CATEGORY),
        amount=_decimal(fields, "amount"),
        start_date=_date(fields, "startdate") or first,
        end_date=_date(fields, "enddate") or last,
    )


def goal_from_fields(fields: Mapping[str, Any], today: Optional[date] = None) -> Goal:
    """Build a savings goal from lower-cased field names."""
    return Goal(
        name=_text(fields, "goalname", "Imported goal"),
        target_amount=_decimal(fields, "targetamount"),
        current_amount=_decimal(fields, "currentamount"),
        category=_text(fields, "category", config.DEFAULT_GOAL_CATEGORY),
        deadline=_date(fields, "deadline"),
        priority=Priority.resolve(_text(fields, "priority")),
        created_at=_date(fields, "createdat") or today or date.today(),
    )
