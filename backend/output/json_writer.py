"""
JSON Export Writer
Serializes records to the JSON interchange document.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Optional

import simplejson

from models import Budget, Goal, RecordBatch, SectionOptions, Transaction, UserIdentity

logger = logging.getLogger(__name__)


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def transaction_to_dict(transaction: Transaction) -> dict:
    return {
        "id": transaction.id,
        "description": transaction.description,
        "amount": transaction.amount,
        "category": transaction.category,
        "date": _iso(transaction.date),
        "type": transaction.type.value,
        "paymentMethod": transaction.payment_method,
        "currency": transaction.currency,
    }


def budget_to_dict(budget: Budget) -> dict:
    return {
        "id": budget.id,
        "category": budget.category,
        "amount": budget.amount,
        "startDate": _iso(budget.start_date),
        "endDate": _iso(budget.end_date),
    }


def goal_to_dict(goal: Goal) -> dict:
    return {
        "id": goal.id,
        "goalName": goal.name,
        "category": goal.category,
        "targetAmount": goal.target_amount,
        "currentAmount": goal.current_amount,
        "deadline": _iso(goal.deadline),
        "priority": goal.priority.value,
        "createdAt": _iso(goal.created_at),
    }


def write_json(
    user: UserIdentity,
    records: RecordBatch,
    sections: Optional[SectionOptions] = None,
    exported_at: Optional[datetime] = None
) -> bytes:
    """
    Build the JSON export document.

    Args:
        user: Owner of the records
        records: Records to export
        sections: Which arrays to include
        exported_at: Export timestamp (default: now)

    Returns:
        UTF-8 encoded, pretty-printed JSON
    """
    sections = sections or SectionOptions()
    document = {
        "exportDate": (exported_at or datetime.now()).isoformat(),
        "exportedBy": user.username,
    }
    if sections.transactions:
        document["transactions"] = [transaction_to_dict(t) for t in records.transactions]
    if sections.budgets:
        document["budgets"] = [budget_to_dict(b) for b in records.budgets]
    if sections.goals:
        document["goals"] = [goal_to_dict(g) for g in records.goals]

    logger.info(f"JSON export for {user.username}: sections={sections.enabled_names()}")
    # Decimals are written with their exact digits
    return simplejson.dumps(
        document, indent=2, ensure_ascii=False, use_decimal=True, default=_json_default
    ).encode("utf-8")
