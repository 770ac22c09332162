"""
JSON Loader Module
Reads the JSON export back into records.
"""

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from models import RecordBatch, SectionOptions
from .field_mapping import budget_from_fields, goal_from_fields, normalize_keys, transaction_from_fields

logger = logging.getLogger(__name__)


class JSONLoadError(Exception):
    """Raised when the data is not a JSON export document."""
    pass


def load_document(data: bytes) -> dict:
    """
    Decode JSON bytes into the top-level export object.

    Raises:
        JSONLoadError: If the bytes are not JSON or the root is not an object
    """
    try:
        document = json.loads(data.decode("utf-8-sig"), parse_float=Decimal)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Invalid JSON data: {e}")
        raise JSONLoadError(f"Invalid JSON file: {e}") from e

    if not isinstance(document, dict):
        raise JSONLoadError("JSON export must be an object with transactions/budgets/goals arrays")
    return document


def parse_json(
    data: bytes,
    sections: Optional[SectionOptions] = None,
    today: Optional[date] = None
) -> RecordBatch:
    """
    Parse a JSON export into records.

    Args:
        data: Raw JSON file content
        sections: Which arrays to read
        today: Reference day for defaulted dates

    Returns:
        RecordBatch with the parsed records and per-item warnings

    Raises:
        JSONLoadError: If the document cannot be read
    """
    sections = sections or SectionOptions()
    document = load_document(data)
    batch = RecordBatch()

    plan = (
        ("transactions", transaction_from_fields, batch.transactions),
        ("budgets", budget_from_fields, batch.budgets),
        ("goals", goal_from_fields, batch.goals),
    )

    for name, builder, target in plan:
        if not getattr(sections, name):
            continue

        items = document.get(name)
        if items is None:
            continue
        if not isinstance(items, list):
            batch.warnings.append(f"'{name}' is not a list; section skipped")
            logger.warning(f"JSON '{name}' is {type(items).__name__}, expected list")
            continue

        for position, item in enumerate(items):
            try:
                if not isinstance(item, dict):
                    raise ValueError(f"expected an object, got {type(item).__name__}")
                target.append(builder(normalize_keys(item), today))
            except Exception as e:
                logger.warning(f"JSON {name}[{position}] import error: {e}")
                batch.warnings.append(f"{name}[{position}]: skipped ({e})")

    logger.info(
        f"JSON parsed: {len(batch.transactions)} transactions, "
        f"{len(batch.budgets)} budgets, {len(batch.goals)} goals"
    )
    return batch
