"""
CSV Export Writer
Writes each enabled section as a "# NAME" marker, a header row and data rows.
"""

import csv
import io
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from models import RecordBatch, SectionOptions

logger = logging.getLogger(__name__)

TRANSACTION_HEADERS = ["id", "description", "amount", "category", "date", "type", "paymentMethod", "currency"]
BUDGET_HEADERS = ["id", "category", "amount", "startDate", "endDate"]
GOAL_HEADERS = ["id", "goalName", "category", "targetAmount", "currentAmount", "deadline", "priority", "createdAt"]

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS)


def _iso(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def _id(value: Optional[int]):
    return value if value is not None else ""


def write_csv(records: RecordBatch, sections: Optional[SectionOptions] = None) -> bytes:
    """
    Build the sectioned CSV export.

    Text fields are quoted (embedded quotes doubled), numbers are not.

    Args:
        records: Records to export
        sections: Which sections to write

    Returns:
        UTF-8 encoded CSV
    """
    sections = sections or SectionOptions()
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    written = []

    def start_section(marker: str, headers: list[str]):
        if written:
            buffer.write("\n")
        buffer.write(f"# {marker}\n")
        buffer.write(",".join(headers) + "\n")
        written.append(marker)

    if sections.transactions:
        start_section("TRANSACTIONS", TRANSACTION_HEADERS)
        for t in records.transactions:
            writer.writerow([
                _id(t.id),
                t.description or "",
                _money(t.amount),
                t.category or "",
                _iso(t.date),
                t.type.value,
                t.payment_method or "",
                t.currency or "",
            ])

    if sections.budgets:
        start_section("BUDGETS", BUDGET_HEADERS)
        for b in records.budgets:
            writer.writerow([
                _id(b.id),
                b.category or "",
                _money(b.amount),
                _iso(b.start_date),
                _iso(b.end_date),
            ])

    if sections.goals:
        start_section("GOALS", GOAL_HEADERS)
        for g in records.goals:
            writer.writerow([
                _id(g.id),
                g.name or "",
                g.category or "",
                _money(g.target_amount),
                _money(g.current_amount),
                _iso(g.deadline),
                g.priority.value,
                _iso(g.created_at),
            ])

    logger.info(f"CSV export: sections={written}")
    return buffer.getvalue().encode("utf-8")
