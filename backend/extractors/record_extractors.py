"""
Record Extractors Module
Turns classified report lines (or, for goals, blocks of lines) into domain
records. Extractors never raise on bad input; they return a rejection with a
reason instead.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from config import config
from models import Budget, Goal, Priority, Transaction, TransactionType
from .line_classifier import DOLLAR_PATTERN, find_money, is_goal_block_start, is_header_line
from .primitives import add_months, month_bounds, parse_amount, parse_flexible_date, truncate

logger = logging.getLogger(__name__)

DATE_TOKEN = (
    r'(?:[A-Za-z]{3}\s+\d{1,2},\s*\d{4}'
    r'|\d{1,2}[/-]\d{1,2}[/-]\d{2,4}'
    r'|\d{4}-\d{2}-\d{2})'
)
AMOUNT_TOKEN = r'[+-]?\$?[\d,]*\.\d{2}'
TYPE_TOKEN = r'(?i:income|expense)'

# Report table row with columns separated by runs of spaces:
# "Jan 05, 2024   Coffee beans   Food   EXPENSE   -$4.50   Cash"
COLUMN_ROW_PATTERN = re.compile(
    r'^(?P<date>' + DATE_TOKEN + r')\s{2,}'
    r'(?P<description>.+?)\s{2,}'
    r'(?P<category>.+?)\s{2,}'
    r'(?P<type>' + TYPE_TOKEN + r')\s{2,}'
    r'(?P<amount>' + AMOUNT_TOKEN + r')'
    r'(?:\s{2,}(?P<method>\S.*?))?\s*$'
)

# Same fields with single-space separation; category and method are one word
LOOSE_ROW_PATTERN = re.compile(
    r'^(?P<date>' + DATE_TOKEN + r')\s+'
    r'(?P<description>.+?)\s+'
    r'(?P<category>\S+)\s+'
    r'(?P<type>' + TYPE_TOKEN + r')\s+'
    r'(?P<amount>' + AMOUNT_TOKEN + r')\s+'
    r'(?P<method>\S+)$'
)

BUDGET_ROW_PATTERN = re.compile(
    r'^(?P<category>.+?)\s+'
    r'\$?(?P<budget>[\d,]*\.\d{2})\s+'
    r'-?\$?(?P<spent>[\d,]*\.\d{2})\s+'
    r'-?\$?(?P<remaining>[\d,]*\.\d{2})\s+'
    r'(?P<status>.+)$'
)

COLUMN_SPLIT_PATTERN = re.compile(r'\s*\|\s*|\s{2,}')

# "$5,000.00 of $10,000.00" progress phrase on goal cards
GOAL_PROGRESS_PATTERN = re.compile(r'\$([\d,]*\d\.\d{2})\s+of\s+\$([\d,]*\d\.\d{2})', re.IGNORECASE)

NO_METHOD_MARKERS = {"", "-", "--", "n/a"}


@dataclass
class ExtractionResult:
    """Either an extracted record or the reason the input was rejected."""
    record: Optional[Any] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def accepted(cls, record) -> "ExtractionResult":
        return cls(record=record)

    @classmethod
    def rejected(cls, reason: str) -> "ExtractionResult":
        return cls(reason=reason)


def split_columns(line: str) -> list[str]:
    """Split on pipes or runs of 2+ spaces, dropping empty cells."""
    return [part.strip() for part in COLUMN_SPLIT_PATTERN.split(line.strip()) if part and part.strip()]


def _default_timestamp(today: Optional[date]) -> datetime:
    if today is None:
        return datetime.now()
    return datetime.combine(today, time.min)


def _build_transaction(
    date_value: Optional[datetime],
    description: str,
    category: str,
    type_text: str,
    amount_text: str,
    method: Optional[str],
    currency: str,
    today: Optional[date]
) -> ExtractionResult:
    amount, ok = parse_amount(amount_text)
    if not ok or amount == 0:
        return ExtractionResult.rejected(f"no usable amount in {amount_text!r}")

    description = truncate(description, config.MAX_DESCRIPTION_LENGTH)
    if not description:
        return ExtractionResult.rejected("empty description")

    method = (method or "").strip()
    if method.lower() in NO_METHOD_MARKERS:
        method = None

    transaction = Transaction(
        description=description,
        amount=abs(amount),
        category=category.strip() or config.DEFAULT_CATEGORY,
        date=date_value or _default_timestamp(today),
        type=TransactionType.resolve(type_text),
        payment_method=method,
        currency=currency,
    )
    return ExtractionResult.accepted(transaction)


def extract_transaction(
    line: str,
    currency: Optional[str] = None,
    today: Optional[date] = None
) -> ExtractionResult:
    """
    Extract a transaction from one report table row.

    The column-aligned layout is tried first, then the single-space layout,
    then a positional split on pipes / wide gaps.

    Args:
        line: Trimmed text line already classified as a transaction candidate
        currency: Currency code to stamp on the record (defaults to config)
        today: Reference day for rows whose date cannot be read

    Returns:
        ExtractionResult with a Transaction or a rejection reason
    """
    currency = currency or config.DEFAULT_CURRENCY
    line = line.strip()

    for pattern in (COLUMN_ROW_PATTERN, LOOSE_ROW_PATTERN):
        match = pattern.match(line)
        if match:
            date_value, _ = parse_flexible_date(match.group("date"))
            return _build_transaction(
                date_value,
                match.group("description"),
                match.group("category"),
                match.group("type"),
                match.group("amount"),
                match.group("method"),
                currency,
                today,
            )

    parts = split_columns(line)
    if len(parts) < 5:
        return ExtractionResult.rejected(f"expected at least 5 columns, found {len(parts)}")

    # "Jan 05, 2024" may arrive as up to three separate cells
    date_value, consumed = None, 1
    for size in range(1, min(3, len(parts)) + 1):
        parsed, ok = parse_flexible_date(" ".join(parts[:size]))
        if ok:
            date_value, consumed = parsed, size
            break

    rest = parts[consumed:]
    if len(rest) < 4:
        return ExtractionResult.rejected(f"expected 4 columns after the date, found {len(rest)}")

    logger.debug(f"Positional fallback used for: {line[:60]}")
    return _build_transaction(
        date_value,
        rest[0],
        rest[1],
        rest[2],
        rest[3],
        rest[4] if len(rest) > 4 else None,
        currency,
        today,
    )


def extract_budget(line: str, today: Optional[date] = None) -> ExtractionResult:
    """
    Extract a budget from one budget overview row.

    Only the category and the budgeted amount are kept; spent, remaining and
    status are derived figures. The period is the current calendar month.

    Args:
        line: Trimmed text line already classified as a budget candidate
        today: Reference day for the budget period

    Returns:
        ExtractionResult with a Budget or a rejection reason
    """
    line = line.strip()
    match = BUDGET_ROW_PATTERN.match(line)
    if match:
        category_text = match.group("category")
        amount_text = match.group("budget")
    else:
        parts = split_columns(line)
        if len(parts) < 2:
            return ExtractionResult.rejected("no category/amount columns")
        category_text = parts[0]
        amounts = find_money(" ".join(parts[1:]))
        if not amounts:
            return ExtractionResult.rejected("no amount column")
        amount_text = amounts[0]

    amount, ok = parse_amount(amount_text)
    if not ok or amount <= 0:
        return ExtractionResult.rejected(f"budget amount must be positive, got {amount_text!r}")

    category = truncate(category_text, config.MAX_BUDGET_CATEGORY_LENGTH)
    if not category:
        return ExtractionResult.rejected("empty category")

    start_date, end_date = month_bounds(today or date.today())
    return ExtractionResult.accepted(Budget(
        category=category,
        amount=amount,
        start_date=start_date,
        end_date=end_date,
    ))


def collect_goal_block(
    lines: list[str],
    start: int,
    max_lines: Optional[int] = None
) -> tuple[list[str], int]:
    """
    Gather the lines of one goal card.

    The block begins at ``start`` and ends before the next blank line, header
    line or block start, or when ``max_lines`` lines have been gathered.

    Returns:
        (block lines, index of the first line after the block)
    """
    max_lines = max_lines or config.GOAL_BLOCK_MAX_LINES
    block = [lines[start].strip()]
    index = start + 1

    while index < len(lines) and len(block) < max_lines:
        line = lines[index].strip()
        if not line or is_header_line(line) or is_goal_block_start(line):
            break
        block.append(line)
        index += 1

    return block, index


def _dollar_amount(text: str) -> Decimal:
    amount, ok = parse_amount(text)
    return amount if ok else Decimal("0")


def extract_goal(block: list[str], today: Optional[date] = None) -> ExtractionResult:
    """
    Extract a savings goal from a goal card block.

    The first line is the name. A "$A of $B" phrase gives current=A and
    target=B; otherwise the first dollar amount in the block is the target
    and the second the current amount. Deadline and priority are not shown
    in a recoverable form and get fixed defaults.

    Args:
        block: Lines returned by collect_goal_block
        today: Reference day for created/deadline dates

    Returns:
        ExtractionResult with a Goal or a rejection reason
    """
    if not block:
        return ExtractionResult.rejected("empty goal block")

    name = truncate(block[0], config.MAX_DESCRIPTION_LENGTH)
    if not name:
        return ExtractionResult.rejected("empty goal name")

    text = " ".join(block[1:])
    progress = GOAL_PROGRESS_PATTERN.search(text)
    if progress:
        current = _dollar_amount(progress.group(1))
        target = _dollar_amount(progress.group(2))
    else:
        amounts = DOLLAR_PATTERN.findall(text)
        target = _dollar_amount(amounts[0]) if amounts else Decimal("0")
        current = _dollar_amount(amounts[1]) if len(amounts) > 1 else Decimal("0")

    if target <= 0:
        logger.debug(f"No target found for goal '{name}', using placeholder")
        target = config.GOAL_PLACEHOLDER_TARGET

    today = today or date.today()
    return ExtractionResult.accepted(Goal(
        name=name,
        target_amount=target,
        current_amount=current,
        category=config.DEFAULT_GOAL_CATEGORY,
        deadline=add_months(today, config.GOAL_DEFAULT_DEADLINE_MONTHS),
        priority=Priority.MEDIUM,
        created_at=today,
    ))
