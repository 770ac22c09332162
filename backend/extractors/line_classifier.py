"""
Line Classifier Module
Stateless tests that decide what a single line of report text represents.
"""

import re

from config import config

# Table column titles, report chrome and divider characters
HEADER_TOKENS = (
    "DATE",
    "DESCRIPTION",
    "CATEGORY",
    "TYPE",
    "AMOUNT",
    "METHOD",
    "BUDGET",
    "SPENT",
    "REMAINING",
    "STATUS",
    "HISTORY",
    "OVERVIEW",
    "GOALS",
    config.REPORT_BRAND.upper(),
    "FINANCIAL",
    "REPORT",
    "GENERATED",
    "USER:",
    "EMAIL",
    "---",
    "===",
    "──",
)

# Money with optional sign and dollar symbol, e.g. "-$4.50", "1234.00"
MONEY_PATTERN = re.compile(r'[+-]?\$?\d+[.,]\d{2}')

# Dollar amounts inside goal cards, e.g. "$10,000.00"
DOLLAR_PATTERN = re.compile(r'\$([\d,]*\d\.\d{2})')

NUMERIC_DATE_PATTERN = re.compile(r'\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}-\d{2}-\d{2}')
MONTH_NAME_DATE_PATTERN = re.compile(
    r'\b(JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC)[A-Z]*\.?\s+\d{1,2}\b',
    re.IGNORECASE
)

ALPHA_ONLY_PATTERN = re.compile(r'^[A-Za-z\s]*$')
GOAL_START_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9\s]*$')


def _without_thousands(line: str) -> str:
    return re.sub(r'(?<=\d),(?=\d{3})', '', line)


def contains_money(line: str) -> bool:
    """Check for a money-like token anywhere in the line."""
    return bool(MONEY_PATTERN.search(_without_thousands(line)))


def find_money(line: str) -> list[str]:
    """All money-like tokens in order of appearance (thousands commas removed)."""
    return MONEY_PATTERN.findall(_without_thousands(line))


def looks_like_date(line: str) -> bool:
    return bool(NUMERIC_DATE_PATTERN.search(line) or MONTH_NAME_DATE_PATTERN.search(line))


def is_alphabetic(line: str) -> bool:
    return bool(ALPHA_ONLY_PATTERN.match(line))


def is_header_line(line: str) -> bool:
    """
    Check if a line is a table header or report chrome.

    Args:
        line: Trimmed text line

    Returns:
        True if any header token appears in the line (case-insensitive)
    """
    upper = line.upper()
    return any(token in upper for token in HEADER_TOKENS)


def is_transaction_candidate(line: str) -> bool:
    """A transaction row carries both an amount and a date."""
    if is_alphabetic(line):
        return False
    return contains_money(line) and looks_like_date(line)


def is_budget_candidate(line: str) -> bool:
    """Budget rows carry amounts but never percentages."""
    if is_alphabetic(line) or "%" in line:
        return False
    return contains_money(line)


def is_goal_block_start(line: str) -> bool:
    """
    Goal cards open with a bare name line (letters, digits and spaces only).

    Args:
        line: Trimmed text line

    Returns:
        True if the line can start a goal block
    """
    return (
        len(line) > 2
        and bool(GOAL_START_PATTERN.match(line))
        and not is_header_line(line)
    )
