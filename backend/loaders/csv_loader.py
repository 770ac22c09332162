"""
CSV Loader Module
Reads the sectioned CSV export back into records.

Layout: a "# TRANSACTIONS" / "# BUDGETS" / "# GOALS" marker line, a header
row, then data rows. When no marker precedes a header row the section is
guessed from the header names.
"""

import csv
import io
import logging
from datetime import date
from typing import Optional

from models import RecordBatch, SectionOptions
from .field_mapping import budget_from_fields, goal_from_fields, transaction_from_fields

logger = logging.getLogger(__name__)

SECTION_MARKERS = {
    "TRANSACTIONS": "transactions",
    "BUDGETS": "budgets",
    "GOALS": "goals",
}

BUILDERS = {
    "transactions": transaction_from_fields,
    "budgets": budget_from_fields,
    "goals": goal_from_fields,
}


class CSVLoadError(Exception):
    """Raised when the data cannot be read as CSV at all."""
    pass


def detect_section(headers: list[str]) -> Optional[str]:
    """
    Guess the section from a header row.

    Args:
        headers: Lower-cased header names

    Returns:
        "transactions", "budgets", "goals" or None
    """
    names = set(headers)
    if "goalname" in names or "targetamount" in names:
        return "goals"
    if "startdate" in names or "enddate" in names:
        return "budgets"
    if "description" in names or "paymentmethod" in names or "type" in names:
        return "transactions"
    return None


def decode_csv(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error(f"CSV data is not valid UTF-8: {e}")
        raise CSVLoadError(f"CSV file is not valid UTF-8 text: {e}") from e


def parse_csv(
    data: bytes,
    sections: Optional[SectionOptions] = None,
    today: Optional[date] = None
) -> RecordBatch:
    """
    Parse sectioned CSV bytes into records.

    Args:
        data: Raw CSV file content
        sections: Which sections to read (others are skipped)
        today: Reference day for defaulted dates

    Returns:
        RecordBatch with the parsed records and per-row warnings

    Raises:
        CSVLoadError: If the content is not decodable or not CSV
    """
    sections = sections or SectionOptions()
    text = decode_csv(data)
    batch = RecordBatch()
    targets = {
        "transactions": batch.transactions,
        "budgets": batch.budgets,
        "goals": batch.goals,
    }

    section: Optional[str] = None
    headers: Optional[list[str]] = None
    reader = csv.reader(io.StringIO(text))

    try:
        for row in reader:
            if not row or all(not cell.strip() for cell in row):
                continue

            first = row[0].strip()
            if first.startswith("#"):
                marker = first.lstrip("#").strip().upper()
                if marker in SECTION_MARKERS:
                    section = SECTION_MARKERS[marker]
                    headers = None
                    logger.debug(f"CSV section: {section}")
                continue

            if headers is None:
                headers = [cell.strip().lower() for cell in row]
                if section is None:
                    section = detect_section(headers)
                    logger.debug(f"CSV section detected from headers: {section}")
                continue

            if section is None or not getattr(sections, section):
                continue

            try:
                fields = dict(zip(headers, row))
                targets[section].append(BUILDERS[section](fields, today))
            except Exception as e:
                logger.warning(f"CSV line {reader.line_num} parse error: {e}")
                batch.warnings.append(f"CSV line {reader.line_num}: {section[:-1]} skipped ({e})")

    except csv.Error as e:
        logger.error(f"Malformed CSV near line {reader.line_num}: {e}")
        raise CSVLoadError(f"Malformed CSV near line {reader.line_num}: {e}") from e

    logger.info(
        f"CSV parsed: {len(batch.transactions)} transactions, "
        f"{len(batch.budgets)} budgets, {len(batch.goals)} goals"
    )
    return batch
