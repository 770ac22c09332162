"""
Report Parser Module
Recovers transactions, budgets and goals from the text of a rendered financial
report. Lines are streamed through the section tracker, the line classifier
and the record extractors; rejected lines become warnings, never errors.
"""

import logging
from datetime import date
from typing import Optional

from config import config
from models import RecordBatch, SectionOptions
from .line_classifier import (
    is_budget_candidate,
    is_goal_block_start,
    is_header_line,
    is_transaction_candidate,
)
from .record_extractors import collect_goal_block, extract_budget, extract_goal, extract_transaction
from .sections import Section, SectionState

logger = logging.getLogger(__name__)


class ReportParser:
    """
    Parses report text line by line.
    One parser instance handles one document.
    """

    def __init__(
        self,
        sections: Optional[SectionOptions] = None,
        today: Optional[date] = None,
        currency: Optional[str] = None
    ):
        """
        Initialize parser.

        Args:
            sections: Which record kinds to recover (default: all)
            today: Reference day for dates the report does not state
            currency: Currency code stamped on recovered transactions
        """
        self.sections = sections or SectionOptions()
        self.today = today
        self.currency = currency or config.DEFAULT_CURRENCY
        self.section_state = SectionState()
        self.stats = {
            "lines_processed": 0,
            "section_changes": 0,
            "header_lines": 0,
            "transactions_found": 0,
            "budgets_found": 0,
            "goals_found": 0,
            "rejected": 0,
        }

    def parse_text(self, text: str) -> RecordBatch:
        """Parse a whole text blob (newline separated)."""
        if not text or not text.strip():
            logger.warning("Empty text provided for report parsing")
            return RecordBatch()
        return self.parse_lines(text.split("\n"))

    def parse_lines(self, lines: list[str]) -> RecordBatch:
        """
        Recover records from report lines.

        Args:
            lines: Report text lines in reading order

        Returns:
            RecordBatch with the recovered records and per-line warnings
        """
        batch = RecordBatch()
        logger.info(f"Starting report parsing of {len(lines)} lines")

        index = 0
        while index < len(lines):
            line = lines[index].strip()
            line_num = index + 1
            index += 1
            self.stats["lines_processed"] += 1

            if len(line) < 2:
                continue

            try:
                index = self._process_line(lines, line, line_num, index, batch)
            except Exception as e:
                logger.error(f"Error processing line {line_num}: {e}")
                logger.debug(f"Problematic line: {line[:100]}")
                batch.warnings.append(f"Line {line_num}: unreadable ({e}): {line[:80]}")
                continue

        logger.info(
            f"Report parsing complete: {self.stats['transactions_found']} transactions, "
            f"{self.stats['budgets_found']} budgets, {self.stats['goals_found']} goals, "
            f"{self.stats['rejected']} lines rejected"
        )
        if batch.total == 0:
            logger.warning(
                f"No records recovered from {len(lines)} lines. "
                f"Sections seen: {[name for name, _ in self.section_state.get_history()]}"
            )
        return batch

    def _process_line(
        self,
        lines: list[str],
        line: str,
        line_num: int,
        next_index: int,
        batch: RecordBatch
    ) -> int:
        """Handle one line and return the index to resume from."""
        # Section titles double as header lines, so check them first
        if self.section_state.update_state(line):
            self.stats["section_changes"] += 1
            return next_index

        if is_header_line(line):
            self.stats["header_lines"] += 1
            logger.debug(f"Skipping header line: {line[:60]}")
            return next_index

        section = self.section_state.get_state()

        if section == Section.TRANSACTIONS and self.sections.transactions:
            if is_transaction_candidate(line):
                result = extract_transaction(line, currency=self.currency, today=self.today)
                self._collect(result, batch.transactions, "transaction", line_num, line, batch)

        elif section == Section.BUDGETS and self.sections.budgets:
            if is_budget_candidate(line):
                result = extract_budget(line, today=self.today)
                self._collect(result, batch.budgets, "budget", line_num, line, batch)

        elif section == Section.GOALS and self.sections.goals:
            if is_goal_block_start(line):
                block, next_index = collect_goal_block(lines, line_num - 1)
                result = extract_goal(block, today=self.today)
                self._collect(result, batch.goals, "goal", line_num, line, batch)

        return next_index

    def _collect(self, result, bucket: list, kind: str, line_num: int, line: str, batch: RecordBatch):
        if result.ok:
            bucket.append(result.record)
            self.stats[f"{kind}s_found"] += 1
            logger.debug(f"Recovered {kind} from line {line_num}: {line[:60]}")
        else:
            self.stats["rejected"] += 1
            batch.warnings.append(f"Line {line_num}: {kind} rejected ({result.reason}): {line[:80]}")
            logger.debug(f"Rejected {kind} on line {line_num}: {result.reason}")

    def get_stats(self) -> dict:
        """Get parsing statistics."""
        return self.stats.copy()


def parse_report_lines(
    lines: list[str],
    sections: Optional[SectionOptions] = None,
    today: Optional[date] = None
) -> RecordBatch:
    """
    Convenience function to recover records from report lines.

    Args:
        lines: Report text lines
        sections: Which record kinds to recover
        today: Reference day for unstated dates

    Returns:
        RecordBatch of recovered records
    """
    parser = ReportParser(sections=sections, today=today)
    return parser.parse_lines(lines)
