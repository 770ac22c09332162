"""
Section Tracking Module
Tracks which report section (transactions, budgets, goals) the parser is in.
"""

from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Section(Enum):
    """Report section enumeration."""
    NONE = "none"
    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    GOALS = "goals"


class SectionState:
    """
    Tracks the current section while streaming report lines.
    A section persists until the title of a different section is seen.
    """

    def __init__(self):
        """Initialize with NONE state."""
        self.current = Section.NONE
        self.current_title: Optional[str] = None
        self._state_history: list[tuple[str, str]] = []

    @staticmethod
    def detect(line: str) -> Optional[Section]:
        """
        Match a line against the section title triggers.

        Args:
            line: Text line to check

        Returns:
            The section the line opens, or None if it is not a section title
        """
        lower = line.strip().lower()

        if "transaction" in lower and "history" in lower:
            return Section.TRANSACTIONS

        if "budget" in lower and ("overview" in lower or "status" in lower) and "transaction" not in lower:
            return Section.BUDGETS

        if (
            ("goal" in lower or "savings" in lower)
            and ("progress" in lower or "goals" in lower)
            and "transaction" not in lower
            and "budget" not in lower
        ):
            return Section.GOALS

        return None

    def update_state(self, line: str) -> bool:
        """
        Check if line is a section title and update state accordingly.

        Args:
            line: Text line to check

        Returns:
            True if the line was a section title (state set), False otherwise
        """
        section = self.detect(line)
        if section is None:
            return False

        if section != self.current:
            logger.debug(f"Section changed {self.current.name} -> {section.name}: {line.strip()}")
        self.current = section
        self.current_title = line.strip()
        self._state_history.append((section.name, self.current_title))
        return True

    def is_active(self) -> bool:
        """True once any section title has been seen."""
        return self.current != Section.NONE

    def get_state(self) -> Section:
        """Get current section."""
        return self.current

    def reset(self):
        """Reset state to NONE and forget the section history."""
        self.current = Section.NONE
        self.current_title = None
        self._state_history.clear()
        logger.debug("Section reset to NONE")

    def get_history(self) -> list[tuple[str, str]]:
        """Get section change history for debugging."""
        return self._state_history.copy()
