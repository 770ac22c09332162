from datetime import date
from decimal import Decimal

import pytest

from extractors.report_parser import ReportParser, parse_report_lines
from extractors.sections import Section
from models import SectionOptions

TODAY = date(2024, 3, 15)


@pytest.fixture
def report_lines() -> list[str]:
    return [
        "Ledgerly   Generated: Mar 15, 2024 at 09:30 AM",
        "Personal Financial Report   User: alice",
        # Before any section title: ignored
        "Mar 01, 2024   Salary   Income   INCOME   +$3,000.00   Bank Transfer",
        "Transaction History",
        "Date   Description   Category   Type   Amount   Method",
        "Mar 05, 2024   Coffee   Food   EXPENSE   -$4.50   Cash",
        "Mar 10, 2024   Mystery   Food   EXPENSE   $0.00   Cash",
        "",
        "Budget Overview",
        "Category   Budget   Spent   Remaining   Status",
        "Food   $500.00   $124.75   $375.25   On Track",
        "Savings Goals",
        "Emergency Fund",
        "$5,000.00 of $10,000.00 (50%)",
        "Category: Savings | Deadline: Dec 31, 2024 | Priority: High",
        "New Laptop",
        "$300.00 of $1,500.00 (20%)",
        "Category: Electronics | Deadline: None | Priority: Low",
        "This report was generated by Ledgerly - Your Personal Finance Assistant",
    ]


def test_recovers_each_section(report_lines):
    parser = ReportParser(today=TODAY)
    batch = parser.parse_lines(report_lines)

    assert [t.description for t in batch.transactions] == ["Coffee"]
    assert batch.transactions[0].amount == Decimal("4.50")

    assert len(batch.budgets) == 1
    assert batch.budgets[0].category == "Food"
    assert batch.budgets[0].amount == Decimal("500.00")

    assert [g.name for g in batch.goals] == ["Emergency Fund", "New Laptop"]
    assert batch.goals[1].target_amount == Decimal("1500.00")
    assert batch.goals[1].current_amount == Decimal("300.00")


def test_rejected_rows_become_warnings(report_lines):
    parser = ReportParser(today=TODAY)
    batch = parser.parse_lines(report_lines)

    assert len(batch.warnings) == 1
    assert batch.warnings[0].startswith("Line 7: transaction rejected")
    assert parser.get_stats()["rejected"] == 1


def test_stats(report_lines):
    parser = ReportParser(today=TODAY)
    parser.parse_lines(report_lines)
    stats = parser.get_stats()

    # Goal amount lines are consumed together with their name line
    assert stats["lines_processed"] == len(report_lines) - 2
    # The budget column header also names the budget section
    assert stats["section_changes"] == 4
    assert stats["transactions_found"] == 1
    assert stats["budgets_found"] == 1
    assert stats["goals_found"] == 2


def test_disabled_sections_are_skipped(report_lines):
    batch = parse_report_lines(report_lines, sections=SectionOptions(transactions=False, budgets=False), today=TODAY)

    assert batch.transactions == []
    assert batch.budgets == []
    assert len(batch.goals) == 2
    assert batch.warnings == []


def test_header_only_title_reaches_no_extractor():
    parser = ReportParser(today=TODAY)
    batch = parser.parse_lines(["BUDGET OVERVIEW"])

    assert batch.total == 0
    assert batch.warnings == []
    assert parser.section_state.get_state() == Section.BUDGETS
    assert parser.get_stats()["rejected"] == 0


def test_money_free_lines_yield_nothing():
    lines = [
        "Transaction History",
        "No transactions recorded.",
        "Budget Overview",
        "Nothing budgeted yet",
    ]
    batch = parse_report_lines(lines, today=TODAY)

    assert batch.total == 0
    assert batch.warnings == []


def test_lines_before_any_section_are_ignored():
    batch = parse_report_lines([
        "Jan 05, 2024   Coffee   Food   EXPENSE   $4.50   Cash",
        "Food   $500.00   $120.00   $380.00   On Track",
        "Emergency Fund",
    ], today=TODAY)

    assert batch.total == 0


def test_parse_text():
    text = "Transaction History\nJan 05, 2024   Coffee   Food   EXPENSE   $4.50   Cash\n"
    batch = ReportParser(today=TODAY).parse_text(text)
    assert len(batch.transactions) == 1


def test_empty_text():
    assert ReportParser().parse_text("   ").total == 0
