import pytest

from extractors.line_classifier import (
    contains_money,
    find_money,
    is_budget_candidate,
    is_goal_block_start,
    is_header_line,
    is_transaction_candidate,
    looks_like_date,
)


class TestHeaderLines:

    @pytest.mark.parametrize("line", [
        "BUDGET OVERVIEW",
        "Date   Description   Category   Type   Amount   Method",
        "Category   Budget   Spent   Remaining   Status",
        "Ledgerly   Generated: Mar 15, 2024 at 09:30 AM",
        "User: alice",
        "----------",
        "Category: Savings | Deadline: Dec 31, 2024 | Priority: High",
    ])
    def test_report_chrome_is_header(self, line):
        assert is_header_line(line)

    @pytest.mark.parametrize("line", [
        "Jan 05, 2024   Coffee   Food   EXPENSE   $4.50   Cash",
        "Food   $500.00   $120.00   $380.00   On Track",
        "Emergency Fund",
    ])
    def test_record_lines_are_not_headers(self, line):
        assert not is_header_line(line)


def test_budget_overview_title_never_reaches_an_extractor():
    line = "BUDGET OVERVIEW"
    assert is_header_line(line)
    assert not is_transaction_candidate(line)
    assert not is_budget_candidate(line)


def test_transaction_candidate():
    assert is_transaction_candidate("Jan 05, 2024   Coffee   Food   EXPENSE   $4.50   Cash")
    assert is_transaction_candidate("2024-01-05 | Coffee | Food | EXPENSE | 4.50 | Cash")
    # Money without a date
    assert not is_transaction_candidate("Food   $500.00   $120.00   $380.00   On Track")
    # Date without money
    assert not is_transaction_candidate("Jan 05, 2024 Coffee Food")


def test_budget_candidate_rejects_percentages():
    assert is_budget_candidate("Food   $500.00   $120.00   $380.00   On Track")
    assert not is_budget_candidate("Food   $124.75   59.4%")
    assert not is_budget_candidate("Food budget")


@pytest.mark.parametrize("line", [
    "Coffee at the corner shop",
    "No transactions recorded",
    "On Track",
    "Over Limit",
    "Savings Rate",
])
def test_money_free_lines_are_never_candidates(line):
    assert not contains_money(line)
    assert not is_transaction_candidate(line)
    assert not is_budget_candidate(line)


def test_find_money_drops_thousands_separators():
    assert find_money("$5,000.00 of $10,000.00 (50%)") == ["$5000.00", "$10000.00"]
    assert find_money("Mar 01, 2024   Salary   +$3,000.00") == ["+$3000.00"]


def test_looks_like_date():
    assert looks_like_date("Jan 05, 2024")
    assert looks_like_date("05/01/2024")
    assert looks_like_date("2024-01-05")
    assert not looks_like_date("Total Income $3,000.00")


@pytest.mark.parametrize("line, expected", [
    ("Emergency Fund", True),
    ("New Laptop 2", True),
    ("Go", False),
    ("$5,000.00 of $10,000.00 (50%)", False),
    ("Savings Goals", False),
    ("Category: Savings | Deadline: None | Priority: Medium", False),
])
def test_goal_block_start(line, expected):
    assert is_goal_block_start(line) is expected
