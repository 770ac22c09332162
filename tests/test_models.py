from decimal import Decimal

import pytest

from models import Goal, ImportOutcome, Priority, SectionOptions, Transaction, TransactionType, UserIdentity
from repository import InMemoryRepository, RepositoryError


@pytest.mark.parametrize("value, expected", [
    (None, (True, True, True)),
    ("all", (True, True, True)),
    ("ALL", (True, True, True)),
    ("transactions,goals", (True, False, True)),
    (" budgets ", (False, True, False)),
])
def test_section_options_parse(value, expected):
    options = SectionOptions.parse(value)
    assert (options.transactions, options.budgets, options.goals) == expected


def test_section_options_from_mapping():
    options = SectionOptions.from_mapping({"goals": False})
    assert options.enabled_names() == ["transactions", "budgets"]
    assert not SectionOptions(False, False, False).any_enabled()


def test_section_options_from_mapping_reads_text_flags():
    options = SectionOptions.from_mapping({"goals": "false", "budgets": "True"})
    assert (options.transactions, options.budgets, options.goals) == (True, True, False)


@pytest.mark.parametrize("value", [1, "no", None, "yes"])
def test_section_options_from_mapping_rejects_non_flags(value):
    with pytest.raises(ValueError, match="goals"):
        SectionOptions.from_mapping({"goals": value})


def test_transaction_amount_is_unsigned():
    t = Transaction("Refund", Decimal("-12.00"))
    assert t.amount == Decimal("12.00")
    assert t.signed_amount == Decimal("-12.00")
    assert Transaction("Pay", Decimal("5"), type=TransactionType.INCOME).signed_amount == Decimal("5")


@pytest.mark.parametrize("text, expected", [
    ("INCOME", TransactionType.INCOME),
    ("income", TransactionType.INCOME),
    ("EXPENSE", TransactionType.EXPENSE),
    ("transfer", TransactionType.EXPENSE),
    (None, TransactionType.EXPENSE),
])
def test_transaction_type_resolve(text, expected):
    assert TransactionType.resolve(text) == expected


def test_priority_resolve():
    assert Priority.resolve("high") == Priority.HIGH
    assert Priority.resolve("urgent") == Priority.MEDIUM


def test_goal_progress():
    assert Goal("Bike", Decimal("800"), Decimal("200")).progress == 0.25
    assert Goal("Bike", Decimal("800"), Decimal("1000")).progress == 1.0


def test_outcome_to_dict():
    outcome = ImportOutcome(True, "done", 1, 2, 3, ["w"])
    assert outcome.to_dict() == {
        "success": True,
        "message": "done",
        "transactionsImported": 1,
        "budgetsImported": 2,
        "goalsImported": 3,
        "warnings": ["w"],
    }
    assert outcome.total_imported == 6


class TestInMemoryRepository:

    def test_saves_assign_ids_per_user(self, user):
        repo = InMemoryRepository()
        saved = repo.save_transaction(user, Transaction("Coffee", Decimal("4.50")))

        assert saved.id == 1
        assert repo.find_transactions(user) == [saved]
        assert repo.find_transactions(UserIdentity("bob")) == []
        assert repo.count(user) == 1

    def test_user_required(self):
        with pytest.raises(RepositoryError):
            InMemoryRepository().find_goals(UserIdentity(""))
