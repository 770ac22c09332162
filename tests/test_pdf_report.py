import io
from datetime import date
from decimal import Decimal

import pytest
from reportlab.pdfgen import canvas

from loaders.pdf_loader import PDFLoadError, load_pdf_lines, load_pdf_text
from main import PDF_EMPTY_MESSAGE
from models import Priority, SectionOptions, TransactionType
from output.writer import PDFReportWriter, budget_status, generate_pdf_report


@pytest.fixture
def report_bytes(service, user, generated_at) -> bytes:
    return service.export_data(user, "pdf", generated_at=generated_at)


def _plain_pdf(*lines: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer)
    y = 760
    for line in lines:
        pdf.drawString(72, y, line)
        y -= 18
    pdf.save()
    return buffer.getvalue()


def test_report_is_a_pdf(report_bytes):
    assert report_bytes.startswith(b"%PDF")


def test_report_text_layout(report_bytes):
    lines = load_pdf_lines(report_bytes)

    assert "Transaction History" in lines
    assert "Budget Overview" in lines
    assert "Savings Goals" in lines
    assert "Mar 05, 2024   Coffee   Food   EXPENSE   -$4.50   Cash" in lines
    assert "Food   $100.00   $124.75   -$24.75   Over Limit" in lines
    assert "$5,000.00 of $10,000.00 (50%)" in lines


def test_round_trip_recovers_records(report_bytes, restore_service, user, today):
    outcome = restore_service.import_data(user, "pdf", report_bytes, today=today)

    assert outcome.success
    assert (outcome.transactions_imported, outcome.budgets_imported, outcome.goals_imported) == (4, 2, 2)

    transactions = {t.description: t for t in restore_service.repository.find_transactions(user)}
    assert {name: t.amount for name, t in transactions.items()} == {
        "Salary": Decimal("3000.00"),
        "Coffee": Decimal("4.50"),
        "Groceries": Decimal("120.25"),
        "Electric bill": Decimal("85.00"),
    }
    assert transactions["Salary"].type == TransactionType.INCOME
    assert transactions["Salary"].payment_method == "Bank Transfer"
    assert transactions["Salary"].date.date() == date(2024, 3, 1)
    assert transactions["Electric bill"].type == TransactionType.EXPENSE
    assert transactions["Electric bill"].payment_method is None
    assert transactions["Groceries"].category == "Food"

    budgets = {b.category: b for b in restore_service.repository.find_budgets(user)}
    assert {name: b.amount for name, b in budgets.items()} == {
        "Food": Decimal("100.00"),
        "Utilities": Decimal("80.00"),
    }
    assert budgets["Food"].start_date == date(2024, 3, 1)

    goals = {g.name: g for g in restore_service.repository.find_goals(user)}
    assert goals["Emergency Fund"].target_amount == Decimal("10000.00")
    assert goals["Emergency Fund"].current_amount == Decimal("5000.00")
    assert goals["New Laptop"].target_amount == Decimal("1500.00")
    assert goals["New Laptop"].current_amount == Decimal("300.00")
    # Not recoverable from the card, so fixed defaults apply
    assert goals["New Laptop"].category == "Savings"
    assert goals["New Laptop"].priority == Priority.MEDIUM
    assert goals["New Laptop"].deadline == date(2024, 9, 15)


def test_import_only_selected_sections(report_bytes, restore_service, user, today):
    outcome = restore_service.import_data(
        user, "pdf", report_bytes, SectionOptions(transactions=False, budgets=False), today=today
    )

    assert outcome.success
    assert (outcome.transactions_imported, outcome.budgets_imported, outcome.goals_imported) == (0, 0, 2)


def test_row_limit_keeps_most_recent(user, sample_records, generated_at, restore_service, today):
    data = PDFReportWriter(max_transaction_rows=2).generate_report(user, sample_records, generated_at=generated_at)
    batch = restore_service.parse_records("pdf", data, SectionOptions.parse("transactions"), today=today)

    assert sorted(t.description for t in batch.transactions) == ["Coffee", "Groceries"]


def test_generate_pdf_report_header(user, sample_records, generated_at):
    text = load_pdf_text(generate_pdf_report(user, sample_records, generated_at=generated_at))

    assert "Personal Financial Report" in text
    assert "Generated: Mar 15, 2024 at 09:30 AM" in text
    assert "User: alice" in text


def test_goals_only_report(service, user, generated_at):
    data = service.export_data(user, "pdf", SectionOptions.parse("goals"), generated_at=generated_at)
    lines = load_pdf_lines(data)

    assert "Savings Goals" in lines
    assert "Transaction History" not in lines
    assert "Budget Overview" not in lines


def test_pdf_without_records_is_not_an_error(restore_service, user):
    outcome = restore_service.import_data(user, "pdf", _plain_pdf("Hello there", "Nothing to see"))

    assert outcome.success
    assert outcome.total_imported == 0
    assert outcome.message == PDF_EMPTY_MESSAGE


@pytest.mark.parametrize("data", [b"", b"definitely not a pdf"])
def test_unreadable_pdf_is_fatal(restore_service, user, data):
    with pytest.raises(PDFLoadError):
        load_pdf_lines(data)

    outcome = restore_service.import_data(user, "pdf", data)
    assert not outcome.success
    assert outcome.message.startswith("Import failed:")
    assert restore_service.repository.count() == 0


@pytest.mark.parametrize("spent, expected", [
    ("0.00", "On Track"),
    ("79.99", "On Track"),
    ("80.00", "Warning"),
    ("100.00", "Over Limit"),
    ("150.00", "Over Limit"),
])
def test_budget_status(spent, expected):
    assert budget_status(Decimal(spent), Decimal("100.00")) == expected
