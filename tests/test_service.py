import json
from datetime import date

import pytest

from main import InterchangeService, UnsupportedFormatError, export_filename, infer_format, main
from models import SectionOptions, UserIdentity
from repository import InMemoryRepository, RepositoryError
from validators.record_validator import RecordValidator


class FlakyRepository(InMemoryRepository):
    """Fails the nth transaction save."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.attempts = 0

    def save_transaction(self, user, transaction):
        self.attempts += 1
        if self.attempts == self.fail_on:
            raise RepositoryError("database unavailable")
        return super().save_transaction(user, transaction)


def _transactions_json(*amounts) -> bytes:
    return json.dumps({
        "transactions": [
            {"description": f"Item {i}", "amount": amount, "type": "EXPENSE", "date": "2024-03-0%dT10:00:00" % (i + 1)}
            for i, amount in enumerate(amounts)
        ]
    }).encode("utf-8")


class TestFormats:

    def test_unsupported_import_format_fails_before_parsing(self, restore_service, user):
        outcome = restore_service.import_data(user, "xml", b"<transactions/>")

        assert not outcome.success
        assert outcome.message == "Unsupported import format: xml"
        assert outcome.total_imported == 0
        assert restore_service.repository.count() == 0

    def test_unsupported_export_format_raises(self, service, user):
        with pytest.raises(UnsupportedFormatError):
            service.export_data(user, "xlsx")

    def test_format_names_are_case_insensitive(self, service, user):
        assert service.export_data(user, " JSON ").startswith(b"{")

    @pytest.mark.parametrize("filename, expected", [
        ("financial-data-15-03-2024.csv", "csv"),
        ("REPORT.PDF", "pdf"),
        ("backup.json", "json"),
        ("notes.txt", None),
        ("", None),
    ])
    def test_infer_format(self, filename, expected):
        assert infer_format(filename) == expected

    def test_export_filename(self):
        assert export_filename("pdf", date(2024, 3, 15)) == "financial-report-15-03-2024.pdf"
        assert export_filename("csv", date(2024, 3, 15)) == "financial-data-15-03-2024.csv"


class TestPersistAsYouGo:

    def test_failed_save_keeps_earlier_records(self, user):
        repository = FlakyRepository(fail_on=2)
        service = InterchangeService(repository)

        outcome = service.import_data(user, "json", _transactions_json(10, 20, 30))

        assert outcome.success
        assert outcome.transactions_imported == 2
        assert outcome.warnings == ["Transaction 2 not saved: database unavailable"]
        assert [t.description for t in repository.find_transactions(user)] == ["Item 0", "Item 2"]

    def test_invalid_records_are_reported_and_skipped(self, restore_service, user):
        outcome = restore_service.import_data(user, "json", _transactions_json(10, 0, 30))

        assert outcome.success
        assert outcome.transactions_imported == 2
        assert outcome.warnings == ["Transaction 2 rejected: Invalid amount: zero"]

    def test_zero_amounts_allowed_when_configured(self, user):
        service = InterchangeService(InMemoryRepository(), RecordValidator(allow_zero_amounts=True))
        outcome = service.import_data(user, "json", _transactions_json(10, 0))

        assert outcome.transactions_imported == 2

    def test_strict_validator_failures_are_still_warnings(self, user):
        service = InterchangeService(InMemoryRepository(), RecordValidator(strict_mode=True))
        outcome = service.import_data(user, "json", _transactions_json(0, 5))

        assert outcome.success
        assert outcome.transactions_imported == 1
        assert outcome.warnings == ["Transaction 1 rejected: Invalid amount: zero"]

    def test_dry_run_saves_nothing(self, restore_service, user):
        outcome = restore_service.import_data(user, "json", _transactions_json(10, 20), dry_run=True)

        assert outcome.transactions_imported == 2
        assert outcome.message.startswith("Import validated.")
        assert restore_service.repository.count() == 0


class TestExport:

    def test_records_are_scoped_to_the_user(self, service, user):
        other = UserIdentity(username="bob")
        document = json.loads(service.export_data(other, "json"))

        assert document["transactions"] == []
        assert document["goals"] == []

    def test_sections_limit_export(self, service, user):
        document = json.loads(service.export_data(user, "json", SectionOptions.parse("goals")))

        assert set(document) == {"exportDate", "exportedBy", "goals"}

    def test_stats(self, service, restore_service, user):
        data = service.export_data(user, "json")
        restore_service.import_data(user, "json", data)

        assert service.stats["exports"] == 1
        assert restore_service.stats["imports"] == 1
        assert restore_service.stats["records_saved"] == 8


class TestCommandLine:

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr("logging_config.setup_logging", lambda **kwargs: None)

    def test_preview(self, tmp_path, capsys):
        path = tmp_path / "backup.json"
        path.write_bytes(_transactions_json(10, 20))

        assert main([str(path), "--log-level", "WARNING"]) == 0
        assert "Import validated. Transactions: 2" in capsys.readouterr().out

    def test_unsupported_file(self, tmp_path, capsys):
        path = tmp_path / "backup.xml"
        path.write_text("<x/>")

        assert main([str(path)]) == 1
        assert "unsupported file type" in capsys.readouterr().out
