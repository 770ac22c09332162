"""
Ledgerly Data Interchange - Main Service
Orchestrates exporting a user's records to JSON, CSV or PDF and importing them
back from any of those formats.
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from config import config
from extractors.report_parser import ReportParser
from loaders.csv_loader import CSVLoadError, parse_csv
from loaders.json_loader import JSONLoadError, parse_json
from loaders.pdf_loader import PDFLoadError, load_pdf_lines
from models import ImportOutcome, RecordBatch, SectionOptions, UserIdentity
from output.csv_writer import write_csv
from output.json_writer import write_json
from output.writer import PDFReportWriter
from repository import InMemoryRepository, RecordRepository
from validators.record_validator import RecordValidator, ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv", "pdf")

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
    "pdf": "application/pdf",
}

PDF_EMPTY_MESSAGE = (
    "The PDF was read but no records could be recovered from it. "
    "PDF import is best-effort; export as JSON or CSV for a reliable round trip."
)

# Errors meaning the file could not be read as its stated format at all
CONTAINER_ERRORS = (PDFLoadError, CSVLoadError, JSONLoadError)


class UnsupportedFormatError(ValueError):
    """Raised when an export is requested in a format that is not supported."""
    pass


def normalize_format(fmt: Optional[str]) -> Optional[str]:
    """Lower-cased format name, or None if it is not a supported format."""
    if not fmt:
        return None
    name = fmt.strip().lower().lstrip(".")
    return name if name in SUPPORTED_FORMATS else None


def infer_format(filename: Optional[str]) -> Optional[str]:
    """
    Map a file name to a format by extension.

    Args:
        filename: e.g. "financial-data-05-01-2024.csv"

    Returns:
        "json", "csv", "pdf" or None
    """
    if not filename:
        return None
    return normalize_format(Path(filename).suffix)


def export_filename(fmt: str, day: Optional[date] = None) -> str:
    """Download name for an export, e.g. financial-report-05-01-2024.pdf."""
    stamp = (day or date.today()).strftime("%d-%m-%Y")
    stem = "financial-report" if fmt == "pdf" else "financial-data"
    return f"{stem}-{stamp}.{fmt}"


class InterchangeService:
    """
    Export and import entry point.

    The service is stateless between calls: the user identity, format and
    section options arrive with every call. Imports follow a persist-as-you-go
    policy: each accepted record is saved on its own, so a record that fails
    validation or storage is reported as a warning while every record saved
    before it stays saved. Partial imports are therefore expected.
    """

    def __init__(
        self,
        repository: RecordRepository,
        validator: Optional[RecordValidator] = None
    ):
        """
        Initialize service.

        Args:
            repository: Persistence collaborator for the user's records
            validator: Record validator (default: lenient, zero amounts per config)
        """
        self.repository = repository
        self.validator = validator or RecordValidator(allow_zero_amounts=config.ALLOW_ZERO_AMOUNTS)
        self.stats = {
            "exports": 0,
            "imports": 0,
            "records_saved": 0,
            "records_rejected": 0,
        }

    def export_data(
        self,
        user: UserIdentity,
        fmt: str,
        sections: Optional[SectionOptions] = None,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """
        Export the user's records.

        Args:
            user: Owner of the records
            fmt: "json", "csv" or "pdf"
            sections: Which record kinds to include (default: all)
            generated_at: Timestamp written into the export (default: now)

        Returns:
            File content

        Raises:
            UnsupportedFormatError: If the format is unknown
        """
        name = normalize_format(fmt)
        if name is None:
            logger.error(f"Export rejected: unsupported format {fmt!r}")
            raise UnsupportedFormatError(f"Unsupported export format: {fmt}")

        sections = sections or SectionOptions()
        logger.info(f"Exporting {name.upper()} for {user.username}: {sections.enabled_names()}")

        records = self._load_records(user, sections, include_spending=(name == "pdf"))

        if name == "json":
            data = write_json(user, records, sections, exported_at=generated_at)
        elif name == "csv":
            data = write_csv(records, sections)
        else:
            data = PDFReportWriter().generate_report(user, records, sections, generated_at=generated_at)

        self.stats["exports"] += 1
        logger.info(f"Export complete: {len(data)} bytes")
        return data

    def _load_records(self, user: UserIdentity, sections: SectionOptions, include_spending: bool) -> RecordBatch:
        records = RecordBatch()
        # Budget rows in the PDF show this month's spending, which needs transactions
        if sections.transactions or (include_spending and sections.budgets):
            records.transactions = self.repository.find_transactions(user)
        if sections.budgets:
            records.budgets = self.repository.find_budgets(user)
        if sections.goals:
            records.goals = self.repository.find_goals(user)
        return records

    def parse_records(
        self,
        fmt: str,
        data: bytes,
        sections: Optional[SectionOptions] = None,
        today: Optional[date] = None
    ) -> RecordBatch:
        """
        Parse file content into records without storing anything.

        Args:
            fmt: "json", "csv" or "pdf"
            data: File content
            sections: Which record kinds to read
            today: Reference day for dates the file does not carry

        Returns:
            RecordBatch of parsed records and warnings

        Raises:
            UnsupportedFormatError: If the format is unknown
            PDFLoadError, CSVLoadError, JSONLoadError: If the file is unreadable
        """
        name = normalize_format(fmt)
        if name is None:
            raise UnsupportedFormatError(f"Unsupported import format: {fmt}")

        sections = sections or SectionOptions()
        if name == "json":
            return parse_json(data, sections, today=today)
        if name == "csv":
            return parse_csv(data, sections, today=today)

        lines = load_pdf_lines(data)
        parser = ReportParser(sections=sections, today=today)
        batch = parser.parse_lines(lines)
        logger.debug(f"Report parser stats: {parser.get_stats()}")
        return batch

    def import_data(
        self,
        user: UserIdentity,
        fmt: str,
        data: bytes,
        sections: Optional[SectionOptions] = None,
        dry_run: bool = False,
        today: Optional[date] = None
    ) -> ImportOutcome:
        """
        Import records from file content.

        Args:
            user: Owner of the new records
            fmt: "json", "csv" or "pdf"
            data: File content
            sections: Which record kinds to import
            dry_run: Validate and count records without saving them
            today: Reference day for dates the file does not carry

        Returns:
            ImportOutcome with per-kind counts and warnings. success is False
            only for an unsupported format or an unreadable file.
        """
        name = normalize_format(fmt)
        if name is None:
            logger.error(f"Import rejected: unsupported format {fmt!r}")
            return ImportOutcome.failure(f"Unsupported import format: {fmt}")

        sections = sections or SectionOptions()
        logger.info("=" * 60)
        logger.info(f"Importing {name.upper()} for {user.username} ({len(data or b'')} bytes)")

        # Step 1: Parse
        try:
            batch = self.parse_records(name, data, sections, today=today)
        except CONTAINER_ERRORS as e:
            logger.error(f"Import failed, file unreadable: {e}")
            return ImportOutcome.failure(f"Import failed: {e}")

        # Step 2: Validate and persist record by record
        outcome = ImportOutcome(success=True, message="", warnings=list(batch.warnings))
        outcome.transactions_imported = self._persist_each(
            user, batch.transactions, self.validator.validate_transaction,
            self.repository.save_transaction, "transaction", outcome, dry_run
        )
        outcome.budgets_imported = self._persist_each(
            user, batch.budgets, self.validator.validate_budget,
            self.repository.save_budget, "budget", outcome, dry_run
        )
        outcome.goals_imported = self._persist_each(
            user, batch.goals, self.validator.validate_goal,
            self.repository.save_goal, "goal", outcome, dry_run
        )

        if name == "pdf" and outcome.total_imported == 0:
            outcome.message = PDF_EMPTY_MESSAGE
        else:
            verb = "validated" if dry_run else "completed"
            outcome.message = (
                f"Import {verb}. Transactions: {outcome.transactions_imported}, "
                f"Budgets: {outcome.budgets_imported}, Goals: {outcome.goals_imported}"
            )

        self.stats["imports"] += 1
        self._print_summary(outcome)
        return outcome

    def _persist_each(self, user, records, validate, save, kind, outcome, dry_run) -> int:
        """Validate and save records one at a time; failures become warnings."""
        saved = 0
        for position, record in enumerate(records, 1):
            try:
                if not validate(record):
                    raise ValidationError(self.validator.last_error or "invalid record")
                if not dry_run:
                    save(user, record)
                saved += 1
            except ValidationError as e:
                self.stats["records_rejected"] += 1
                outcome.warnings.append(f"{kind.capitalize()} {position} rejected: {e}")
            except Exception as e:
                self.stats["records_rejected"] += 1
                logger.error(f"Could not save {kind} {position}: {e}", exc_info=True)
                outcome.warnings.append(f"{kind.capitalize()} {position} not saved: {e}")

        if not dry_run:
            self.stats["records_saved"] += saved
        return saved

    def _print_summary(self, outcome: ImportOutcome):
        """Log import summary."""
        logger.info("IMPORT SUMMARY")
        logger.info(f"Transactions imported:    {outcome.transactions_imported}")
        logger.info(f"Budgets imported:         {outcome.budgets_imported}")
        logger.info(f"Goals imported:           {outcome.goals_imported}")
        logger.info(f"Warnings:                 {len(outcome.warnings)}")
        logger.info("=" * 60)


def main(argv: Optional[list[str]] = None) -> int:
    """Dry-run an import file and print what would be imported."""
    from logging_config import setup_logging

    arg_parser = argparse.ArgumentParser(description="Preview the records an export file would import")
    arg_parser.add_argument("file", help="JSON, CSV or PDF export file")
    arg_parser.add_argument("--sections", default="all", help='"all" or e.g. "transactions,goals"')
    arg_parser.add_argument(
        "--log-level", default=None, type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    args = arg_parser.parse_args(argv)

    setup_logging(log_level=args.log_level, log_file="interchange.log")

    path = Path(args.file)
    fmt = infer_format(path.name)
    if fmt is None:
        print(f"\n❌ Error: unsupported file type: {path.name}")
        return 1
    if not path.exists():
        print(f"\n❌ Error: file not found: {path}")
        return 1

    service = InterchangeService(InMemoryRepository())
    outcome = service.import_data(
        UserIdentity(username="cli"),
        fmt,
        path.read_bytes(),
        SectionOptions.parse(args.sections),
        dry_run=True,
    )

    marker = "✅" if outcome.success else "❌"
    print(f"\n{marker} {outcome.message}")
    for warning in outcome.warnings[:20]:
        print(f"  - {warning}")
    if len(outcome.warnings) > 20:
        print(f"  ... and {len(outcome.warnings) - 20} more warnings")
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
