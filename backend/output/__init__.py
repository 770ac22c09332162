"""
Output Module - JSON, CSV and PDF export writers.
"""

from .writer import (
    PDFReportWriter,
    ReportGenerationError,
    budget_status,
    generate_pdf_report
)

from .csv_writer import write_csv

from .json_writer import write_json

__all__ = [
    'PDFReportWriter',
    'ReportGenerationError',
    'budget_status',
    'generate_pdf_report',
    'write_csv',
    'write_json',
]
