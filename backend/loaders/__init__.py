"""
Loaders Module - Reading exported files back into records.
"""

from .pdf_loader import (
    load_pdf_lines,
    load_pdf_text,
    PDFLoadError
)

from .csv_loader import (
    parse_csv,
    detect_section,
    CSVLoadError
)

from .json_loader import (
    parse_json,
    JSONLoadError
)

__all__ = [
    'load_pdf_lines',
    'load_pdf_text',
    'PDFLoadError',
    'parse_csv',
    'detect_section',
    'CSVLoadError',
    'parse_json',
    'JSONLoadError',
]
