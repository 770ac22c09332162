"""
PDF Loader Module
Extracts report text from PDF bytes using PyMuPDF (fitz), rebuilding visual
table rows so that cells on the same baseline come back as one line.
"""

import fitz  # PyMuPDF
import logging

logger = logging.getLogger(__name__)

# Words whose bottoms lie within this many points share a row
ROW_TOLERANCE = 3.0
# Horizontal gap (points) above which two words belong to different cells
COLUMN_GAP_POINTS = 6.0
COLUMN_SEPARATOR = "   "


class PDFLoadError(Exception):
    """Custom exception for PDF loading errors."""
    pass


def _page_lines(page) -> list[str]:
    """
    Rebuild the text rows of one page from its word boxes.

    Args:
        page: fitz.Page

    Returns:
        Lines in top-to-bottom order with cells joined by a wide gap
    """
    words = page.get_text("words")
    if not words:
        return []

    # (x0, y0, x1, y1, text, block_no, line_no, word_no)
    words = sorted(words, key=lambda w: (w[3], w[0]))

    rows: list[list[tuple]] = []
    row_bottom = None
    for word in words:
        if row_bottom is not None and abs(word[3] - row_bottom) <= ROW_TOLERANCE:
            rows[-1].append(word)
        else:
            rows.append([word])
            row_bottom = word[3]

    lines = []
    for row in rows:
        row.sort(key=lambda w: w[0])
        parts = [row[0][4]]
        for previous, word in zip(row, row[1:]):
            gap = word[0] - previous[2]
            parts.append(COLUMN_SEPARATOR if gap > COLUMN_GAP_POINTS else " ")
            parts.append(word[4])
        lines.append("".join(parts))
    return lines


def load_pdf_lines(data: bytes) -> list[str]:
    """
    Extract text lines from all pages of an in-memory PDF.

    Args:
        data: Raw PDF file content

    Returns:
        Lines of every page in reading order, pages separated by a blank line

    Raises:
        PDFLoadError: If the bytes cannot be opened as a PDF
    """
    if not data:
        logger.error("PDF data is empty")
        raise PDFLoadError("PDF file is empty")

    doc = None
    try:
        doc = fitz.open(stream=data, filetype="pdf")

        if doc.page_count == 0:
            logger.error("PDF has no pages")
            raise PDFLoadError("PDF has no pages")

        logger.info(f"Loading PDF ({doc.page_count} pages, {len(data)} bytes)")

        lines: list[str] = []
        empty_pages = 0
        for page_num in range(doc.page_count):
            try:
                page_lines = _page_lines(doc[page_num])
            except Exception as e:
                logger.error(f"Error extracting text from page {page_num + 1}: {e}")
                continue

            if not page_lines:
                empty_pages += 1
                logger.warning(f"Page {page_num + 1}: empty or no extractable text")
                continue

            if lines:
                lines.append("")
            lines.extend(page_lines)
            logger.debug(f"Page {page_num + 1}: extracted {len(page_lines)} lines")

        logger.info(
            f"Extraction complete: {len(lines)} lines from {doc.page_count} pages "
            f"({empty_pages} empty pages skipped)"
        )
        return lines

    except PDFLoadError:
        raise

    except fitz.FileDataError as e:
        logger.error("Invalid or corrupted PDF data", exc_info=True)
        raise PDFLoadError(f"Invalid or corrupted PDF file: {e}") from e

    except Exception as e:
        logger.error(f"Unexpected error loading PDF: {e}", exc_info=True)
        raise PDFLoadError(f"Failed to load PDF: {e}") from e

    finally:
        # Ensure PDF is always closed
        if doc is not None:
            try:
                doc.close()
            except Exception as e:
                logger.warning(f"Error closing PDF document: {e}")


def load_pdf_text(data: bytes) -> str:
    """Convenience wrapper returning the extracted lines as one string."""
    return "\n".join(load_pdf_lines(data))
