"""PDF-to-text collaborator backed by pdfplumber."""

import io
from typing import Callable

import pdfplumber
import structlog

from packages.core.errors import TextExtractionError

logger = structlog.get_logger()

TextExtractor = Callable[[bytes], str]


def extract_text(buffer: bytes) -> str:
    """
    Extract the text of every page, joined with newlines.

    Raises:
        TextExtractionError: for empty, corrupt or encrypted documents,
            or when no page yields any text (e.g. image-only scans).
    """
    if not buffer:
        raise TextExtractionError("Empty document")

    try:
        with pdfplumber.open(io.BytesIO(buffer)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.warning("text_extraction_failed", error=str(e), size=len(buffer))
        raise TextExtractionError(f"Unable to read PDF: {e}") from e

    text = "\n".join(pages)
    if not text.strip():
        logger.warning("text_extraction_failed", error="no text", pages=len(pages))
        raise TextExtractionError("No text found in document")

    logger.info("text_extracted", pages=len(pages), length=len(text))
    return text
