from unittest.mock import MagicMock, patch

import pytest

from packages.core.errors import TextExtractionError
from packages.statement_engine.pdf_text import extract_text


def _page(text):
    page = MagicMock()
    page.extract_text.return_value = text
    return page


@patch("packages.statement_engine.pdf_text.pdfplumber.open")
def test_joins_page_text(mock_open):
    mock_open.return_value.__enter__.return_value.pages = [
        _page("HDFC Bank"),
        _page(None),
        _page("SWIGGY*BANGALORE 450.00 Dr 12/01/2024"),
    ]

    text = extract_text(b"%PDF-1.4 fake")
    assert text == "HDFC Bank\n\nSWIGGY*BANGALORE 450.00 Dr 12/01/2024"


@patch("packages.statement_engine.pdf_text.pdfplumber.open")
def test_unreadable_document(mock_open):
    mock_open.side_effect = Exception("PDF is encrypted")

    with pytest.raises(TextExtractionError) as exc_info:
        extract_text(b"%PDF-1.4 fake")
    assert "encrypted" in exc_info.value.detail


@patch("packages.statement_engine.pdf_text.pdfplumber.open")
def test_document_without_text(mock_open):
    mock_open.return_value.__enter__.return_value.pages = [_page(""), _page(None)]

    with pytest.raises(TextExtractionError):
        extract_text(b"%PDF-1.4 scanned")


@patch("packages.statement_engine.pdf_text.pdfplumber.open")
def test_empty_buffer(mock_open):
    with pytest.raises(TextExtractionError):
        extract_text(b"")
    mock_open.assert_not_called()
