"""Error types for the statement engine.

None of these escape the public parsing boundary: text extraction failures
become a ``success: False`` result and persistence failures are logged and
swallowed by the learned-pattern store.
"""


class StatementEngineError(Exception):
    """Base engine error."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class TextExtractionError(StatementEngineError):
    """The document could not be turned into text (corrupt, encrypted, empty)."""

    def __init__(self, detail: str = "Unable to extract text from document"):
        super().__init__(detail=detail)


class PersistenceError(StatementEngineError):
    """The learned-pattern store could not be read or written."""

    def __init__(self, detail: str = "Learned pattern store unavailable", path: str = ""):
        super().__init__(detail=detail)
        self.path = path


# Fixed remediation hints returned with every failed parse.
PARSE_FAILURE_SUGGESTIONS = [
    "Ensure the PDF is a valid bank statement",
    "Try a clearer scan if the PDF is scanned",
    "Password-protected PDFs may not parse correctly",
]


def build_failure_result(error: str) -> dict:
    """Build the structured result for a document that could not be parsed."""
    return {
        "success": False,
        "error": error,
        "parsed": [],
        "suggestions": list(PARSE_FAILURE_SUGGESTIONS),
    }
