"""Errors raised while turning a drawing into BOM records."""


class BOMExtractionError(Exception):
    """Base class for per-document failures. Never fatal to a batch."""


class UnsupportedMediaKind(BOMExtractionError):
    def __init__(self, mime_type: str | None):
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")


class PageLimitExceeded(BOMExtractionError):
    def __init__(self, page_count: int, limit: int):
        self.page_count = page_count
        self.limit = limit
        super().__init__(f"PDF has {page_count} pages. The maximum allowed is {limit} pages.")


class DocumentUnreadable(BOMExtractionError):
    def __init__(self, detail: str = ""):
        message = "Could not be read or is corrupted."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InferenceFailure(BOMExtractionError):
    """The model call itself failed (transport, quota, auth...)."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"AI analysis failed: {cause}")


class MalformedResponse(BOMExtractionError):
    """The model answered, but not with the JSON we asked for."""


class MissingCredentials(RuntimeError):
    """No Gemini API key configured. Fatal for a whole run."""
