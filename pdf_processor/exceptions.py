"""Error taxonomy for the PDF processing service.

Every failure the service reports to a caller is a subclass of
`PdfServiceError`. The exception handlers in `pdf_processor.api.errors`
turn them into a JSON body of the form ``{"error": ..., "details": ...}``.
"""

from typing import Dict, Optional

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="PDF Processor"'}
BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class PdfServiceError(Exception):
    """Base exception for all errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


# --- Configuration ---

class ServerMisconfigured(PdfServiceError):
    """A required secret is missing from the configuration."""

    status_code = 500
    default_message = "Server configuration error"


# --- Authentication ---

class AuthenticationRequired(PdfServiceError):
    status_code = 401
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers=BASIC_CHALLENGE)


class MissingOrMalformedHeader(PdfServiceError):
    status_code = 401
    default_message = "Missing or invalid Authorization header. Expected: Bearer <API_KEY>"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers=BEARER_CHALLENGE)


class InvalidCredential(PdfServiceError):
    """Credentials were presented but do not match.

    The bearer scheme answers 403, the basic scheme answers 401 with a
    challenge so browsers prompt again.
    """

    status_code = 403
    default_message = "Invalid API key"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message, headers=headers)
        if status_code is not None:
            self.status_code = status_code


# --- Upload validation ---

class NoFileProvided(PdfServiceError):
    status_code = 400
    default_message = "No PDF file uploaded"


class UnexpectedFileField(PdfServiceError):
    status_code = 400
    default_message = "Only one PDF file may be uploaded per request"


class UnsupportedMediaType(PdfServiceError):
    status_code = 400
    default_message = "Only PDF files are allowed"


class PayloadTooLarge(PdfServiceError):
    status_code = 400
    default_message = "File too large. Maximum size is 10MB."


# --- Processing ---

class MalformedOrOutOfRangeInput(PdfServiceError):
    """pdftk reported a domain error, e.g. the requested page does not exist."""

    status_code = 400
    default_message = (
        "PDF processing failed. The PDF might not have a second page or might be corrupted."
    )


class ToolExecutionError(PdfServiceError):
    status_code = 500
    default_message = "Failed to process PDF with pdftk"


class InternalError(PdfServiceError):
    status_code = 500
    default_message = "Internal server error"
