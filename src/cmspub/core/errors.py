"""Error taxonomy shared by the transport, import pipeline, and CLI"""

from typing import Any, Optional


EXIT_SUCCESS    = 0
EXIT_VALIDATION = 1
EXIT_AUTH       = 2
EXIT_NETWORK    = 3


class CmsError(Exception):
    """Base class for every failure the CLI knows how to report."""
    exit_code: int = EXIT_NETWORK
    default_code: str = "error"

    def __init__(self, message: str, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details


class ValidationError(CmsError):
    """Bad or missing input detected before any network call."""
    exit_code = EXIT_VALIDATION
    default_code = "validation_error"


class ParseError(ValidationError):
    """A Markdown source file could not be split, decoded, or validated."""
    default_code = "invalid_markdown"


class AuthError(CmsError):
    """No usable session: missing profile, base URL, or token."""
    exit_code = EXIT_AUTH
    default_code = "not_logged_in"


class TransportError(CmsError):
    """Network failure or a success response that is not a JSON object."""
    exit_code = EXIT_NETWORK
    default_code = "request_failed"


class APIError(CmsError):
    """The API answered with status >= 400.

    body is the decoded JSON object when the response carried one, else None;
    raw is always the undecoded response text.
    """

    def __init__(self, status: int, body: Optional[dict[str, Any]] = None, raw: str = ""):
        self.status = status
        self.body = body
        self.raw = raw
        super().__init__(self._message(), code=self._code(), details=body)

    def _message(self) -> str:
        message = (self.body or {}).get("message")
        if isinstance(message, str) and message:
            return message
        if self.raw:
            return self.raw
        return f"request failed with status {self.status}"

    def _code(self) -> str:
        code = (self.body or {}).get("error_code")
        return code if isinstance(code, str) and code else "api_error"

    @property
    def not_found(self) -> bool:
        return self.status == 404

    @property
    def exit_code(self) -> int:
        if self.status in (401, 403):
            return EXIT_AUTH
        if self.status >= 500:
            return EXIT_NETWORK
        return EXIT_VALIDATION
