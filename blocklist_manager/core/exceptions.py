"""
Exception classes for the blocklist manager.

The hierarchy follows the layer structure:
- The Zoraxy client raises UpstreamError for anything that goes wrong talking to Zoraxy
- The import service raises ImportInProgressError when the import guard is busy
- Startup raises ConfigurationError when the host did not hand over what we need

The API layer maps these to HTTP responses in api/exception_handlers.py.
"""


class AppException(Exception):
    """
    Base exception for all application-specific exceptions.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str = "An application error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# DOMAIN EXCEPTIONS (raised by service layer)
# ============================================================================


class ImportInProgressError(AppException):
    """
    Raised when an import is requested while another one still holds the import guard.

    Typically maps to HTTP 409 (Conflict)
    """

    def __init__(self, message: str = "Import already in progress"):
        super().__init__(message)


# ============================================================================
# UPSTREAM/TECHNICAL EXCEPTIONS
# ============================================================================


class UpstreamError(AppException):
    """
    Raised when a call to the Zoraxy access-control API fails.

    Examples:
    - Connection refused / timeout
    - Non-2xx status code
    - Body that is not JSON or not the expected shape

    Maps to HTTP 502 (Bad Gateway) for synchronous endpoints. Inside an import
    job it is logged per IP and never surfaced.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Zoraxy API error: {detail}")


class ConfigurationError(AppException):
    """
    Raised when required runtime configuration is missing or unreadable.

    Fatal: aborts process startup.
    """

    pass
