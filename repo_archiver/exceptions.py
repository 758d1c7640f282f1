"""repo-archiver exception classes."""


class RepoArchiverError(Exception):
    """Base exception for all repo-archiver errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepoArchiverError):
    """Raised when settings or command-line options are invalid."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR") -> None:
        super().__init__(code, message)


class InvalidDuration(ConfigurationError):
    """Raised when an age string does not match ``<integer><y|m>``."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_DURATION")


class HostError(RepoArchiverError):
    """Raised when the repository host cannot list or reach repositories."""

    pass


class HostUnavailableError(HostError):
    """Raised when the host tool is missing or not authenticated."""

    def __init__(self, message: str) -> None:
        super().__init__("HOST_UNAVAILABLE", message)


class AuthenticationError(HostError):
    """Raised when the API rejects the token (401/403)."""

    pass


class NotFoundError(HostError):
    """Raised when a resource is not found."""

    pass


class RateLimitedError(HostError):
    """Raised when rate limited."""

    def __init__(self, code: str, message: str, retry_after: int) -> None:
        super().__init__(code, message)
        self.retry_after = retry_after


class ServerError(HostError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class InvariantViolation(RepoArchiverError):
    """Raised when internal state is driven somewhere it must never go.

    Cursor clamping and the executor's bookkeeping keep these unreachable;
    seeing one means a bug, not bad input.
    """

    def __init__(self, message: str) -> None:
        super().__init__("INVARIANT_VIOLATION", message)
