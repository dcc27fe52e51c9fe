from __future__ import annotations


class AtsMatcherError(RuntimeError):
    """Base class for failures surfaced to the user as a dismissible notice."""

    code = "error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class InputError(AtsMatcherError):
    code = "input_missing"


class ExtractionError(AtsMatcherError):
    code = "extraction_failed"


class StorageError(AtsMatcherError):
    code = "storage_failed"


class UpstreamError(AtsMatcherError):
    code = "upstream_failed"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message, code=code)
        self.status_code = status_code


class ConfigurationError(UpstreamError):
    code = "not_configured"


class AuthError(UpstreamError):
    code = "auth_failed"


class RateLimitError(UpstreamError):
    code = "rate_limited"


class NetworkError(UpstreamError):
    code = "network_error"

    def __init__(self, message: str, *, timeout: bool = False, code: str | None = None):
        super().__init__(message, code=code or ("timeout" if timeout else None))
        self.timeout = timeout
