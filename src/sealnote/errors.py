"""Domain errors.

Services and guards raise these; a single exception handler in main.py
turns them into HTTP responses. Storage-engine errors are translated
into these types by the repositories and never reach the API layer.
"""


class DomainError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequest(DomainError):
    status_code = 400


class PayloadTooLarge(BadRequest):
    status_code = 413


class UnsupportedMediaType(BadRequest):
    status_code = 415


class Unauthenticated(DomainError):
    """Missing/invalid credential or message password."""

    status_code = 401


class Forbidden(DomainError):
    """Authenticated, but not the owner of the target project."""

    status_code = 403


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    status_code = 409
