class AppError(Exception):
    """Base for errors raised by the scoring services.

    Rendered by the API as ``{"detail": ...}`` with ``status_code``.
    """

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(AppError):
    """Malformed score submission (hole count, hole id, stroke range, missing input)."""

    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """The requested transition is not allowed in the current state."""

    status_code = 409


class DomainError(AppError):
    """Well-formed request that the scoring rules cannot satisfy."""

    status_code = 422
