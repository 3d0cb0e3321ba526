"""Error taxonomy shared by every issuance service.

Each error carries a ``kind`` (stable identifier returned to clients), a
human-readable ``reason``, the HTTP status the boundary layer maps it to, and
whether the caller may retry the same call.
"""


class IssuanceError(Exception):
    kind: str = "Internal"
    status_code: int = 500
    retryable: bool = False

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.reason}


class BadInput(IssuanceError):
    kind = "BadInput"
    status_code = 400


class AuthorizationError(IssuanceError):
    kind = "Authorization"
    status_code = 403


class NotFound(IssuanceError):
    kind = "NotFound"
    status_code = 404


class PreconditionFailed(IssuanceError):
    kind = "PreconditionFailed"
    status_code = 409


class AlreadyCompleted(IssuanceError):
    kind = "AlreadyCompleted"
    status_code = 409


class AlreadyBound(IssuanceError):
    kind = "AlreadyBound"
    status_code = 409


class Conflict(IssuanceError):
    kind = "Conflict"
    status_code = 409
    retryable = True


class ScoringUnavailable(IssuanceError):
    kind = "ScoringUnavailable"
    status_code = 503
    retryable = True


class StorageUnavailable(IssuanceError):
    kind = "StorageUnavailable"
    status_code = 503
    retryable = True
