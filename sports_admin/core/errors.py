class SportsAdminError(Exception):
    """Base error; ``code`` is the stable identifier reported to clients."""

    code = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationFailed(SportsAdminError):
    code = "validation_failed"

    def __init__(self, message: str | None = None, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class InvalidScore(ValidationFailed):
    code = "invalid_score"


class CapacityExceeded(SportsAdminError):
    code = "capacity_exceeded"


class EnrollmentLimitExceeded(SportsAdminError):
    code = "enrollment_limit_exceeded"


class DuplicateParticipant(SportsAdminError):
    code = "duplicate_participant"


class Unauthorized(SportsAdminError):
    code = "unauthorized"


class NotFound(SportsAdminError):
    code = "not_found"


class Conflict(SportsAdminError):
    code = "conflict"
