class WorklogError(Exception):
    """Base exception for business rule violations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorklogError):
    """Raised when input data is malformed (dates, months, times, statuses)."""

    status_code = 400


class NotFoundError(WorklogError):
    """Raised when a user or record does not exist for the caller."""

    status_code = 404


class DuplicateError(WorklogError):
    """Raised when a record already exists for the same key."""

    status_code = 409


class AuthError(WorklogError):
    """Raised when the credential is missing, invalid or expired."""

    status_code = 401


class RepositoryError(WorklogError):
    """Raised when the database rejects a read or write."""

    status_code = 500
