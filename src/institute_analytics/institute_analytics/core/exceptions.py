class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed (missing date, unknown status, ...)."""


class NotFoundError(DomainError):
    """Raised when a record addressed by id does not exist."""


class PersistenceError(DomainError):
    """Raised when the record store fails to read or write."""
