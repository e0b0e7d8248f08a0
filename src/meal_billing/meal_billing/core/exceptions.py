class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class OverlapError(DomainError):
    """Raised when a setting version would overlap an existing interval."""


class NotFoundError(DomainError):
    """Raised when a referenced user or setting key does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StorageError(DomainError):
    """Raised when the backing store fails. Wraps the driver error."""


class DegradedDataWarning(UserWarning):
    """Membership history is unavailable and the current status was used instead.

    Never raised: it is logged and attached to results so reports can be
    annotated as approximate.
    """
