class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an operation targets a record that does not exist."""


class StoreError(Exception):
    """Base exception for document store failures."""


class TransientStoreError(StoreError):
    """Temporary failure (network, availability); the next pass retries naturally."""


class PermanentStoreError(StoreError):
    """Failure that will not go away on retry (bad query, corrupt document)."""
