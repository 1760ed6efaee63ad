class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class EmployeeNotFoundError(DomainError):
    """Raised when a scanned identifier matches no employee."""


class RecordNotFoundError(DomainError):
    """Raised when an attendance record id does not exist."""


class StoreError(Exception):
    """Raised when a backing store cannot be read or written.

    For attendance records the scan must be retried by the caller; a punch is
    never silently dropped.
    """


class ConcurrentScanError(StoreError):
    """Raised when a write lost a race against another scan for the same record."""
