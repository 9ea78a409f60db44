"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidSnapshotError(DomainException):
    """Snapshot violates the caller contract (e.g. day-of-month out of range)"""

    pass
