"""Domain-specific exceptions"""

from typing import Optional


class DomainException(Exception):
    """Base exception for the accounting core"""

    pass


class ValidationError(DomainException):
    """Malformed or missing field, invalid amount or unknown reference"""

    pass


class StateError(DomainException):
    """Operation not allowed in the entity's current state"""

    def __init__(self, message: str, count: Optional[int] = None):
        super().__init__(message)
        self.count = count


class NotFoundError(DomainException):
    """Entity id does not exist in the current account scope"""

    pass
