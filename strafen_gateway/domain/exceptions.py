"""Domain-specific exceptions"""

from typing import Any


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmount(DomainException, ValueError):
    """Monetary value is negative or not a number"""

    def __init__(self, message: str, raw_value: Any = None):
        super().__init__(message)
        self.raw_value = raw_value


class PayedStateTransitionError(DomainException):
    """Fine is already payed or settled"""

    pass


class UnknownFineReasonError(DomainException):
    """Fine references a reason template that doesn't exist"""

    pass


class FunctionCallError(DomainException):
    """Callable function backend returned an error or is unavailable"""

    pass
