"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Input is out of range or malformed (window, horizon, amount, date)"""

    pass


class NotFoundError(DomainException):
    """Referenced owner, receivable or staff record does not exist"""

    pass
