"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPolicyError(DomainException):
    """Stored policy record is malformed (bad threshold, unknown rule type, bad JSON)"""

    pass


class InvalidTimeEntryError(DomainException):
    """Time entry record is malformed or has an unparseable date"""

    pass
