"""
errors.py — Error Types for the Rewards Service

Every error carries the HTTP status code it maps to at the API boundary and
a client-facing message. Handlers render them as `{"error": message}`.

Errors:
    - ValidationError (400): missing or out-of-range input.
    - MissingFieldError (400): required fields absent from an order submission.
    - NotFoundError (404): unknown order reference, brand, utid or employee.
    - UnexpectedError (500): any other failure, e.g. an unreadable catalog file.
"""


class RewardsError(Exception):
    """Base class for all errors raised by the rewards service."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(RewardsError):
    status_code = 400


class MissingFieldError(ValidationError):
    """
    Raised when required fields are absent from a submission.

    Attributes:
        fields (list[str]): Names of the missing fields, in declaration order.
    """

    def __init__(self, message, fields):
        super().__init__(f"{message}: {', '.join(fields)}")
        self.fields = list(fields)


class NotFoundError(RewardsError):
    status_code = 404


class UnexpectedError(RewardsError):
    status_code = 500
