"""Errors raised by lead mutations (mark-responded, delete)."""


class LeadMutationError(Exception):
    """Base class; ``message`` is safe to show to the operator."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidLeadSourceError(LeadMutationError):
    status_code = 400


class LeadNotFoundError(LeadMutationError):
    status_code = 404


class LeadStorageError(LeadMutationError):
    status_code = 503
