"""Domain error taxonomy for the order integrity core.

Services raise these; views translate them into HTTP responses. Messages are
written for end users and never carry internal identifiers.
"""

from typing import Optional


class OrderIntegrityError(Exception):
    """Base class for every error raised by the core."""

    default_message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(OrderIntegrityError):
    """Input rejected before any state mutation."""

    default_message = "Invalid input."

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class PermissionDeniedError(OrderIntegrityError):
    default_message = "You are not allowed to perform this action."


class InvalidTransitionError(OrderIntegrityError):
    """State change not allowed from the current state."""

    default_message = "Action no longer valid. The state changed, please refresh."


class InvalidStateError(InvalidTransitionError):
    default_message = "This action is not available in the current state."


class DuplicateDisputeError(OrderIntegrityError):
    default_message = "This order already has an open dispute."


class AlreadyResolvedError(OrderIntegrityError):
    """A resolution was attempted on a dispute that is already resolved."""

    default_message = "This dispute has already been resolved."

    def __init__(self, dispute=None, message: Optional[str] = None):
        super().__init__(message)
        self.dispute = dispute


class PersistenceError(OrderIntegrityError):
    default_message = "Storage is temporarily unavailable. Please try again later."


class LedgerImmutableError(OrderIntegrityError):
    default_message = "Audit entries are append-only."
