"""Domain exceptions for crypto-payments.

Exception hierarchy:
    DomainException (base)
    ├── Validation Errors (ValidationError, also a ValueError)
    │   ├── InvalidPaymentIdError
    │   ├── InvalidAmountError
    │   ├── InvalidTransactionHashError
    │   ├── InvalidPaymentAddressError
    │   ├── InvalidConfirmationCountError
    │   ├── InvalidBlockInfoError
    │   ├── InvalidNetworkFeeError
    │   └── InvalidConfirmationPolicyError
    ├── State & Transition Errors
    │   ├── InvalidTransitionError
    │   │   └── MissingBlockInfoError
    │   └── InsufficientConfirmationsError
    └── Persistence Errors (raised by repositories and use cases, never the aggregate)
        ├── PaymentNotFoundError
        └── PaymentAlreadyExistsError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crypto_payments.domain.status import PaymentStatus, Trigger


class DomainException(Exception):
    """Base exception for all domain-level errors.

    All domain exceptions inherit from this class to enable
    catching domain errors distinctly from infrastructure errors.
    """


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DomainException, ValueError):
    """Raised when input is malformed.

    Validation happens before any state is touched, so a ValidationError
    always means the payment is unchanged.
    """


class InvalidPaymentIdError(ValidationError):
    """Raised when a payment ID is not a valid UUID."""


class InvalidAmountError(ValidationError):
    """Raised when a payment amount is missing, non-numeric or not positive."""


class InvalidTransactionHashError(ValidationError):
    """Raised when a transaction hash is empty or too short."""


class InvalidPaymentAddressError(ValidationError):
    """Raised when a payment address is empty, too short or has no network."""


class InvalidConfirmationCountError(ValidationError):
    """Raised when a confirmation count is negative."""


class InvalidBlockInfoError(ValidationError):
    """Raised when a block number is negative or a block hash is empty."""


class InvalidNetworkFeeError(ValidationError):
    """Raised when a network fee is not strictly positive."""


class InvalidConfirmationPolicyError(ValidationError):
    """Raised when a confirmation tier table is malformed.

    Tiers must start at amount 0, have strictly ascending lower bounds and
    require at least one confirmation each.
    """


# =============================================================================
# State & Transition Errors
# =============================================================================


class InvalidTransitionError(DomainException):
    """Raised when a trigger has no edge from the payment's current status.

    Valid edges:
        - detected → confirming (included)
        - confirming → confirmed (confirmed)
        - confirming → orphaned (orphaned)
        - orphaned → detected (back_to_mempool)
        - orphaned → failed (dropped)
        - detected | confirming | orphaned → failed (failed)

    Terminal statuses (confirmed, failed) reject every trigger.
    """

    def __init__(self, message: str, current_status: PaymentStatus, trigger: Trigger) -> None:
        super().__init__(message)
        self.current_status = current_status
        self.trigger = trigger


class MissingBlockInfoError(InvalidTransitionError):
    """Raised when ``included`` fires on a payment with no block metadata.

    A transaction cannot be included without knowing which block includes it.
    """


class InsufficientConfirmationsError(DomainException):
    """Raised when ``confirmed`` fires before the required threshold is met.

    Distinct from InvalidTransitionError: the edge exists, the payment is
    simply not ready yet.
    """

    def __init__(
        self,
        message: str,
        current_status: PaymentStatus,
        trigger: Trigger,
        confirmations: int,
        required: int,
    ) -> None:
        super().__init__(message)
        self.current_status = current_status
        self.trigger = trigger
        self.confirmations = confirmations
        self.required = required


# =============================================================================
# Persistence Errors
# =============================================================================


class PaymentNotFoundError(DomainException):
    """Raised when a payment cannot be found by ID or transaction hash."""


class PaymentAlreadyExistsError(DomainException):
    """Raised when a payment with the same ID or transaction hash is stored twice.

    A transaction hash identifies exactly one payment; a second detection of
    the same hash is rejected at the creation boundary.
    """
