"""Exception hierarchy for swap and escrow operations.

Every error aborts the transaction that raised it: systems validate all
preconditions before building a new ``State`` so the caller's snapshot is
never partially updated. Nothing here is retried internally.

All exceptions inherit from :class:`SwapError` for easy catching; the
intermediate classes group errors by taxonomy:

* identity mismatch (credential or counterparty differs from the commitment)
* state-machine violation (wrong stage or wrong role)
* value constraint (insufficient payment)
* completion flag conflict (claim/cancel path contradicts the asserted flag)
* object errors (id unknown, credential already spent, caller not the owner)
"""

from typing import Any, Dict, Optional


class SwapError(Exception):
    """Base exception for all swap protocol errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# Identity mismatch


class IdentityMismatchError(SwapError):
    """Presented credential or declared counterparty does not match the commitment."""


class KeyMismatch(IdentityMismatchError):
    """Raised when a key is presented to a lock it was not paired with."""


class MismatchedSenderRecipient(IdentityMismatchError):
    """Raised when the parties of a swap do not name each other."""


class MismatchedExchangeObject(IdentityMismatchError):
    """Raised when the offered asset is not the one the counterparty demanded."""


# State-machine violation


class StateViolationError(SwapError):
    """Precondition for the attempted transition is not met."""


class InvalidState(StateViolationError):
    """Raised when an action is not legal in the escrow's current stage."""


class AlreadySubmittedURL(StateViolationError):
    """Raised when a party submits its delivery channel a second time."""


AlreadySubmitted = AlreadySubmittedURL


class InvalidCaller(StateViolationError):
    """Raised when the caller has no authority for the attempted action."""


# Value constraint


class ValueConstraintError(SwapError):
    """A value supplied to the protocol violates a constraint."""


class InsufficientPayment(ValueConstraintError):
    """Raised when a deposited amount is below the escrow price."""


# Completion flag conflict


class CompletionFlagError(SwapError):
    """The claim/cancel path is inconsistent with the asserted completion flag."""


class TransferNotCompleted(CompletionFlagError):
    """Raised when the seller claims without asserting delivery."""


class TransferAlreadyCompleted(CompletionFlagError):
    """Raised when the buyer cancels after delivery was asserted."""


# Ledger objects


class ObjectError(SwapError):
    """A referenced ledger object cannot be used by this caller."""


class ObjectNotFound(ObjectError):
    """Raised when an id does not resolve to an object of the expected kind."""


class CredentialConsumed(ObjectNotFound):
    """Raised when a lock or key that was already used is referenced again."""


class ObjectNotOwned(ObjectError):
    """Raised when the caller tries to spend an object it does not own."""
