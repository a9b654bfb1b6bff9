"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation at the interaction boundary."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class InvalidDocumentError(DomainError):
    """Persisted document that fails structural parsing."""


def amount_not_positive(amount) -> str:
    """Return message for a non-positive entry amount."""
    return f"Amount must be greater than zero (got {amount})"


def description_required() -> str:
    """Return message for a blank entry description."""
    return "Description is required"


def commitment_not_found(reference: str) -> str:
    """Return message for missing commitment by id or name."""
    return f"Commitment '{reference}' not found"


def unparseable_amount(text: str) -> str:
    """Return message for an amount string that cannot be parsed."""
    return f"Could not parse amount '{text}'"
