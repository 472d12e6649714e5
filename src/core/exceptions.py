"""Error taxonomy for ledger operations.

Services raise these; the API layer maps them to HTTP status codes.
Nothing here is considered transient, callers resubmit explicitly.
"""


class LedgerError(Exception):
    """Base class for errors surfaced to the caller of a ledger operation."""

    default_message = "Ledger operation failed."

    def __init__(self, message=None, *, field=None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def __str__(self):
        return self.message


class InvalidInput(LedgerError, ValueError):
    """Malformed, missing or out-of-range input."""

    default_message = "Invalid input."


class NotFound(LedgerError, LookupError):
    """Referenced record does not exist or lies outside the caller's company."""

    default_message = "Not found."


class ConflictDuringTransaction(LedgerError):
    """The store rejected the write (constraint violation) or the current
    state forbids it."""

    default_message = "The operation conflicts with existing data."
