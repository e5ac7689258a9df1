"""
Manara Ledger - Errors
========================
Structural violations only. Business edge cases (unknown
references, oversell) are never raised; they travel as notices.
"""


class LedgerError(Exception):
    """Base error for all ledger operations."""
    pass


class DuplicateTransactionError(LedgerError):
    """A transaction id is already present in the log."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction '{transaction_id}' is already in the log. "
            f"The log is append-only."
        )


class DuplicateEntityError(LedgerError):
    """Registry add of an id that is already registered."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' is already registered.")


class ImmutableFieldError(LedgerError):
    """Update tried to change a value owned by the ledger history."""

    def __init__(self, entity_id: str, field_name: str):
        self.entity_id = entity_id
        self.field_name = field_name
        super().__init__(
            f"'{field_name}' of '{entity_id}' is fixed at registration. "
            f"Quantities and balances change only through transactions."
        )


class LedgerPersistenceError(LedgerError):
    """Saving or loading the ledger failed in the database layer."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Ledger {operation} failed: {detail}")


class PermissionDeniedError(LedgerError):
    """Raised by require_permission when the capability check fails."""

    def __init__(self, user_id: str, action: str, view: str = None):
        self.user_id = user_id
        self.action = action
        self.view = view
        target = f" on '{view}'" if view else ""
        super().__init__(f"User '{user_id}' may not '{action}'{target}.")


class DuplicateSkuError(LedgerError):
    """A product SKU is already used by another registered product."""

    def __init__(self, sku: str, product_id: str, holder_id: str):
        self.sku = sku
        self.product_id = product_id
        self.holder_id = holder_id
        super().__init__(
            f"SKU '{sku}' of product '{product_id}' is already used by '{holder_id}'."
        )
