"""
Manara Replay Engine - Errors
===============================
Error types for the replay and verification layer.
"""

from core.ledger.errors import LedgerError


class ReplayError(LedgerError):
    """Base error for all replay operations."""
    pass


class ReplayMismatchError(ReplayError):
    """Replaying the log did not reproduce the current derived state."""

    def __init__(self, mismatches: list):
        self.mismatches = mismatches
        first = mismatches[0] if mismatches else {}
        super().__init__(
            f"Replay mismatch - {len(mismatches)} difference(s); "
            f"first: {first}"
        )
