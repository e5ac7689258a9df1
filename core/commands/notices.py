"""
Manara Command Layer - Ledger Notices
=======================================
Structured warnings for business edge cases the ledger absorbs.

A notice is NOT an error. The operation that produced it still
completed; the notice tells the caller what was skipped or clamped.

Every notice is:
- Deterministic (same input, same notice)
- Machine-readable (code)
- Human-readable (message)
- Traceable (reference id + the policy that raised it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# ══════════════════════════════════════════════════════════════
# LEDGER NOTICE (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerNotice:
    """
    Structured, non-fatal condition raised while applying an operation.

    Fields:
        code:        Machine-readable code (see NoticeCode).
        message:     Human-readable explanation.
        reference:   Id of the product/warehouse/safe/entity concerned.
        policy_name: Name of the check that produced the notice.
    """

    code: str
    message: str
    reference: Optional[str] = None
    policy_name: str = ""

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "reference": self.reference,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD NOTICE CODES
# ══════════════════════════════════════════════════════════════

class NoticeCode:
    """
    Known notice codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
