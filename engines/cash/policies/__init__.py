"""
Manara Cash Engine - Policies
===============================
Checks run while planning the cash effect of a transaction.
"""

from __future__ import annotations

from typing import Optional

from core.commands.notices import LedgerNotice, NoticeCode
from core.registry import EntityKind, EntityRegistry


def unknown_safe_policy(
    safe_id: str,
    registry: EntityRegistry,
) -> Optional[LedgerNotice]:
    """A transaction pointing at an unregistered safe moves no cash."""
    if registry.contains(EntityKind.SAFE, safe_id):
        return None

    return LedgerNotice(
        code=NoticeCode.REFERENCE_NOT_FOUND,
        message=f"Safe '{safe_id}' is not registered; cash effect skipped.",
        reference=safe_id,
        policy_name="unknown_safe_policy",
    )
