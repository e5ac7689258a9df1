"""
Manara Command Layer - Ledger Outcomes
========================================
Every ledger mutator produces exactly one LedgerOutcome.
Absorbed business conditions travel with it as LedgerNotices.
"""

from core.commands.notices import LedgerNotice, NoticeCode
from core.commands.outcomes import LedgerOutcome

__all__ = [
    "LedgerNotice",
    "LedgerOutcome",
    "NoticeCode",
]
