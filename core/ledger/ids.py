"""
Manara Ledger - Transaction Ids
=================================
Ids are derived from the injected clock (epoch milliseconds) and
stay unique when several operations land in the same millisecond.
"""

from __future__ import annotations

from typing import Callable, Optional

from core.time.clock import Clock, epoch_millis, get_default_clock


class TransactionIdGenerator:
    """
    Time-derived id source.

    Usage:
        ids = TransactionIdGenerator(clock)
        ids.next()               -> "1735689600000"
        ids.next(prefix="PAY-")  -> "PAY-1735689600001"
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or get_default_clock()
        self._last = 0

    def next(
        self,
        prefix: str = "",
        is_taken: Optional[Callable[[str], bool]] = None,
    ) -> str:
        candidate = max(epoch_millis(self._clock), self._last + 1)
        while is_taken is not None and is_taken(f"{prefix}{candidate}"):
            candidate += 1
        self._last = candidate
        return f"{prefix}{candidate}"
