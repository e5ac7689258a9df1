"""
Manara Replay Engine - Public API
===================================
Transaction Log = truth archive.
Replay = time machine.
Time machine must never change history.

The replayer itself is imported from its module:
Use: from core.replay.ledger_replayer import verify_replay
"""

from core.replay.errors import ReplayError, ReplayMismatchError

__all__ = ["ReplayError", "ReplayMismatchError"]
