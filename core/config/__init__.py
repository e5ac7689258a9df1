"""
Manara Core Config - Public API
=================================
Application settings read from the Django MANARA setting.
"""

from core.config.rules import LedgerSettings, get_ledger_settings

__all__ = [
    "LedgerSettings",
    "get_ledger_settings",
]
