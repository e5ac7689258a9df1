"""
Manara Core - Ledger Store App Configuration
==============================================
Persists the ledger's JSON-compatible state shape.

This app:
- Saves a full snapshot atomically (replace-all)
- Loads a snapshot and rebuilds the ledger by replaying its log

This app does NOT:
- Apply business rules (that is core.ledger responsibility)
- Trust persisted current stocks/balances over the replayed ones
"""

from django.apps import AppConfig


class LedgerStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.ledger_store"
    label = "ledger_store"
    verbose_name = "Manara Ledger Store"
