"""
Manara Ledger Store - Record Model
====================================
One row per persisted record of one collection (products,
customers, ..., transactions, accountingEntries, salaryPayments,
registryJournal).

RULES:
- (kind, record_id) is unique
- position preserves the collection order (log order for transactions)
- data holds the camelCase record exactly as to_record() produced it

This file contains NO business logic.
"""

from django.db import models


class LedgerRecord(models.Model):

    kind = models.CharField(
        max_length=40,
        help_text="Snapshot collection key (e.g. products, transactions).",
    )

    record_id = models.CharField(
        max_length=255,
        help_text="Identity of the record inside its collection.",
    )

    position = models.PositiveIntegerField(
        help_text="Order of the record inside its collection.",
    )

    data = models.JSONField(
        help_text="JSON-compatible record with camelCase attribute names.",
    )

    class Meta:
        db_table = "manara_ledger_record"
        ordering = ["kind", "position"]
        constraints = [
            models.UniqueConstraint(
                fields=["kind", "record_id"],
                name="uq_ledger_kind_record",
            ),
        ]
        indexes = [
            models.Index(fields=["kind", "position"], name="idx_ledger_kind_pos"),
        ]

    def __str__(self):
        return f"{self.kind}:{self.record_id}"
