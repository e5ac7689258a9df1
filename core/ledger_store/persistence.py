"""
Manara Ledger Store - Persistence Service
==========================================
The controlled save/load path for the ledger state.

    save_ledger(store)  -> number of records written
    load_ledger()       -> rebuilt LedgerStore

Save is replace-all inside one atomic block: either the whole
snapshot is stored or nothing changes. Load replays the persisted
log together with the registry journal; persisted current
stocks/balances that disagree with the replay are logged and discarded.

Database failures are never swallowed; they surface as
LedgerPersistenceError.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db import DatabaseError, transaction

from core.ledger.errors import LedgerPersistenceError
from core.ledger.store import LedgerStore
from core.ledger_store.models import LedgerRecord
from core.registry import EntityKind
from core.replay.ledger_replayer import persisted_state_mismatches
from core.time.clock import Clock

logger = logging.getLogger("manara.persistence")

SNAPSHOT_COLLECTIONS = tuple(kind.value for kind in EntityKind) + (
    "transactions",
    "accountingEntries",
    "salaryPayments",
    "registryJournal",
)


def save_ledger(store: LedgerStore) -> int:
    data = store.snapshot()
    rows = [
        LedgerRecord(
            kind=collection,
            record_id=record["id"],
            position=position,
            data=record,
        )
        for collection in SNAPSHOT_COLLECTIONS
        for position, record in enumerate(data.get(collection, []))
    ]

    try:
        with transaction.atomic():
            LedgerRecord.objects.all().delete()
            LedgerRecord.objects.bulk_create(rows)
    except DatabaseError as exc:
        logger.error(f"Ledger save failed: {exc}")
        raise LedgerPersistenceError("save", str(exc)) from exc

    logger.info(f"Ledger saved: {len(rows)} records")
    return len(rows)


def load_snapshot() -> dict:
    try:
        rows = list(
            LedgerRecord.objects.order_by("kind", "position").values_list("kind", "data")
        )
    except DatabaseError as exc:
        logger.error(f"Ledger load failed: {exc}")
        raise LedgerPersistenceError("load", str(exc)) from exc

    data = {collection: [] for collection in SNAPSHOT_COLLECTIONS}
    for kind, record in rows:
        data.setdefault(kind, []).append(record)
    return data


def load_ledger(clock: Optional[Clock] = None) -> LedgerStore:
    data = load_snapshot()
    store = LedgerStore.from_snapshot(data, clock=clock)

    for mismatch in persisted_state_mismatches(store, data):
        logger.warning(
            f"Persisted state differs from replay, replay wins: {mismatch}"
        )

    logger.info(f"Ledger loaded: {len(store.transactions())} transactions")
    return store
