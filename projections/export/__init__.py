"""
Manara Projections - CSV Export
=================================
Writes statement rows and registry rows as UTF-8 CSV with a
leading byte-order mark, so spreadsheet tools detect the encoding.

Export only reads snapshots; it never touches the ledger.
"""

from __future__ import annotations

import csv
from typing import Iterable, Mapping, Optional, Sequence, TextIO

from core.primitives.ledger import Transaction
from projections.movements import MovementRow
from projections.statements import Statement

BOM = "\ufeff"
INTERNAL_LABEL = "Internal"
MISSING = "-"

COLUMN_LABELS = {
    "date": "Date",
    "id": "Transaction",
    "type": "Type",
    "entity": "Counterparty",
    "branch": "Branch",
    "safe": "Safe",
    "product": "Product",
    "qty": "Quantity",
    "amount": "Amount",
}

DEFAULT_COLUMNS = ("date", "id", "type", "entity", "amount")

STATEMENT_HEADERS = ("Date", "Transaction", "Type", "Description", "Debit", "Credit", "Balance")


def write_csv(stream: TextIO, headers: Sequence[str], rows: Iterable[Sequence]) -> int:
    """Write BOM, header and rows. Returns the number of data rows."""
    stream.write(BOM)
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(headers)
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count


def export_statement(statement: Statement, stream: TextIO) -> int:
    rows = [
        (
            row.date,
            row.transaction_id,
            row.transaction_type.value,
            row.description,
            str(row.debit),
            str(row.credit),
            str(row.balance),
        )
        for row in statement.rows
    ]
    rows.append(
        ("", "", "", statement.balance_label,
         str(statement.total_debit), str(statement.total_credit), str(statement.net))
    )
    return write_csv(stream, STATEMENT_HEADERS, rows)


def _check_columns(columns: Sequence[str]) -> None:
    unknown = [c for c in columns if c not in COLUMN_LABELS]
    if unknown:
        raise ValueError(
            f"Unknown export columns: {unknown}. "
            f"Must be among: {list(COLUMN_LABELS)}"
        )


def _cell(column: str, record, quantity, product, amount,
          branch_names: Mapping[str, str], safe_names: Mapping[str, str]):
    if column == "date":
        return record.date
    if column == "id":
        return record.transaction_id
    if column == "type":
        return record.transaction_type.value
    if column == "entity":
        return record.entity_name or INTERNAL_LABEL
    if column == "branch":
        return branch_names.get(record.branch_id, MISSING)
    if column == "safe":
        return safe_names.get(record.safe_id, MISSING)
    if column == "product":
        return product or MISSING
    if column == "qty":
        return quantity if quantity else MISSING
    return str(amount)


def export_transactions(
    transactions: Iterable[Transaction],
    stream: TextIO,
    columns: Sequence[str] = DEFAULT_COLUMNS,
    branch_names: Optional[Mapping[str, str]] = None,
    safe_names: Optional[Mapping[str, str]] = None,
) -> int:
    _check_columns(columns)
    branch_names = branch_names or {}
    safe_names = safe_names or {}
    rows = (
        [
            _cell(c, t, None, None, t.total_amount, branch_names, safe_names)
            for c in columns
        ]
        for t in transactions
    )
    return write_csv(stream, [COLUMN_LABELS[c] for c in columns], rows)


def export_movements(
    movements: Iterable[MovementRow],
    stream: TextIO,
    columns: Sequence[str] = DEFAULT_COLUMNS + ("product", "qty"),
    branch_names: Optional[Mapping[str, str]] = None,
    safe_names: Optional[Mapping[str, str]] = None,
) -> int:
    _check_columns(columns)
    branch_names = branch_names or {}
    safe_names = safe_names or {}
    rows = (
        [
            _cell(c, m, m.quantity, m.product_name, m.item_total, branch_names, safe_names)
            for c in columns
        ]
        for m in movements
    )
    return write_csv(stream, [COLUMN_LABELS[c] for c in columns], rows)
