"""
sink.py - CSV account snapshot writer

Output format:

    client,available,held,total,locked
    1,1.5,0,1.5,false

Amounts keep their natural decimal scale (never more than 4 places, which
Amount guarantees) and are never written in exponent form.
"""

from __future__ import annotations
from typing import IO, Iterable, Tuple
import csv

from .core import Amount
from .snapshot import AccountSnapshot


HEADER = ("client", "available", "held", "total", "locked")


def format_amount(amount: Amount) -> str:
    return format(amount.value, "f")


def snapshot_row(snapshot: AccountSnapshot) -> Tuple[str, ...]:
    return (
        str(snapshot.client),
        format_amount(snapshot.available),
        format_amount(snapshot.held),
        format_amount(snapshot.total),
        "true" if snapshot.locked else "false",
    )


def write_accounts(snapshots: Iterable[AccountSnapshot], stream: IO[str]) -> int:
    """
    Write the header and one row per snapshot.

    Returns:
        Number of account rows written
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    count = 0
    for snapshot in snapshots:
        writer.writerow(snapshot_row(snapshot))
        count += 1
    return count
