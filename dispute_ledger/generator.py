"""
generator.py - Random transaction streams for load and smoke testing

Rows are drawn the same way for every type:
    - type uniformly from the five transaction types
    - client uniformly from [0, clients)
    - deposits and withdrawals get tx id i (1-based row number) and an amount
      in [0.01, 9999.99] with 2 decimal places
    - dispute, resolve and chargeback reference a random earlier id in [0, i)

Most generated disputes miss (wrong client, withdrawal id, unknown id), which
is what exercises the engine's discard paths.
"""

from __future__ import annotations
from decimal import Decimal
from typing import IO, Iterable, List, Optional
import csv

import numpy as np

from .core import Amount, Transaction, TransactionType, MAX_CLIENT_ID, MAX_TX_ID
from .feed import FIELDNAMES


_KINDS = (
    TransactionType.DEPOSIT,
    TransactionType.WITHDRAWAL,
    TransactionType.DISPUTE,
    TransactionType.RESOLVE,
    TransactionType.CHARGEBACK,
)

# Amounts are drawn in cents.
MIN_CENTS = 1
MAX_CENTS = 999_999


def generate_transactions(
    count: int = 100,
    clients: int = 50,
    seed: Optional[int] = None,
) -> List[Transaction]:
    """
    Generate `count` random, structurally valid transactions.

    Args:
        count: Number of events (default: 100)
        clients: Size of the client id pool, ids 0..clients-1 (default: 50)
        seed: Seed for numpy's Generator; same seed, same stream

    Returns:
        List of Transaction events in stream order
    """
    if count < 0 or count > MAX_TX_ID:
        raise ValueError(f"count must be in 0..{MAX_TX_ID}, got {count}")
    if clients < 1 or clients > MAX_CLIENT_ID + 1:
        raise ValueError(f"clients must be in 1..{MAX_CLIENT_ID + 1}, got {clients}")

    rng = np.random.default_rng(seed)
    kind_idx = rng.integers(0, len(_KINDS), size=count)
    client_ids = rng.integers(0, clients, size=count)
    cents = rng.integers(MIN_CENTS, MAX_CENTS + 1, size=count)
    # Reference into [0, i) for row i, drawn for every row to keep the stream
    # shape independent of the type mix.
    references = np.floor(rng.random(size=count) * np.arange(1, count + 1)).astype(np.int64)

    events = []
    for i in range(count):
        kind = _KINDS[int(kind_idx[i])]
        client = int(client_ids[i])
        if kind.requires_amount:
            amount = Amount(Decimal(int(cents[i])).scaleb(-2))
            events.append(Transaction(kind, client, i + 1, amount))
        else:
            events.append(Transaction(kind, client, int(references[i])))
    return events


def write_transactions(events: Iterable[Transaction], stream: IO[str]) -> int:
    """
    Write events as feed-compatible CSV.

    Returns:
        Number of rows written (excluding the header)
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDNAMES)
    count = 0
    for event in events:
        amount = str(event.amount) if event.amount is not None else ""
        writer.writerow((event.kind.value, event.client, event.tx, amount))
        count += 1
    return count
