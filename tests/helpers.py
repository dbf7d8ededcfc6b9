"""
helpers.py - Assertion helpers shared across test modules
"""

from decimal import Decimal
from typing import Dict, Tuple

from dispute_ledger import LedgerEngine


def balances(engine: LedgerEngine, client: int) -> Tuple[Decimal, Decimal, Decimal, bool]:
    """Return (available, held, total, locked) for a client as plain Decimals."""
    snapshot = engine.get_account(client)
    assert snapshot is not None, f"client {client} has no account"
    return (
        snapshot.available.value,
        snapshot.held.value,
        snapshot.total.value,
        snapshot.locked,
    )


def state_of(engine: LedgerEngine) -> Dict[int, Tuple[Decimal, Decimal, bool]]:
    """Map client -> (available, held, locked) for every account."""
    return {
        s.client: (s.available.value, s.held.value, s.locked)
        for s in engine.accounts()
    }
