"""
snapshot.py - Read-only export of account balances
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List

from .account import Account
from .core import Amount


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """
    Point-in-time balances of one client.

    Attributes:
        client: Client id.
        available: Available balance.
        held: Held balance.
        total: available + held at the time the snapshot was taken.
        locked: Whether the account is locked.
    """
    client: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool

    @classmethod
    def from_account(cls, account: Account) -> AccountSnapshot:
        return cls(
            client=account.client,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )


def snapshot_accounts(accounts: Iterable[Account], sort_by_client: bool = False) -> List[AccountSnapshot]:
    """
    Snapshot every account, in iteration order or by ascending client id.

    Each client appears exactly once as long as `accounts` holds one Account
    per client, which the engine guarantees.
    """
    snapshots = [AccountSnapshot.from_account(account) for account in accounts]
    if sort_by_client:
        snapshots.sort(key=lambda s: s.client)
    return snapshots
