"""
account.py - Per-client balance state

An Account holds the available and held balances of one client plus the
locked flag. Total is always derived (available + held) and never stored.

Balance operations are plain mutations with their own precondition checks.
Each one computes every new value before assigning any, so a failed check or
an arithmetic fault leaves the account untouched. Whether an operation is
allowed at all (locked accounts, dispute state) is decided by the engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .core import Amount


@dataclass(slots=True)
class Account:
    """
    Balance state for a single client.

    Attributes:
        client: Client id owning the account.
        available: Funds the client may withdraw or have disputed.
        held: Funds frozen by open disputes.
        locked: Set by a chargeback; never cleared.
    """
    client: int
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False

    @property
    def total(self) -> Amount:
        """available + held, recomputed on every read."""
        return self.available.add(self.held)

    def can_debit(self, amount: Amount) -> bool:
        """True if `amount` can leave the available balance."""
        return self.available >= amount

    def can_release(self, amount: Amount) -> bool:
        """True if `amount` can leave the held balance."""
        return self.held >= amount

    def credit_available(self, amount: Amount) -> None:
        self.available = self.available.add(amount)

    def debit_available(self, amount: Amount) -> None:
        """
        Remove funds from the available balance.

        Raises:
            InsufficientFunds: If available < amount. Balances are unchanged.
        """
        self.available = self.available.subtract(amount)

    def move_available_to_held(self, amount: Amount) -> None:
        """
        Freeze funds for a dispute.

        Raises:
            InsufficientFunds: If available < amount. Balances are unchanged.
        """
        new_available = self.available.subtract(amount)
        new_held = self.held.add(amount)
        self.available = new_available
        self.held = new_held

    def move_held_to_available(self, amount: Amount) -> None:
        """
        Release frozen funds after a resolve.

        Raises:
            InsufficientFunds: If held < amount. Balances are unchanged.
        """
        new_held = self.held.subtract(amount)
        new_available = self.available.add(amount)
        self.held = new_held
        self.available = new_available

    def forfeit_held(self, amount: Amount) -> None:
        """
        Remove held funds from the account entirely (chargeback).

        Not checked against the held balance: if held < amount the held
        balance goes negative.
        """
        self.held = self.held.subtract_unchecked(amount)

    def lock(self) -> None:
        self.locked = True
