"""
deposits.py - Deposit history and the dispute lifecycle

Every successfully applied deposit leaves a DepositRecord behind, keyed by its
transaction id. Only deposits are disputable; withdrawals leave no record.

=== DISPUTE LIFECYCLE ===

    NORMAL --dispute--> DISPUTED --resolve----> RESOLVED
                                 --chargeback-> CHARGED_BACK

RESOLVED and CHARGED_BACK are terminal. Every other (state, event) pair is
refused and the triggering event is discarded by the engine.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from .core import (
    Amount, DisputeState, TransactionType,
    InvalidDisputeTransition,
)


_TRANSITIONS: Dict[Tuple[DisputeState, TransactionType], DisputeState] = {
    (DisputeState.NORMAL, TransactionType.DISPUTE): DisputeState.DISPUTED,
    (DisputeState.DISPUTED, TransactionType.RESOLVE): DisputeState.RESOLVED,
    (DisputeState.DISPUTED, TransactionType.CHARGEBACK): DisputeState.CHARGED_BACK,
}

TERMINAL_STATES: FrozenSet[DisputeState] = frozenset({
    DisputeState.RESOLVED,
    DisputeState.CHARGED_BACK,
})


def next_dispute_state(state: DisputeState, kind: TransactionType) -> Optional[DisputeState]:
    """Return the state `kind` moves a deposit to from `state`, or None if refused."""
    return _TRANSITIONS.get((state, kind))


@dataclass(slots=True)
class DepositRecord:
    """
    A processed deposit and its dispute status.

    Attributes:
        tx: Transaction id of the deposit.
        client: Client the deposit was credited to.
        amount: Deposited amount; the amount every dispute-family event moves.
        state: Current dispute status (starts NORMAL).
    """
    tx: int
    client: int
    amount: Amount
    state: DisputeState = DisputeState.NORMAL

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def can_transition(self, kind: TransactionType) -> bool:
        return next_dispute_state(self.state, kind) is not None

    def transition(self, kind: TransactionType) -> DisputeState:
        """
        Move to the state `kind` leads to.

        Returns:
            The new state.

        Raises:
            InvalidDisputeTransition: If `kind` is not allowed from the current state.
        """
        new_state = next_dispute_state(self.state, kind)
        if new_state is None:
            raise InvalidDisputeTransition(
                f"tx {self.tx}: cannot {kind.value} from {self.state.value}"
            )
        self.state = new_state
        return new_state
