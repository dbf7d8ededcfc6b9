"""
engine.py - Stateful transaction replay engine

The LedgerEngine is the only component that mutates accounts and deposit
records. It consumes events one at a time, in arrival order, and either
commits exactly one state change or discards the event.

Key responsibilities:
    - Dispatches each event to the rule for its type
    - Enforces tx-id uniqueness, account locks and the dispute lifecycle
    - Discards business-rule violations silently (early return, no exception)
    - Propagates fatal input errors (MalformedTransaction, AmountOverflow)
    - Exports account snapshots on demand
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple
import logging

from .account import Account
from .core import (
    # Types
    Transaction, TransactionType, ApplyResult, DisputeState,
    # Exceptions
    MalformedTransaction,
)
from .deposits import DepositRecord
from .snapshot import AccountSnapshot, snapshot_accounts


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApplyStats:
    """Counts of committed and discarded events from one apply_all() call."""
    applied: int
    rejected: int

    @property
    def total(self) -> int:
        return self.applied + self.rejected


class LedgerEngine:
    """
    Single-pass reducer from transaction events to account balances.

    Design Principles:
        - Transactional per event: every precondition is checked before the
          first mutation, so a discarded event has no observable effect.
        - Explicit ownership: the account and deposit maps belong to this
          instance alone. Nothing is global; create one engine per run.

    Account creation:
        Any event addressing an unseen client creates a zero-balance,
        unlocked account, even if the event itself is then discarded.

    Thread Safety:
        Not thread-safe. Events must be applied in order from one thread.

    Example:
        engine = LedgerEngine()
        engine.apply(Transaction.deposit(1, 1, "10.0"))
        engine.apply(Transaction.dispute(1, 1))
        for snapshot in engine.accounts():
            print(snapshot)
    """

    def __init__(self, name: str = "main", verbose: bool = False):
        """
        Create an engine.

        Args:
            name: Engine identifier, used in log messages
            verbose: Log every discarded event at INFO (default: False)
        """
        self.name = name
        self.verbose = verbose
        self._accounts: Dict[int, Account] = {}
        self._deposits: Dict[int, DepositRecord] = {}
        # Ids of committed deposits and withdrawals
        self._used_tx_ids: Set[int] = set()
        self.applied_count = 0
        self.rejected_count = 0
        self._handlers: Dict[TransactionType, Callable[[Transaction, Account], str]] = {
            TransactionType.DEPOSIT: self._apply_deposit,
            TransactionType.WITHDRAWAL: self._apply_withdrawal,
            TransactionType.DISPUTE: self._apply_dispute,
            TransactionType.RESOLVE: self._apply_resolve,
            TransactionType.CHARGEBACK: self._apply_chargeback,
        }

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    def accounts(self, sort_by_client: bool = False) -> List[AccountSnapshot]:
        """
        Snapshot every account.

        Args:
            sort_by_client: Order by ascending client id instead of the order
                in which clients first appeared (default: False)

        Returns:
            One AccountSnapshot per client
        """
        return snapshot_accounts(self._accounts.values(), sort_by_client=sort_by_client)

    def get_account(self, client: int) -> Optional[AccountSnapshot]:
        """Snapshot of one client's account, or None if the client was never seen."""
        account = self._accounts.get(client)
        return AccountSnapshot.from_account(account) if account is not None else None

    def get_deposit(self, tx: int) -> Optional[DepositRecord]:
        """Copy of the deposit record for `tx`, or None if no such deposit was applied."""
        record = self._deposits.get(tx)
        return replace(record) if record is not None else None

    def has_transaction(self, tx: int) -> bool:
        """True if `tx` was used by a committed deposit or withdrawal."""
        return tx in self._used_tx_ids

    def list_clients(self) -> List[int]:
        """Client ids in order of first appearance."""
        return list(self._accounts)

    def verify_invariants(self) -> Dict[str, Any]:
        """
        Check balance invariants across all accounts.

        Checks performed per account:
        1. available >= 0
        2. held >= 0 (may legitimately fail after a chargeback forfeits more
           than is held; reported so callers can see it)
        3. locked if and only if a deposit of that client was charged back

        Returns:
            Dict with keys:
            - 'valid': bool - True if no violations were found
            - 'violations': List[Dict] - one entry per violation, each with
              client, check and detail

        Example:
            result = engine.verify_invariants()
            assert result['valid'], result['violations']
        """
        charged_back_clients = {
            record.client for record in self._deposits.values()
            if record.state == DisputeState.CHARGED_BACK
        }
        violations = []

        for client, account in self._accounts.items():
            if not account.available.is_non_negative():
                violations.append({
                    'client': client,
                    'check': 'available_non_negative',
                    'detail': str(account.available),
                })
            if not account.held.is_non_negative():
                violations.append({
                    'client': client,
                    'check': 'held_non_negative',
                    'detail': str(account.held),
                })
            if account.locked != (client in charged_back_clients):
                violations.append({
                    'client': client,
                    'check': 'lock_matches_chargeback',
                    'detail': f"locked={account.locked}",
                })

        return {
            'valid': len(violations) == 0,
            'violations': violations,
        }

    # ========================================================================
    # EVENT APPLICATION (Mutating)
    # ========================================================================

    def apply(self, event: Transaction) -> ApplyResult:
        """
        Apply one event.

        Business-rule violations (duplicate tx, locked account, insufficient
        funds, unknown or foreign deposit, invalid dispute transition) are
        discarded silently and reported only through the return value.

        Args:
            event: Transaction to apply

        Returns:
            ApplyResult.APPLIED if the event was committed
            ApplyResult.REJECTED if it was discarded

        Raises:
            MalformedTransaction: If `event` is not a Transaction or has an
                unknown type. Fatal; the run must abort.
            AmountOverflow: If a balance would leave the representable range.
                Fatal; the account is left unchanged.
        """
        if not isinstance(event, Transaction):
            raise MalformedTransaction(f"expected Transaction, got {type(event).__name__}")
        handler = self._handlers.get(event.kind)
        if handler is None:
            raise MalformedTransaction(f"unknown transaction type {event.kind!r}")

        account = self._accounts.get(event.client)
        if account is None:
            account = self._accounts[event.client] = Account(event.client)

        reason = handler(event, account)
        if reason:
            self.rejected_count += 1
            if self.verbose:
                logger.info("REJECTED %s tx=%d client=%d: %s",
                            event.kind.value, event.tx, event.client, reason)
            return ApplyResult.REJECTED

        self.applied_count += 1
        if self.verbose:
            logger.debug("APPLIED %r", event)
        return ApplyResult.APPLIED

    def apply_all(self, events: Iterable[Transaction]) -> ApplyStats:
        """
        Apply events in order.

        Returns:
            ApplyStats for this call only

        Raises:
            MalformedTransaction, AmountOverflow: As for apply(). Events
                before the failing one remain applied.
        """
        applied = rejected = 0
        for event in events:
            if self.apply(event) is ApplyResult.APPLIED:
                applied += 1
            else:
                rejected += 1
        logger.debug("%s: applied %d, rejected %d", self.name, applied, rejected)
        return ApplyStats(applied=applied, rejected=rejected)

    # Each rule returns "" on commit or the reason the event was discarded.
    # Every check precedes the first mutation.

    def _apply_deposit(self, event: Transaction, account: Account) -> str:
        if event.tx in self._used_tx_ids:
            return f"duplicate transaction id {event.tx}"
        if account.locked:
            return "account locked"
        account.credit_available(event.amount)
        self._used_tx_ids.add(event.tx)
        self._deposits[event.tx] = DepositRecord(event.tx, event.client, event.amount)
        return ""

    def _apply_withdrawal(self, event: Transaction, account: Account) -> str:
        if event.tx in self._used_tx_ids:
            return f"duplicate transaction id {event.tx}"
        if account.locked:
            return "account locked"
        if not account.can_debit(event.amount):
            return f"insufficient funds: available {account.available} < {event.amount}"
        account.debit_available(event.amount)
        self._used_tx_ids.add(event.tx)
        return ""

    def _disputed_deposit(self, event: Transaction) -> Tuple[Optional[DepositRecord], str]:
        """Look up the referenced deposit; returns (record, reason)."""
        record = self._deposits.get(event.tx)
        if record is None:
            return None, f"no deposit with tx {event.tx}"
        if record.client != event.client:
            return None, f"tx {event.tx} belongs to client {record.client}"
        if not record.can_transition(event.kind):
            return None, f"cannot {event.kind.value} a {record.state.value} deposit"
        return record, ""

    def _apply_dispute(self, event: Transaction, account: Account) -> str:
        record, reason = self._disputed_deposit(event)
        if record is None:
            return reason
        if account.locked:
            return "account locked"
        if not account.can_debit(record.amount):
            return f"insufficient funds to hold: available {account.available} < {record.amount}"
        account.move_available_to_held(record.amount)
        record.transition(event.kind)
        return ""

    def _apply_resolve(self, event: Transaction, account: Account) -> str:
        record, reason = self._disputed_deposit(event)
        if record is None:
            return reason
        if account.locked:
            return "account locked"
        if not account.can_release(record.amount):
            return f"held {account.held} < {record.amount}"
        account.move_held_to_available(record.amount)
        record.transition(event.kind)
        return ""

    def _apply_chargeback(self, event: Transaction, account: Account) -> str:
        # No lock check: chargeback is the one event a locked account accepts.
        record, reason = self._disputed_deposit(event)
        if record is None:
            return reason
        account.forfeit_held(record.amount)
        account.lock()
        record.transition(event.kind)
        return ""

    # ========================================================================
    # ENGINE OPERATIONS
    # ========================================================================

    def clone(self) -> LedgerEngine:
        """
        Create an independent copy of this engine.

        Accounts, deposit records, used tx ids and counters are copied;
        applying events to the clone never affects the original.
        """
        cloned = LedgerEngine(name=self.name, verbose=self.verbose)
        cloned._accounts = {
            client: replace(account) for client, account in self._accounts.items()
        }
        cloned._deposits = {
            tx: replace(record) for tx, record in self._deposits.items()
        }
        cloned._used_tx_ids = set(self._used_tx_ids)
        cloned.applied_count = self.applied_count
        cloned.rejected_count = self.rejected_count
        return cloned
