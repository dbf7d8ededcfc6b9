"""
dispute_ledger - Transaction replay engine with a dispute lifecycle

Replays deposits, withdrawals, disputes, resolves and chargebacks into
per-client account balances using exact fixed-point arithmetic.

Usage:
    from dispute_ledger import LedgerEngine, Transaction

    engine = LedgerEngine()
    engine.apply(Transaction.deposit(1, 1, "10.0"))
    engine.apply(Transaction.withdrawal(1, 2, "2.5"))
    engine.apply(Transaction.dispute(1, 1))   # discarded: only 7.5 available

    for snapshot in engine.accounts():
        print(snapshot.client, snapshot.available, snapshot.held, snapshot.total, snapshot.locked)

From CSV:
    from dispute_ledger import LedgerEngine, load_transactions, write_accounts

    engine = LedgerEngine()
    engine.apply_all(load_transactions("transactions.csv"))
    write_accounts(engine.accounts(), sys.stdout)
"""

# Core types
from .core import (
    Amount,
    Transaction,
    TransactionType,
    DisputeState,
    ApplyResult,
    LedgerError,
    MalformedTransaction,
    AmountOverflow,
    InsufficientFunds,
    InvalidDisputeTransition,
    AMOUNT_DECIMAL_PLACES,
    MAX_AMOUNT,
    MAX_CLIENT_ID,
    MAX_TX_ID,
)

# State
from .account import Account
from .deposits import DepositRecord, next_dispute_state, TERMINAL_STATES

# Engine
from .engine import LedgerEngine, ApplyStats
from .snapshot import AccountSnapshot, snapshot_accounts

# CSV I/O
from .feed import read_transactions, load_transactions, parse_row
from .sink import write_accounts, format_amount
from .generator import generate_transactions, write_transactions

__all__ = [
    # Core
    'Amount', 'Transaction', 'TransactionType', 'DisputeState', 'ApplyResult',
    'LedgerError', 'MalformedTransaction', 'AmountOverflow', 'InsufficientFunds',
    'InvalidDisputeTransition',
    'AMOUNT_DECIMAL_PLACES', 'MAX_AMOUNT', 'MAX_CLIENT_ID', 'MAX_TX_ID',
    # State
    'Account', 'DepositRecord', 'next_dispute_state', 'TERMINAL_STATES',
    # Engine
    'LedgerEngine', 'ApplyStats', 'AccountSnapshot', 'snapshot_accounts',
    # CSV I/O
    'read_transactions', 'load_transactions', 'parse_row',
    'write_accounts', 'format_amount',
    'generate_transactions', 'write_transactions',
]

__version__ = '1.0.0'
