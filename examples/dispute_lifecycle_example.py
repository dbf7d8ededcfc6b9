#!/usr/bin/env python3
"""
Dispute Lifecycle Demo

Walks one client through deposits, a withdrawal, a resolved dispute and a
charged-back dispute, printing balances after every event.

Key concepts:
- Disputes move a deposit's amount from available to held
- Resolve releases held funds; chargeback forfeits them and locks the account
- Discarded events (insufficient funds, locked account) change nothing

Usage:
    python examples/dispute_lifecycle_example.py
"""

import sys
from pathlib import Path

# Add project root to path so we can import dispute_ledger
sys.path.insert(0, str(Path(__file__).parent.parent))

from dispute_ledger import LedgerEngine, Transaction, write_accounts


def show(engine, event, result):
    snapshot = engine.get_account(event.client)
    print(f"{event!r:<48} {result.value:<9} "
          f"available={snapshot.available} held={snapshot.held} "
          f"total={snapshot.total} locked={snapshot.locked}")


def main():
    print("=" * 70)
    print("DISPUTE LIFECYCLE")
    print("=" * 70)

    engine = LedgerEngine("demo")
    events = [
        Transaction.deposit(1, 1, "100.00"),
        Transaction.deposit(1, 2, "40.00"),
        Transaction.withdrawal(1, 3, "45.50"),
        Transaction.dispute(1, 1),          # discarded: only 94.50 available
        Transaction.dispute(1, 2),
        Transaction.withdrawal(1, 4, "80"),  # discarded: 40 is held
        Transaction.resolve(1, 2),
        Transaction.dispute(1, 2),           # discarded: resolve is final
        Transaction.deposit(2, 5, "10"),
        Transaction.dispute(2, 5),
        Transaction.chargeback(2, 5),
        Transaction.deposit(2, 6, "1"),      # discarded: account locked
    ]

    for event in events:
        show(engine, event, engine.apply(event))

    print()
    print(f"applied={engine.applied_count} rejected={engine.rejected_count}")
    print()
    write_accounts(engine.accounts(sort_by_client=True), sys.stdout)

    result = engine.verify_invariants()
    print()
    print("invariants:", "OK" if result['valid'] else result['violations'])


if __name__ == "__main__":
    main()
