"""
Conformance Test Suite

This suite defines the normative behavior of the dispute ledger engine.

The tests are organized by invariant:
1. test_balance_invariants.py - Non-negative available, total = available + held
2. test_event_atomicity.py - A discarded event has no observable effect
3. test_tx_uniqueness.py - Each tx id is committed at most once
4. test_lock_monotonicity.py - Locked accounts stay locked and frozen
5. test_replay_determinism.py - Same input, same output
6. test_funds_conservation.py - Balances are fully explained by committed events

These tests use hypothesis for property-based testing.
"""
