"""
Transaction Id Uniqueness Conformance Tests

INVARIANT: tx ids are global across clients and types.

    ∀ tx: at most one deposit or withdrawal carrying tx is APPLIED
    A deposit record, once created, keeps its client and amount forever

Discarded deposits and withdrawals do not consume their id.
"""

from collections import Counter

from hypothesis import given, settings

from dispute_ledger import LedgerEngine, ApplyResult, Transaction
from tests.strategies import event_streams


class TestTxUniquenessProperties:

    @given(event_streams)
    @settings(max_examples=200)
    def test_each_id_committed_once(self, events):
        engine = LedgerEngine("uniqueness")
        committed = Counter()
        for event in events:
            if engine.apply(event) is ApplyResult.APPLIED and event.kind.requires_amount:
                committed[event.tx] += 1
        assert all(n == 1 for n in committed.values())
        for tx in committed:
            assert engine.has_transaction(tx)

    @given(event_streams)
    @settings(max_examples=200)
    def test_deposit_record_is_first_committed_deposit(self, events):
        engine = LedgerEngine("uniqueness")
        first = {}
        for event in events:
            result = engine.apply(event)
            if result is ApplyResult.APPLIED and event.kind.value == "deposit":
                first.setdefault(event.tx, event)
        for tx, event in first.items():
            record = engine.get_deposit(tx)
            assert (record.client, record.amount) == (event.client, event.amount)


class TestTxUniquenessExamples:

    def test_replaying_a_stream_commits_nothing_twice(self, engine):
        stream = [
            Transaction.deposit(1, 1, "5"),
            Transaction.withdrawal(1, 2, "1"),
            Transaction.deposit(2, 3, "7"),
        ]
        first = engine.apply_all(stream)
        second = engine.apply_all(stream)
        assert (first.applied, second.applied, second.rejected) == (3, 0, 3)

    def test_discarded_withdrawal_id_can_be_reused(self, engine):
        assert engine.apply(Transaction.withdrawal(1, 1, "5")) is ApplyResult.REJECTED
        assert engine.apply(Transaction.deposit(1, 1, "5")) is ApplyResult.APPLIED
