"""
test_generator.py - Unit tests for random transaction streams
"""

import io
import pytest
from decimal import Decimal

from dispute_ledger import (
    LedgerEngine, TransactionType,
    generate_transactions, write_transactions, read_transactions,
)


class TestGenerateTransactions:

    def test_count(self):
        assert len(generate_transactions(25, seed=1)) == 25
        assert generate_transactions(0, seed=1) == []

    def test_same_seed_same_stream(self):
        assert generate_transactions(200, seed=42) == generate_transactions(200, seed=42)

    def test_different_seed_different_stream(self):
        assert generate_transactions(200, seed=1) != generate_transactions(200, seed=2)

    def test_amount_bearing_rows_use_row_number(self):
        for i, event in enumerate(generate_transactions(300, seed=3), start=1):
            if event.kind.requires_amount:
                assert event.tx == i

    def test_references_point_backwards(self):
        for i, event in enumerate(generate_transactions(300, seed=4), start=1):
            if event.kind.is_dispute_related:
                assert 0 <= event.tx < i
                assert event.amount is None

    def test_amounts_have_two_places(self):
        for event in generate_transactions(300, seed=5):
            if event.amount is not None:
                value = event.amount.value
                assert Decimal("0.01") <= value <= Decimal("9999.99")
                assert value == value.quantize(Decimal("0.01"))

    def test_client_pool(self):
        events = generate_transactions(300, clients=3, seed=6)
        assert {event.client for event in events} <= {0, 1, 2}

    def test_every_type_appears(self):
        kinds = {event.kind for event in generate_transactions(500, seed=7)}
        assert kinds == set(TransactionType)

    @pytest.mark.parametrize("kwargs", [
        {"count": -1},
        {"count": 10, "clients": 0},
        {"count": 10, "clients": 65537},
    ])
    def test_bad_arguments(self, kwargs):
        with pytest.raises(ValueError):
            generate_transactions(**kwargs)


class TestWriteTransactions:

    def test_output_reads_back(self):
        events = generate_transactions(100, seed=8)
        out = io.StringIO()
        assert write_transactions(events, out) == 100
        out.seek(0)
        assert list(read_transactions(out)) == events

    def test_dispute_rows_have_empty_amount(self):
        events = [e for e in generate_transactions(100, seed=9) if e.kind.is_dispute_related][:1]
        out = io.StringIO()
        write_transactions(events, out)
        lines = out.getvalue().splitlines()
        assert lines[0] == "type,client,tx,amount"
        assert lines[1].endswith(",")

    def test_generated_stream_replays_cleanly(self):
        engine = LedgerEngine("generated")
        stats = engine.apply_all(generate_transactions(1000, clients=10, seed=10))
        assert stats.total == 1000
        result = engine.verify_invariants()
        assert result['valid'], result['violations']
