"""
conftest.py - Shared pytest fixtures for dispute ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Empty and pre-funded engines
- CSV fixture directory
"""

import pytest
from pathlib import Path

from dispute_ledger import LedgerEngine, Transaction


DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def engine():
    """Fresh, empty engine."""
    return LedgerEngine("test")


@pytest.fixture
def funded_engine():
    """
    Engine with two funded clients.

    client 1: deposit tx 1 of 10.0, deposit tx 2 of 5.0
    client 2: deposit tx 3 of 20.0
    """
    engine = LedgerEngine("funded")
    engine.apply(Transaction.deposit(1, 1, "10.0"))
    engine.apply(Transaction.deposit(1, 2, "5.0"))
    engine.apply(Transaction.deposit(2, 3, "20.0"))
    return engine


@pytest.fixture
def data_dir():
    return DATA_DIR
