"""
Shared fixtures for the zkarena test suite.
"""

import pytest

from zkarena.circuits import ConstraintSystem
from zkarena.config import CircuitConfig
from zkarena.notes import Keypair


@pytest.fixture
def cs():
    """A fresh constraint system."""
    return ConstraintSystem("test")


@pytest.fixture(scope="session")
def alice():
    return Keypair.from_seed(b"alice-test-seed-0123456789")


@pytest.fixture(scope="session")
def bob():
    return Keypair.from_seed(b"bob-test-seed-0123456789")


@pytest.fixture(scope="session")
def small_deck_config():
    """An eight-card deck keeps card-draw circuits cheap to synthesize."""
    return CircuitConfig(deck_size=8)
