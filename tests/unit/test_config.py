"""
Unit tests for circuit configuration.
"""

import pytest

from zkarena.config import DEFAULT_CONFIG, CircuitConfig
from zkarena.errors import ConfigurationError


class TestCircuitConfig:
    """Test CircuitConfig validation."""

    def test_defaults(self):
        """Test the default configuration."""
        DEFAULT_CONFIG.validate()
        assert DEFAULT_CONFIG.deck_size == 52
        assert DEFAULT_CONFIG.merkle_depth == 20
        assert DEFAULT_CONFIG.rarity_scale == 10000
        assert DEFAULT_CONFIG.random_bits == 14
        assert DEFAULT_CONFIG.default_thresholds == (100, 500, 2000, 10000)

    def test_small_deck_is_valid(self):
        CircuitConfig(deck_size=8).validate()

    @pytest.mark.parametrize(
        "overrides,key",
        [
            ({"deck_size": 1}, "deck_size"),
            ({"deck_size": 20000}, "deck_size"),
            ({"merkle_depth": 0}, "merkle_depth"),
            ({"random_bits": 13}, "rarity_scale"),
            ({"rarity_scale": 5000, "default_thresholds": (100, 500, 2000, 5000)}, "rarity_scale"),
            ({"num_tiers": 3}, "default_thresholds"),
            ({"default_thresholds": (100, 500, 2000, 9000)}, "default_thresholds"),
            ({"default_thresholds": (500, 100, 2000, 10000)}, "default_thresholds"),
            ({"default_thresholds": (100, 100, 2000, 10000)}, "default_thresholds"),
            ({"default_thresholds": (-5, 100, 2000, 10000)}, "default_thresholds"),
            ({"default_thresholds": (100, 500, 20000, 10000)}, "default_thresholds"),
            ({"address_bits": 254}, "address_bits"),
            ({"max_constraints": 0}, "max_constraints"),
        ],
    )
    def test_invalid(self, overrides, key):
        """Test that each invalid setting is reported with its key."""
        with pytest.raises(ConfigurationError) as exc_info:
            CircuitConfig(**overrides).validate()
        assert exc_info.value.config_key == key

    def test_custom_thresholds(self):
        CircuitConfig(default_thresholds=(0, 1, 9999, 10000)).validate()

    def test_frozen(self):
        with pytest.raises(Exception):
            DEFAULT_CONFIG.deck_size = 10
