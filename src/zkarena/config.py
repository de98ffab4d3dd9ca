"""
Circuit-level configuration for zkarena.

Sizes that are fixed per deployment (deck size, Merkle depth, rarity scale)
live here so every gadget and application circuit reads them from one place.
"""

from dataclasses import dataclass, field
from typing import Tuple

from .errors import ConfigurationError

# Largest bit width num2bits accepts; full-field decompositions use the strict form.
MAX_SAFE_BITS = 253
FIELD_BITS = 254


@dataclass(frozen=True)
class CircuitConfig:
    """Configuration for constraint synthesis."""

    deck_size: int = 52
    merkle_depth: int = 20
    rarity_scale: int = 10000
    random_bits: int = 14
    num_tiers: int = 4
    address_bits: int = 160
    max_constraints: int = 2_000_000
    default_thresholds: Tuple[int, ...] = field(default=(100, 500, 2000, 10000))

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.deck_size < 2:
            raise ConfigurationError("deck_size must be at least 2", "deck_size")

        if self.deck_size > 2**self.random_bits:
            raise ConfigurationError(
                "deck_size cannot exceed 2^random_bits", "deck_size"
            )

        if not 1 <= self.merkle_depth <= 64:
            raise ConfigurationError(
                "merkle_depth must be between 1 and 64", "merkle_depth"
            )

        if self.random_bits < 1 or self.random_bits > MAX_SAFE_BITS:
            raise ConfigurationError("random_bits out of range", "random_bits")

        # A single conditional subtraction reduces into [0, scale) only if 2^bits < 2*scale.
        if not self.rarity_scale < 2**self.random_bits < 2 * self.rarity_scale:
            raise ConfigurationError(
                "rarity_scale must satisfy scale < 2^random_bits < 2*scale",
                "rarity_scale",
            )

        if self.num_tiers < 1:
            raise ConfigurationError("num_tiers must be positive", "num_tiers")

        if len(self.default_thresholds) != self.num_tiers:
            raise ConfigurationError(
                "default_thresholds must have num_tiers entries", "default_thresholds"
            )

        if self.default_thresholds[-1] != self.rarity_scale:
            raise ConfigurationError(
                "last threshold must equal rarity_scale", "default_thresholds"
            )

        thresholds = self.default_thresholds
        if any(t < 0 for t in thresholds) or any(
            lower >= upper for lower, upper in zip(thresholds, thresholds[1:])
        ):
            raise ConfigurationError(
                "default_thresholds must be non-negative and strictly increasing",
                "default_thresholds",
            )

        if not 1 <= self.address_bits <= MAX_SAFE_BITS:
            raise ConfigurationError("address_bits out of range", "address_bits")

        if self.max_constraints <= 0:
            raise ConfigurationError(
                "max_constraints must be positive", "max_constraints"
            )


DEFAULT_CONFIG = CircuitConfig()
