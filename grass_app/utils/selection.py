"""
Uniform selection over small fixed lists.

The random source is injected so callers (and tests) control the draw.
Anything with a ``random() -> float in [0, 1)`` method works, which
includes ``random.Random`` instances and the ``random`` module itself.
"""

import math
from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Minimal random source interface."""

    def random(self) -> float: ...


def uniform_index(count: int, rng: RandomSource) -> int:
    """
    Draw an index in [0, count) uniformly.

    Args:
        count: Number of items, must be positive
        rng: Random source

    Returns:
        Selected index

    Raises:
        ValueError: If count is not positive
    """
    if count <= 0:
        raise ValueError(f"Cannot select from {count} items")

    # Clamp guards sources that return exactly 1.0
    return min(int(math.floor(rng.random() * count)), count - 1)


def pick_uniform(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one item from a non-empty sequence uniformly at random."""
    return items[uniform_index(len(items), rng)]
