"""
Level progression derived from experience.

The level curve is quadratic: reaching level ``L`` takes
``50 * L * (L + 1)`` experience in total.  Both functions are pure and
never fail for non-negative experience.
"""

import math


def calculate_level(experience: int) -> int:
    """Return the level reached with ``experience`` points.

    Equivalent to ``floor((sqrt(2500 + 200 * experience) - 50) / 100)``;
    ``math.isqrt`` keeps it exact on the level thresholds, where the
    radicand is a perfect square.
    """
    return (math.isqrt(2500 + 200 * experience) - 50) // 100


def calculate_until_next_level(experience: int, level: int) -> int:
    """Return the experience still missing to reach ``level + 1``."""
    return 50 * (level + 1) * (level + 2) - experience


def calculate_progress(experience: int) -> tuple[int, int]:
    """Return ``(level, until_next_level)`` for ``experience``."""
    level = calculate_level(experience)
    return level, calculate_until_next_level(experience, level)
