import pytest

from player_registry_api.app.services.leveling import (
    calculate_level,
    calculate_progress,
    calculate_until_next_level,
)


@pytest.mark.parametrize(
    "experience, level, until_next_level",
    [
        (0, 0, 100),
        (99, 0, 1),
        (100, 1, 200),
        (299, 1, 1),
        (300, 2, 300),
        (1500, 5, 600),
        (10_000_000, 446, 12800),
    ],
)
def test_progress_values(experience, level, until_next_level):
    assert calculate_progress(experience) == (level, until_next_level)


def test_level_thresholds_are_exact():
    # 50 * L * (L + 1) experience reaches level L exactly
    for level in range(0, 447):
        threshold = 50 * level * (level + 1)
        assert calculate_level(threshold) == level
        if threshold:
            assert calculate_level(threshold - 1) == level - 1


def test_level_is_monotonic_and_remaining_is_positive():
    previous = 0
    for experience in list(range(0, 10_000_001, 997)) + [10_000_000]:
        level, remaining = calculate_progress(experience)
        assert level >= previous
        assert remaining > 0
        previous = level


def test_until_next_level_uses_given_level():
    assert calculate_until_next_level(150, 1) == 150
