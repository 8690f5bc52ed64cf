"""Level computation.

Levels are flat 1000-XP bands: level = floor(xp / 1000) + 1.
"""

from __future__ import annotations

XP_PER_LEVEL = 1000
MIN_LEVEL = 1


def compute_level(total_xp: int) -> int:
    """Level for a cumulative XP total. Never below MIN_LEVEL."""
    return max(MIN_LEVEL, total_xp // XP_PER_LEVEL + 1)


def level_progress(total_xp: int) -> dict:
    """Progress within the current band, for UI progress bars."""
    level = compute_level(total_xp)
    floor_xp = (level - 1) * XP_PER_LEVEL
    return {
        "level": level,
        "xp_into_level": max(0, total_xp - floor_xp),
        "xp_for_level": XP_PER_LEVEL,
        "next_level": level + 1,
    }
