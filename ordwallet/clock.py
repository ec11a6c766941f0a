"""Hand angles of the block clock."""

from __future__ import annotations

from dataclasses import dataclass

SUBSIDY_HALVING_INTERVAL = 210_000
DIFFCHANGE_INTERVAL = 2016
FIRST_POST_SUBSIDY_HEIGHT = 33 * SUBSIDY_HALVING_INTERVAL


@dataclass(frozen=True)
class Clock:
    """Angles in degrees for a block height.

    The hour hand tracks progress to the last subsidy block, the minute hand
    progress through the current halving epoch, and the second hand progress
    through the current difficulty adjustment period.
    """

    height: int
    hour: float
    minute: float
    second: float

    @classmethod
    def from_height(cls, height: int) -> Clock:
        if height < 0:
            raise ValueError(f"height must not be negative: {height}")
        capped = min(height, FIRST_POST_SUBSIDY_HEIGHT)
        return cls(
            height=height,
            hour=float(capped % FIRST_POST_SUBSIDY_HEIGHT)
            / float(FIRST_POST_SUBSIDY_HEIGHT)
            * 360.0,
            minute=float(capped % SUBSIDY_HALVING_INTERVAL)
            / float(SUBSIDY_HALVING_INTERVAL)
            * 360.0,
            second=float(height % DIFFCHANGE_INTERVAL) / float(DIFFCHANGE_INTERVAL) * 360.0,
        )