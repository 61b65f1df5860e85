"""Wellbeing scales for the daily progress journal.

The tracker stores mood, productivity satisfaction and health feeling as a
single token: the emoji the user tapped, the option value behind it
(``very_happy``) or, for older entries, the option label (``Very Happy``).
Each scale parses any of those spellings into a member carrying a 1-5 score.
"""

import logging
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 3

# Emoji presentation selector some keyboards append to glyphs
_VARIATION_SELECTOR = "\ufe0f"


class WellbeingScale(Enum):
    """Base class for 1-5 wellbeing scales."""

    def __init__(self, token: str, score: int, emoji: str, label: str):
        self.token = token
        self.score = score
        self.emoji = emoji
        self.label = label

    @classmethod
    def neutral(cls) -> "WellbeingScale":
        for member in cls:
            if member.score == NEUTRAL_SCORE:
                return member
        raise LookupError(f"{cls.__name__} has no neutral member")

    @classmethod
    def _lookup(cls) -> Dict[str, "WellbeingScale"]:
        table = {}
        for member in cls:
            table[member.token] = member
            table[member.emoji] = member
            table[member.label.lower()] = member
        return table

    @classmethod
    def parse(cls, raw: Optional[str]) -> "WellbeingScale":
        """Parse a stored token, falling back to the neutral member."""
        if raw is None:
            return cls.neutral()
        key = str(raw).replace(_VARIATION_SELECTOR, "").strip()
        table = cls._lookup()
        member = table.get(key) or table.get(key.lower())
        if member is None:
            logger.debug("Unrecognized %s token %r, treating as neutral", cls.__name__, raw)
            return cls.neutral()
        return member


class MoodLevel(WellbeingScale):
    """Overall mood for the day."""
    VERY_HAPPY = ("very_happy", 5, "\U0001F604", "Very Happy")
    HAPPY = ("happy", 4, "\U0001F642", "Happy")
    NEUTRAL = ("neutral", 3, "\U0001F610", "Neutral")
    SAD = ("sad", 2, "\U0001F615", "Sad")
    VERY_SAD = ("very_sad", 1, "\U0001F622", "Very Sad")


class ProductivityLevel(WellbeingScale):
    """Satisfaction with the day's productivity."""
    VERY_SATISFIED = ("very_satisfied", 5, "\U0001F929", "Very Satisfied")
    SATISFIED = ("satisfied", 4, "\U0001F60A", "Satisfied")
    NEUTRAL = ("neutral", 3, "\U0001F610", "Neutral")
    NOT_SATISFIED = ("not_satisfied", 2, "\U0001F614", "Not Satisfied")
    VERY_UNSATISFIED = ("very_unsatisfied", 1, "\U0001F629", "Very Unsatisfied")


class HealthLevel(WellbeingScale):
    """How physically well the user felt."""
    EXCELLENT = ("excellent", 5, "\U0001F4AA", "Excellent")
    GOOD = ("good", 4, "\U0001F60A", "Good")
    OKAY = ("okay", 3, "\U0001F610", "Okay")
    UNWELL = ("unwell", 2, "\U0001F637", "Unwell")
    VERY_UNWELL = ("very_unwell", 1, "\U0001F912", "Very Unwell")


class WellbeingDimension(Enum):
    """Scored journal dimensions."""
    MOOD = "mood"
    PRODUCTIVITY = "productivity"
    HEALTH = "health"

    @property
    def scale(self):
        return _DIMENSION_SCALES[self]


_DIMENSION_SCALES = {
    WellbeingDimension.MOOD: MoodLevel,
    WellbeingDimension.PRODUCTIVITY: ProductivityLevel,
    WellbeingDimension.HEALTH: HealthLevel,
}


def get_emoticon_score(token: Optional[str], dimension: WellbeingDimension) -> int:
    """Score a stored wellbeing token on its dimension's 1-5 scale."""
    return dimension.scale.parse(token).score
