"""Enumerations for htmlencoding."""

import enum


class Confidence(enum.IntEnum):
    """How far an encoding decision may be overridden by later evidence.

    Members are ordered by precedence: a decision can only be replaced by a
    candidate of equal or higher rank, and never once it is final.
    """

    TENTATIVE = 1
    CERTAIN = 2
    IRRELEVANT = 3

    @property
    def is_final(self) -> bool:
        """Whether no later signal may replace a decision with this confidence."""
        return self is not Confidence.TENTATIVE
