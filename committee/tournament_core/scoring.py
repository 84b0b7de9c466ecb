"""
Configurable scoring systems for tournaments.

This module defines how match scores are converted to league points.
"""

from typing import Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringSystem:
    """Defines how matches are scored in a league table."""

    win_points: int = 3
    draw_points: int = 1
    loss_points: int = 0

    def match_points(self, score1: int, score2: int) -> Tuple[int, int]:
        """
        Determine league points based on a match score.

        Args:
            score1: Goals scored by the first team
            score2: Goals scored by the second team

        Returns:
            Tuple of (first_team_points, second_team_points)
        """
        if score1 > score2:
            return (self.win_points, self.loss_points)
        elif score1 < score2:
            return (self.loss_points, self.win_points)
        else:
            return (self.draw_points, self.draw_points)

    def points(self, won: int, drawn: int, lost: int = 0) -> int:
        """Total league points for a win/draw/loss record."""
        return won * self.win_points + drawn * self.draw_points + lost * self.loss_points


# Three points for a win, one for a draw
FOOTBALL_SCORING = ScoringSystem()

# Older two-point system, kept for leagues that still use it
TWO_ONE_ZERO_SCORING = ScoringSystem(win_points=2, draw_points=1, loss_points=0)
