"""
Fluent assertion interface for testing league tables.

This module provides a clean, fluent way to assert table entries and
positions for testing purposes. It works with the pure Python
tournament_core structures.
"""

from typing import List, Optional
from dataclasses import dataclass

from committee.tournament_core.tiebreaks import PointsTableEntry


# Use the built-in AssertionError for proper test framework integration


@dataclass
class StandingsAssertion:
    """Fluent interface for asserting a league table."""

    table: List[PointsTableEntry]
    team_name: Optional[str] = None

    def _get_entry(self) -> PointsTableEntry:
        if self.team_name is None:
            raise AssertionError("No team selected for assertion")
        for entry in self.table:
            if entry.team_name == self.team_name:
                return entry
        raise AssertionError(f"Team '{self.team_name}' not found in table")

    def team(self, name: str) -> "TeamAssertion":
        """Select a team by name for assertions."""
        assertion = TeamAssertion(self.table, name)
        assertion._get_entry()
        return assertion

    def order(self, *names: str) -> "StandingsAssertion":
        """Assert the table lists exactly these teams in this order."""
        actual = [entry.team_name for entry in self.table]
        if actual != list(names):
            raise AssertionError(f"Expected order {list(names)}, got {actual}")
        return self

    def qualified(self, *names: str) -> "StandingsAssertion":
        """Assert exactly these teams are marked as qualified."""
        actual = [entry.team_name for entry in self.table if entry.qualified]
        if actual != list(names):
            raise AssertionError(f"Expected qualified teams {list(names)}, got {actual}")
        return self


class TeamAssertion(StandingsAssertion):
    """Assertions for a specific team."""

    def assert_(self) -> "TeamResultAssertion":
        """Start a chain of assertions for this team."""
        return TeamResultAssertion(self.table, self.team_name)


class TeamResultAssertion(StandingsAssertion):
    """Fluent interface for asserting one team's line."""

    def _check(self, field_name: str, label: str, expected) -> "TeamResultAssertion":
        actual = getattr(self._get_entry(), field_name)
        if actual != expected:
            raise AssertionError(
                f"{self.team_name} expected {expected} {label}, got {actual}"
            )
        return self

    def played(self, expected: int) -> "TeamResultAssertion":
        return self._check("played", "played", expected)

    def wins(self, expected: int) -> "TeamResultAssertion":
        return self._check("won", "wins", expected)

    def draws(self, expected: int) -> "TeamResultAssertion":
        return self._check("drawn", "draws", expected)

    def losses(self, expected: int) -> "TeamResultAssertion":
        return self._check("lost", "losses", expected)

    def goals(self, scored: int, conceded: int) -> "TeamResultAssertion":
        """Assert goals for and against."""
        self._check("goals_for", "goals for", scored)
        return self._check("goals_against", "goals against", conceded)

    def goal_difference(self, expected: int) -> "TeamResultAssertion":
        return self._check("goal_difference", "goal difference", expected)

    def points(self, expected: int) -> "TeamResultAssertion":
        return self._check("points", "points", expected)

    def qualified(self, expected: Optional[bool] = True) -> "TeamResultAssertion":
        return self._check("qualified", "qualified flag", expected)

    def position(self, expected: int) -> "TeamResultAssertion":
        """Assert the final position in the table (1 = top)."""
        entry = self._get_entry()
        actual = self.table.index(entry) + 1
        if actual != expected:
            raise AssertionError(
                f"{self.team_name} expected position {expected}, got {actual}"
            )
        return self


def assert_standings(table: List[PointsTableEntry]) -> StandingsAssertion:
    """Create a fluent assertion interface for a league table.

    Example:
        assert_standings(table).team("Lions").assert_().wins(2).points(6).position(1)
    """
    return StandingsAssertion(table)
