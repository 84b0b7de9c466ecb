"""
Tiebreak rules for league tables.

These functions decide the order of two teams that finished level on points.
Each rule is a comparator over two table entries; rules are applied in the
order configured for the tournament and the first rule that separates the
teams decides.
"""

import logging
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from committee.tournament_core.structure import (
    MatchKey,
    Round,
    ScoresMap,
    lookup_score,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointsTableEntry:
    """One team's line in a league table."""

    team_name: str
    played: int = 0
    won: int = 0
    lost: int = 0
    drawn: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    crest: Optional[str] = None
    qualified: Optional[bool] = None

    def to_dict(self) -> Dict[str, Union[str, int, bool]]:
        """Serialize using the stored camelCase field names."""
        data = {
            "teamName": self.team_name,
            "played": self.played,
            "won": self.won,
            "lost": self.lost,
            "drawn": self.drawn,
            "goalsFor": self.goals_for,
            "goalsAgainst": self.goals_against,
            "goalDifference": self.goal_difference,
            "points": self.points,
        }
        if self.crest is not None:
            data["logo"] = self.crest
        if self.qualified is not None:
            data["qualified"] = self.qualified
        return data


class TiebreakRule(Enum):
    """Tiebreak rules, identified by their stored names."""

    GOAL_DIFFERENCE = "goalDifference"
    GOALS_FOR = "goalsFor"
    HEAD_TO_HEAD = "headToHead"


DEFAULT_TIEBREAKER_RULES: Tuple[TiebreakRule, ...] = (
    TiebreakRule.GOAL_DIFFERENCE,
    TiebreakRule.GOALS_FOR,
    TiebreakRule.HEAD_TO_HEAD,
)


def parse_tiebreak_rules(
    values: Iterable[Union[TiebreakRule, str]],
) -> Tuple[TiebreakRule, ...]:
    """Convert stored rule names into TiebreakRule members, keeping order.

    Unknown names are skipped so that a bad setting never breaks a table.
    """
    rules = []
    for value in values:
        if isinstance(value, TiebreakRule):
            rules.append(value)
            continue
        try:
            rules.append(TiebreakRule(value))
        except ValueError:
            logger.warning("Ignoring unknown tiebreak rule %r", value)
    return tuple(rules)


@dataclass(frozen=True)
class TiebreakContext:
    """Everything a rule may need beyond the two entries being compared."""

    rounds: Sequence[Round] = ()
    scores: ScoresMap = field(default_factory=dict)
    group_name: Optional[str] = None
    away_goals_rule: bool = False


@dataclass(frozen=True)
class HeadToHead:
    """Combined result of all played meetings between two teams."""

    meetings: int = 0
    aggregate_a: int = 0
    aggregate_b: int = 0
    away_goals_a: int = 0
    away_goals_b: int = 0


def head_to_head(
    team_a: str,
    team_b: str,
    rounds: Sequence[Round],
    scores: ScoresMap,
    group_name: Optional[str] = None,
) -> HeadToHead:
    """
    Calculate the head-to-head record between two teams.

    Every match between exactly these two teams in the given rounds counts,
    with ``team1`` of each leg as the home side. Goals scored as ``team2``
    are away goals.

    Args:
        team_a: Name of the first team
        team_b: Name of the second team
        rounds: Rounds to search for meetings
        scores: Recorded scores
        group_name: Group prefix used to build the score keys

    Returns:
        The aggregate and away goals for both teams
    """
    meetings = 0
    aggregate_a = aggregate_b = 0
    away_goals_a = away_goals_b = 0

    for round in rounds:
        for match in round.matches:
            if not match.is_between(team_a, team_b):
                continue

            score = lookup_score(scores, MatchKey.for_match(round, match, group_name))
            if score is None or not score.is_played:
                continue

            meetings += 1
            if match.team1 == team_a:
                aggregate_a += score.score1
                aggregate_b += score.score2
                away_goals_b += score.score2
            else:
                aggregate_b += score.score1
                aggregate_a += score.score2
                away_goals_a += score.score2

    return HeadToHead(meetings, aggregate_a, aggregate_b, away_goals_a, away_goals_b)


def compare_goal_difference(
    a: PointsTableEntry, b: PointsTableEntry, context: TiebreakContext
) -> int:
    return b.goal_difference - a.goal_difference


def compare_goals_for(
    a: PointsTableEntry, b: PointsTableEntry, context: TiebreakContext
) -> int:
    return b.goals_for - a.goals_for


def compare_head_to_head(
    a: PointsTableEntry, b: PointsTableEntry, context: TiebreakContext
) -> int:
    """Compare the aggregate of direct meetings, then away goals if enabled."""
    record = head_to_head(
        a.team_name, b.team_name, context.rounds, context.scores, context.group_name
    )
    if record.meetings == 0:
        return 0
    if record.aggregate_a != record.aggregate_b:
        return record.aggregate_b - record.aggregate_a
    if context.away_goals_rule:
        return record.away_goals_b - record.away_goals_a
    return 0


Comparator = Callable[[PointsTableEntry, PointsTableEntry, TiebreakContext], int]

COMPARATORS: Dict[TiebreakRule, Comparator] = {
    TiebreakRule.GOAL_DIFFERENCE: compare_goal_difference,
    TiebreakRule.GOALS_FOR: compare_goals_for,
    TiebreakRule.HEAD_TO_HEAD: compare_head_to_head,
}


def compare_entries(
    a: PointsTableEntry,
    b: PointsTableEntry,
    rules: Sequence[TiebreakRule],
    context: TiebreakContext,
) -> int:
    """
    Order two table entries.

    Points decide first, then each rule in order. Teams that no rule can
    separate are ordered by name so the table is always fully ordered.

    Returns:
        Negative if ``a`` ranks higher, positive if ``b`` does
    """
    if a.points != b.points:
        return b.points - a.points

    for rule in rules:
        result = COMPARATORS[rule](a, b, context)
        if result != 0:
            return result

    if a.team_name < b.team_name:
        return -1
    if a.team_name > b.team_name:
        return 1
    return 0
