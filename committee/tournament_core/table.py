"""
League table calculation.

Builds a ranked points table from a roster, a schedule and the sparse map of
recorded scores. The calculation is a pure function: inputs are never
modified and every call starts from zero.
"""

import logging
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence, Union

from committee.tournament_core.scoring import ScoringSystem, FOOTBALL_SCORING
from committee.tournament_core.structure import (
    MatchKey,
    Round,
    ScoresMap,
    Team,
    lookup_score,
)
from committee.tournament_core.tiebreaks import (
    DEFAULT_TIEBREAKER_RULES,
    PointsTableEntry,
    TiebreakContext,
    TiebreakRule,
    compare_entries,
    parse_tiebreak_rules,
)

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    """Mutable counters for one team while matches are being added up."""

    team_name: str
    crest: Optional[str] = None
    played: int = 0
    won: int = 0
    lost: int = 0
    drawn: int = 0
    goals_for: int = 0
    goals_against: int = 0

    def record(self, goals_for: int, goals_against: int):
        self.played += 1
        self.goals_for += goals_for
        self.goals_against += goals_against
        if goals_for > goals_against:
            self.won += 1
        elif goals_for < goals_against:
            self.lost += 1
        else:
            self.drawn += 1

    def entry(self, scoring: ScoringSystem) -> PointsTableEntry:
        return PointsTableEntry(
            team_name=self.team_name,
            played=self.played,
            won=self.won,
            lost=self.lost,
            drawn=self.drawn,
            goals_for=self.goals_for,
            goals_against=self.goals_against,
            goal_difference=self.goals_for - self.goals_against,
            points=scoring.points(self.won, self.drawn, self.lost),
            crest=self.crest,
        )


def compute_standings(
    teams: Iterable[Team],
    rounds: Sequence[Round],
    scores: ScoresMap,
    away_goals_rule: bool = False,
    group_name: Optional[str] = None,
    teams_to_qualify: Optional[int] = None,
    tiebreaker_rules: Iterable[Union[TiebreakRule, str]] = DEFAULT_TIEBREAKER_RULES,
    scoring: ScoringSystem = FOOTBALL_SCORING,
) -> List[PointsTableEntry]:
    """
    Calculate a ranked league table.

    Args:
        teams: Teams to rank; names must be unique
        rounds: Rounds whose matches count towards the table
        scores: Recorded scores keyed by MatchKey or stored identifier
        away_goals_rule: Let away goals separate teams level on head-to-head
            aggregate
        group_name: Group whose score keys should be used
        teams_to_qualify: When positive, mark the top N entries as qualified
        tiebreaker_rules: Rules applied in order to teams level on points
        scoring: Points awarded for wins, draws and losses

    Returns:
        Table entries ordered by rank, first place first
    """
    tallies: Dict[str, _Tally] = {}
    for team in teams:
        tallies[team.name] = _Tally(team_name=team.name, crest=team.crest)

    for round in rounds:
        for match in round.matches:
            if match.is_bye:
                logger.debug(
                    "Skipping round %s match %s: bye", round.number, match.number
                )
                continue

            score = lookup_score(scores, MatchKey.for_match(round, match, group_name))
            if score is None or not score.is_played:
                continue

            home = tallies.get(match.team1)
            away = tallies.get(match.team2)
            if home is None or away is None:
                logger.debug(
                    "Skipping round %s match %s: %s vs %s is not between listed teams",
                    round.number,
                    match.number,
                    match.team1,
                    match.team2,
                )
                continue

            home.record(score.score1, score.score2)
            away.record(score.score2, score.score1)

    entries = [tally.entry(scoring) for tally in tallies.values()]

    rules = parse_tiebreak_rules(tiebreaker_rules)
    context = TiebreakContext(
        rounds=rounds,
        scores=scores,
        group_name=group_name,
        away_goals_rule=away_goals_rule,
    )
    ranked = sorted(
        entries, key=cmp_to_key(lambda a, b: compare_entries(a, b, rules, context))
    )

    if teams_to_qualify and teams_to_qualify > 0:
        ranked = [
            replace(entry, qualified=index < teams_to_qualify)
            for index, entry in enumerate(ranked)
        ]

    return ranked
