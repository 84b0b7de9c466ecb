"""
Tournament-level views over the league tables.

Works out which tables a tournament shows, who qualifies from a group stage,
when rounds are complete and who won a round-robin competition.
"""

from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field, replace

from committee.tournament_core.structure import (
    Group,
    MatchKey,
    Round,
    ScoreRecord,
    ScoresMap,
    Tournament,
    TournamentType,
    lookup_score,
)
from committee.tournament_core.table import compute_standings
from committee.tournament_core.tiebreaks import PointsTableEntry


@dataclass(frozen=True)
class StandingsTable:
    """A titled league table."""

    title: str
    entries: List[PointsTableEntry] = field(default_factory=list)

    @property
    def qualified_teams(self) -> List[str]:
        return [entry.team_name for entry in self.entries if entry.qualified]


@dataclass(frozen=True)
class QualificationSummary:
    """Group tables at the end of a group stage and the teams going through."""

    tables: List[StandingsTable]
    teams_per_group: int
    qualified: List[str]


def _group_table(
    tournament: Tournament, group: Group, teams_to_qualify: Optional[int]
) -> StandingsTable:
    settings = tournament.settings
    entries = compute_standings(
        tournament.teams_named(list(group.teams)),
        group.rounds,
        tournament.scores,
        away_goals_rule=settings.away_goals_rule,
        group_name=group.name,
        teams_to_qualify=teams_to_qualify,
        tiebreaker_rules=settings.tiebreaker_rules,
    )
    return StandingsTable(group.name, entries)


def _teams_per_group(tournament: Tournament, groups: Sequence[Group]) -> int:
    if not groups:
        return 0
    return (tournament.settings.teams_advancing or 0) // len(groups)


def standings_tables(tournament: Tournament) -> List[StandingsTable]:
    """
    Build the league tables shown for a tournament.

    Hybrid tournaments show their group stage. Grouped schedules give one
    table per group, marking qualifiers for hybrid tournaments. Ungrouped
    round-robin schedules give a single overall table. Knockout-only
    tournaments have no tables.
    """
    settings = tournament.settings
    fixture = tournament.fixture
    is_hybrid = settings.tournament_type == TournamentType.HYBRID

    rounds = fixture.rounds
    groups = fixture.groups
    if is_hybrid and fixture.group_stage is not None:
        rounds = fixture.group_stage.rounds
        groups = fixture.group_stage.groups

    if groups:
        teams_to_qualify = _teams_per_group(tournament, groups) if is_hybrid else 0
        return [_group_table(tournament, group, teams_to_qualify) for group in groups]

    if rounds and settings.tournament_type == TournamentType.ROUND_ROBIN:
        entries = compute_standings(
            tournament.teams,
            rounds,
            tournament.scores,
            away_goals_rule=settings.away_goals_rule,
            tiebreaker_rules=settings.tiebreaker_rules,
        )
        return [StandingsTable("Overall Standings", entries)]

    return []


def qualification_summary(tournament: Tournament) -> QualificationSummary:
    """
    Summarise the end of a grouped group stage.

    The teams advancing are split evenly between groups; the top teams of each
    group qualify.

    Raises:
        ValueError: If the tournament has no grouped group stage
    """
    stage = tournament.fixture.group_stage
    if stage is None or not stage.groups:
        raise ValueError(
            "Knockout progression needs a hybrid tournament with a grouped group stage"
        )

    teams_per_group = _teams_per_group(tournament, stage.groups)
    tables = [_group_table(tournament, group, teams_per_group) for group in stage.groups]

    qualified = []
    for table in tables:
        qualified.extend(table.qualified_teams)

    return QualificationSummary(tables, teams_per_group, qualified)


def is_round_complete(
    rounds: Sequence[Round],
    scores: ScoresMap,
    round_number: int,
    group_name: Optional[str] = None,
) -> bool:
    """Check that every real match of a round has a recorded score."""
    for round in rounds:
        if round.number != round_number:
            continue
        for match in round.matches:
            if match.is_bye:
                continue
            score = lookup_score(scores, MatchKey.for_match(round, match, group_name))
            if score is None or not score.is_played:
                return False
    return True


def is_stage_complete(
    rounds: Sequence[Round], scores: ScoresMap, group_name: Optional[str] = None
) -> bool:
    """Check that every round has been completed."""
    return all(
        is_round_complete(rounds, scores, round.number, group_name) for round in rounds
    )


def lock_round(
    scores: ScoresMap,
    rounds: Sequence[Round],
    round_number: int,
    group_name: Optional[str] = None,
) -> Dict[str, ScoreRecord]:
    """
    Lock every match of a round against further score changes.

    Matches without a record get an empty locked record. The result is a new
    score map keyed by stored identifiers; the given map is not modified.
    """
    locked = {}
    for key, value in scores.items():
        record = ScoreRecord.coerce(value)
        if record is not None:
            locked[str(key)] = record

    for round in rounds:
        if round.number != round_number:
            continue
        for match in round.matches:
            key = MatchKey.for_match(round, match, group_name)
            record = lookup_score(scores, key) or ScoreRecord()
            locked[str(key)] = replace(record, locked=True)

    return locked


def round_robin_champion(tournament: Tournament) -> Optional[str]:
    """Get the winner of a finished, ungrouped round-robin tournament.

    Returns:
        The name of the team top of the overall table, or None if the
        tournament is not a plain round-robin or is still being played
    """
    settings = tournament.settings
    fixture = tournament.fixture
    if settings.tournament_type in (
        TournamentType.HYBRID,
        TournamentType.SINGLE_ELIMINATION,
    ):
        return None
    if not fixture.rounds or fixture.groups:
        return None
    if not is_stage_complete(fixture.rounds, tournament.scores):
        return None

    entries = compute_standings(
        tournament.teams,
        fixture.rounds,
        tournament.scores,
        away_goals_rule=settings.away_goals_rule,
        tiebreaker_rules=settings.tiebreaker_rules,
    )
    if not entries:
        return None
    return entries[0].team_name
