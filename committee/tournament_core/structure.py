"""
Tournament structures for representing fixtures and recorded scores.

This module provides a simple, clean way to represent tournaments with:
- Teams, identified by name
- Matches between two team slots, grouped into rounds (and optionally groups)
- A sparse score map keyed by match identifiers
"""

import re
from collections import abc
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum


BYE = "Bye"


def is_bye_name(name: Optional[str]) -> bool:
    """Return True if a team slot holds the bye placeholder (any letter case)."""
    return isinstance(name, str) and name.lower() == "bye"


@dataclass(frozen=True)
class Team:
    """A registered team. The name is the join key used by matches."""

    name: str
    crest: Optional[str] = None


@dataclass(frozen=True)
class Match:
    """A scheduled match between two team slots.

    ``team1`` is treated as the home side when legs are compared.
    """

    number: int
    team1: str
    team2: str
    venue: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return is_bye_name(self.team1) or is_bye_name(self.team2)

    def is_between(self, team_a: str, team_b: str) -> bool:
        """Return True if this match is between exactly these two teams."""
        return (self.team1 == team_a and self.team2 == team_b) or (
            self.team1 == team_b and self.team2 == team_a
        )


@dataclass(frozen=True)
class Round:
    """A round in a tournament containing multiple matches."""

    number: int
    matches: Tuple[Match, ...] = ()
    name: Optional[str] = None

    def add_match(self, match: Match) -> "Round":
        """Return a new Round with the match added (immutable pattern)."""
        return Round(self.number, tuple(self.matches) + (match,), self.name)


@dataclass(frozen=True)
class Group:
    """A named group of teams with its own round-robin schedule."""

    name: str
    teams: Tuple[str, ...] = ()
    rounds: Tuple[Round, ...] = ()


@dataclass(frozen=True)
class Stage:
    """One stage of a hybrid tournament (group stage or knockout stage)."""

    rounds: Tuple[Round, ...] = ()
    groups: Tuple[Group, ...] = ()


@dataclass(frozen=True)
class Fixture:
    """The complete schedule of a tournament.

    Only some of the fields are populated depending on the format:
    plain ``rounds`` for round-robin and single elimination, ``groups`` for
    grouped round-robin, and ``group_stage``/``knockout_stage`` for hybrid.
    """

    rounds: Tuple[Round, ...] = ()
    groups: Tuple[Group, ...] = ()
    group_stage: Optional[Stage] = None
    knockout_stage: Optional[Stage] = None


@dataclass(frozen=True)
class ScoreRecord:
    """Recorded score for one match.

    Both scores are ``None`` until the match is played. The tiebreak scores
    (penalties) only decide knockout matches and never count in standings.
    """

    score1: Optional[int] = None
    score2: Optional[int] = None
    score1_tiebreak: Optional[int] = None
    score2_tiebreak: Optional[int] = None
    locked: bool = False

    @property
    def is_played(self) -> bool:
        return _is_goal_count(self.score1) and _is_goal_count(self.score2)

    @property
    def has_tiebreak(self) -> bool:
        return _is_goal_count(self.score1_tiebreak) and _is_goal_count(
            self.score2_tiebreak
        )

    @classmethod
    def coerce(cls, value: Any) -> Optional["ScoreRecord"]:
        """Build a ScoreRecord from a record or raw mapping.

        Returns None for values that cannot be read as a score record.
        """
        if isinstance(value, ScoreRecord):
            return value
        if not isinstance(value, abc.Mapping):
            return None

        score1 = value.get("score1")
        score2 = value.get("score2")
        if not _is_optional_goal_count(score1) or not _is_optional_goal_count(score2):
            return None

        tiebreak1 = value.get("score1_tiebreak")
        tiebreak2 = value.get("score2_tiebreak")
        return cls(
            score1=score1,
            score2=score2,
            score1_tiebreak=tiebreak1 if _is_goal_count(tiebreak1) else None,
            score2_tiebreak=tiebreak2 if _is_goal_count(tiebreak2) else None,
            locked=bool(value.get("locked", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"score1": self.score1, "score2": self.score2, "locked": self.locked}
        if self.score1_tiebreak is not None or self.score2_tiebreak is not None:
            data["score1_tiebreak"] = self.score1_tiebreak
            data["score2_tiebreak"] = self.score2_tiebreak
        return data


def _is_goal_count(value: Any) -> bool:
    # bool is an int subclass but never a valid score
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_optional_goal_count(value: Any) -> bool:
    return value is None or _is_goal_count(value)


_MATCH_ID_PATTERN = re.compile(r"^(?:g(?P<group>.+))?r(?P<round>\d+)m(?P<match>\d+)$")


@dataclass(frozen=True)
class MatchKey:
    """Structured key of a score record.

    ``str(key)`` produces the stored identifier: ``r1m2`` for ungrouped
    matches and ``gAr1m2`` for match 2 of round 1 in group "A".
    """

    round_number: int
    match_number: int
    group_name: Optional[str] = None

    def __post_init__(self):
        if not self.group_name:
            object.__setattr__(self, "group_name", None)

    def __str__(self) -> str:
        identifier = f"r{self.round_number}m{self.match_number}"
        if self.group_name:
            return f"g{self.group_name}{identifier}"
        return identifier

    @classmethod
    def for_match(
        cls, round: Round, match: Match, group_name: Optional[str] = None
    ) -> "MatchKey":
        return cls(round.number, match.number, group_name)

    @classmethod
    def parse(cls, text: str) -> "MatchKey":
        """Parse a stored identifier back into a key.

        Group names are greedy, so ``gAr1r2m3`` is group "Ar1", round 2.
        """
        matched = _MATCH_ID_PATTERN.match(text) if isinstance(text, str) else None
        if matched is None:
            raise ValueError(f"Not a match identifier: {text!r}")
        return cls(
            int(matched.group("round")),
            int(matched.group("match")),
            matched.group("group"),
        )


ScoresMap = Mapping[Union[MatchKey, str], Any]


def lookup_score(scores: ScoresMap, key: MatchKey) -> Optional[ScoreRecord]:
    """Find the score record for a key in a map keyed by MatchKey or string."""
    value = scores.get(key)
    if value is None:
        value = scores.get(str(key))
    return ScoreRecord.coerce(value)


class TournamentType(Enum):
    """Format of a tournament."""

    ROUND_ROBIN = "round-robin"
    SINGLE_ELIMINATION = "single elimination"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class TournamentSettings:
    """Rules configured for a tournament."""

    tournament_type: Optional[TournamentType] = None
    away_goals_rule: bool = False
    # Stored tournaments without configured rules were displayed with these
    tiebreaker_rules: Tuple[str, ...] = ("goalDifference", "goalsFor")
    teams_advancing: Optional[int] = None
    knockout_home_and_away: bool = False
    round_robin_home_and_away: bool = False


@dataclass(frozen=True)
class Tournament:
    """A complete tournament: roster, schedule, recorded scores and rules."""

    name: str
    teams: Tuple[Team, ...] = ()
    fixture: Fixture = field(default_factory=Fixture)
    scores: Mapping[Union[MatchKey, str], ScoreRecord] = field(default_factory=dict)
    settings: TournamentSettings = field(default_factory=TournamentSettings)
    active_round: int = 1

    def team(self, name: str) -> Optional[Team]:
        for team in self.teams:
            if team.name == name:
                return team
        return None

    def teams_named(self, names: List[str]) -> List[Team]:
        """Resolve names to roster teams, dropping names not in the roster."""
        return [team for team in (self.team(name) for name in names) if team]
