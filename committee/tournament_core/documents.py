"""
Conversion between stored tournament documents and tournament structures.

Tournaments are stored as JSON documents using camelCase field names, with
scores keyed by identifiers such as ``r1m2`` or ``gAr1m2``. This module reads
those documents into the frozen structures used by the calculations and
writes results back in the same shape.
"""

import logging
from collections import abc
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from committee.tournament_core.structure import (
    Fixture,
    Group,
    Match,
    MatchKey,
    Round,
    ScoreRecord,
    Stage,
    Team,
    Tournament,
    TournamentSettings,
    TournamentType,
)
from committee.tournament_core.tiebreaks import PointsTableEntry

logger = logging.getLogger(__name__)


class InvalidDocumentError(ValueError):
    """Raised when a stored document cannot be read as a tournament."""


def _require_mapping(value: Any, what: str) -> Mapping:
    if not isinstance(value, abc.Mapping):
        raise InvalidDocumentError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _list_of(value: Any, what: str) -> List:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidDocumentError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _int_field(data: Mapping, name: str, what: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDocumentError(f"{what} needs an integer '{name}', got {value!r}")
    return value


def _slot_name(value: Any, what: str) -> str:
    # Slots are stored as {"name": ..., "logo": ...}; older documents used plain names
    if isinstance(value, str):
        return value
    slot = _require_mapping(value, what)
    name = slot.get("name")
    if not isinstance(name, str):
        raise InvalidDocumentError(f"{what} has no team name")
    return name


def load_match(data: Any) -> Match:
    match = _require_mapping(data, "Match")
    number = _int_field(match, "match", "Match")
    return Match(
        number=number,
        team1=_slot_name(match.get("team1"), f"Match {number} team1"),
        team2=_slot_name(match.get("team2"), f"Match {number} team2"),
        venue=match.get("venue"),
    )


def load_round(data: Any) -> Round:
    round = _require_mapping(data, "Round")
    number = _int_field(round, "round", "Round")
    matches = tuple(load_match(m) for m in _list_of(round.get("matches"), "Round matches"))
    return Round(number=number, matches=matches, name=round.get("name"))


def load_group(data: Any) -> Group:
    group = _require_mapping(data, "Group")
    name = group.get("groupName")
    if not isinstance(name, str) or not name:
        raise InvalidDocumentError("Group needs a 'groupName'")
    return Group(
        name=name,
        teams=tuple(_list_of(group.get("teams"), f"Group {name} teams")),
        rounds=_load_rounds(group.get("rounds"), f"Group {name} rounds"),
    )


def _load_rounds(value: Any, what: str) -> Tuple[Round, ...]:
    return tuple(load_round(r) for r in _list_of(value, what))


def _load_groups(value: Any, what: str) -> Tuple[Group, ...]:
    return tuple(load_group(g) for g in _list_of(value, what))


def _load_stage(value: Any, what: str) -> Optional[Stage]:
    if value is None:
        return None
    stage = _require_mapping(value, what)
    return Stage(
        rounds=_load_rounds(stage.get("rounds"), f"{what} rounds"),
        groups=_load_groups(stage.get("groups"), f"{what} groups"),
    )


def load_fixture(data: Any) -> Fixture:
    if data is None:
        return Fixture()
    fixture = _require_mapping(data, "Fixture")
    return Fixture(
        rounds=_load_rounds(fixture.get("rounds"), "Fixture rounds"),
        groups=_load_groups(fixture.get("groups"), "Fixture groups"),
        group_stage=_load_stage(fixture.get("groupStage"), "Group stage"),
        knockout_stage=_load_stage(fixture.get("knockoutStage"), "Knockout stage"),
    )


def load_team(data: Any) -> Team:
    if isinstance(data, str):
        return Team(data)
    team = _require_mapping(data, "Team")
    name = team.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidDocumentError("Team needs a 'name'")
    return Team(name=name, crest=team.get("logo") or None)


def load_scores(data: Any) -> Dict[str, ScoreRecord]:
    """
    Read a stored score map.

    Entries that cannot be read as scores are dropped, so the matches they
    belong to count as unplayed.
    """
    if data is None:
        return {}
    raw = _require_mapping(data, "Scores")
    scores = {}
    for key, value in raw.items():
        record = ScoreRecord.coerce(value)
        if record is None:
            logger.warning("Ignoring malformed score for %s: %r", key, value)
            continue
        scores[str(key)] = record
    return scores


def load_settings(data: Mapping) -> TournamentSettings:
    tournament_type = data.get("tournamentType")
    if tournament_type is not None:
        try:
            tournament_type = TournamentType(tournament_type)
        except ValueError:
            raise InvalidDocumentError(f"Unknown tournament type: {tournament_type!r}")

    rules = data.get("tiebreakerRules")
    if rules is None:
        rules = TournamentSettings().tiebreaker_rules
    elif not isinstance(rules, list):
        raise InvalidDocumentError(f"tiebreakerRules must be a list, got {rules!r}")
    teams_advancing = data.get("teamsAdvancing")
    if teams_advancing is not None and (
        isinstance(teams_advancing, bool) or not isinstance(teams_advancing, int)
    ):
        raise InvalidDocumentError(f"teamsAdvancing must be an integer, got {teams_advancing!r}")

    return TournamentSettings(
        tournament_type=tournament_type,
        away_goals_rule=bool(data.get("awayGoalsRule", False)),
        tiebreaker_rules=tuple(rules),
        teams_advancing=teams_advancing,
        knockout_home_and_away=bool(data.get("knockoutHomeAndAway", False)),
        round_robin_home_and_away=bool(data.get("roundRobinHomeAndAway", False)),
    )


def load_tournament(data: Any) -> Tournament:
    """
    Build a Tournament from a stored document.

    Raises:
        InvalidDocumentError: If the document's structure cannot be read
    """
    document = _require_mapping(data, "Tournament")
    active_round = document.get("activeRound", 1)
    if isinstance(active_round, bool) or not isinstance(active_round, int):
        active_round = 1

    return Tournament(
        name=document.get("tournamentName") or "",
        teams=tuple(load_team(t) for t in _list_of(document.get("teams"), "Teams")),
        fixture=load_fixture(document.get("fixture")),
        scores=load_scores(document.get("scores")),
        settings=load_settings(document),
        active_round=active_round,
    )


def dump_table(entries: Iterable[PointsTableEntry]) -> List[Dict[str, Any]]:
    return [entry.to_dict() for entry in entries]


def dump_scores(
    scores: Mapping[Union[MatchKey, str], ScoreRecord],
) -> Dict[str, Dict[str, Any]]:
    """Serialize a score map using the stored identifiers as keys."""
    return {str(key): record.to_dict() for key, record in scores.items()}


def _dump_match(match: Match) -> Dict[str, Any]:
    data = {
        "match": match.number,
        "team1": {"name": match.team1},
        "team2": {"name": match.team2},
    }
    if match.venue is not None:
        data["venue"] = match.venue
    return data


def _dump_round(round: Round) -> Dict[str, Any]:
    data = {
        "round": round.number,
        "matches": [_dump_match(m) for m in round.matches],
    }
    if round.name:
        data["name"] = round.name
    return data


def _dump_groups(groups: Iterable[Group]) -> List[Dict[str, Any]]:
    return [
        {
            "groupName": g.name,
            "teams": list(g.teams),
            "rounds": [_dump_round(r) for r in g.rounds],
        }
        for g in groups
    ]


def _dump_stage(stage: Stage) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if stage.rounds:
        data["rounds"] = [_dump_round(r) for r in stage.rounds]
    if stage.groups:
        data["groups"] = _dump_groups(stage.groups)
    return data


def dump_tournament(tournament: Tournament) -> Dict[str, Any]:
    """Serialize a tournament back into the stored document shape."""
    settings = tournament.settings
    fixture = _dump_stage(
        Stage(rounds=tournament.fixture.rounds, groups=tournament.fixture.groups)
    )
    if tournament.fixture.group_stage is not None:
        fixture["groupStage"] = _dump_stage(tournament.fixture.group_stage)
    if tournament.fixture.knockout_stage is not None:
        fixture["knockoutStage"] = _dump_stage(tournament.fixture.knockout_stage)

    document = {
        "tournamentName": tournament.name,
        "teams": [
            {"name": t.name, **({"logo": t.crest} if t.crest else {})}
            for t in tournament.teams
        ],
        "fixture": fixture,
        "scores": dump_scores(tournament.scores),
        "awayGoalsRule": settings.away_goals_rule,
        "tiebreakerRules": list(settings.tiebreaker_rules),
        "knockoutHomeAndAway": settings.knockout_home_and_away,
        "roundRobinHomeAndAway": settings.round_robin_home_and_away,
        "activeRound": tournament.active_round,
    }
    if settings.tournament_type is not None:
        document["tournamentType"] = settings.tournament_type.value
    if settings.teams_advancing is not None:
        document["teamsAdvancing"] = settings.teams_advancing
    return document
