"""
Builder for creating tournament structures with a fluent API.

This module provides a builder class for creating tournament_core structures
without writing out every dataclass by hand. Results are given as "2-1"
strings and stored under the same identifiers a real tournament uses.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from committee.tournament_core.structure import (
    BYE,
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


def parse_result(result: str) -> Tuple[int, int]:
    """Parse a "2-1" style result into a pair of scores."""
    try:
        score1, score2 = (int(part) for part in result.split("-"))
    except ValueError:
        raise ValueError(f"Invalid result: {result!r} (expected e.g. '2-1')")
    if score1 < 0 or score2 < 0:
        raise ValueError(f"Invalid result: {result!r} (scores cannot be negative)")
    return score1, score2


def round_robin(team_names: Sequence[str], home_and_away: bool = False) -> List[List[Tuple[str, str]]]:
    """
    Generate round-robin pairings with the circle method.

    An odd number of teams gets a bye each round. With home and away, the
    second half of the schedule repeats the first with venues swapped.

    Returns:
        One list of (home, away) pairs per round
    """
    names = list(team_names)
    if len(names) < 2:
        return []
    if len(names) % 2 == 1:
        names.append(BYE)

    count = len(names)
    rounds = []
    for round_index in range(count - 1):
        pairings = []
        for i in range(count // 2):
            home = names[i]
            away = names[count - 1 - i]
            # Alternate the fixed team's venue so no one is always at home
            if i == 0 and round_index % 2 == 1:
                home, away = away, home
            pairings.append((home, away))
        rounds.append(pairings)
        # Keep the first team fixed and rotate the rest
        names = [names[0]] + [names[-1]] + names[1:-1]

    if home_and_away:
        rounds += [[(away, home) for home, away in pairings] for pairings in rounds]
    return rounds


class FixtureBuilder:
    """Builder for creating tournaments easily."""

    def __init__(self, name: str = "Test Tournament"):
        self.name = name
        self.teams: List[Team] = []
        self.rounds: List[Round] = []
        self.groups: List[Group] = []
        self.scores: Dict[str, ScoreRecord] = {}
        self.settings: Dict = {}
        self._current_group: Optional[str] = None
        self._group_teams: Dict[str, List[str]] = {}
        self._group_rounds: Dict[str, List[Round]] = {}
        self._knockout: bool = False
        self._knockout_rounds: List[Round] = []

    # Roster and settings

    def team(self, name: str, crest: Optional[str] = None) -> "FixtureBuilder":
        """Add a team to the roster."""
        self.teams.append(Team(name, crest))
        if self._current_group is not None:
            self._group_teams[self._current_group].append(name)
        return self

    def teams_named(self, *names: str) -> "FixtureBuilder":
        for name in names:
            self.team(name)
        return self

    def rules(self, **settings) -> "FixtureBuilder":
        """Set tournament settings (away_goals_rule, tiebreaker_rules, ...)."""
        self.settings.update(settings)
        return self

    # Schedule

    def group(self, name: str) -> "FixtureBuilder":
        """Start a group; following teams and rounds belong to it."""
        self._current_group = name
        self._knockout = False
        self._group_teams.setdefault(name, [])
        self._group_rounds.setdefault(name, [])
        return self

    def knockout(self) -> "FixtureBuilder":
        """Following rounds belong to the knockout stage of a hybrid tournament."""
        self._current_group = None
        self._knockout = True
        return self

    def round(self, number: int, name: Optional[str] = None) -> "FixtureBuilder":
        """Start a new round."""
        self._rounds().append(Round(number, (), name))
        return self

    def match(
        self,
        team1: str,
        team2: str,
        result: Optional[str] = None,
        tiebreak: Optional[str] = None,
        number: Optional[int] = None,
    ) -> "FixtureBuilder":
        """
        Add a match to the current round, optionally with its result.

        Args:
            team1: Home team name
            team2: Away team name
            result: Score such as "2-1"; None leaves the match unplayed
            tiebreak: Penalty score such as "4-3" for drawn knockout matches
            number: Match number; defaults to the next number in the round
        """
        rounds = self._rounds()
        if not rounds:
            raise ValueError("No active round. Call round() first.")

        current = rounds[-1]
        if number is None:
            number = len(current.matches) + 1
        rounds[-1] = current.add_match(Match(number, team1, team2))

        if result is not None or tiebreak is not None:
            self.score(current.number, number, result, tiebreak)
        return self

    def bye(self, team: str) -> "FixtureBuilder":
        return self.match(team, BYE)

    def score(
        self,
        round_number: int,
        match_number: int,
        result: Optional[str] = None,
        tiebreak: Optional[str] = None,
        locked: bool = False,
    ) -> "FixtureBuilder":
        """Record a score for a match in the current group (or ungrouped)."""
        score1 = score2 = None
        if result is not None:
            score1, score2 = parse_result(result)
        tiebreak1 = tiebreak2 = None
        if tiebreak is not None:
            tiebreak1, tiebreak2 = parse_result(tiebreak)

        key = MatchKey(round_number, match_number, self._current_group)
        self.scores[str(key)] = ScoreRecord(score1, score2, tiebreak1, tiebreak2, locked)
        return self

    def round_robin(
        self, results: Optional[Dict[Tuple[str, str], str]] = None, home_and_away: bool = False
    ) -> "FixtureBuilder":
        """
        Schedule every team of the current group (or the roster) against each other.

        Args:
            results: Optional map of (home, away) to result strings
            home_and_away: Play each pairing twice with venues swapped
        """
        if self._current_group is not None:
            names = self._group_teams[self._current_group]
        else:
            names = [team.name for team in self.teams]
        results = results or {}

        first_round = len(self._rounds()) + 1
        for offset, pairings in enumerate(round_robin(names, home_and_away)):
            self.round(first_round + offset)
            for home, away in pairings:
                self.match(home, away, results.get((home, away)))
        return self

    def _rounds(self) -> List[Round]:
        if self._knockout:
            return self._knockout_rounds
        if self._current_group is not None:
            return self._group_rounds[self._current_group]
        return self.rounds

    # Build

    def build(self) -> Tournament:
        """Build the final tournament structure."""
        groups = tuple(
            Group(name, tuple(self._group_teams[name]), tuple(self._group_rounds[name]))
            for name in self._group_teams
        )

        tiebreaker_rules = self.settings.get("tiebreaker_rules")
        if tiebreaker_rules is not None:
            self.settings["tiebreaker_rules"] = tuple(tiebreaker_rules)
        settings = TournamentSettings(**self.settings)

        if settings.tournament_type == TournamentType.HYBRID:
            fixture = Fixture(
                group_stage=Stage(rounds=tuple(self.rounds), groups=groups),
                knockout_stage=Stage(rounds=tuple(self._knockout_rounds)),
            )
        else:
            fixture = Fixture(rounds=tuple(self.rounds), groups=groups)

        return Tournament(
            name=self.name,
            teams=tuple(self.teams),
            fixture=fixture,
            scores=dict(self.scores),
            settings=settings,
        )
