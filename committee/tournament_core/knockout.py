"""
Knockout bracket utilities.

This module provides functionality for:
- Deciding single matches (byes, scores and penalty tiebreaks)
- Deciding two-legged ties on aggregate, away goals and penalties
- Advancing winners through a bracket
- Naming knockout rounds and finding the champion
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from committee.tournament_core.structure import (
    Match,
    MatchKey,
    Round,
    ScoreRecord,
    ScoresMap,
    is_bye_name,
    lookup_score,
)

logger = logging.getLogger(__name__)


def single_match_winner(match: Match, score: Optional[ScoreRecord]) -> Optional[str]:
    """Return the name of the team that won a single match.

    A bye sends the other team through. A drawn match is decided by the
    tiebreak scores when they are recorded.

    Returns:
        The winning team's name, or None if the match is undecided
    """
    if is_bye_name(match.team1):
        return match.team2
    if is_bye_name(match.team2):
        return match.team1

    if score is None or not score.is_played:
        return None
    if score.score1 > score.score2:
        return match.team1
    if score.score2 > score.score1:
        return match.team2
    return _tiebreak_winner(match, score)


def _tiebreak_winner(match: Match, score: ScoreRecord) -> Optional[str]:
    if not score.has_tiebreak:
        return None
    if score.score1_tiebreak > score.score2_tiebreak:
        return match.team1
    if score.score2_tiebreak > score.score1_tiebreak:
        return match.team2
    return None


def two_legged_winner(
    leg1: Match,
    leg2: Match,
    score1: Optional[ScoreRecord],
    score2: Optional[ScoreRecord],
    away_goals_rule: bool = False,
) -> Optional[str]:
    """
    Decide a tie played over two legs.

    The home team of the first leg is the away team of the second. The tie is
    decided by aggregate score, then by away goals when the rule is enabled,
    and finally by the tiebreak scores recorded on the second leg.

    Args:
        leg1: First leg, ``team1`` at home
        leg2: Second leg, the reverse fixture
        score1: Score of the first leg
        score2: Score of the second leg
        away_goals_rule: Whether away goals decide a level aggregate

    Returns:
        The winning team's name, or None if either leg is unplayed or the tie
        is still level
    """
    if score1 is None or not score1.is_played or score2 is None or not score2.is_played:
        return None

    team_a = leg1.team1
    team_b = leg1.team2

    aggregate_a = score1.score1 + score2.score2
    aggregate_b = score1.score2 + score2.score1
    if aggregate_a > aggregate_b:
        return team_a
    if aggregate_b > aggregate_a:
        return team_b

    if away_goals_rule:
        away_goals_a = score2.score2
        away_goals_b = score1.score2
        if away_goals_a > away_goals_b:
            return team_a
        if away_goals_b > away_goals_a:
            return team_b

    return _tiebreak_winner(leg2, score2)


def _group_ties(matches: Sequence[Match]) -> Tuple[List[Match], List[List[Match]]]:
    """Split a round into bye matches and ties keyed by the pair of teams."""
    singles = []
    ties: Dict[Tuple[str, str], List[Match]] = {}
    for match in matches:
        if match.is_bye:
            singles.append(match)
            continue
        key = tuple(sorted((match.team1, match.team2)))
        ties.setdefault(key, []).append(match)
    return singles, list(ties.values())


def _place_winner(next_matches: List[Match], match: Match, winner: Optional[str]):
    """Write a winner into the next round's slot fed by this match."""
    if winner is None:
        return
    index = (match.number - 1) // 2
    if index >= len(next_matches):
        return
    target = next_matches[index]
    if (match.number - 1) % 2 == 0:
        next_matches[index] = Match(target.number, winner, target.team2, target.venue)
    else:
        next_matches[index] = Match(target.number, target.team1, winner, target.venue)


def advance_bracket(
    rounds: Sequence[Round],
    scores: ScoresMap,
    home_and_away: bool = False,
    away_goals_rule: bool = False,
) -> List[Round]:
    """
    Fill later knockout rounds with the winners of earlier ones.

    Winners of matches ``2k - 1`` and ``2k`` meet in match ``k`` of the next
    round, the first as ``team1``. With home and away legs, the two matches
    between the same pair of teams form one tie and its winner takes the slot
    fed by the first leg.

    Args:
        rounds: Knockout rounds in order
        scores: Recorded scores
        home_and_away: Whether ties are played over two legs
        away_goals_rule: Whether away goals decide a level two-legged tie

    Returns:
        New rounds with known winners placed; the input is not modified
    """
    advanced = [Round(r.number, tuple(r.matches), r.name) for r in rounds]

    for index in range(len(advanced) - 1):
        current = advanced[index]
        next_matches = list(advanced[index + 1].matches)

        def score_of(match: Match) -> Optional[ScoreRecord]:
            return lookup_score(scores, MatchKey.for_match(current, match))

        if home_and_away:
            singles, ties = _group_ties(current.matches)
            for match in singles:
                winner = single_match_winner(match, score_of(match))
                _place_winner(next_matches, match, winner)
            for legs in ties:
                if len(legs) != 2:
                    for match in legs:
                        _place_winner(
                            next_matches, match, single_match_winner(match, score_of(match))
                        )
                    continue
                leg1, leg2 = sorted(legs, key=lambda m: m.number)
                winner = two_legged_winner(
                    leg1, leg2, score_of(leg1), score_of(leg2), away_goals_rule
                )
                _place_winner(next_matches, leg1, winner)
        else:
            for match in current.matches:
                winner = single_match_winner(match, score_of(match))
                _place_winner(next_matches, match, winner)

        following = advanced[index + 1]
        advanced[index + 1] = Round(following.number, tuple(next_matches), following.name)

    return advanced


def knockout_round_name(round: Round, home_and_away: bool = False) -> str:
    """Get the standard name for a knockout round based on ties remaining."""
    ties = len(round.matches)
    if home_and_away:
        # An odd number of legs cannot be paired into ties
        if ties % 2:
            return f"Round {round.number}"
        ties //= 2

    stage_names = {
        1: "Final",
        2: "Semi-finals",
        4: "Quarter-finals",
        8: "Round of 16",
    }
    if ties in stage_names:
        return stage_names[ties]
    return f"Round {round.number}"


def knockout_champion(
    rounds: Sequence[Round],
    scores: ScoresMap,
    home_and_away: bool = False,
    away_goals_rule: bool = False,
) -> Optional[str]:
    """Get the winner of a completed knockout bracket.

    Returns:
        The champion's name, or None if the final has not been decided
    """
    if not rounds:
        return None

    final_round = advance_bracket(rounds, scores, home_and_away, away_goals_rule)[-1]
    if len(final_round.matches) != 1:
        return None

    final = final_round.matches[0]
    score = lookup_score(scores, MatchKey.for_match(final_round, final))
    winner = single_match_winner(final, score)
    if winner is not None:
        logger.debug("Knockout champion decided: %s", winner)
    return winner
