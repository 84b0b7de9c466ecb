"""
Tests for tournament-level tables, qualification, round completion and locking.
"""

import unittest

from committee.tournament_core.builder import FixtureBuilder
from committee.tournament_core.stages import (
    is_round_complete,
    is_stage_complete,
    lock_round,
    qualification_summary,
    round_robin_champion,
    standings_tables,
)
from committee.tournament_core.structure import ScoreRecord, TournamentType
from committee.tournament_core.assertions import assert_standings

# Pairings for three teams: (A, Bye), (B, C) / (C, A), (Bye, B) / (A, B), (C, Bye)
THREE_TEAM_RESULTS = {
    ("Ants", "Bees"): "1-1",
    ("Bees", "Cats"): "1-0",
    ("Cats", "Ants"): "0-2",
}


def hybrid_tournament(teams_advancing=2):
    return (
        FixtureBuilder("World Cup")
        .rules(tournament_type=TournamentType.HYBRID, teams_advancing=teams_advancing)
        .group("A")
        .teams_named("Lions", "Tigers")
        .round_robin({("Lions", "Tigers"): "2-0"})
        .group("B")
        .teams_named("Bears", "Wolves")
        .round_robin({("Bears", "Wolves"): "1-3"})
        .build()
    )


def league(results=THREE_TEAM_RESULTS, tournament_type=TournamentType.ROUND_ROBIN):
    return (
        FixtureBuilder("League")
        .rules(tournament_type=tournament_type)
        .teams_named("Ants", "Bees", "Cats")
        .round_robin(results)
        .build()
    )


class StandingsTablesTests(unittest.TestCase):
    def test_round_robin_has_overall_table(self):
        tables = standings_tables(league())

        self.assertEqual([table.title for table in tables], ["Overall Standings"])
        # Ants and Bees both have 4 points; Ants have the better goal difference
        standings = assert_standings(tables[0].entries)
        standings.order("Ants", "Bees", "Cats")
        standings.team("Ants").assert_().points(4).goal_difference(2).qualified(None)

    def test_hybrid_group_tables_mark_qualifiers(self):
        tables = standings_tables(hybrid_tournament())

        self.assertEqual([table.title for table in tables], ["A", "B"])
        self.assertEqual(tables[0].qualified_teams, ["Lions"])
        self.assertEqual(tables[1].qualified_teams, ["Wolves"])
        assert_standings(tables[1].entries).team("Bears").assert_().qualified(False)

    def test_grouped_round_robin_has_no_qualifiers(self):
        tournament = (
            FixtureBuilder("Grouped League")
            .rules(tournament_type=TournamentType.ROUND_ROBIN)
            .group("North")
            .teams_named("Lions", "Tigers")
            .round_robin({("Lions", "Tigers"): "0-1"})
            .build()
        )

        tables = standings_tables(tournament)

        self.assertEqual([table.title for table in tables], ["North"])
        assert_standings(tables[0].entries).order("Tigers", "Lions")
        self.assertEqual(tables[0].qualified_teams, [])

    def test_knockout_and_untyped_tournaments_have_no_tables(self):
        self.assertEqual(standings_tables(league(tournament_type=TournamentType.SINGLE_ELIMINATION)), [])
        self.assertEqual(standings_tables(league(tournament_type=None)), [])

    def test_tournament_rules_are_applied(self):
        tournament = (
            FixtureBuilder("League")
            .rules(
                tournament_type=TournamentType.ROUND_ROBIN,
                tiebreaker_rules=["goalsFor", "goalDifference"],
            )
            .teams_named("Ants", "Bees", "Cats", "Dogs")
            .round(1)
            .match("Ants", "Bees", "3-2")
            .match("Cats", "Dogs", "2-0")
            .build()
        )

        table = standings_tables(tournament)[0]

        assert_standings(table.entries).order("Ants", "Cats", "Bees", "Dogs")


class QualificationSummaryTests(unittest.TestCase):
    def test_teams_advancing_split_between_groups(self):
        summary = qualification_summary(hybrid_tournament())

        self.assertEqual(summary.teams_per_group, 1)
        self.assertEqual(summary.qualified, ["Lions", "Wolves"])
        self.assertEqual(len(summary.tables), 2)

    def test_all_teams_advancing(self):
        summary = qualification_summary(hybrid_tournament(teams_advancing=4))

        self.assertEqual(summary.qualified, ["Lions", "Tigers", "Wolves", "Bears"])

    def test_requires_grouped_group_stage(self):
        with self.assertRaises(ValueError):
            qualification_summary(league())


class CompletionTests(unittest.TestCase):
    def setUp(self):
        self.partial = league(
            {("Bees", "Cats"): "1-0", ("Cats", "Ants"): "0-2"}
        )

    def test_round_with_bye_is_complete(self):
        rounds = self.partial.fixture.rounds
        self.assertTrue(is_round_complete(rounds, self.partial.scores, 1))
        self.assertTrue(is_round_complete(rounds, self.partial.scores, 2))
        self.assertFalse(is_round_complete(rounds, self.partial.scores, 3))

    def test_stage_completion(self):
        self.assertFalse(is_stage_complete(self.partial.fixture.rounds, self.partial.scores))
        complete = league()
        self.assertTrue(is_stage_complete(complete.fixture.rounds, complete.scores))

    def test_group_rounds_use_group_keys(self):
        tournament = hybrid_tournament()
        group = tournament.fixture.group_stage.groups[0]

        self.assertTrue(is_stage_complete(group.rounds, tournament.scores, group.name))
        self.assertFalse(is_stage_complete(group.rounds, tournament.scores))


class ChampionTests(unittest.TestCase):
    def test_finished_league_has_champion(self):
        self.assertEqual(round_robin_champion(league()), "Ants")

    def test_unfinished_league_has_no_champion(self):
        self.assertIsNone(round_robin_champion(league({("Bees", "Cats"): "1-0"})))

    def test_other_formats_have_no_champion(self):
        self.assertIsNone(round_robin_champion(hybrid_tournament()))
        self.assertIsNone(
            round_robin_champion(league(tournament_type=TournamentType.SINGLE_ELIMINATION))
        )


class LockRoundTests(unittest.TestCase):
    def test_locks_every_match_of_the_round(self):
        tournament = league({("Bees", "Cats"): "1-0", ("Ants", "Bees"): "1-1"})
        scores = tournament.scores

        locked = lock_round(scores, tournament.fixture.rounds, 1)

        # Round 1 is Ants vs Bye and Bees vs Cats
        self.assertEqual(locked["r1m1"], ScoreRecord(locked=True))
        self.assertEqual(locked["r1m2"], ScoreRecord(1, 0, locked=True))
        self.assertEqual(locked["r3m1"], ScoreRecord(1, 1))
        # The original map is untouched
        self.assertFalse(scores["r1m2"].locked)
        self.assertNotIn("r1m1", scores)

    def test_locks_group_keys(self):
        tournament = hybrid_tournament()
        group = tournament.fixture.group_stage.groups[1]

        locked = lock_round(tournament.scores, group.rounds, 1, group.name)

        self.assertTrue(locked["gBr1m1"].locked)
        self.assertFalse(locked["gAr1m1"].locked)


if __name__ == "__main__":
    unittest.main()
