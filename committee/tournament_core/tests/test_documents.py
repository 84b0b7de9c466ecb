"""
Tests for reading and writing stored tournament documents.
"""

import unittest

from committee.tournament_core.documents import (
    InvalidDocumentError,
    dump_scores,
    dump_table,
    dump_tournament,
    load_fixture,
    load_scores,
    load_settings,
    load_tournament,
)
from committee.tournament_core.stages import standings_tables
from committee.tournament_core.structure import (
    Fixture,
    Match,
    MatchKey,
    Round,
    ScoreRecord,
    Team,
    Tournament,
    TournamentType,
)
from committee.tournament_core.tiebreaks import PointsTableEntry


def league_document():
    return {
        "tournamentName": "Sunday League",
        "tournamentType": "round-robin",
        "teams": [
            {"name": "Lions", "logo": "lions.png"},
            {"name": "Tigers", "logo": ""},
            "Bears",
        ],
        "fixture": {
            "rounds": [
                {
                    "round": 1,
                    "matches": [
                        {
                            "match": 1,
                            "team1": {"name": "Lions"},
                            "team2": {"name": "Tigers"},
                            "venue": "Riverside",
                        },
                        {"match": 2, "team1": {"name": "Bears"}, "team2": {"name": "Bye"}},
                    ],
                }
            ]
        },
        "scores": {
            "r1m1": {"score1": 2, "score2": 1, "locked": True},
            "r1m2": {"score1": None, "score2": None},
        },
        "awayGoalsRule": True,
        "tiebreakerRules": ["headToHead", "goalsFor"],
        "activeRound": 2,
    }


class LoadTournamentTests(unittest.TestCase):
    def test_league_document(self):
        tournament = load_tournament(league_document())

        self.assertEqual(tournament.name, "Sunday League")
        self.assertEqual([team.name for team in tournament.teams], ["Lions", "Tigers", "Bears"])
        self.assertEqual(tournament.team("Lions").crest, "lions.png")
        self.assertIsNone(tournament.team("Tigers").crest)
        self.assertEqual(tournament.active_round, 2)

        settings = tournament.settings
        self.assertEqual(settings.tournament_type, TournamentType.ROUND_ROBIN)
        self.assertTrue(settings.away_goals_rule)
        self.assertEqual(settings.tiebreaker_rules, ("headToHead", "goalsFor"))

        round = tournament.fixture.rounds[0]
        self.assertEqual(round.number, 1)
        self.assertEqual([m.team2 for m in round.matches], ["Tigers", "Bye"])
        self.assertEqual(round.matches[0].venue, "Riverside")
        self.assertEqual(tournament.scores["r1m1"], ScoreRecord(2, 1, locked=True))

    def test_loaded_tournament_gives_table(self):
        tables = standings_tables(load_tournament(league_document()))

        self.assertEqual(tables[0].entries[0].team_name, "Lions")
        self.assertEqual(tables[0].entries[0].crest, "lions.png")

    def test_minimal_document(self):
        tournament = load_tournament({})

        self.assertEqual(tournament.name, "")
        self.assertEqual(tournament.teams, ())
        self.assertEqual(tournament.fixture.rounds, ())
        self.assertEqual(tournament.scores, {})
        self.assertEqual(tournament.active_round, 1)

    def test_invalid_structures(self):
        documents = [
            [],
            {"teams": "Lions"},
            {"teams": [{"logo": "x.png"}]},
            {"fixture": {"rounds": [{"matches": []}]}},
            {"fixture": {"rounds": [{"round": 1, "matches": [{"match": "1"}]}]}},
            {"fixture": {"groups": [{"teams": []}]}},
            {"tournamentType": "swiss"},
            {"tiebreakerRules": "goalsFor"},
            {"teamsAdvancing": "4"},
            {"scores": ["r1m1"]},
        ]
        for document in documents:
            with self.subTest(document=document):
                with self.assertRaises(InvalidDocumentError):
                    load_tournament(document)

    def test_invalid_document_error_is_value_error(self):
        with self.assertRaises(ValueError):
            load_tournament(None)


class LoadPartsTests(unittest.TestCase):
    def test_malformed_scores_are_dropped(self):
        with self.assertLogs("committee.tournament_core.documents", level="WARNING"):
            scores = load_scores(
                {"r1m1": {"score1": 1, "score2": 0}, "r1m2": {"score1": -2, "score2": 0}}
            )

        self.assertEqual(list(scores), ["r1m1"])

    def test_hybrid_fixture(self):
        fixture = load_fixture(
            {
                "groupStage": {
                    "groups": [
                        {
                            "groupName": "A",
                            "teams": ["Lions", "Tigers"],
                            "rounds": [
                                {
                                    "round": 1,
                                    "matches": [{"match": 1, "team1": "Lions", "team2": "Tigers"}],
                                }
                            ],
                        }
                    ]
                },
                "knockoutStage": {"rounds": [{"round": 1, "name": "Final", "matches": []}]},
            }
        )

        group = fixture.group_stage.groups[0]
        self.assertEqual(group.name, "A")
        self.assertEqual(group.teams, ("Lions", "Tigers"))
        self.assertEqual(group.rounds[0].matches[0].team1, "Lions")
        self.assertEqual(fixture.knockout_stage.rounds[0].name, "Final")

    def test_settings_defaults(self):
        settings = load_settings({})

        self.assertIsNone(settings.tournament_type)
        self.assertFalse(settings.away_goals_rule)
        self.assertEqual(settings.tiebreaker_rules, ("goalDifference", "goalsFor"))
        self.assertIsNone(settings.teams_advancing)

    def test_empty_rule_list_is_kept(self):
        # Only points and the name fallback order the table
        settings = load_settings({"tiebreakerRules": []})

        self.assertEqual(settings.tiebreaker_rules, ())


class DumpTests(unittest.TestCase):
    def test_dump_table(self):
        entries = [PointsTableEntry("Lions", played=1, won=1, points=3, qualified=True)]

        self.assertEqual(dump_table(entries)[0]["teamName"], "Lions")
        self.assertTrue(dump_table(entries)[0]["qualified"])

    def test_dump_scores_uses_identifiers(self):
        dumped = dump_scores({MatchKey(1, 2, "A"): ScoreRecord(1, 0)})

        self.assertEqual(dumped, {"gAr1m2": {"score1": 1, "score2": 0, "locked": False}})

    def test_dumped_document_loads_back(self):
        original = load_tournament(league_document())

        reloaded = load_tournament(dump_tournament(original))

        self.assertEqual(reloaded, original)

    def test_venues_survive_a_round_trip(self):
        tournament = Tournament(
            "Cup",
            teams=(Team("Lions"), Team("Tigers")),
            fixture=Fixture(
                rounds=(
                    Round(1, (Match(1, "Lions", "Tigers", venue="Pitch 1"),)),
                    Round(2, (Match(2, "Tigers", "Lions"),)),
                )
            ),
        )

        document = dump_tournament(tournament)

        self.assertEqual(document["fixture"]["rounds"][0]["matches"][0]["venue"], "Pitch 1")
        self.assertNotIn("venue", document["fixture"]["rounds"][1]["matches"][0])
        self.assertEqual(load_tournament(document), tournament)

    def test_dump_hybrid_settings(self):
        document = league_document()
        document.update(
            tournamentType="hybrid",
            teamsAdvancing=4,
            fixture={"groupStage": {"groups": []}, "knockoutStage": {"rounds": []}},
        )

        dumped = dump_tournament(load_tournament(document))

        self.assertEqual(dumped["tournamentType"], "hybrid")
        self.assertEqual(dumped["teamsAdvancing"], 4)
        self.assertIn("groupStage", dumped["fixture"])
        self.assertIn("knockoutStage", dumped["fixture"])


if __name__ == "__main__":
    unittest.main()
