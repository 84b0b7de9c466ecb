"""
Management command to generate a demo tournament document:
- Team names generated with Faker
- Round-robin schedule (optionally split into groups)
- Random scores for the first rounds, later rounds left unplayed
"""

import json
import random

from django.core.management.base import BaseCommand, CommandError
from faker import Faker

from committee.tournament_core.builder import FixtureBuilder
from committee.tournament_core.documents import dump_tournament
from committee.tournament_core.structure import MatchKey, TournamentType, is_bye_name

TEAM_SUFFIXES = ["FC", "United", "City", "Rovers", "Athletic", "Wanderers", "Albion"]


class Command(BaseCommand):
    help = "Generate a demo round-robin tournament document with random results"

    def add_arguments(self, parser):
        parser.add_argument(
            "--name",
            type=str,
            default="Demo Cup",
            help="Tournament name (default: Demo Cup)",
        )
        parser.add_argument(
            "--teams",
            type=int,
            default=6,
            help="Number of teams (default: 6)",
        )
        parser.add_argument(
            "--groups",
            type=int,
            default=0,
            help="Split teams into this many groups for a hybrid tournament (default: 0)",
        )
        parser.add_argument(
            "--teams-advancing",
            type=int,
            help="Teams advancing to the knockout stage (default: 2 per group)",
        )
        parser.add_argument(
            "--played-rounds",
            type=int,
            help="Number of rounds with results (default: all)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Random seed for reproducible output",
        )
        parser.add_argument(
            "--locale",
            type=str,
            default="en_US",
            help="Faker locale for team names (default: en_US)",
        )
        parser.add_argument(
            "--output",
            type=str,
            help="Write the document to this file instead of stdout",
        )

    def handle(self, *args, **options):
        team_count = options["teams"]
        group_count = options["groups"]
        if team_count < 2:
            raise CommandError("A tournament needs at least 2 teams")
        if group_count < 0 or (group_count and team_count < group_count * 2):
            raise CommandError(f"Cannot split {team_count} teams into {group_count} groups")

        fake = Faker(options["locale"])
        rng = random.Random(options["seed"])
        if options["seed"] is not None:
            fake.seed_instance(options["seed"])

        names = self._team_names(fake, rng, team_count)
        builder = FixtureBuilder(options["name"])

        if group_count:
            teams_advancing = options["teams_advancing"] or group_count * 2
            builder.rules(
                tournament_type=TournamentType.HYBRID,
                teams_advancing=teams_advancing,
            )
            for index in range(group_count):
                builder.group(chr(ord("A") + index))
                for name in names[index::group_count]:
                    builder.team(name)
                builder.round_robin()
        else:
            builder.rules(tournament_type=TournamentType.ROUND_ROBIN)
            builder.teams_named(*names).round_robin()

        tournament = builder.build()
        document = dump_tournament(tournament)
        document["scores"] = self._random_scores(
            document["fixture"], rng, options["played_rounds"]
        )

        output = json.dumps(document, indent=2)
        if options["output"]:
            with open(options["output"], "w", encoding="utf-8") as f:
                f.write(output)
            self.stdout.write(
                self.style.SUCCESS(f"✓ Wrote {options['name']} ({team_count} teams) to {options['output']}")
            )
        else:
            self.stdout.write(output)

    def _team_names(self, fake, rng, count):
        """Generate unique club names such as "Springfield Rovers"."""
        names = []
        used = set()
        while len(names) < count:
            name = f"{fake.city()} {rng.choice(TEAM_SUFFIXES)}"
            if name in used:
                continue
            used.add(name)
            names.append(name)
        return names

    def _random_scores(self, fixture, rng, played_rounds):
        """Random scores for every match in the first played_rounds rounds."""
        scores = {}
        schedules = [(None, fixture.get("rounds", []))]
        stage = fixture.get("groupStage", {})
        schedules += [(g["groupName"], g["rounds"]) for g in stage.get("groups", [])]

        for group_name, rounds in schedules:
            for round in rounds:
                if played_rounds is not None and round["round"] > played_rounds:
                    continue
                for match in round["matches"]:
                    if is_bye_name(match["team1"]["name"]) or is_bye_name(match["team2"]["name"]):
                        continue
                    key = MatchKey(round["round"], match["match"], group_name)
                    scores[str(key)] = {
                        "score1": rng.choice([0, 0, 1, 1, 1, 2, 2, 3, 4]),
                        "score2": rng.choice([0, 0, 1, 1, 1, 2, 2, 3]),
                        "locked": True,
                    }
        return scores
