"""
Management command to print league tables for a stored tournament document.

Reads a tournament JSON document (as exported from the tournament store),
calculates its tables and prints them as text or JSON.
"""

import json
from dataclasses import replace

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from committee.tournament_core.documents import (
    InvalidDocumentError,
    dump_table,
    load_tournament,
)
from committee.tournament_core.stages import (
    StandingsTable,
    round_robin_champion,
    standings_tables,
)
from committee.tournament_core.table import compute_standings


class Command(BaseCommand):
    help = "Calculate and print the league tables of a tournament document"

    def add_arguments(self, parser):
        parser.add_argument(
            "document",
            type=str,
            help="Path to the tournament JSON document",
        )
        parser.add_argument(
            "--group",
            type=str,
            help="Only print the table of this group",
        )
        parser.add_argument(
            "--qualify",
            type=int,
            help="Mark the top N teams of each table as qualified",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the tables as JSON instead of text",
        )

    def handle(self, *args, **options):
        path = options["document"]
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise CommandError(f"Could not read {path}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"{path} is not valid JSON: {e}")

        try:
            tournament = load_tournament(data)
        except InvalidDocumentError as e:
            raise CommandError(f"Invalid tournament document: {e}")

        # Documents without configured rules fall back to the site defaults
        rules = tournament.settings
        if data.get("tiebreakerRules") is None:
            rules = replace(
                rules, tiebreaker_rules=tuple(settings.COMMITTEE_TIEBREAKER_RULES)
            )
        if "awayGoalsRule" not in data:
            rules = replace(rules, away_goals_rule=settings.COMMITTEE_AWAY_GOALS_RULE)
        tournament = replace(tournament, settings=rules)

        tables = self._tables(tournament, options.get("qualify"))
        group = options.get("group")
        if group:
            tables = [table for table in tables if table.title == group]
            if not tables:
                raise CommandError(f"Tournament has no group named {group!r}")

        if options["json"]:
            payload = [
                {"title": table.title, "table": dump_table(table.entries)}
                for table in tables
            ]
            self.stdout.write(json.dumps(payload, indent=2))
            return

        if not tables:
            self.stdout.write(self.style.WARNING("This tournament has no league tables."))
            return

        for table in tables:
            self._write_table(table)

        champion = round_robin_champion(tournament)
        if champion:
            self.stdout.write(self.style.SUCCESS(f"Tournament complete! The winner is {champion}."))

    def _tables(self, tournament, qualify):
        tables = standings_tables(tournament)
        # Tournaments without a type still have a table when they have rounds
        if not tables and tournament.fixture.rounds and (
            tournament.settings.tournament_type is None
        ):
            tables = [
                StandingsTable(
                    "Overall Standings",
                    compute_standings(
                        tournament.teams,
                        tournament.fixture.rounds,
                        tournament.scores,
                        away_goals_rule=tournament.settings.away_goals_rule,
                        tiebreaker_rules=tournament.settings.tiebreaker_rules,
                    ),
                )
            ]

        if qualify and qualify > 0:
            tables = [
                StandingsTable(
                    table.title,
                    [
                        replace(entry, qualified=index < qualify)
                        for index, entry in enumerate(table.entries)
                    ],
                )
                for table in tables
            ]
        return tables

    def _write_table(self, table):
        self.stdout.write(self.style.MIGRATE_HEADING(table.title))
        self.stdout.write(
            f"{'#':>3}  {'Team':<24}{'P':>4}{'W':>4}{'D':>4}{'L':>4}"
            f"{'GF':>5}{'GA':>5}{'GD':>5}{'Pts':>5}"
        )
        for position, entry in enumerate(table.entries, start=1):
            marker = "*" if entry.qualified else " "
            self.stdout.write(
                f"{position:>3}{marker} {entry.team_name:<24}{entry.played:>4}{entry.won:>4}"
                f"{entry.drawn:>4}{entry.lost:>4}{entry.goals_for:>5}{entry.goals_against:>5}"
                f"{entry.goal_difference:>+5}{entry.points:>5}"
            )
        self.stdout.write("")
