from django.apps import AppConfig


class TournamentCoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'committee.tournament_core'
    verbose_name = 'Standings and Bracket Logic'
