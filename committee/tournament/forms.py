from django import forms
from django.utils.translation import gettext_lazy as _

from committee.tournament_core.structure import ScoreRecord
from committee.tournament_core.tiebreaks import TiebreakRule

TIEBREAKER_OPTIONS = (
    (TiebreakRule.GOAL_DIFFERENCE.value, 'Goal Difference'),
    (TiebreakRule.GOALS_FOR.value, 'Goals For'),
    (TiebreakRule.HEAD_TO_HEAD.value, 'Head-to-Head'),
)

YES_NO_OPTIONS = (
    (True, 'Yes',),
    (False, 'No',),
)


class TiebreakerRulesForm(forms.Form):
    """Ordered choice of the two rules that separate teams level on points."""

    tiebreaker_rule1 = forms.ChoiceField(
        choices=TIEBREAKER_OPTIONS,
        initial=TiebreakRule.GOAL_DIFFERENCE.value,
        label=_('First tiebreaker'),
    )
    tiebreaker_rule2 = forms.ChoiceField(
        choices=TIEBREAKER_OPTIONS,
        initial=TiebreakRule.GOALS_FOR.value,
        label=_('Second tiebreaker'),
    )

    def clean(self):
        cleaned_data = super().clean()
        rule1 = cleaned_data.get('tiebreaker_rule1')
        rule2 = cleaned_data.get('tiebreaker_rule2')
        if rule1 and rule2 and rule1 == rule2:
            self.add_error('tiebreaker_rule2', _('Tiebreaker rules must be different.'))
        return cleaned_data

    def rules(self):
        return (
            TiebreakRule(self.cleaned_data['tiebreaker_rule1']),
            TiebreakRule(self.cleaned_data['tiebreaker_rule2']),
        )


class TournamentRulesForm(forms.Form):
    away_goals_rule = forms.TypedChoiceField(
        choices=YES_NO_OPTIONS,
        coerce=lambda x: x == 'True',
        initial=False,
        label=_('Away goals rule'),
        help_text=_('Away goals decide two-legged ties that are level on aggregate.'),
    )
    knockout_home_and_away = forms.TypedChoiceField(
        choices=YES_NO_OPTIONS,
        coerce=lambda x: x == 'True',
        initial=False,
        label=_('Two-legged knockout ties'),
    )
    teams_advancing = forms.IntegerField(
        required=False,
        min_value=1,
        label=_('Teams advancing to the knockout stage'),
    )

    def __init__(self, *args, group_count=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.group_count = group_count

    def clean_teams_advancing(self):
        teams_advancing = self.cleaned_data.get('teams_advancing')
        if teams_advancing and self.group_count and teams_advancing % self.group_count:
            raise forms.ValidationError(
                f'Teams advancing must split evenly between {self.group_count} groups.'
            )
        return teams_advancing


class ScoreEntryForm(forms.Form):
    score1 = forms.IntegerField(required=False, min_value=0, label=_('Home score'))
    score2 = forms.IntegerField(required=False, min_value=0, label=_('Away score'))
    score1_tiebreak = forms.IntegerField(required=False, min_value=0, label=_('Home penalties'))
    score2_tiebreak = forms.IntegerField(required=False, min_value=0, label=_('Away penalties'))
    locked = forms.BooleanField(required=False, label=_('Lock this result'))

    def __init__(self, *args, existing=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.existing = existing

    def clean(self):
        cleaned_data = super().clean()
        if self.existing is not None and self.existing.locked:
            raise forms.ValidationError('This match is locked and cannot be edited.')

        score1 = cleaned_data.get('score1')
        score2 = cleaned_data.get('score2')
        if (score1 is None) != (score2 is None):
            raise forms.ValidationError('Enter both scores, or neither to clear the result.')

        tiebreak1 = cleaned_data.get('score1_tiebreak')
        tiebreak2 = cleaned_data.get('score2_tiebreak')
        if tiebreak1 is not None or tiebreak2 is not None:
            if tiebreak1 is None or tiebreak2 is None:
                raise forms.ValidationError('Enter both penalty scores.')
            if score1 is None or score1 != score2:
                raise forms.ValidationError('Penalty scores can only be entered for a draw.')
            if tiebreak1 == tiebreak2:
                raise forms.ValidationError('A penalty shoot-out must have a winner.')

        return cleaned_data

    def score_record(self):
        return ScoreRecord(
            score1=self.cleaned_data.get('score1'),
            score2=self.cleaned_data.get('score2'),
            score1_tiebreak=self.cleaned_data.get('score1_tiebreak'),
            score2_tiebreak=self.cleaned_data.get('score2_tiebreak'),
            locked=self.cleaned_data.get('locked', False),
        )
