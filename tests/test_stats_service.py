"""
Tests for team statistics and standings.
"""

from datetime import timedelta

import pytest

from test_utils import TestDataFactory, NOW

from domain.models.team import Team
from domain.services.stats_service import (
    compute_stats, calculate_win_percentage, calculate_average,
    format_win_percentage, format_team_record
)
from domain.services.team_service import rank_standings, compute_streak


class TestComputeStats:
    """Derived statistics for a single team."""

    def test_league_leader_stats(self):
        stats = compute_stats(TestDataFactory.create_thunder())

        assert round(stats.win_percentage, 3) == 0.857
        assert stats.point_differential == 96
        assert stats.games_played == 14
        assert stats.avg_points_for == 96.0
        assert stats.avg_points_against == 89.1

    def test_team_without_games_has_zero_ratios(self):
        stats = compute_stats(Team(id="9", name="Expansion"))

        assert stats.win_percentage == 0
        assert stats.games_played == 0
        assert stats.avg_points_for == 0
        assert stats.avg_points_against == 0

    @pytest.mark.parametrize("wins,losses,draws", [
        (0, 0, 0), (1, 0, 0), (0, 5, 0), (3, 3, 2), (0, 0, 4), (14, 1, 0),
    ])
    def test_win_percentage_bounds(self, wins, losses, draws):
        stats = compute_stats(Team(wins=wins, losses=losses, draws=draws))

        assert 0 <= stats.win_percentage <= 1
        assert (stats.win_percentage == 0) == (wins == 0)

    @pytest.mark.parametrize("points_for,points_against", [(0, 0), (1344, 1248), (1162, 1301), (50, 50)])
    def test_point_differential_is_exact(self, points_for, points_against):
        stats = compute_stats(Team(wins=1, points_for=points_for, points_against=points_against))
        assert stats.point_differential == points_for - points_against

    def test_draws_count_as_games_played(self):
        assert calculate_win_percentage(2, 1, 1) == 0.5

    def test_average_rounds_half_away_from_zero(self):
        # 0.25 would round to 0.2 with banker's rounding
        assert calculate_average(5, 20) == 0.3
        assert calculate_average(1247, 14) == 89.1

    def test_input_team_not_modified(self):
        team = TestDataFactory.create_thunder()
        stats = compute_stats(team)

        assert not hasattr(team, 'win_percentage')
        assert stats.name == team.name
        assert stats.coach == "Mike Stevens"

    def test_display_helpers(self):
        assert format_win_percentage(0.75) == "75.0%"
        assert format_win_percentage(6 / 7) == "85.7%"
        assert format_team_record(10, 5) == "10-5"
        assert format_team_record(10, 5, 2) == "10-5-2"


class TestRankStandings:
    """League table ordering."""

    def test_empty_input(self):
        assert rank_standings([]) == []

    def test_ranks_are_one_to_n_in_descending_order(self):
        teams = [
            Team(id="a", name="A", wins=4, losses=10),
            Team(id="b", name="B", wins=12, losses=2),
            Team(id="c", name="C", wins=8, losses=6),
        ]
        standings = rank_standings(teams)

        assert [s.rank for s in standings] == [1, 2, 3]
        assert [s.team.id for s in standings] == ["b", "c", "a"]
        percentages = [s.team.win_percentage for s in standings]
        assert percentages == sorted(percentages, reverse=True)

    def test_ties_keep_input_order(self):
        team_a = Team(id="a", name="TeamA", wins=5, losses=5)
        team_b = Team(id="b", name="TeamB", wins=3, losses=3)
        leader = Team(id="c", name="Leader", wins=9, losses=1)

        standings = rank_standings([team_a, team_b, leader])
        assert [(s.team.id, s.rank) for s in standings] == [("c", 1), ("a", 2), ("b", 3)]

        reversed_input = rank_standings([team_b, team_a])
        assert [s.team.id for s in reversed_input] == ["b", "a"]

    def test_ranking_is_repeatable(self):
        teams = [Team(id=str(i), wins=i % 3, losses=1) for i in range(10)]
        first = [s.team.id for s in rank_standings(teams)]
        second = [s.team.id for s in rank_standings(teams)]
        assert first == second

    def test_length_preserved_with_winless_teams(self):
        teams = [Team(id=str(i)) for i in range(6)]
        standings = rank_standings(teams)
        assert len(standings) == 6
        assert [s.team.id for s in standings] == [str(i) for i in range(6)]


class TestComputeStreak:
    """Current streak from recorded results."""

    def _game(self, game_id, days_ago, home_score, away_score, home="1", away="2"):
        return TestDataFactory.create_game(
            game_id=game_id,
            home_team_id=home,
            away_team_id=away,
            game_time=NOW - timedelta(days=days_ago),
            home_score=home_score,
            away_score=away_score,
        )

    def test_winning_streak_counts_most_recent_run(self):
        games = [
            self._game("1", 10, 80, 90),
            self._game("2", 7, 95, 88),
            self._game("3", 3, 60, 70, home="2", away="1"),
            self._game("4", 1, 99, 95),
        ]
        assert compute_streak("1", games) == "W3"
        assert compute_streak("2", games) == "L3"

    def test_unplayed_games_are_ignored(self):
        games = [self._game("1", 2, 88, 90), self._game("2", -3, None, None)]
        assert compute_streak("1", games) == "L1"

    def test_draw_streak(self):
        assert compute_streak("1", [self._game("1", 1, 80, 80)]) == "D1"

    def test_no_results(self):
        assert compute_streak("1", []) is None
