"""
Team statistics derived from cumulative win/loss/draw and points counters.
Every function here is pure; ratios with a zero denominator are 0.
"""

from dataclasses import fields

from core.utils import round_half_up

from ..models.team import Team, TeamWithStats


def calculate_games_played(wins: int, losses: int, draws: int) -> int:
    return wins + losses + draws


def calculate_win_percentage(wins: int, losses: int, draws: int) -> float:
    """Win percentage in [0, 1]; draws count as games played."""
    total_games = calculate_games_played(wins, losses, draws)
    if total_games == 0:
        return 0.0
    return wins / total_games


def calculate_point_differential(points_for: int, points_against: int) -> int:
    """Positive when the team is outscoring its opponents."""
    return points_for - points_against


def calculate_average(points: int, games_played: int) -> float:
    """Per-game average rounded to one decimal, half away from zero."""
    if games_played == 0:
        return 0.0
    return round_half_up(points / games_played, 1)


def compute_stats(team: Team) -> TeamWithStats:
    """
    Transform a Team into TeamWithStats by computing its derived statistics.

    Args:
        team: Team record with cumulative counters

    Returns:
        A new TeamWithStats; the input team is not modified
    """
    games_played = calculate_games_played(team.wins, team.losses, team.draws)
    base_values = {f.name: getattr(team, f.name) for f in fields(Team)}

    return TeamWithStats(
        **base_values,
        win_percentage=calculate_win_percentage(team.wins, team.losses, team.draws),
        point_differential=calculate_point_differential(team.points_for, team.points_against),
        games_played=games_played,
        avg_points_for=calculate_average(team.points_for, games_played),
        avg_points_against=calculate_average(team.points_against, games_played),
    )


def format_win_percentage(win_percentage: float) -> str:
    """Format a 0-1 win percentage for display, e.g. "75.0%"."""
    return f"{round_half_up(win_percentage * 100, 1):.1f}%"


def format_team_record(wins: int, losses: int, draws: int = 0) -> str:
    """Format a record as "10-5", or "10-5-2" when the team has draws."""
    if draws > 0:
        return f"{wins}-{losses}-{draws}"
    return f"{wins}-{losses}"
