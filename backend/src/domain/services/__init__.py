"""
Domain services for the RecLeague backend.
Pure derivation functions plus async services that read through a LeagueRepository.
"""

from .stats_service import compute_stats, format_win_percentage, format_team_record
from .team_service import TeamService, rank_standings, compute_streak
from .game_service import GameService, resolve_status
from .player_service import PlayerService, summarize_payments
from .box_score_service import synthesize, synthesize_halves, synthesize_game_details
from .league_view_service import (
    LeagueViewService,
    build_game_with_details,
    build_team_detail,
    build_standings_table,
    recent_games,
    upcoming_games,
)

__all__ = [
    # Stat calculator
    "compute_stats",
    "format_win_percentage",
    "format_team_record",

    # Standings
    "TeamService",
    "rank_standings",
    "compute_streak",

    # Game status
    "GameService",
    "resolve_status",

    # Players and payments
    "PlayerService",
    "summarize_payments",

    # Box scores
    "synthesize",
    "synthesize_halves",
    "synthesize_game_details",

    # Composite views
    "LeagueViewService",
    "build_game_with_details",
    "build_team_detail",
    "build_standings_table",
    "recent_games",
    "upcoming_games",
]
