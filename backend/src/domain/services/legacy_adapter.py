"""
Adapters between the canonical models and the older flat record shape.

The flat shape names players with a single ``name`` and ``number`` and splits a
game's time into ``date`` ("2024-02-10") and ``time`` ("7:00 PM") strings. It is
only produced and consumed here; nothing else in the package depends on it.
"""

from typing import Any, Dict

from .game_service import combine_date_time, format_game_time_only
from ..models.game import Game, GameWithDetails
from ..models.player import PlayerProfile
from ..models.statistics import GameDetails


def player_profile_to_legacy(profile: PlayerProfile) -> Dict[str, Any]:
    return {
        'id': profile.id,
        'name': profile.full_name,
        'number': profile.jersey_number if profile.jersey_number is not None else 0,
        'pointsPerGame': profile.points_per_game,
        'email': profile.email or None,
        'teamId': profile.team_id,
    }


def game_to_legacy(game: GameWithDetails) -> Dict[str, Any]:
    """Flatten a resolved game; scores and details only appear once recorded."""
    record = {
        'id': game.id,
        'homeTeam': game.home_team_name,
        'homeTeamId': game.home_team_id,
        'awayTeam': game.away_team_name,
        'awayTeamId': game.away_team_id,
        'date': game.game_time.strftime('%Y-%m-%d'),
        'time': format_game_time_only(game.game_time),
        'status': game.status.value,
    }
    if game.has_result:
        record['homeScore'] = game.home_score
        record['awayScore'] = game.away_score
    if game.details is not None:
        record['details'] = game.details.to_dict()
    return record


def legacy_game_to_game(record: Dict[str, Any]) -> Game:
    """
    Build a canonical Game from a flat record. The flat ``status`` is dropped
    since status is always derived.
    """
    details = record.get('details')
    return Game(
        id=str(record['id']),
        home_team_id=str(record['homeTeamId']),
        away_team_id=str(record['awayTeamId']),
        game_time=combine_date_time(record['date'], record['time']),
        home_score=record.get('homeScore'),
        away_score=record.get('awayScore'),
        details=GameDetails.from_api_response(details) if details else None,
        raw_data=record,
    )
