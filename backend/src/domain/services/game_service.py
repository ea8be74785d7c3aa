"""
Game status resolution, schedule formatting helpers and the game domain service.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from config.settings import settings
from core.error_handler import with_domain_error_handling
from core.exceptions import ValidationError
from core.utils import DataValidator

from .base_service import BaseService
from ..models.game import Game, GameStatus
from ..models.statistics import GameDetails


def default_stale_threshold() -> timedelta:
    return timedelta(minutes=settings.stale_game_threshold_minutes)


def _align_now(game_time: datetime, now: Optional[datetime]) -> datetime:
    """Express `now` in the same naive/aware convention as the game time."""
    if now is None:
        return datetime.now(game_time.tzinfo)
    if game_time.tzinfo is None and now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    if game_time.tzinfo is not None and now.tzinfo is None:
        return now.astimezone(game_time.tzinfo)
    return now


def resolve_status(
    game_time: datetime,
    has_result: bool,
    now: Optional[datetime] = None,
    stale_threshold: Optional[timedelta] = None
) -> GameStatus:
    """
    Derive a game's lifecycle state.

    A recorded result always means completed. Without one, a future game is
    scheduled, a game that started less than `stale_threshold` ago is live, and
    an older one is presumed completed even though no result exists yet.

    Args:
        game_time: Scheduled tip-off
        has_result: Whether both final scores are recorded
        now: Evaluation time, defaults to the current wall clock
        stale_threshold: Defaults to the configured threshold (2 hours)
    """
    if has_result:
        return GameStatus.COMPLETED

    now = _align_now(game_time, now)
    if game_time > now:
        return GameStatus.SCHEDULED

    threshold = stale_threshold if stale_threshold is not None else default_stale_threshold()
    if now - game_time < threshold:
        return GameStatus.LIVE
    return GameStatus.COMPLETED


def game_status(game: Game, now: Optional[datetime] = None) -> GameStatus:
    return resolve_status(game.game_time, game.has_result, now=now)


def get_game_winner(home_score: int, away_score: int) -> str:
    """'home', 'away' or 'draw'."""
    if home_score > away_score:
        return "home"
    if away_score > home_score:
        return "away"
    return "draw"


def format_game_score(home_score: int, away_score: int) -> str:
    """e.g. "94-87"."""
    return f"{home_score}-{away_score}"


def format_game_date(game_time: datetime) -> str:
    """e.g. "Feb 10, 2024"."""
    return f"{game_time.strftime('%b')} {game_time.day}, {game_time.year}"


def format_game_time_only(game_time: datetime) -> str:
    """e.g. "4:00 PM"."""
    hour = game_time.hour % 12 or 12
    period = "AM" if game_time.hour < 12 else "PM"
    return f"{hour}:{game_time.minute:02d} {period}"


def format_game_time(game_time: datetime) -> str:
    """e.g. "Feb 10, 2024 at 4:00 PM"."""
    return f"{format_game_date(game_time)} at {format_game_time_only(game_time)}"


def split_game_time(game_time: datetime) -> Dict[str, str]:
    """Split into form fields: date "YYYY-MM-DD" and 24-hour time "HH:MM"."""
    return {
        'date': game_time.strftime('%Y-%m-%d'),
        'time': game_time.strftime('%H:%M'),
    }


def combine_date_time(date: str, time: str) -> datetime:
    """Combine "YYYY-MM-DD" and "HH:MM" (or "7:00 PM") into a game time."""
    try:
        return datetime.fromisoformat(f"{date}T{convert_time_to_24_hour(time)}:00")
    except ValueError as e:
        raise ValidationError("gameTime", f"{date} {time}", "must be a valid date and time") from e


def convert_time_to_24_hour(time: str) -> str:
    """
    Convert "7:00 PM" to "19:00". Strings already in 24-hour form, and strings
    that cannot be parsed, are returned unchanged.
    """
    if 'AM' not in time and 'PM' not in time:
        return time

    parts = time.split(' ')
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return time

    time_part, period = parts
    time_parts = time_part.split(':')
    if len(time_parts) != 2 or not all(p.isdigit() for p in time_parts):
        return time

    hours, minutes = (int(p) for p in time_parts)
    if period == 'PM' and hours != 12:
        hours += 12
    elif period == 'AM' and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes:02d}"


class GameService(BaseService[Game]):
    """
    Domain service for game-related operations.
    Reads and writes go through the repository; status is always derived here.
    """

    def __init__(self, repository):
        super().__init__(repository, Game)

    def get_entity_name(self) -> str:
        return "game"

    async def get_game(self, game_id: str) -> Game:
        return await self.get_by_id(game_id)

    async def list_games(self) -> List[Game]:
        """All games in chronological order."""
        games = await self.get_all()
        return sorted(games, key=lambda g: g.game_time)

    async def get_team_games(self, team_id: str) -> List[Game]:
        """Games where the team plays home or away, chronological."""
        games = await self.list_games()
        return [game for game in games if game.involves(team_id)]

    async def get_games_by_status(self, status: GameStatus, now: Optional[datetime] = None) -> List[Game]:
        games = await self.list_games()
        return [game for game in games if game_status(game, now) == status]

    async def get_live_games(self, now: Optional[datetime] = None) -> List[Game]:
        return await self.get_games_by_status(GameStatus.LIVE, now)

    @with_domain_error_handling()
    async def schedule_game(self, home_team_id: str, away_team_id: str, game_time: datetime) -> Game:
        """Create a game after checking both teams exist."""
        await self.repository.get_team(home_team_id)
        await self.repository.get_team(away_team_id)
        game = Game(home_team_id=home_team_id, away_team_id=away_team_id, game_time=game_time)
        self.logger.info(f"Scheduling game {home_team_id} vs {away_team_id} at {game_time.isoformat()}")
        return await self.repository.create_game(game)

    @with_domain_error_handling()
    async def reschedule_game(self, game_id: str, game_time: datetime) -> Game:
        return await self.repository.update_game(game_id, game_time=game_time)

    @with_domain_error_handling()
    async def record_result(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        details: Optional[GameDetails] = None
    ) -> Game:
        """
        Record a final score. The repository enforces the half and player-point
        sum invariants and updates both teams' counters.
        """
        DataValidator.validate_non_negative_int(home_score, "home_score")
        DataValidator.validate_non_negative_int(away_score, "away_score")
        self.logger.info(f"Recording result for game {game_id}: {format_game_score(home_score, away_score)}")
        return await self.repository.submit_game_result(game_id, home_score, away_score, details)

    @with_domain_error_handling()
    async def cancel_game(self, game_id: str) -> bool:
        return await self.repository.delete_game(game_id)
