"""
Game domain models.
A game's status is never stored; it is derived from its time and recorded result.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.exceptions import ValidationError
from core.utils import parse_datetime

from .base import BaseEntity, unwrap_api_data, optional_str
from .statistics import GameDetails


class GameStatus(str, Enum):
    """Lifecycle state of a game."""
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"


@dataclass
class Game(BaseEntity):
    """
    A scheduled game between two teams, optionally carrying a recorded result.
    home_score and away_score are either both present or both absent.
    """
    home_team_id: str = ""
    away_team_id: str = ""
    game_time: Optional[datetime] = None

    # Recorded result
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    # Recorded box score, if one was entered with the result
    details: Optional[GameDetails] = None

    def __post_init__(self):
        if isinstance(self.game_time, str):
            self.game_time = parse_datetime(self.game_time)

        if self.home_team_id and self.home_team_id == self.away_team_id:
            raise ValidationError("awayTeamId", self.away_team_id, "must differ from homeTeamId")

        if (self.home_score is None) != (self.away_score is None):
            raise ValidationError(
                "score",
                (self.home_score, self.away_score),
                "homeScore and awayScore must be recorded together"
            )

        for name, score in (("homeScore", self.home_score), ("awayScore", self.away_score)):
            if score is not None and score < 0:
                raise ValidationError(name, score, "must be non-negative")

    @property
    def has_result(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    @property
    def point_differential(self) -> Optional[int]:
        """Home minus away, None before a result exists."""
        if not self.has_result:
            return None
        return self.home_score - self.away_score

    @property
    def total_score(self) -> Optional[int]:
        if not self.has_result:
            return None
        return self.home_score + self.away_score

    @property
    def winner(self) -> Optional[str]:
        """'home', 'away' or 'draw'; None before a result exists."""
        if not self.has_result:
            return None
        if self.home_score > self.away_score:
            return "home"
        if self.away_score > self.home_score:
            return "away"
        return "draw"

    @property
    def winning_team_id(self) -> Optional[str]:
        """Get the ID of the winning team; None for draws and unplayed games."""
        if self.winner == "home":
            return self.home_team_id
        if self.winner == "away":
            return self.away_team_id
        return None

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    @staticmethod
    def _parse_result(game_data: Dict[str, Any]) -> Dict[str, Optional[int]]:
        # Results arrive either inline or as a nested GameResult record
        result = game_data.get('result') or {}
        home_score = game_data.get('homeScore', result.get('homeScore'))
        away_score = game_data.get('awayScore', result.get('awayScore'))
        return {
            'home_score': int(home_score) if home_score is not None else None,
            'away_score': int(away_score) if away_score is not None else None,
        }

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'Game':
        """Create Game from league service response."""
        game_data = unwrap_api_data(api_data)
        details_data = game_data.get('details')

        return cls(
            id=str(game_data.get('id', '')),
            home_team_id=optional_str(game_data.get('homeTeamId')) or "",
            away_team_id=optional_str(game_data.get('awayTeamId')) or "",
            game_time=parse_datetime(game_data.get('gameTime')),
            details=GameDetails.from_api_response(details_data) if details_data else None,
            raw_data=api_data,
            **cls._parse_result(game_data),
            **cls._timestamps(game_data)
        )


@dataclass
class GameWithDetails(Game):
    """Game with resolved team names, derived status and (when completed) its box score."""
    home_team_name: str = ""
    away_team_name: str = ""
    status: GameStatus = GameStatus.SCHEDULED
