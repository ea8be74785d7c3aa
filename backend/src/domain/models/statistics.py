"""
Box score models: per-player points and half-time splits for a single game.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from core.exceptions import InvariantViolationError

from .base import serialize_value, to_camel_case


@dataclass
class PlayerGameStats:
    """A player's scoring line for one game."""
    player_id: str
    player_name: str
    jersey_number: int
    points: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'playerId': self.player_id,
            'playerName': self.player_name,
            'number': self.jersey_number,
            'points': self.points,
        }

    @classmethod
    def from_api_response(cls, stat_data: Dict[str, Any]) -> 'PlayerGameStats':
        return cls(
            player_id=str(stat_data.get('playerId', '')),
            player_name=stat_data.get('playerName', ''),
            jersey_number=int(stat_data.get('number') or 0),
            points=int(stat_data.get('points') or 0),
        )


@dataclass(frozen=True)
class HalfSplit:
    """A team's score split into halves; first_half + second_half is the final score."""
    first_half: int
    second_half: int

    @property
    def total(self) -> int:
        return self.first_half + self.second_half


@dataclass
class GameDetails:
    """
    Half-time scores and per-player points for a completed game.
    Player lists are ordered leading scorer first.
    """
    game_id: str
    home_first_half: int = 0
    home_second_half: int = 0
    away_first_half: int = 0
    away_second_half: int = 0
    home_player_stats: List[PlayerGameStats] = field(default_factory=list)
    away_player_stats: List[PlayerGameStats] = field(default_factory=list)

    @property
    def home_total(self) -> int:
        return self.home_first_half + self.home_second_half

    @property
    def away_total(self) -> int:
        return self.away_first_half + self.away_second_half

    def validate_against(self, home_score: int, away_score: int) -> None:
        """
        Check both sum invariants against a recorded final score.
        Player stats are only checked when present.
        """
        checks = [
            ('home halves', home_score, self.home_total),
            ('away halves', away_score, self.away_total),
        ]
        if self.home_player_stats:
            checks.append(('home player points', home_score, sum(s.points for s in self.home_player_stats)))
        if self.away_player_stats:
            checks.append(('away player points', away_score, sum(s.points for s in self.away_player_stats)))

        for invariant, expected, actual in checks:
            if expected != actual:
                raise InvariantViolationError(invariant, expected, actual)

    def to_dict(self) -> Dict[str, Any]:
        return {
            to_camel_case(name): serialize_value(getattr(self, name))
            for name in self.__dataclass_fields__
        }

    @classmethod
    def from_api_response(cls, details_data: Dict[str, Any]) -> 'GameDetails':
        return cls(
            game_id=str(details_data.get('gameId', '')),
            home_first_half=int(details_data.get('homeFirstHalf') or 0),
            home_second_half=int(details_data.get('homeSecondHalf') or 0),
            away_first_half=int(details_data.get('awayFirstHalf') or 0),
            away_second_half=int(details_data.get('awaySecondHalf') or 0),
            home_player_stats=[
                PlayerGameStats.from_api_response(s) for s in details_data.get('homePlayerStats') or []
            ],
            away_player_stats=[
                PlayerGameStats.from_api_response(s) for s in details_data.get('awayPlayerStats') or []
            ],
        )
