"""
Team domain models and the composites derived from them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import BaseEntity, unwrap_api_data
from .game import GameWithDetails
from .player import PlayerProfile


@dataclass
class Team(BaseEntity):
    """
    A league team with its cumulative record.
    Counters only change when a game result is submitted to the store.
    """
    name: str = ""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    points_for: int = 0
    points_against: int = 0

    # Presentation extras
    coach: Optional[str] = None
    home_venue: Optional[str] = None
    logo: Optional[str] = None

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'Team':
        """Create Team from league service response."""
        team_data = unwrap_api_data(api_data)

        return cls(
            id=str(team_data.get('id', '')),
            name=team_data.get('name', ''),
            wins=int(team_data.get('wins') or 0),
            losses=int(team_data.get('losses') or 0),
            draws=int(team_data.get('draws') or 0),
            points_for=int(team_data.get('pointsFor') or 0),
            points_against=int(team_data.get('pointsAgainst') or 0),
            coach=team_data.get('coach'),
            home_venue=team_data.get('homeVenue'),
            logo=team_data.get('logo'),
            raw_data=api_data,
            **cls._timestamps(team_data)
        )


@dataclass
class TeamWithStats(Team):
    """Team plus statistics derived from its counters. Never persisted."""
    win_percentage: float = 0.0
    point_differential: int = 0
    games_played: int = 0
    avg_points_for: float = 0.0
    avg_points_against: float = 0.0


@dataclass
class Standing:
    """A team's ranked position in the league table."""
    rank: int
    team: TeamWithStats
    streak: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'team': self.team.to_dict(),
            'streak': self.streak,
        }


@dataclass
class TeamDetail:
    """Everything the team page shows: stats, roster and schedule."""
    team: TeamWithStats
    roster: List[PlayerProfile] = field(default_factory=list)
    games: List[GameWithDetails] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = self.team.to_dict()
        result['roster'] = [player.to_dict() for player in self.roster]
        result['games'] = [game.to_dict() for game in self.games]
        return result
