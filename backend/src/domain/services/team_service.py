"""
Team domain service and the standings ranker.
"""

from typing import Iterable, List, Optional

from core.utils import LoggerFactory
from core.error_handler import with_domain_error_handling

from .base_service import BaseService
from .stats_service import compute_stats
from ..models.game import Game
from ..models.team import Team, TeamWithStats, Standing

logger = LoggerFactory.get_logger(__name__)


def rank_standings(teams: Iterable[Team]) -> List[Standing]:
    """
    Rank teams by win percentage, best first.

    Ties are not merged: teams with equal win percentage keep their input
    order and receive consecutive ranks.

    Args:
        teams: Teams in any order

    Returns:
        One Standing per team, ranks 1..N
    """
    ranked = sorted(
        (compute_stats(team) for team in teams),
        key=lambda stats: stats.win_percentage,
        reverse=True
    )
    return [Standing(rank=index + 1, team=stats) for index, stats in enumerate(ranked)]


def compute_streak(team_id: str, games: Iterable[Game]) -> Optional[str]:
    """
    Current streak from recorded results, e.g. "W5", "L2" or "D1".
    Returns None when the team has no recorded results.
    """
    played = sorted(
        (game for game in games if game.has_result and game.involves(team_id)),
        key=lambda g: g.game_time,
        reverse=True
    )
    if not played:
        return None

    def outcome(game: Game) -> str:
        if game.winner == "draw":
            return "D"
        return "W" if game.winning_team_id == team_id else "L"

    current = outcome(played[0])
    length = 0
    for game in played:
        if outcome(game) != current:
            break
        length += 1
    return f"{current}{length}"


class TeamService(BaseService[Team]):
    """
    Domain service for team-related operations.
    Inherits common functionality from BaseService.
    """

    def __init__(self, repository):
        super().__init__(repository, Team)

    def get_entity_name(self) -> str:
        return "team"

    async def get_team(self, team_id: str) -> Team:
        return await self.get_by_id(team_id)

    async def get_team_stats(self, team_id: str) -> TeamWithStats:
        """Get a team with its derived statistics."""
        team = await self.get_by_id(team_id)
        return compute_stats(team)

    async def get_all_team_stats(self) -> List[TeamWithStats]:
        teams = await self.get_all()
        return [compute_stats(team) for team in teams]

    async def get_standings(self, include_streaks: bool = True) -> List[Standing]:
        """
        Current league table. Streaks are derived from the recorded game
        results when include_streaks is set.
        """
        teams = await self.get_all()
        standings = rank_standings(teams)

        if include_streaks and standings:
            games = await self.repository.list_games()
            for standing in standings:
                standing.streak = compute_streak(standing.team.id, games)

        logger.debug(f"Ranked {len(standings)} teams")
        return standings

    async def find_by_name(self, name: str) -> Optional[Team]:
        """Case-insensitive exact name lookup."""
        name_lower = name.strip().lower()
        for team in await self.get_all():
            if team.name.lower() == name_lower:
                return team
        return None

    @with_domain_error_handling()
    async def create_team(self, name: str, **extras) -> Team:
        """Create a team with a zeroed record."""
        team = Team(name=name, **extras)
        self.logger.info(f"Creating team {name}")
        return await self.repository.create_team(team)

    @with_domain_error_handling()
    async def update_team(self, team_id: str, **changes) -> Team:
        return await self.repository.update_team(team_id, **changes)

    @with_domain_error_handling()
    async def delete_team(self, team_id: str) -> bool:
        return await self.repository.delete_team(team_id)
