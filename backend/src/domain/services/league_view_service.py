"""
Composite views for the league pages: team detail, game detail, the homepage
slices and the standings table.

The module-level builders are pure aggregation over records that were already
fetched. LeagueViewService fetches them from a repository and delegates here.
"""

import random
from dataclasses import fields
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from config.settings import settings
from core.exceptions import TeamNotFoundError
from core.utils import LoggerFactory

from .box_score_service import synthesize_game_details
from .game_service import resolve_status
from .player_service import build_profiles
from .stats_service import compute_stats
from .team_service import rank_standings, compute_streak
from ..models.game import Game, GameStatus, GameWithDetails
from ..models.player import Player, PlayerProfile, User
from ..models.team import Team, Standing, TeamDetail

logger = LoggerFactory.get_logger(__name__)


def _team_name(team_names: Mapping[str, str], team_id: str) -> str:
    try:
        return team_names[team_id]
    except KeyError:
        raise TeamNotFoundError(team_id) from None


def group_rosters(players: Iterable[Player], users: Iterable[User]) -> Dict[str, List[PlayerProfile]]:
    """Profiles keyed by team id; free agents are left out."""
    rosters: Dict[str, List[PlayerProfile]] = {}
    for profile in build_profiles(players, users):
        if profile.team_id is not None:
            rosters.setdefault(profile.team_id, []).append(profile)
    return rosters


def build_game_with_details(
    game: Game,
    team_names: Mapping[str, str],
    now: Optional[datetime] = None,
    rosters: Optional[Mapping[str, Sequence[PlayerProfile]]] = None,
    rng: Optional[random.Random] = None
) -> GameWithDetails:
    """
    Resolve team names and status for a game.

    Details are attached only when a result is recorded: the recorded box score
    when there is one, otherwise a synthesized one when both teams' rosters are
    available in `rosters`. A game that is merely presumed completed (past the
    stale threshold, no result) never gets details.

    Raises:
        TeamNotFoundError: a team id is missing from team_names
    """
    status = resolve_status(game.game_time, game.has_result, now=now)
    details = None

    if game.has_result:
        details = game.details
        if details is None and rosters is not None:
            home_roster = rosters.get(game.home_team_id) or []
            away_roster = rosters.get(game.away_team_id) or []
            if home_roster and away_roster:
                details = synthesize_game_details(game, home_roster, away_roster, rng)
            else:
                logger.debug(f"No box score for game {game.id}: roster unavailable")

    base_values = {f.name: getattr(game, f.name) for f in fields(Game)}
    base_values['details'] = details

    return GameWithDetails(
        **base_values,
        home_team_name=_team_name(team_names, game.home_team_id),
        away_team_name=_team_name(team_names, game.away_team_id),
        status=status,
    )


def build_team_detail(
    team: Team,
    players: Iterable[Player],
    games: Iterable[Game],
    users: Optional[Iterable[User]] = None,
    teams: Optional[Iterable[Team]] = None,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None
) -> TeamDetail:
    """
    Assemble a team page: stats, roster and every game the team plays in.

    Args:
        team: The team to describe
        players: All known players; the roster is those whose team_id matches
        games: All known games; only home or away games of this team are kept
        users: Accounts used to fill roster names and contacts
        teams: All teams, used to name opponents; without it opponents are
            unnamed
        now: Evaluation time for game status
        rng: Random source for synthesized box scores

    Returns:
        TeamDetail with games in chronological order
    """
    rosters = group_rosters(players, users or [])
    team_games = sorted((g for g in games if g.involves(team.id)), key=lambda g: g.game_time)

    if teams is None:
        team_names: Dict[str, str] = {
            opponent_id: ""
            for game in team_games
            for opponent_id in (game.home_team_id, game.away_team_id)
        }
    else:
        team_names = {other.id: other.name for other in teams}
    team_names[team.id] = team.name

    rng = rng or random.Random()
    return TeamDetail(
        team=compute_stats(team),
        roster=rosters.get(team.id, []),
        games=[build_game_with_details(game, team_names, now, rosters, rng) for game in team_games],
    )


def recent_games(games: Iterable[GameWithDetails], limit: Optional[int] = None) -> List[GameWithDetails]:
    """
    The last `limit` completed games by game time.

    The slice keeps chronological order (oldest of the slice first), the same
    order as upcoming_games and the schedule it is cut from.
    """
    limit = settings.recent_games_limit if limit is None else limit
    if limit <= 0:
        return []
    completed = [g for g in sorted(games, key=lambda g: g.game_time) if g.status == GameStatus.COMPLETED]
    return completed[-limit:]


def upcoming_games(games: Iterable[GameWithDetails], limit: Optional[int] = None) -> List[GameWithDetails]:
    """The first `limit` scheduled games, soonest first."""
    limit = settings.upcoming_games_limit if limit is None else limit
    if limit <= 0:
        return []
    scheduled = [g for g in sorted(games, key=lambda g: g.game_time) if g.status == GameStatus.SCHEDULED]
    return scheduled[:limit]


def build_standings_table(teams: Iterable[Team], games: Iterable[Game] = ()) -> List[Standing]:
    """Ranked standings with each team's current streak."""
    games = list(games)
    standings = rank_standings(teams)
    for standing in standings:
        standing.streak = compute_streak(standing.team.id, games)
    return standings


class LeagueViewService:
    """
    Builds page-level views from a LeagueRepository.
    Each call reads a fresh snapshot; nothing is cached between calls.
    """

    def __init__(self, repository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    async def _snapshot(self):
        teams = await self.repository.list_teams()
        games = await self.repository.list_games()
        players = await self.repository.list_players()
        users = await self.repository.list_users()
        return teams, games, players, users

    def _build_schedule(self, teams, games, players, users, now) -> List[GameWithDetails]:
        team_names = {team.id: team.name for team in teams}
        rosters = group_rosters(players, users)
        rng = self.rng or random.Random()
        return [
            build_game_with_details(game, team_names, now, rosters, rng)
            for game in sorted(games, key=lambda g: g.game_time)
        ]

    async def get_schedule(self, now: Optional[datetime] = None) -> List[GameWithDetails]:
        """Every game, resolved and in chronological order."""
        teams, games, players, users = await self._snapshot()
        return self._build_schedule(teams, games, players, users, now)

    async def get_home_page(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Recent results, upcoming games and the top of the standings, all from one read."""
        teams, games, players, users = await self._snapshot()
        schedule = self._build_schedule(teams, games, players, users, now)
        self.logger.debug(f"Home page built from {len(schedule)} games")
        return {
            'recentGames': recent_games(schedule),
            'upcomingGames': upcoming_games(schedule),
            'standings': build_standings_table(teams, games),
        }

    async def get_standings(self) -> List[Standing]:
        teams = await self.repository.list_teams()
        games = await self.repository.list_games()
        return build_standings_table(teams, games)

    async def get_team_detail(self, team_id: str, now: Optional[datetime] = None) -> TeamDetail:
        """
        Raises:
            TeamNotFoundError: unknown team id
        """
        team = await self.repository.get_team(team_id)
        teams, games, players, users = await self._snapshot()
        return build_team_detail(team, players, games, users=users, teams=teams, now=now, rng=self.rng)

    async def get_game(self, game_id: str, now: Optional[datetime] = None) -> GameWithDetails:
        """
        Raises:
            GameNotFoundError: unknown game id
        """
        game = await self.repository.get_game(game_id)
        teams = await self.repository.list_teams()
        players = await self.repository.list_players()
        users = await self.repository.list_users()
        team_names = {team.id: team.name for team in teams}
        return build_game_with_details(game, team_names, now, group_rosters(players, users), self.rng)
