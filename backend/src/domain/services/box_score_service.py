"""
Box score synthesis for completed games that have no recorded player breakdown.

Totals are exact: player points always sum to the team score and the two
halves always sum to the team score. Only the distribution is random.
"""

import math
import random
from typing import List, Optional, Sequence

from config.settings import settings
from core.exceptions import EmptyRosterError, ValidationError
from core.utils import LoggerFactory, round_half_up

from ..models.game import Game
from ..models.player import PlayerProfile
from ..models.statistics import GameDetails, HalfSplit, PlayerGameStats

logger = LoggerFactory.get_logger(__name__)


def _validate_score(team_score: int) -> None:
    if isinstance(team_score, bool) or not isinstance(team_score, int) or team_score < 0:
        raise ValidationError("teamScore", team_score, "must be a non-negative integer")


def synthesize(
    roster: Sequence[PlayerProfile],
    team_score: int,
    rng: Optional[random.Random] = None,
    league_average: Optional[float] = None,
    variance: Optional[int] = None
) -> List[PlayerGameStats]:
    """
    Distribute a team score across a roster.

    Players are visited by points-per-game, highest first. Each player except
    the last gets floor(score * ppg / league_average) plus a random offset in
    [-variance, variance], clamped to what is still unallocated. The last
    player gets the remainder.

    Args:
        roster: Players on the team; each appears exactly once in the result
        team_score: Final score to distribute
        rng: Random source; a fresh unseeded generator when omitted
        league_average: Reference team score, defaults to settings
        variance: Perturbation half-width, defaults to settings

    Returns:
        Stats ordered by points, leading scorer first

    Raises:
        EmptyRosterError: roster is empty and team_score is positive
        ValidationError: team_score is negative or not an integer
    """
    _validate_score(team_score)
    if not roster:
        if team_score > 0:
            raise EmptyRosterError(team_score)
        return []

    rng = rng or random.Random()
    league_average = league_average if league_average is not None else settings.league_average_score
    variance = variance if variance is not None else settings.scoring_variance

    by_rate = sorted(roster, key=lambda player: player.points_per_game, reverse=True)
    remaining = team_score
    allocations = []

    for player in by_rate[:-1]:
        target = math.floor(team_score * player.points_per_game / league_average)
        points = min(max(target + rng.randint(-variance, variance), 0), remaining)
        remaining -= points
        allocations.append((player, points))

    allocations.append((by_rate[-1], max(0, remaining)))

    stats = [
        PlayerGameStats(
            player_id=player.id,
            player_name=player.full_name,
            jersey_number=player.jersey_number if player.jersey_number is not None else 0,
            points=points,
        )
        for player, points in allocations
    ]
    return sorted(stats, key=lambda s: s.points, reverse=True)


def synthesize_halves(
    team_score: int,
    rng: Optional[random.Random] = None,
    split_min: Optional[float] = None,
    split_max: Optional[float] = None
) -> HalfSplit:
    """Split a score into halves; the second half is always the remainder."""
    _validate_score(team_score)
    rng = rng or random.Random()
    split_min = split_min if split_min is not None else settings.half_split_min
    split_max = split_max if split_max is not None else settings.half_split_max

    first_half = round_half_up(team_score * rng.uniform(split_min, split_max))
    first_half = min(max(first_half, 0), team_score)
    return HalfSplit(first_half=first_half, second_half=team_score - first_half)


def synthesize_game_details(
    game: Game,
    home_roster: Sequence[PlayerProfile],
    away_roster: Sequence[PlayerProfile],
    rng: Optional[random.Random] = None
) -> GameDetails:
    """
    Build a full box score for a game with a recorded result.

    Raises:
        ValidationError: the game has no recorded result
        EmptyRosterError: a side scored points but has no players
    """
    if not game.has_result:
        raise ValidationError("result", None, f"game {game.id} has no recorded result")

    rng = rng or random.Random()
    home_halves = synthesize_halves(game.home_score, rng)
    away_halves = synthesize_halves(game.away_score, rng)

    logger.debug(f"Synthesizing box score for game {game.id}")
    return GameDetails(
        game_id=game.id,
        home_first_half=home_halves.first_half,
        home_second_half=home_halves.second_half,
        away_first_half=away_halves.first_half,
        away_second_half=away_halves.second_half,
        home_player_stats=synthesize(home_roster, game.home_score, rng),
        away_player_stats=synthesize(away_roster, game.away_score, rng),
    )
