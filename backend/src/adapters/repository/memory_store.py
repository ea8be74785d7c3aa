"""
In-memory LeagueRepository.

The store owns its dictionaries outright. Every read returns a deep copy and
every write replaces the stored entity, so callers can never alias store state.
"""

import asyncio
import copy
import dataclasses
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, TypeVar

from core.exceptions import (
    ValidationError, TeamNotFoundError, GameNotFoundError,
    PlayerNotFoundError, UserNotFoundError, PaymentNotFoundError
)
from core.utils import DataValidator
from domain.models.base import BaseEntity
from domain.models.game import Game
from domain.models.payment import Payment, PaymentStatus
from domain.models.player import Player, User
from domain.models.statistics import GameDetails
from domain.models.team import Team

from .base import LeagueRepository

logger = logging.getLogger(__name__)

E = TypeVar('E', bound=BaseEntity)

TEAM_COUNTERS = ('wins', 'losses', 'draws', 'points_for', 'points_against')
RESULT_FIELDS = ('home_score', 'away_score', 'details')


def _snapshot(entity: E) -> E:
    return copy.deepcopy(entity)


class InMemoryLeagueStore(LeagueRepository):
    """
    Dictionary-backed store used by tests, demos and local development.
    A single asyncio lock serializes writes so a result is never applied twice.
    """

    def __init__(
        self,
        teams: Iterable[Team] = (),
        games: Iterable[Game] = (),
        players: Iterable[Player] = (),
        users: Iterable[User] = (),
        payments: Iterable[Payment] = ()
    ):
        self._teams: Dict[str, Team] = {team.id: _snapshot(team) for team in teams}
        self._games: Dict[str, Game] = {game.id: _snapshot(game) for game in games}
        self._players: Dict[str, Player] = {player.id: _snapshot(player) for player in players}
        self._users: Dict[str, User] = {user.id: _snapshot(user) for user in users}
        self._payments: Dict[str, Payment] = {payment.id: _snapshot(payment) for payment in payments}
        self._write_lock = asyncio.Lock()

    def _require_team(self, team_id: str) -> Team:
        try:
            return self._teams[team_id]
        except KeyError:
            raise TeamNotFoundError(team_id) from None

    def _require_game(self, game_id: str) -> Game:
        try:
            return self._games[game_id]
        except KeyError:
            raise GameNotFoundError(game_id) from None

    def _require_player(self, player_id: str) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise PlayerNotFoundError(player_id) from None

    def _require_user(self, user_id: str) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise UserNotFoundError(user_id) from None

    def _require_payment(self, payment_id: str) -> Payment:
        try:
            return self._payments[payment_id]
        except KeyError:
            raise PaymentNotFoundError(payment_id) from None

    @staticmethod
    def _check_new_id(collection: Dict[str, BaseEntity], entity: BaseEntity, field: str):
        if entity.id in collection:
            raise ValidationError(field, entity.id, "already exists")

    @staticmethod
    def _apply_changes(entity: E, changes: Dict, protected: Iterable[str]) -> E:
        protected = set(protected) | {'id', 'created_at', 'raw_data'}
        valid_fields = {f.name for f in dataclasses.fields(entity)}
        for name in changes:
            if name not in valid_fields:
                raise ValidationError(name, changes[name], "is not a field of " + type(entity).__name__)
            if name in protected:
                raise ValidationError(name, changes[name], "cannot be changed directly")
        return dataclasses.replace(entity, updated_at=datetime.now(), **changes)

    # Teams

    async def list_teams(self) -> List[Team]:
        return [_snapshot(team) for team in self._teams.values()]

    async def get_team(self, team_id: str) -> Team:
        return _snapshot(self._require_team(team_id))

    async def create_team(self, team: Team) -> Team:
        async with self._write_lock:
            self._check_new_id(self._teams, team, "teamId")
            for counter in TEAM_COUNTERS:
                DataValidator.validate_non_negative_int(getattr(team, counter), counter)
            stored = dataclasses.replace(team, created_at=team.created_at or datetime.now())
            self._teams[stored.id] = stored
            logger.info(f"Created team {stored.name} ({stored.id})")
            return _snapshot(stored)

    async def update_team(self, team_id: str, **changes) -> Team:
        """Update presentation fields; record counters only move with game results."""
        async with self._write_lock:
            team = self._require_team(team_id)
            stored = self._apply_changes(team, changes, TEAM_COUNTERS)
            self._teams[team_id] = stored
            return _snapshot(stored)

    async def delete_team(self, team_id: str) -> bool:
        """Delete a team with no games; its players become free agents."""
        async with self._write_lock:
            self._require_team(team_id)
            if any(game.involves(team_id) for game in self._games.values()):
                raise ValidationError("teamId", team_id, "team still has games")

            for player_id, player in list(self._players.items()):
                if player.team_id == team_id:
                    self._players[player_id] = dataclasses.replace(player, team_id=None, updated_at=datetime.now())

            del self._teams[team_id]
            logger.info(f"Deleted team {team_id}")
            return True

    # Games

    async def list_games(self) -> List[Game]:
        return [_snapshot(game) for game in self._games.values()]

    async def get_game(self, game_id: str) -> Game:
        return _snapshot(self._require_game(game_id))

    async def create_game(self, game: Game) -> Game:
        """Create an unplayed game. Results are only recorded through submit_game_result."""
        async with self._write_lock:
            self._check_new_id(self._games, game, "gameId")
            self._require_team(game.home_team_id)
            self._require_team(game.away_team_id)
            if game.game_time is None:
                raise ValidationError("gameTime", None, "is required")
            if game.has_result:
                raise ValidationError("result", (game.home_score, game.away_score), "submit results separately")

            stored = dataclasses.replace(game, created_at=game.created_at or datetime.now())
            self._games[stored.id] = stored
            return _snapshot(stored)

    async def update_game(self, game_id: str, game_time: Optional[datetime] = None, **changes) -> Game:
        async with self._write_lock:
            game = self._require_game(game_id)
            if game_time is not None:
                changes['game_time'] = game_time
            for team_field in ('home_team_id', 'away_team_id'):
                if team_field not in changes:
                    continue
                # The recorded result is already counted in both teams' records
                if game.has_result and changes[team_field] != getattr(game, team_field):
                    raise ValidationError(team_field, changes[team_field], "game already has a recorded result")
                self._require_team(changes[team_field])

            stored = self._apply_changes(game, changes, RESULT_FIELDS)
            self._games[game_id] = stored
            return _snapshot(stored)

    async def delete_game(self, game_id: str) -> bool:
        """Delete an unplayed game; a recorded result is already counted in team records."""
        async with self._write_lock:
            game = self._require_game(game_id)
            if game.has_result:
                raise ValidationError("gameId", game_id, "game already has a recorded result")
            del self._games[game_id]
            return True

    async def submit_game_result(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        details: Optional[GameDetails] = None
    ) -> Game:
        async with self._write_lock:
            game = self._require_game(game_id)
            if game.has_result:
                raise ValidationError("gameId", game_id, "result already recorded")

            DataValidator.validate_non_negative_int(home_score, "homeScore")
            DataValidator.validate_non_negative_int(away_score, "awayScore")

            if details is not None:
                details = dataclasses.replace(copy.deepcopy(details), game_id=game_id)
                details.validate_against(home_score, away_score)

            home = self._require_team(game.home_team_id)
            away = self._require_team(game.away_team_id)

            stored = dataclasses.replace(
                game,
                home_score=home_score,
                away_score=away_score,
                details=details,
                updated_at=datetime.now()
            )
            self._games[game_id] = stored
            self._teams[home.id] = self._with_result(home, home_score, away_score)
            self._teams[away.id] = self._with_result(away, away_score, home_score)

            logger.info(f"Recorded result for game {game_id}: {home_score}-{away_score}")
            return _snapshot(stored)

    @staticmethod
    def _with_result(team: Team, scored: int, allowed: int) -> Team:
        return dataclasses.replace(
            team,
            wins=team.wins + (scored > allowed),
            losses=team.losses + (scored < allowed),
            draws=team.draws + (scored == allowed),
            points_for=team.points_for + scored,
            points_against=team.points_against + allowed,
            updated_at=datetime.now()
        )

    # Players and users

    async def list_players(self) -> List[Player]:
        return [_snapshot(player) for player in self._players.values()]

    async def get_player(self, player_id: str) -> Player:
        return _snapshot(self._require_player(player_id))

    async def create_player(self, player: Player) -> Player:
        async with self._write_lock:
            self._check_new_id(self._players, player, "playerId")
            self._require_user(player.user_id)
            if player.team_id is not None:
                self._require_team(player.team_id)
            stored = dataclasses.replace(player, created_at=player.created_at or datetime.now())
            self._players[stored.id] = stored
            return _snapshot(stored)

    async def assign_player_to_team(
        self,
        player_id: str,
        team_id: Optional[str],
        jersey_number: Optional[int] = None
    ) -> Player:
        async with self._write_lock:
            player = self._require_player(player_id)
            if team_id is not None:
                self._require_team(team_id)

            changes = {'team_id': team_id, 'updated_at': datetime.now()}
            if jersey_number is not None:
                changes['jersey_number'] = jersey_number
            stored = dataclasses.replace(player, **changes)
            self._players[player_id] = stored
            return _snapshot(stored)

    async def update_player_registration(
        self,
        player_id: str,
        is_fully_registered: bool,
        registration_fee_due: Optional[float] = None
    ) -> Player:
        """Set registration state; a fee of None leaves the recorded fee unchanged."""
        async with self._write_lock:
            player = self._require_player(player_id)
            changes = {'is_fully_registered': is_fully_registered, 'updated_at': datetime.now()}
            if registration_fee_due is not None:
                if registration_fee_due < 0:
                    raise ValidationError("registrationFeeDue", registration_fee_due, "must be non-negative")
                changes['registration_fee_due'] = registration_fee_due
            stored = dataclasses.replace(player, **changes)
            self._players[player_id] = stored
            return _snapshot(stored)

    async def delete_player(self, player_id: str) -> bool:
        """Delete a player with no payment history."""
        async with self._write_lock:
            self._require_player(player_id)
            if any(payment.player_id == player_id for payment in self._payments.values()):
                raise ValidationError("playerId", player_id, "player still has payments")
            del self._players[player_id]
            logger.info(f"Deleted player {player_id}")
            return True

    async def list_users(self) -> List[User]:
        return [_snapshot(user) for user in self._users.values()]

    async def get_user(self, user_id: str) -> User:
        return _snapshot(self._require_user(user_id))

    async def create_user(self, user: User) -> User:
        async with self._write_lock:
            self._check_new_id(self._users, user, "userId")
            stored = dataclasses.replace(user, created_at=user.created_at or datetime.now())
            self._users[stored.id] = stored
            return _snapshot(stored)

    async def update_user(self, user_id: str, **changes) -> User:
        async with self._write_lock:
            user = self._require_user(user_id)
            stored = self._apply_changes(user, changes, ())
            self._users[user_id] = stored
            return _snapshot(stored)

    async def delete_user(self, user_id: str) -> bool:
        """Delete an account that no player registration points at."""
        async with self._write_lock:
            self._require_user(user_id)
            if any(player.user_id == user_id for player in self._players.values()):
                raise ValidationError("userId", user_id, "user still has a player registration")
            del self._users[user_id]
            logger.info(f"Deleted user {user_id}")
            return True

    # Payments

    async def list_payments(self) -> List[Payment]:
        return [_snapshot(payment) for payment in self._payments.values()]

    async def create_payment(self, payment: Payment) -> Payment:
        async with self._write_lock:
            self._check_new_id(self._payments, payment, "paymentId")
            self._require_player(payment.player_id)
            if payment.amount < 0:
                raise ValidationError("amount", payment.amount, "must be non-negative")
            self._payments[payment.id] = _snapshot(payment)
            return _snapshot(payment)

    async def update_payment_status(self, payment_id: str, status: str) -> Payment:
        async with self._write_lock:
            payment = self._require_payment(payment_id)
            try:
                status = PaymentStatus(status).value
            except ValueError:
                raise ValidationError("status", status, "must be pending, completed or failed") from None
            stored = dataclasses.replace(payment, status=status, updated_at=datetime.now())
            self._payments[payment_id] = stored
            logger.info(f"Payment {payment_id} is now {status}")
            return _snapshot(stored)

    async def delete_payment(self, payment_id: str) -> bool:
        async with self._write_lock:
            self._require_payment(payment_id)
            del self._payments[payment_id]
            return True
