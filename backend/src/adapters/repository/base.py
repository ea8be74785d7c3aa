"""
Repository contract the domain services read and write through.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from domain.models.game import Game
from domain.models.payment import Payment
from domain.models.player import Player, User
from domain.models.statistics import GameDetails
from domain.models.team import Team


class LeagueRepository(ABC):
    """
    Storage for teams, games, players, users and payments.

    Getters raise the matching EntityNotFoundError subclass for unknown ids.
    Returned entities are snapshots: mutating one never changes stored state.
    """

    # Teams
    @abstractmethod
    async def list_teams(self) -> List[Team]:
        pass

    @abstractmethod
    async def get_team(self, team_id: str) -> Team:
        pass

    @abstractmethod
    async def create_team(self, team: Team) -> Team:
        pass

    @abstractmethod
    async def update_team(self, team_id: str, **changes) -> Team:
        pass

    @abstractmethod
    async def delete_team(self, team_id: str) -> bool:
        pass

    # Games
    @abstractmethod
    async def list_games(self) -> List[Game]:
        pass

    @abstractmethod
    async def get_game(self, game_id: str) -> Game:
        pass

    @abstractmethod
    async def create_game(self, game: Game) -> Game:
        pass

    @abstractmethod
    async def update_game(self, game_id: str, game_time: Optional[datetime] = None, **changes) -> Game:
        pass

    @abstractmethod
    async def delete_game(self, game_id: str) -> bool:
        pass

    @abstractmethod
    async def submit_game_result(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        details: Optional[GameDetails] = None
    ) -> Game:
        """
        Record a final score once, validating any box score against it and
        updating both teams' win/loss/draw and points counters.
        """
        pass

    # Players and users
    @abstractmethod
    async def list_players(self) -> List[Player]:
        pass

    @abstractmethod
    async def get_player(self, player_id: str) -> Player:
        pass

    @abstractmethod
    async def create_player(self, player: Player) -> Player:
        pass

    @abstractmethod
    async def assign_player_to_team(
        self,
        player_id: str,
        team_id: Optional[str],
        jersey_number: Optional[int] = None
    ) -> Player:
        pass

    @abstractmethod
    async def update_player_registration(
        self,
        player_id: str,
        is_fully_registered: bool,
        registration_fee_due: Optional[float] = None
    ) -> Player:
        pass

    @abstractmethod
    async def delete_player(self, player_id: str) -> bool:
        pass

    @abstractmethod
    async def list_users(self) -> List[User]:
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> User:
        pass

    @abstractmethod
    async def create_user(self, user: User) -> User:
        pass

    @abstractmethod
    async def update_user(self, user_id: str, **changes) -> User:
        pass

    @abstractmethod
    async def delete_user(self, user_id: str) -> bool:
        pass

    # Payments
    @abstractmethod
    async def list_payments(self) -> List[Payment]:
        pass

    @abstractmethod
    async def create_payment(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def update_payment_status(self, payment_id: str, status: str) -> Payment:
        pass

    @abstractmethod
    async def delete_payment(self, payment_id: str) -> bool:
        pass
