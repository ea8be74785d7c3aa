"""
Player domain service: profiles, rosters, free agents and registration payments.
"""

from typing import Dict, Iterable, List, Optional

from core.utils import LoggerFactory, DataValidator
from core.exceptions import UserNotFoundError, ValidationError
from core.error_handler import with_domain_error_handling

from .base_service import BaseService
from ..models.payment import Payment, PaymentStatus, PlayerPaymentSummary
from ..models.player import Player, PlayerProfile, User

logger = LoggerFactory.get_logger(__name__)


def build_profiles(players: Iterable[Player], users: Iterable[User]) -> List[PlayerProfile]:
    """Join players with their user accounts; unknown users leave identity blank."""
    users_by_id: Dict[str, User] = {user.id: user for user in users}
    return [PlayerProfile.from_player(player, users_by_id.get(player.user_id)) for player in players]


def summarize_payments(
    player_id: str,
    payments: Iterable[Payment],
    player_name: Optional[str] = None
) -> PlayerPaymentSummary:
    """Total a player's payments by status, history ordered oldest first."""
    history = sorted(
        (payment for payment in payments if payment.player_id == player_id),
        key=lambda p: (p.payment_date is None, p.payment_date)
    )
    summary = PlayerPaymentSummary(player_id=player_id, player_name=player_name, payment_history=history)

    for payment in history:
        if payment.status == PaymentStatus.COMPLETED.value:
            summary.total_paid += payment.amount
        elif payment.status == PaymentStatus.PENDING.value:
            summary.total_pending += payment.amount
        elif payment.status == PaymentStatus.FAILED.value:
            summary.total_failed += payment.amount

    return summary


class PlayerService(BaseService[Player]):
    """
    Domain service for player-related operations.
    Roster membership is read from each player's team_id; nothing else is authoritative.
    """

    def __init__(self, repository):
        super().__init__(repository, Player)

    def get_entity_name(self) -> str:
        return "player"

    async def get_player(self, player_id: str) -> Player:
        return await self.get_by_id(player_id)

    async def get_player_profile(self, player_id: str) -> PlayerProfile:
        """Get a player joined with its user account."""
        player = await self.get_by_id(player_id)
        try:
            user = await self.repository.get_user(player.user_id)
        except UserNotFoundError:
            self.logger.warning(f"Player {player_id} references missing user {player.user_id}")
            user = None
        return PlayerProfile.from_player(player, user)

    async def list_profiles(self) -> List[PlayerProfile]:
        players = await self.get_all()
        users = await self.repository.list_users()
        return build_profiles(players, users)

    async def get_roster(self, team_id: str) -> List[PlayerProfile]:
        """Players whose team_id is the given team."""
        profiles = await self.list_profiles()
        return [profile for profile in profiles if profile.team_id == team_id]

    async def list_free_agents(self) -> List[PlayerProfile]:
        profiles = await self.list_profiles()
        return [profile for profile in profiles if profile.is_free_agent]

    async def list_active_players(self) -> List[Player]:
        players = await self.get_all()
        return [player for player in players if player.is_active]

    @with_domain_error_handling()
    async def assign_to_team(
        self,
        player_id: str,
        team_id: Optional[str],
        jersey_number: Optional[int] = None
    ) -> Player:
        """Move a player onto a team, or release them to free agency with team_id=None."""
        DataValidator.validate_optional_int(jersey_number, "jersey_number")
        if team_id is not None:
            await self.repository.get_team(team_id)
        self.logger.info(f"Assigning player {player_id} to team {team_id or 'free agency'}")
        return await self.repository.assign_player_to_team(player_id, team_id, jersey_number)

    @with_domain_error_handling()
    async def register_player(self, user_id: str, **extras) -> Player:
        """Create a player registration for an existing user."""
        await self.repository.get_user(user_id)
        return await self.repository.create_player(Player(user_id=user_id, **extras))

    async def get_payment_summary(self, player_id: str) -> PlayerPaymentSummary:
        profile = await self.get_player_profile(player_id)
        payments = await self.repository.list_payments()
        return summarize_payments(player_id, payments, profile.full_name or None)

    @with_domain_error_handling()
    async def update_registration(
        self,
        player_id: str,
        is_fully_registered: bool,
        registration_fee_due: Optional[float] = None
    ) -> Player:
        """Mark a player's registration complete or outstanding, optionally resetting the fee due."""
        if registration_fee_due is not None and registration_fee_due < 0:
            raise ValidationError("registration_fee_due", registration_fee_due, "must be non-negative")
        return await self.repository.update_player_registration(player_id, is_fully_registered, registration_fee_due)

    @with_domain_error_handling()
    async def update_payment_status(self, payment_id: str, status: str) -> Payment:
        """Move a payment between pending, completed and failed."""
        try:
            status = PaymentStatus(status).value
        except ValueError:
            raise ValidationError("status", status, "must be pending, completed or failed") from None
        self.logger.info(f"Setting payment {payment_id} to {status}")
        return await self.repository.update_payment_status(payment_id, status)

    @with_domain_error_handling()
    async def remove_player(self, player_id: str) -> bool:
        await self.repository.get_player(player_id)
        return await self.repository.delete_player(player_id)
