"""
User, player and roster models.
The normalized shape (User account + Player registration) is canonical.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import BaseEntity, unwrap_api_data, optional_str


@dataclass
class User(BaseEntity):
    """A league account. Players, coaches and admins all have one."""
    email: str = ""
    phone_number: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = "player"

    @property
    def full_name(self) -> str:
        """Get user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        """Get user's initials, e.g. "JD" for John Doe."""
        first_initial = self.first_name[:1]
        last_initial = self.last_name[:1]
        return f"{first_initial}{last_initial}".upper()

    def display_name(self, include_role: bool = False) -> str:
        """Get display name, optionally suffixed with the role."""
        if include_role and self.role:
            return f"{self.full_name} ({self.role})"
        return self.full_name

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'User':
        """Create User from league service response."""
        user_data = unwrap_api_data(api_data)
        return cls(
            id=str(user_data.get('id', '')),
            email=user_data.get('email', ''),
            phone_number=user_data.get('phoneNumber', ''),
            first_name=user_data.get('firstName', ''),
            last_name=user_data.get('lastName', ''),
            role=user_data.get('role', 'player'),
            raw_data=api_data,
            **cls._timestamps(user_data)
        )


@dataclass
class Player(BaseEntity):
    """
    A player registration linked to a user account.
    team_id is the only source of truth for roster membership; None means free agent.
    """
    user_id: str = ""
    team_id: Optional[str] = None
    registration_fee_due: Optional[float] = None
    is_fully_registered: bool = False
    is_active: bool = True
    jersey_number: Optional[int] = None

    # Historical scoring rate, used to synthesize box scores
    points_per_game: float = 0.0

    @property
    def is_free_agent(self) -> bool:
        return self.team_id is None

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'Player':
        """Create Player from league service response."""
        player_data = unwrap_api_data(api_data)
        return cls(
            id=str(player_data.get('id', '')),
            user_id=str(player_data.get('userId', '')),
            team_id=optional_str(player_data.get('teamId')),
            registration_fee_due=player_data.get('registrationFeeDue'),
            is_fully_registered=bool(player_data.get('isFullyRegistered', False)),
            is_active=bool(player_data.get('isActive', True)),
            jersey_number=player_data.get('jerseyNumber'),
            points_per_game=float(player_data.get('pointsPerGame') or 0.0),
            raw_data=api_data,
            **cls._timestamps(player_data)
        )


@dataclass
class PlayerProfile(Player):
    """Player joined with the identity fields of its user account."""
    email: str = ""
    phone_number: str = ""
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['fullName'] = self.full_name
        return result

    @classmethod
    def from_player(cls, player: Player, user: Optional[User] = None) -> 'PlayerProfile':
        """Join a player with its user; a missing user leaves identity fields blank."""
        return cls(
            id=player.id,
            created_at=player.created_at,
            updated_at=player.updated_at,
            user_id=player.user_id,
            team_id=player.team_id,
            registration_fee_due=player.registration_fee_due,
            is_fully_registered=player.is_fully_registered,
            is_active=player.is_active,
            jersey_number=player.jersey_number,
            points_per_game=player.points_per_game,
            email=user.email if user else "",
            phone_number=user.phone_number if user else "",
            first_name=user.first_name if user else "",
            last_name=user.last_name if user else "",
        )
