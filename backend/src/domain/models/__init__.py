"""
Domain models for the RecLeague backend.
The normalized User + Player + Team shape is canonical.
"""

from .base import BaseEntity
from .player import User, Player, PlayerProfile
from .team import Team, TeamWithStats, Standing, TeamDetail
from .game import Game, GameStatus, GameWithDetails
from .statistics import PlayerGameStats, GameDetails, HalfSplit
from .payment import Payment, PaymentStatus, PlayerPaymentSummary

__all__ = [
    # Base models
    "BaseEntity",

    # People
    "User",
    "Player",
    "PlayerProfile",

    # Team models
    "Team",
    "TeamWithStats",
    "Standing",
    "TeamDetail",

    # Game models
    "Game",
    "GameStatus",
    "GameWithDetails",

    # Box scores
    "PlayerGameStats",
    "GameDetails",
    "HalfSplit",

    # Payments
    "Payment",
    "PaymentStatus",
    "PlayerPaymentSummary",
]
