"""
Registration payment models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from core.utils import parse_datetime

from .base import BaseEntity, unwrap_api_data


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Payment(BaseEntity):
    """A registration fee payment made by a player."""
    player_id: str = ""
    stripe_id: str = ""
    amount: float = 0.0
    status: str = PaymentStatus.PENDING.value
    payment_date: Optional[datetime] = None

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'Payment':
        payment_data = unwrap_api_data(api_data)
        return cls(
            id=str(payment_data.get('id', '')),
            player_id=str(payment_data.get('playerId', '')),
            stripe_id=payment_data.get('stripeId', ''),
            amount=float(payment_data.get('amount') or 0.0),
            status=payment_data.get('status', PaymentStatus.PENDING.value),
            payment_date=parse_datetime(payment_data.get('paymentDate')),
            raw_data=api_data
        )


@dataclass
class PlayerPaymentSummary:
    """Per-player totals by payment status."""
    player_id: str
    player_name: Optional[str] = None
    total_paid: float = 0.0
    total_pending: float = 0.0
    total_failed: float = 0.0
    payment_history: List[Payment] = field(default_factory=list)
