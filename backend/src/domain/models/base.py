"""
Base domain models and common patterns for league entities.
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

from core.utils import parse_datetime


def to_camel_case(name: str) -> str:
    """Convert a snake_case attribute name to the camelCase wire name."""
    head, *tail = name.split('_')
    return head + ''.join(part.title() for part in tail)


def serialize_value(value: Any) -> Any:
    """Convert a model attribute into a JSON-serializable value."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    return value


def unwrap_api_data(api_data: Dict[str, Any]) -> Dict[str, Any]:
    """Handle both bare records and {"data": {...}} envelopes."""
    if 'data' in api_data and isinstance(api_data['data'], list) and api_data['data']:
        return api_data['data'][0]
    if 'data' in api_data and isinstance(api_data['data'], dict):
        return api_data['data']
    return api_data


def optional_str(value: Any) -> Optional[str]:
    """Ids arrive as strings or numbers; normalize to str, keep None."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class BaseEntity(ABC):
    """
    Base entity class for all domain models with common patterns.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Raw service payload for debugging
    raw_data: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to its camelCase JSON representation."""
        result = {}
        for entity_field in fields(self):
            if entity_field.name == 'raw_data':
                continue
            value = getattr(self, entity_field.name)
            result[to_camel_case(entity_field.name)] = serialize_value(value)
        return result

    @staticmethod
    def _timestamps(record: Dict[str, Any]) -> Dict[str, Optional[datetime]]:
        return {
            'created_at': parse_datetime(record.get('createdAt')),
            'updated_at': parse_datetime(record.get('updatedAt')),
        }

    @classmethod
    def from_api_response(cls, api_data: Dict[str, Any]) -> 'BaseEntity':
        """
        Create entity from a league service response.
        Should be overridden by subclasses for specific transformation logic.
        """
        raise NotImplementedError("Subclasses must implement from_api_response")
