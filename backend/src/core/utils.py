"""
Core utilities for the RecLeague backend.
Common functionality used across the entire application.
"""

import os
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv

from config.settings import settings

from .exceptions import APIResponseError, ValidationError


class LoggerFactory:
    """Centralized logger configuration."""

    _configured = False

    @classmethod
    def setup_logging(cls, level: Optional[str] = None, format_string: Optional[str] = None):
        """Setup application-wide logging configuration."""
        if cls._configured:
            return

        if level is None:
            level = settings.log_level
        if format_string is None:
            format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format=format_string,
            handlers=[logging.StreamHandler()]
        )
        cls._configured = True

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """Get a configured logger instance."""
        LoggerFactory.setup_logging()
        return logging.getLogger(name)


class APIResponseProcessor:
    """Common league service response processing utilities."""

    @staticmethod
    def extract_data(response_data: Any, key: str = "data") -> Any:
        """
        Extract the payload from a league service response.
        The service answers either with a bare JSON value or a {"data": ...} envelope.
        """
        if isinstance(response_data, dict) and key in response_data:
            return response_data[key]
        return response_data

    @staticmethod
    def extract_list(response_data: Any, key: str = "data") -> list:
        """Extract a list payload, rejecting anything that is not a JSON array."""
        payload = APIResponseProcessor.extract_data(response_data, key)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise APIResponseError("JSON array", actual_content=payload)
        return payload

    @staticmethod
    def extract_object(response_data: Any, key: str = "data") -> Dict[str, Any]:
        """Extract a single-object payload."""
        payload = APIResponseProcessor.extract_data(response_data, key)
        if not isinstance(payload, dict):
            raise APIResponseError("JSON object", actual_content=payload)
        return payload


class DataValidator:
    """Common data validation utilities."""

    @staticmethod
    def validate_non_negative_int(value: Any, name: str) -> int:
        """Validate non-negative integer values (counters, scores)."""
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(name, value, "must be a non-negative integer")
        return value

    @staticmethod
    def validate_optional_int(value: Any, name: str) -> Optional[int]:
        """Validate optional non-negative integer values."""
        if value is None:
            return None
        return DataValidator.validate_non_negative_int(value, name)

    @staticmethod
    def validate_identifier(value: Any, name: str) -> str:
        """Validate an entity identifier; ids travel as strings on the wire."""
        if value is None or str(value).strip() == "":
            raise ValidationError(name, value, "must be a non-empty identifier")
        return str(value)


class EnvironmentManager:
    """Environment configuration management."""

    @staticmethod
    def load_env_vars():
        """Load environment variables from a .env file if present."""
        load_dotenv()

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round half away from zero (2.5 -> 3, -2.5 -> -3), unlike the built-in round().
    Returns an int when digits is 0.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp ("2024-02-10T16:00:00", optional 'Z')."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime the way the league service expects it."""
    if value is None:
        return None
    return value.isoformat()


__all__ = [
    'LoggerFactory',
    'APIResponseProcessor',
    'DataValidator',
    'EnvironmentManager',
    'round_half_up',
    'parse_datetime',
    'format_datetime'
]
