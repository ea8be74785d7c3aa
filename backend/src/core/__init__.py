"""
Core package for the RecLeague backend.
Contains exceptions, error handling, and common utilities.
"""

from .exceptions import *
from .error_handler import ErrorHandler, error_handler, with_api_error_handling, with_domain_error_handling
from .utils import *

__all__ = [
    # Base exceptions
    "ErrorContext",
    "RecLeagueException",
    "ValidationError",
    "ConfigurationError",

    # API exceptions
    "APIException",
    "APIConnectionError",
    "APITimeoutError",
    "APINotFoundError",
    "APIServerError",
    "APIResponseError",

    # Domain exceptions
    "DomainException",
    "EntityNotFoundError",
    "TeamNotFoundError",
    "GameNotFoundError",
    "PlayerNotFoundError",
    "UserNotFoundError",
    "PaymentNotFoundError",
    "InvariantViolationError",
    "EmptyRosterError",

    # Cache exceptions
    "CacheException",
    "CacheConnectionError",

    # Error handler
    "ErrorHandler",
    "error_handler",
    "with_api_error_handling",
    "with_domain_error_handling",

    # Utilities
    "LoggerFactory",
    "APIResponseProcessor",
    "DataValidator",
    "EnvironmentManager",
    "round_half_up",
    "parse_datetime",
    "format_datetime"
]
