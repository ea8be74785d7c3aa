"""
Exception hierarchy for the RecLeague backend.

Every error raised by the package derives from RecLeagueException and carries
a stable error_code, a recoverable flag (whether retrying can help) and an
optional ErrorContext describing the failed operation.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class ErrorContext:
    """Where an error happened: the operation, and the entity or endpoint involved."""
    operation: str
    entity: Optional[str] = None
    entity_id: Optional[str] = None
    endpoint: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'operation': self.operation,
            'entity': self.entity,
            'entity_id': self.entity_id,
            'endpoint': self.endpoint,
            'parameters': self.parameters,
            'request_id': self.request_id,
        }
        result['timestamp'] = self.timestamp.isoformat()
        return result


class RecLeagueException(Exception):
    """
    Base exception for the package.
    Subclasses set default_code and default_recoverable instead of passing them.
    """

    default_code = "RECLEAGUE_ERROR"
    default_recoverable = False

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        error_code: Optional[str] = None,
        recoverable: Optional[bool] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.original_error = original_error
        self.error_code = error_code or self.default_code
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for structured logs."""
        return {
            'error_type': type(self).__name__,
            'message': self.message,
            'error_code': self.error_code,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'context': self.context.to_dict() if self.context else None,
            'original_error': repr(self.original_error) if self.original_error else None,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.context and self.context.entity:
            parts.append(f"(Entity: {self.context.entity})")
        parts.append(f"[Code: {self.error_code}]")
        return " ".join(parts)


# =============================================================================
# Validation and Configuration
# =============================================================================

class ValidationError(RecLeagueException):
    """An input value broke a constraint. Recoverable by correcting the input."""

    default_code = "VALIDATION_ERROR"
    default_recoverable = True

    def __init__(self, field: str, value: Any, constraint: str, context: Optional[ErrorContext] = None):
        super().__init__(f"Validation failed for field '{field}': {constraint}. Got: {value}", context=context)
        self.field = field
        self.value = value
        self.constraint = constraint


class ConfigurationError(RecLeagueException):
    """A setting is missing or a component was used before being configured."""

    default_code = "CONFIG_ERROR"

    def __init__(self, setting: str, message: str, context: Optional[ErrorContext] = None):
        super().__init__(f"Configuration error for '{setting}': {message}", context=context)
        self.setting = setting


# =============================================================================
# League service API
# =============================================================================

class APIException(RecLeagueException):
    """Base class for failures talking to the remote league service."""

    default_code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        recoverable: Optional[bool] = None
    ):
        super().__init__(message, context=context, original_error=original_error, recoverable=recoverable)
        self.status_code = status_code
        self.response_data = response_data

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['status_code'] = self.status_code
        result['response_data'] = self.response_data
        return result


class APIConnectionError(APIException):
    """The service could not be reached."""

    default_code = "API_CONNECTION_ERROR"
    default_recoverable = True

    def __init__(self, url: str, context: Optional[ErrorContext] = None, original_error: Optional[Exception] = None):
        super().__init__(f"Failed to connect to API endpoint: {url}", context=context, original_error=original_error)
        self.url = url


class APITimeoutError(APIException):
    """The service did not answer within the request timeout."""

    default_code = "API_TIMEOUT_ERROR"
    default_recoverable = True

    def __init__(self, timeout: float, context: Optional[ErrorContext] = None):
        super().__init__(f"API request timed out after {timeout} seconds", context=context)
        self.timeout = timeout


class APINotFoundError(APIException):
    """HTTP 404. Repository methods translate this into an EntityNotFoundError."""

    default_code = "API_NOT_FOUND_ERROR"

    def __init__(self, resource: str, context: Optional[ErrorContext] = None):
        super().__init__(f"API resource not found: {resource}", status_code=404, context=context)
        self.resource = resource


class APIServerError(APIException):
    """Any other HTTP error status. Only 5xx responses are worth retrying."""

    default_code = "API_SERVER_ERROR"

    def __init__(self, status_code: int, response_data: Any = None, context: Optional[ErrorContext] = None):
        super().__init__(
            f"API server error (HTTP {status_code})",
            status_code=status_code,
            response_data=response_data,
            context=context,
            recoverable=status_code >= 500
        )


class APIResponseError(APIException):
    """The service answered with a body of the wrong shape."""

    default_code = "API_RESPONSE_ERROR"

    def __init__(self, expected_format: str, actual_content: Any = None, context: Optional[ErrorContext] = None):
        super().__init__(f"Invalid API response format. Expected: {expected_format}", context=context)
        self.expected_format = expected_format
        self.actual_content = actual_content


# =============================================================================
# Domain
# =============================================================================

class DomainException(RecLeagueException):
    """Base class for league rule violations and unexpected domain failures."""

    default_code = "DOMAIN_ERROR"


class EntityNotFoundError(DomainException):
    """A referenced league entity does not exist."""

    entity_name = "Entity"
    default_code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_id: Optional[str] = None, context: Optional[ErrorContext] = None):
        if entity_id:
            message = f"{self.entity_name} with ID {entity_id} not found"
        else:
            message = f"{self.entity_name} not found"
        super().__init__(message, context=context)
        self.entity_id = entity_id


class TeamNotFoundError(EntityNotFoundError):
    entity_name = "Team"
    default_code = "TEAM_NOT_FOUND"


class GameNotFoundError(EntityNotFoundError):
    entity_name = "Game"
    default_code = "GAME_NOT_FOUND"


class PlayerNotFoundError(EntityNotFoundError):
    entity_name = "Player"
    default_code = "PLAYER_NOT_FOUND"


class UserNotFoundError(EntityNotFoundError):
    entity_name = "User"
    default_code = "USER_NOT_FOUND"


class PaymentNotFoundError(EntityNotFoundError):
    entity_name = "Payment"
    default_code = "PAYMENT_NOT_FOUND"


class InvariantViolationError(DomainException):
    """A box score disagrees with the final score it belongs to."""

    default_code = "INVARIANT_VIOLATION"

    def __init__(self, invariant: str, expected: int, actual: int, context: Optional[ErrorContext] = None):
        super().__init__(f"Invariant '{invariant}' violated: expected {expected}, got {actual}", context=context)
        self.invariant = invariant
        self.expected = expected
        self.actual = actual


class EmptyRosterError(DomainException):
    """Points were to be distributed across a roster with no players."""

    default_code = "EMPTY_ROSTER"

    def __init__(self, team_score: int, context: Optional[ErrorContext] = None):
        super().__init__(f"Cannot distribute {team_score} points across an empty roster", context=context)
        self.team_score = team_score


# =============================================================================
# Cache
# =============================================================================

class CacheException(RecLeagueException):
    """Cache failures. The cache is optional, so these are always recoverable."""

    default_code = "CACHE_ERROR"
    default_recoverable = True


class CacheConnectionError(CacheException):
    default_code = "CACHE_CONNECTION_ERROR"

    def __init__(
        self,
        cache_url: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            f"Failed to connect to cache server: {cache_url}",
            context=context,
            original_error=original_error
        )
        self.cache_url = cache_url
