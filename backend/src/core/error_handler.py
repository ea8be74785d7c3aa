"""
Retry and error translation decorators for the RecLeague backend.

with_api_error_handling wraps calls to the league service: transient failures
are retried with exponential backoff. with_domain_error_handling wraps domain
service operations: league exceptions pass through, anything else becomes a
DomainException carrying the original error.
"""

import asyncio
import logging
import functools
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Type, TypeVar, Awaitable

from .exceptions import (
    RecLeagueException, ErrorContext,
    APIConnectionError, APITimeoutError, APIServerError,
    CacheException, DomainException
)

logger = logging.getLogger(__name__)

AF = TypeVar('AF', bound=Callable[..., Awaitable[Any]])

TRANSIENT_ERRORS: Tuple[Type[Exception], ...] = (APIConnectionError, APITimeoutError, CacheException)


@dataclass
class FailureRecord:
    failures: int = 0
    last_failure: Optional[datetime] = None
    last_error: Optional[str] = None
    total_attempts: int = 0


def _backoff(delay: float, exponential: bool) -> Iterator[float]:
    while True:
        yield delay
        if exponential:
            delay *= 2


def _worth_retrying(error: Exception) -> bool:
    # League exceptions say whether a retry can help; 4xx server errors cannot
    if isinstance(error, RecLeagueException):
        return error.recoverable
    return True


class ErrorHandler:
    """Retries transient failures and keeps per-operation failure counts."""

    def __init__(self, default_retries: int = 3, default_delay: float = 1.0):
        self.default_retries = default_retries
        self.default_delay = default_delay
        self.retry_history: Dict[str, FailureRecord] = {}

    def with_retry(
        self,
        max_retries: Optional[int] = None,
        delay: Optional[float] = None,
        exponential_backoff: bool = True,
        retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None
    ):
        """
        Decorator for automatic retry with backoff.

        Args:
            max_retries: Retries after the first attempt
            delay: Wait before the first retry, in seconds
            exponential_backoff: Double the wait after every retry
            retryable_exceptions: Exception types that may be retried
        """
        retryable = retryable_exceptions or TRANSIENT_ERRORS

        def decorator(func: AF) -> AF:
            operation_id = f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                retries = self.default_retries if max_retries is None else max_retries
                waits = _backoff(self.default_delay if delay is None else delay, exponential_backoff)
                attempt = 0

                while True:
                    attempt += 1
                    try:
                        result = await func(*args, **kwargs)
                    except retryable as e:
                        if attempt > retries or not _worth_retrying(e):
                            self._record_failure(operation_id, e, attempt)
                            logger.error(f"Operation {operation_id} failed after {attempt} attempts: {e}")
                            raise
                        wait = next(waits)
                        logger.warning(
                            f"Operation {operation_id} failed (attempt {attempt}/{retries + 1}): {e}. "
                            f"Retrying in {wait}s..."
                        )
                        await asyncio.sleep(wait)
                    except Exception as e:
                        self._record_failure(operation_id, e, attempt)
                        logger.error(f"Non-retryable error in {operation_id}: {e}")
                        raise
                    else:
                        if attempt > 1:
                            logger.info(f"Operation {operation_id} succeeded after {attempt - 1} retries")
                        return result

            return wrapper
        return decorator

    def _record_failure(self, operation_id: str, error: Exception, attempts: int):
        record = self.retry_history.setdefault(operation_id, FailureRecord())
        record.failures += 1
        record.last_failure = datetime.now(timezone.utc)
        record.last_error = type(error).__name__
        record.total_attempts += attempts

    def get_failure_stats(self) -> Dict[str, Dict[str, Any]]:
        """Failure counts by operation, as plain dictionaries."""
        return {operation: asdict(record) for operation, record in self.retry_history.items()}

    def reset_stats(self):
        self.retry_history.clear()


# Global error handler instance
error_handler = ErrorHandler()


def with_api_error_handling(max_retries: int = 3, delay: float = 1.0):
    """Retry league service calls on connection errors, timeouts and 5xx responses."""
    def decorator(func: AF) -> AF:
        return error_handler.with_retry(
            max_retries=max_retries,
            delay=delay,
            retryable_exceptions=(APIConnectionError, APITimeoutError, APIServerError)
        )(func)

    return decorator


def with_domain_error_handling(fallback_value: Any = None, suppress_league_errors: bool = False):
    """
    Decorator for domain service operations.

    Args:
        fallback_value: Returned instead of raising when not None
        suppress_league_errors: Also return fallback_value for league exceptions
    """
    def decorator(func: AF) -> AF:
        operation = f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except RecLeagueException as e:
                if suppress_league_errors and fallback_value is not None:
                    logger.warning(f"Suppressing league error in {operation}: {e}, using fallback")
                    return fallback_value
                raise
            except Exception as e:
                logger.error(f"Unexpected error in domain operation {operation}: {e}")
                if fallback_value is not None:
                    return fallback_value
                raise DomainException(
                    message=f"Unexpected error in {operation}",
                    original_error=e,
                    context=ErrorContext(operation=operation, parameters=kwargs)
                ) from e

        return wrapper

    return decorator
