"""
Base service class for league domain services.
Provides common functionality and patterns for all services.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar, Generic
from dataclasses import dataclass, field

from core.utils import LoggerFactory, DataValidator
from core.error_handler import with_domain_error_handling

from ..models.base import BaseEntity

T = TypeVar('T', bound=BaseEntity)

logger = LoggerFactory.get_logger(__name__)


@dataclass
class ServiceListResponse(Generic[T]):
    """Standardized list response from domain services."""
    success: bool
    data: List[T] = field(default_factory=list)
    error: Optional[str] = None
    total_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.total_count == 0:
            self.total_count = len(self.data)


class BaseService(ABC, Generic[T]):
    """
    Abstract base class for all domain services.
    Resolves entities through a LeagueRepository by naming convention:
    ``get_<entity>(id)`` and ``list_<entity>s()``.
    """

    def __init__(self, repository, entity_class: Type[T]):
        """
        Initialize service with a repository and the entity class it manages.

        Args:
            repository: LeagueRepository implementation (in-memory store or API client)
            entity_class: Domain entity class this service manages
        """
        self.repository = repository
        self.entity_class = entity_class
        self.logger = LoggerFactory.get_logger(self.__class__.__name__)

    @abstractmethod
    def get_entity_name(self) -> str:
        """Singular repository name for this service's entity, e.g. "team"."""
        pass

    @with_domain_error_handling()
    async def get_by_id(self, entity_id: str) -> T:
        """
        Retrieve an entity by ID.

        Raises:
            EntityNotFoundError subclass from the repository when the id is unknown
        """
        entity_id = DataValidator.validate_identifier(entity_id, f"{self.get_entity_name()}_id")
        getter = getattr(self.repository, f"get_{self.get_entity_name()}")
        return await getter(entity_id)

    @with_domain_error_handling()
    async def get_all(self) -> List[T]:
        """Retrieve every entity of this service's type."""
        lister = getattr(self.repository, f"list_{self.get_entity_name()}s")
        return await lister()

    async def filter(self, **criteria) -> ServiceListResponse[T]:
        """
        Return entities whose attributes equal every given criterion.
        Unknown attribute names match nothing.
        """
        entities = await self.get_all()
        missing = object()
        matches = [
            entity for entity in entities
            if all(getattr(entity, key, missing) == value for key, value in criteria.items())
        ]
        return ServiceListResponse(
            success=True,
            data=matches,
            metadata={'criteria': criteria, 'entity': self.entity_class.__name__}
        )

    def get_service_info(self) -> Dict[str, Any]:
        """Get information about this service."""
        return {
            'service_name': self.__class__.__name__,
            'entity_type': self.entity_class.__name__,
            'repository': type(self.repository).__name__,
        }


__all__ = [
    'BaseService',
    'ServiceListResponse',
]
