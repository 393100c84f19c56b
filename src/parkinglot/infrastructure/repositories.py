# File: src/parkinglot/infrastructure/repositories.py
"""
Repository Pattern Implementation for the Parking Facility Engine

Repositories provide a collection-like interface for domain entities while
hiding the storage. Only in-memory storage exists: durability is not a
concern of the engine.

The live-ticket table is an InMemoryTicketRepository. Its insert is
insert-if-absent and its remove is atomic; both are guarded by one lock,
so two issuances can never silently overwrite the same key.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List, Dict, Callable
import logging
import threading

from ..domain.models import Ticket, Category


T = TypeVar('T')  # Entity type
ID = TypeVar('ID')  # ID type


# ============================================================================
# REPOSITORY INTERFACES
# ============================================================================

class Repository(ABC, Generic[T, ID]):
    """Base repository interface"""

    @abstractmethod
    def add(self, entity: T) -> bool:
        """Add an entity if its id is not present; returns False otherwise"""
        pass

    @abstractmethod
    def get(self, id: ID) -> Optional[T]:
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        """Snapshot copy of all entities"""
        pass

    @abstractmethod
    def remove(self, id: ID) -> Optional[T]:
        """Remove and return an entity, or None if absent"""
        pass

    @abstractmethod
    def exists(self, id: ID) -> bool:
        pass

    @abstractmethod
    def count(self) -> int:
        pass


# ============================================================================
# IN-MEMORY REPOSITORIES
# ============================================================================

class InMemoryRepository(Repository[T, str]):
    """Thread-safe in-memory repository keyed by entity id"""

    def __init__(self):
        self._storage: Dict[str, T] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def add(self, entity: T) -> bool:
        entity_id = getattr(entity, 'id')
        with self._lock:
            if entity_id in self._storage:
                self._logger.warning(f"Entity {entity_id} already present")
                return False
            self._storage[entity_id] = entity
        self._logger.debug(f"Added entity {entity_id}")
        return True

    def get(self, id: str) -> Optional[T]:
        with self._lock:
            return self._storage.get(id)

    def get_all(self) -> List[T]:
        with self._lock:
            return list(self._storage.values())

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        return [entity for entity in self.get_all() if predicate(entity)]

    def remove(self, id: str) -> Optional[T]:
        with self._lock:
            entity = self._storage.pop(id, None)
        if entity is not None:
            self._logger.debug(f"Removed entity {id}")
        return entity

    def exists(self, id: str) -> bool:
        with self._lock:
            return id in self._storage

    def count(self) -> int:
        with self._lock:
            return len(self._storage)

    def clear(self) -> None:
        """Clear all data (for testing)"""
        with self._lock:
            self._storage.clear()


class InMemoryTicketRepository(InMemoryRepository[Ticket]):
    """Live-ticket table: ACTIVE tickets keyed by ticket id"""

    def find_by_identifier(self, identifier: str) -> List[Ticket]:
        """Active tickets held by a plate / name"""
        wanted = identifier.strip().upper()
        return self.find(lambda ticket: ticket.client.identifier == wanted)

    def count_by_spot_category(self) -> Dict[Category, int]:
        """Active tickets grouped by the category of the spot they occupy"""
        counts = {category: 0 for category in Category}
        for ticket in self.get_all():
            counts[ticket.spot.category] += 1
        return counts
