# File: src/parkinglot/domain/aggregates.py
"""
Aggregates for the Parking Facility Engine

Aggregates:
1. SpotRegistry - all spots of one category on one floor
2. Floor - one SpotRegistry per category, with upgrade-fallback search

Key Concepts:
- A SpotRegistry is the sole owner of its spots and the sole arbiter of
  their occupancy. Its lock guards every find-and-assign, release and count.
- A Floor never holds a lock across categories: each registry attempt is
  atomic on its own, and the fallback search is a sequence of such attempts.
"""

from typing import List, Optional, Dict, Any
from datetime import datetime
import logging
import threading

from .models import Spot, Client, Category
from .exceptions import InvalidReleaseError


# ============================================================================
# SPOT REGISTRY
# ============================================================================

class SpotRegistry:
    """
    Holds every spot of one category on one floor

    Spots are scanned in ascending id order so assignment is deterministic.
    """

    def __init__(self, floor_number: int, category: Category, spots: Optional[List[Spot]] = None):
        self.floor_number = floor_number
        self.category = category
        self._lock = threading.Lock()
        self._spots: List[Spot] = []
        self._by_id: Dict[str, Spot] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

        for spot in spots or []:
            self.add_spot(spot)

    def add_spot(self, spot: Spot) -> None:
        """Register a spot; only used while the floor is being built"""
        if spot.category is not self.category:
            raise ValueError(
                f"Spot {spot.spot_id} is {spot.category}, registry holds {self.category}"
            )
        if spot.floor_number != self.floor_number:
            raise ValueError(
                f"Spot {spot.spot_id} is on floor {spot.floor_number}, "
                f"registry is on floor {self.floor_number}"
            )

        with self._lock:
            if spot.spot_id in self._by_id:
                raise ValueError(f"Duplicate spot id: {spot.spot_id}")
            self._by_id[spot.spot_id] = spot
            self._spots.append(spot)
            self._spots.sort(key=lambda s: s.spot_id)

    def try_assign(self, client: Client, at: Optional[datetime] = None) -> Optional[Spot]:
        """
        Find the first free spot, mark it occupied by the client and return it
        Returns: the assigned Spot, or None if every spot is occupied
        """
        with self._lock:
            for spot in self._spots:
                if not spot.is_occupied:
                    spot.occupy(client, at or datetime.now())
                    self._logger.debug(
                        f"Assigned {spot.spot_id} to {client.identifier}"
                    )
                    return spot
        return None

    def release(self, spot_id: str) -> Spot:
        """
        Mark a spot free and clear its occupant
        Raises: InvalidReleaseError if the spot is unknown or already free
        """
        with self._lock:
            spot = self._by_id.get(spot_id)
            if spot is None:
                raise InvalidReleaseError(
                    spot_id, f"not part of floor {self.floor_number} {self.category} registry"
                )
            if not spot.is_occupied:
                raise InvalidReleaseError(spot_id)

            spot.vacate()
            self._logger.debug(f"Released {spot_id}")
            return spot

    def available_count(self) -> int:
        """Snapshot count of free spots; advisory only"""
        with self._lock:
            return sum(1 for spot in self._spots if not spot.is_occupied)

    def total_count(self) -> int:
        return len(self._spots)

    def occupied_spots(self) -> List[Spot]:
        with self._lock:
            return [spot for spot in self._spots if spot.is_occupied]

    def get_spot(self, spot_id: str) -> Optional[Spot]:
        return self._by_id.get(spot_id)

    @property
    def spots(self) -> List[Spot]:
        return list(self._spots)

    def __len__(self) -> int:
        return len(self._spots)

    def __str__(self) -> str:
        return (
            f"SpotRegistry(floor={self.floor_number}, category={self.category}, "
            f"{self.available_count()}/{self.total_count()} available)"
        )


# ============================================================================
# FLOOR
# ============================================================================

class Floor:
    """
    One floor of the facility: a SpotRegistry for every category

    find_and_assign() tries the client's exact category, then each strictly
    larger category in upgrade order. RESERVED_ACCESSIBLE is only ever tried
    as an exact match.
    """

    def __init__(self, floor_number: int):
        if floor_number < 1:
            raise ValueError("Floor number must be at least 1")
        self.floor_number = floor_number
        self._registries: Dict[Category, SpotRegistry] = {
            category: SpotRegistry(floor_number, category) for category in Category
        }
        self._logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def build(cls, floor_number: int, counts: Dict[Category, int]) -> 'Floor':
        """
        Create a floor with `counts[category]` spots per category
        Spot ids look like F1-R001
        """
        floor = cls(floor_number)
        for category, count in counts.items():
            if count < 0:
                raise ValueError(f"Spot count for {category} cannot be negative")
            for number in range(1, count + 1):
                spot_id = f"F{floor_number}-{category.code}{number:03d}"
                floor.add_spot(Spot(spot_id, category, floor_number))

        floor._logger.debug(
            f"Built floor {floor_number} with {floor.total_count()} spots"
        )
        return floor

    def add_spot(self, spot: Spot) -> None:
        self._registries[spot.category].add_spot(spot)

    def registry(self, category: Category) -> SpotRegistry:
        return self._registries[category]

    def find_and_assign(self, client: Client, at: Optional[datetime] = None) -> Optional[Spot]:
        """
        Assign the client a spot on this floor
        Returns: the assigned Spot, or None if no eligible category has room
        """
        for category in client.required_category.search_order():
            spot = self._registries[category].try_assign(client, at)
            if spot is not None:
                if category is not client.required_category:
                    self._logger.info(
                        f"Floor {self.floor_number}: {client.identifier} upgraded "
                        f"from {client.required_category} to {category}"
                    )
                return spot
        return None

    def release(self, spot: Spot) -> Spot:
        if spot.floor_number != self.floor_number:
            raise InvalidReleaseError(spot.spot_id, f"not on floor {self.floor_number}")
        return self._registries[spot.category].release(spot.spot_id)

    def available_count(self, category: Optional[Category] = None) -> int:
        if category is not None:
            return self._registries[category].available_count()
        return sum(registry.available_count() for registry in self._registries.values())

    def total_count(self, category: Optional[Category] = None) -> int:
        if category is not None:
            return self._registries[category].total_count()
        return sum(registry.total_count() for registry in self._registries.values())

    def get_all_spots(self) -> List[Spot]:
        spots: List[Spot] = []
        for registry in self._registries.values():
            spots.extend(registry.spots)
        return spots

    def to_dict(self) -> Dict[str, Any]:
        return {
            "floor_number": self.floor_number,
            "by_category": {
                category.value: {
                    "total": registry.total_count(),
                    "available": registry.available_count(),
                }
                for category, registry in self._registries.items()
            },
        }

    def __str__(self) -> str:
        return f"Floor {self.floor_number} ({self.available_count()}/{self.total_count()} available)"
