# File: src/parkinglot/infrastructure/factories.py
"""
Factory and Builder for the Parking Facility Engine

FacilityFactory is the composition root: it turns FacilitySettings into a
Facility with its floors, pricing strategy and validator registry.
FacilityBuilder assembles irregular layouts floor by floor.
"""

from typing import Callable, Dict, List, Optional
from datetime import datetime
import logging

from ..config import FacilitySettings
from ..domain.models import Category
from ..domain.aggregates import Floor
from ..domain.strategies import HourlyPricingStrategy
from ..domain.payments import SettlementValidatorRegistry
from ..application.facility import Facility
from .messaging import EventBus


logger = logging.getLogger(__name__)


class FacilityFactory:
    """Factory for creating Facility instances"""

    @staticmethod
    def create_pricing(settings: FacilitySettings) -> HourlyPricingStrategy:
        return HourlyPricingStrategy(
            hourly_rates=settings.hourly_rates(),
            long_stay_hours=settings.long_stay_hours,
            long_stay_factor=settings.long_stay_factor,
            currency=settings.currency
        )

    @staticmethod
    def create_floors(settings: FacilitySettings) -> List[Floor]:
        counts = settings.spots_per_floor()
        return [Floor.build(number, counts) for number in range(1, settings.floors + 1)]

    @classmethod
    def from_settings(
        cls,
        settings: Optional[FacilitySettings] = None,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], datetime]] = None
    ) -> Facility:
        """Create a facility with the configured layout and rates"""
        settings = settings or FacilitySettings()
        logger.info(
            f"Building facility: {settings.floors} floors, "
            f"{sum(settings.spots_per_floor().values())} spots per floor"
        )
        return Facility(
            floors=cls.create_floors(settings),
            pricing=cls.create_pricing(settings),
            validators=SettlementValidatorRegistry.default(),
            event_bus=event_bus,
            clock=clock
        )

    @staticmethod
    def from_layout(
        layout: Dict[int, Dict[Category, int]],
        **kwargs
    ) -> Facility:
        """Create a facility from {floor_number: {category: count}}"""
        floors = [Floor.build(number, counts) for number, counts in layout.items()]
        return Facility(floors=floors, **kwargs)


class FacilityBuilder:
    """Builder pattern for constructing facility layouts"""

    def __init__(self):
        self.reset()

    def reset(self) -> 'FacilityBuilder':
        self._layout: Dict[int, Dict[Category, int]] = {}
        self._current: Optional[int] = None
        return self

    def add_floor(self, floor_number: Optional[int] = None) -> 'FacilityBuilder':
        if floor_number is None:
            floor_number = max(self._layout, default=0) + 1
        if floor_number in self._layout:
            raise ValueError(f"Floor {floor_number} already added")
        self._layout[floor_number] = {}
        self._current = floor_number
        return self

    def _add(self, category: Category, count: int) -> 'FacilityBuilder':
        if self._current is None:
            raise ValueError("Call add_floor() before adding spots")
        counts = self._layout[self._current]
        counts[category] = counts.get(category, 0) + count
        return self

    def add_compact_spots(self, count: int) -> 'FacilityBuilder':
        return self._add(Category.COMPACT, count)

    def add_regular_spots(self, count: int) -> 'FacilityBuilder':
        return self._add(Category.REGULAR, count)

    def add_large_spots(self, count: int) -> 'FacilityBuilder':
        return self._add(Category.LARGE, count)

    def add_accessible_spots(self, count: int) -> 'FacilityBuilder':
        return self._add(Category.RESERVED_ACCESSIBLE, count)

    def build(self, **kwargs) -> Facility:
        """Build the Facility; kwargs are passed to its constructor"""
        if not self._layout:
            raise ValueError("No floors added")
        return FacilityFactory.from_layout(self._layout, **kwargs)
