# File: src/parkinglot/domain/strategies.py
"""
Pricing Strategies for the Parking Facility Engine

The facility consumes a PricingStrategy to turn (client category, elapsed
whole hours) into a fee. Strategies are pure: they hold configuration only
and never touch facility state, so they can be swapped at construction time.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
from decimal import Decimal
import logging

from .models import Category, Money


# Defaults from the hourly rate table
DEFAULT_HOURLY_RATES: Dict[Category, Decimal] = {
    Category.COMPACT: Decimal('2.00'),
    Category.REGULAR: Decimal('5.00'),
    Category.LARGE: Decimal('10.00'),
    Category.RESERVED_ACCESSIBLE: Decimal('3.00'),
}
DEFAULT_LONG_STAY_HOURS = 24
DEFAULT_LONG_STAY_FACTOR = Decimal('0.8')


class PricingStrategy(ABC):
    """
    Abstract base class for pricing strategies
    Defines the interface for fee calculation algorithms
    """

    def __init__(self, currency: str = "USD"):
        self.currency = currency
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def price(self, category: Category, hours_elapsed: int) -> Money:
        """
        Calculate the fee for a stay
        Returns: Calculated fee
        """
        pass

    def get_strategy_name(self) -> str:
        return self.__class__.__name__.replace("Strategy", "")

    def __str__(self) -> str:
        return f"{self.get_strategy_name()} Strategy"


class HourlyPricingStrategy(PricingStrategy):
    """
    Hourly pricing
    - A stay of zero whole hours bills as one hour
    - Fee = category rate x billable hours
    - Stays of `long_stay_hours` or more get `long_stay_factor` applied
    """

    def __init__(
        self,
        hourly_rates: Optional[Dict[Category, Decimal]] = None,
        long_stay_hours: int = DEFAULT_LONG_STAY_HOURS,
        long_stay_factor: Decimal = DEFAULT_LONG_STAY_FACTOR,
        currency: str = "USD"
    ):
        super().__init__(currency)
        rates = dict(DEFAULT_HOURLY_RATES)
        if hourly_rates:
            rates.update(hourly_rates)
        self.hourly_rates = {
            category: Decimal(str(rate)) for category, rate in rates.items()
        }
        self.long_stay_hours = long_stay_hours
        self.long_stay_factor = Decimal(str(long_stay_factor))

        for category, rate in self.hourly_rates.items():
            if rate < Decimal('0'):
                raise ValueError(f"Hourly rate for {category} cannot be negative")
        if self.long_stay_hours < 1:
            raise ValueError("Long-stay threshold must be at least one hour")
        if not Decimal('0') < self.long_stay_factor <= Decimal('1'):
            raise ValueError("Long-stay factor must be in (0, 1]")

    def rate_for(self, category: Category) -> Money:
        try:
            return Money(self.hourly_rates[category], self.currency)
        except KeyError:
            raise ValueError(f"No hourly rate configured for {category}")

    def price(self, category: Category, hours_elapsed: int) -> Money:
        if hours_elapsed < 0:
            raise ValueError("Elapsed hours cannot be negative")

        billable_hours = max(1, hours_elapsed)
        fee = self.rate_for(category) * Decimal(billable_hours)

        if billable_hours >= self.long_stay_hours:
            fee = fee * self.long_stay_factor

        self.logger.debug(
            f"Priced {category} for {billable_hours}h at {fee.format()}"
        )
        return fee
