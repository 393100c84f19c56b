#!/usr/bin/env python3
"""Unit Tests for Pricing Strategies"""

import unittest
from decimal import Decimal

from parkinglot.domain.models import Category, Money
from parkinglot.domain.strategies import HourlyPricingStrategy, PricingStrategy


class TestHourlyPricingStrategy(unittest.TestCase):

    def setUp(self):
        self.pricing = HourlyPricingStrategy()

    def test_zero_hours_bills_one_hour(self):
        self.assertEqual(self.pricing.price(Category.REGULAR, 0), Money.of("5.00"))
        self.assertEqual(self.pricing.price(Category.COMPACT, 0), Money.of("2.00"))

    def test_rate_times_hours(self):
        self.assertEqual(self.pricing.price(Category.REGULAR, 3), Money.of("15.00"))
        self.assertEqual(self.pricing.price(Category.LARGE, 23), Money.of("230.00"))

    def test_long_stay_discount(self):
        self.assertEqual(self.pricing.price(Category.REGULAR, 24), Money.of("96.00"))
        self.assertEqual(self.pricing.price(Category.LARGE, 30), Money.of("240.00"))

    def test_accessible_rate(self):
        self.assertEqual(self.pricing.price(Category.RESERVED_ACCESSIBLE, 2), Money.of("6.00"))

    def test_negative_hours_rejected(self):
        with self.assertRaises(ValueError):
            self.pricing.price(Category.REGULAR, -1)

    def test_custom_rates_and_threshold(self):
        pricing = HourlyPricingStrategy(
            hourly_rates={Category.REGULAR: Decimal('4.00')},
            long_stay_hours=10,
            long_stay_factor=Decimal('0.5'),
            currency="EUR"
        )
        self.assertEqual(pricing.price(Category.REGULAR, 10), Money(Decimal('20.00'), "EUR"))
        # Categories not overridden keep their defaults
        self.assertEqual(pricing.price(Category.COMPACT, 1), Money(Decimal('2.00'), "EUR"))

    def test_invalid_configuration(self):
        with self.assertRaises(ValueError):
            HourlyPricingStrategy(hourly_rates={Category.COMPACT: Decimal('-1')})
        with self.assertRaises(ValueError):
            HourlyPricingStrategy(long_stay_hours=0)
        with self.assertRaises(ValueError):
            HourlyPricingStrategy(long_stay_factor=Decimal('1.5'))

    def test_is_a_pricing_strategy(self):
        self.assertIsInstance(self.pricing, PricingStrategy)
        self.assertEqual(str(self.pricing), "HourlyPricing Strategy")


if __name__ == '__main__':
    unittest.main()
