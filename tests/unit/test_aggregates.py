#!/usr/bin/env python3
"""
Unit Tests for SpotRegistry and Floor

Covers deterministic assignment order, release rules and the
category upgrade fallback on a single floor.
"""

import unittest
from datetime import datetime

from parkinglot.domain.aggregates import SpotRegistry, Floor
from parkinglot.domain.exceptions import InvalidReleaseError
from parkinglot.domain.models import Spot, Client, Category, VehicleKind


AT = datetime(2024, 1, 1, 9, 0, 0)


class TestSpotRegistry(unittest.TestCase):

    def setUp(self):
        # Deliberately out of id order
        self.registry = SpotRegistry(1, Category.COMPACT, [
            Spot("F1-C002", Category.COMPACT, 1),
            Spot("F1-C001", Category.COMPACT, 1),
        ])

    def test_assigns_in_ascending_id_order(self):
        first = self.registry.try_assign(Client("A", VehicleKind.MOTORCYCLE), AT)
        second = self.registry.try_assign(Client("B", VehicleKind.MOTORCYCLE), AT)

        self.assertEqual(first.spot_id, "F1-C001")
        self.assertEqual(second.spot_id, "F1-C002")
        self.assertEqual(first.client.identifier, "A")
        self.assertEqual(first.occupied_since, AT)

    def test_returns_none_when_full(self):
        self.registry.try_assign(Client("A", VehicleKind.MOTORCYCLE), AT)
        self.registry.try_assign(Client("B", VehicleKind.MOTORCYCLE), AT)
        self.assertIsNone(self.registry.try_assign(Client("C", VehicleKind.MOTORCYCLE), AT))
        self.assertEqual(self.registry.available_count(), 0)

    def test_release_frees_spot(self):
        spot = self.registry.try_assign(Client("A", VehicleKind.MOTORCYCLE), AT)
        self.assertEqual(self.registry.available_count(), 1)

        released = self.registry.release(spot.spot_id)
        self.assertIs(released, spot)
        self.assertFalse(spot.is_occupied)
        self.assertEqual(self.registry.available_count(), 2)

    def test_release_of_free_spot_raises(self):
        with self.assertRaises(InvalidReleaseError) as ctx:
            self.registry.release("F1-C001")
        self.assertEqual(ctx.exception.spot_id, "F1-C001")
        self.assertEqual(self.registry.available_count(), 2)

    def test_release_of_unknown_spot_raises(self):
        with self.assertRaises(InvalidReleaseError):
            self.registry.release("F9-C999")

    def test_add_spot_validation(self):
        with self.assertRaises(ValueError):
            self.registry.add_spot(Spot("F1-R001", Category.REGULAR, 1))
        with self.assertRaises(ValueError):
            self.registry.add_spot(Spot("F2-C001", Category.COMPACT, 2))
        with self.assertRaises(ValueError):
            self.registry.add_spot(Spot("F1-C001", Category.COMPACT, 1))

    def test_counts(self):
        self.assertEqual(self.registry.total_count(), 2)
        self.assertEqual(len(self.registry), 2)
        self.assertEqual(self.registry.occupied_spots(), [])


class TestFloor(unittest.TestCase):

    def test_build_generates_spot_ids(self):
        floor = Floor.build(2, {Category.COMPACT: 2, Category.RESERVED_ACCESSIBLE: 1})
        ids = sorted(spot.spot_id for spot in floor.get_all_spots())

        self.assertEqual(ids, ["F2-A001", "F2-C001", "F2-C002"])
        self.assertEqual(floor.total_count(), 3)
        self.assertEqual(floor.total_count(Category.REGULAR), 0)

    def test_build_rejects_negative_counts(self):
        with self.assertRaises(ValueError):
            Floor.build(1, {Category.COMPACT: -1})

    def test_exact_category_first(self):
        floor = Floor.build(1, {Category.COMPACT: 1, Category.REGULAR: 1})
        spot = floor.find_and_assign(Client("BIKE", VehicleKind.MOTORCYCLE), AT)
        self.assertIs(spot.category, Category.COMPACT)

    def test_falls_back_to_larger_categories_in_order(self):
        floor = Floor.build(1, {Category.COMPACT: 1, Category.REGULAR: 1, Category.LARGE: 1})
        kinds = [floor.find_and_assign(Client(f"B{i}", VehicleKind.MOTORCYCLE), AT).category
                 for i in range(3)]

        self.assertEqual(kinds, [Category.COMPACT, Category.REGULAR, Category.LARGE])
        self.assertIsNone(floor.find_and_assign(Client("B3", VehicleKind.MOTORCYCLE), AT))

    def test_never_downgrades(self):
        floor = Floor.build(1, {Category.COMPACT: 5, Category.REGULAR: 5})
        self.assertIsNone(floor.find_and_assign(Client("BIG", VehicleKind.TRUCK), AT))
        self.assertEqual(floor.available_count(), 10)

    def test_accessible_is_exact_match_only(self):
        floor = Floor.build(1, {Category.REGULAR: 3, Category.LARGE: 3})
        client = Client("PERMIT", VehicleKind.CAR, Category.RESERVED_ACCESSIBLE)
        self.assertIsNone(floor.find_and_assign(client, AT))

        floor.add_spot(Spot("F1-A001", Category.RESERVED_ACCESSIBLE, 1))
        self.assertEqual(floor.find_and_assign(client, AT).spot_id, "F1-A001")

    def test_release_routes_to_registry(self):
        floor = Floor.build(1, {Category.REGULAR: 1})
        spot = floor.find_and_assign(Client("ABC", VehicleKind.CAR), AT)
        self.assertEqual(floor.available_count(Category.REGULAR), 0)

        floor.release(spot)
        self.assertEqual(floor.available_count(Category.REGULAR), 1)

    def test_release_of_spot_from_other_floor(self):
        floor = Floor.build(1, {Category.REGULAR: 1})
        with self.assertRaises(InvalidReleaseError):
            floor.release(Spot("F2-R001", Category.REGULAR, 2))

    def test_to_dict(self):
        floor = Floor.build(1, {Category.LARGE: 2})
        floor.find_and_assign(Client("BIG", VehicleKind.TRUCK), AT)
        data = floor.to_dict()

        self.assertEqual(data["floor_number"], 1)
        self.assertEqual(data["by_category"]["large"], {"total": 2, "available": 1})


if __name__ == '__main__':
    unittest.main()
