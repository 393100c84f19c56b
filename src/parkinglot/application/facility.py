# File: src/parkinglot/application/facility.py
"""
Parking Facility Service

The Facility is the single entry point of the engine. It owns the ordered
floors and the live-ticket table, and orchestrates the two use cases:

1. Issue: search floors in ascending order, assign a spot, register a ticket
2. Settle: price the stay, validate the tender, release the spot, close the
   ticket and return a receipt

A Facility is constructed explicitly by the application's composition root
(see infrastructure.factories.FacilityFactory) and passed to its callers.

Concurrency:
- Each SpotRegistry's lock is the only arbiter of a spot's occupancy; no
  lock is held across floors or categories.
- Ticket ids come from an atomically incremented counter.
- Settlement runs under the ticket's own lock, in the order
  validate -> release spot -> complete ticket -> remove from table.
"""

from typing import Callable, Dict, List, Optional, Any, Iterable
from datetime import datetime
import itertools
import logging
import threading

from ..domain.models import (
    Category, Client, Spot, Ticket, Receipt,
    TicketIssuedEvent, TicketSettledEvent, DomainEvent
)
from ..domain.aggregates import Floor
from ..domain.strategies import PricingStrategy, HourlyPricingStrategy
from ..domain.payments import PaymentMethod, SettlementValidatorRegistry
from ..domain.exceptions import (
    ParkingError, CapacityExhaustedError, TicketNotFoundError,
    PaymentDeclinedError, InvalidReleaseError
)
from ..infrastructure.repositories import InMemoryTicketRepository
from ..infrastructure.messaging import EventBus


class Facility:
    """
    Multi-floor parking facility

    Args:
        floors: floors of the facility; searched in ascending floor number
        pricing: pricing strategy (defaults to hourly pricing)
        validators: settlement validator registry (defaults to cash + card)
        tickets: live-ticket table
        event_bus: optional bus receiving TicketIssuedEvent / TicketSettledEvent
        clock: source of "now", injectable for testing
    """

    def __init__(
        self,
        floors: Iterable[Floor],
        pricing: Optional[PricingStrategy] = None,
        validators: Optional[SettlementValidatorRegistry] = None,
        tickets: Optional[InMemoryTicketRepository] = None,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.logger = logging.getLogger(self.__class__.__name__)

        ordered = sorted(floors, key=lambda floor: floor.floor_number)
        if not ordered:
            raise ValueError("A facility needs at least one floor")

        self._floors: List[Floor] = ordered
        self._floors_by_number: Dict[int, Floor] = {}
        for floor in ordered:
            if floor.floor_number in self._floors_by_number:
                raise ValueError(f"Duplicate floor number: {floor.floor_number}")
            self._floors_by_number[floor.floor_number] = floor

        self.pricing = pricing or HourlyPricingStrategy()
        self.validators = validators or SettlementValidatorRegistry.default()
        self._tickets = tickets if tickets is not None else InMemoryTicketRepository()
        self._event_bus = event_bus
        self._clock = clock or datetime.now

        self._ticket_sequence = itertools.count(1)
        self._sequence_lock = threading.Lock()

        self.logger.info(
            f"Facility initialized with {len(self._floors)} floors, "
            f"{sum(self.capacity_summary().values())} spots"
        )

    # ========================================================================
    # USE CASES
    # ========================================================================

    def issue(self, client: Client) -> Ticket:
        """
        Assign the client a spot and issue an ACTIVE ticket
        Raises: CapacityExhaustedError if no floor has an eligible spot
        """
        entry_time = self._clock()
        spot = self._find_and_assign(client, entry_time)
        if spot is None:
            self.logger.warning(
                f"No spot for {client.description}: "
                f"{client.required_category} and its fallbacks are full"
            )
            raise CapacityExhaustedError(client.required_category, client.identifier)

        ticket = Ticket(self._next_ticket_id(entry_time), client, spot, entry_time)
        if not self._tickets.add(ticket):
            # Undo the assignment so the spot is not left orphaned
            self._release_spot(spot)
            raise ParkingError(f"Ticket id collision: {ticket.ticket_id}")

        self.logger.info(
            f"{client.description} entered and got ticket {ticket.ticket_id} "
            f"(spot {spot.spot_id})"
        )
        self._publish(TicketIssuedEvent(
            ticket_id=ticket.ticket_id,
            spot_id=spot.spot_id,
            client=client,
            spot_category=spot.category,
            timestamp=entry_time
        ))
        return ticket

    def settle(self, ticket_id: str, method: PaymentMethod) -> Receipt:
        """
        Charge the ticket's stay and close it
        Raises:
            TicketNotFoundError: unknown or already settled ticket
            UnsupportedMethodError: no validator for the method's tag
            PaymentDeclinedError: the tender does not cover the fee
        Nothing is mutated unless the payment is approved.
        """
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)

        with ticket.settlement_lock:
            # A concurrent settlement may have closed it while we waited
            if not ticket.is_active:
                raise TicketNotFoundError(ticket_id)

            exit_time = max(self._clock(), ticket.entry_time)
            hours = ticket.hours_parked(exit_time)
            fee = self.pricing.price(ticket.client.required_category, hours)

            validator = self.validators.select(method)
            if not validator(method, fee):
                self.logger.warning(
                    f"Payment declined for ticket {ticket_id}: "
                    f"{_method_name(method)} against {fee.format()}"
                )
                raise PaymentDeclinedError(ticket_id, fee.amount, method.method_type)

            self._release_spot(ticket.spot)
            ticket.complete(exit_time, fee)
            self._tickets.remove(ticket_id)

        receipt = Receipt.from_ticket(ticket, hours, _method_name(method))
        self.logger.info(
            f"{ticket.client.description} exited; ticket {ticket_id} paid "
            f"{fee.format()} by {receipt.payment_method}"
        )
        self._publish(TicketSettledEvent(receipt, timestamp=exit_time))
        return receipt

    # ========================================================================
    # QUERY METHODS (Read-only, advisory snapshots)
    # ========================================================================

    def availability_summary(self) -> Dict[Category, int]:
        """Free spots per category, summed across floors"""
        return {
            category: sum(floor.available_count(category) for floor in self._floors)
            for category in Category
        }

    def capacity_summary(self) -> Dict[Category, int]:
        """Configured spots per category, summed across floors"""
        return {
            category: sum(floor.total_count(category) for floor in self._floors)
            for category in Category
        }

    def active_by_category(self) -> Dict[Category, int]:
        """Live tickets per category of the spot they hold"""
        return self._tickets.count_by_spot_category()

    def is_full(self, category: Category) -> bool:
        """True when neither the category nor any of its upgrades has a free spot"""
        summary = self.availability_summary()
        return all(summary[candidate] == 0 for candidate in category.search_order())

    def list_active_tickets(self) -> List[Ticket]:
        """Snapshot copy of the live-ticket table, oldest first"""
        return sorted(
            self._tickets.get_all(),
            key=lambda ticket: (ticket.entry_time, ticket.ticket_id)
        )

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        return self._tickets.get(ticket_id)

    def find_active_tickets(self, identifier: str) -> List[Ticket]:
        return self._tickets.find_by_identifier(identifier)

    @property
    def floors(self) -> List[Floor]:
        return list(self._floors)

    def get_floor(self, floor_number: int) -> Optional[Floor]:
        return self._floors_by_number.get(floor_number)

    def get_status_report(self) -> Dict[str, Any]:
        """Comprehensive status report"""
        availability = self.availability_summary()
        capacity = self.capacity_summary()
        return {
            "floors": len(self._floors),
            "availability": {category.value: count for category, count in availability.items()},
            "capacity": {category.value: count for category, count in capacity.items()},
            "active_tickets": self._tickets.count(),
            "active_by_category": {
                category.value: count
                for category, count in self.active_by_category().items()
            },
            "by_floor": [floor.to_dict() for floor in self._floors],
            "pricing_strategy": str(self.pricing),
            "timestamp": self._clock().isoformat(),
        }

    # ========================================================================
    # INTERNAL HELPER METHODS
    # ========================================================================

    def _find_and_assign(self, client: Client, at: datetime) -> Optional[Spot]:
        for floor in self._floors:
            spot = floor.find_and_assign(client, at)
            if spot is not None:
                return spot
        return None

    def _release_spot(self, spot: Spot) -> None:
        floor = self._floors_by_number.get(spot.floor_number)
        if floor is None:
            raise InvalidReleaseError(spot.spot_id, f"floor {spot.floor_number} is not part of this facility")
        floor.release(spot)

    def _next_ticket_id(self, at: datetime) -> str:
        with self._sequence_lock:
            sequence = next(self._ticket_sequence)
        return f"TKT-{at:%Y%m%d%H%M%S}-{sequence:06d}"

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def __str__(self) -> str:
        available = sum(self.availability_summary().values())
        total = sum(self.capacity_summary().values())
        return f"Facility: {len(self._floors)} floors ({available}/{total} available)"


def _method_name(method: PaymentMethod) -> str:
    method_type = getattr(method, 'method_type', None)
    return getattr(method_type, 'value', str(method_type))
