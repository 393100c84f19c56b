# File: src/parkinglot/domain/models.py
"""
Domain Models for the Parking Facility Engine

This module contains:
1. Value Objects: Money, Client, Receipt
2. Enums: Category (spot / client classification), VehicleKind, TicketStatus
3. Entities: Spot, Ticket
4. Domain Events: TicketIssuedEvent, TicketSettledEvent

Occupancy state on a Spot is only ever changed by the SpotRegistry that owns
it, under that registry's lock. A Ticket is mutated exactly once, when it is
settled.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
import threading
import uuid


CENTS = Decimal('0.01')


# ============================================================================
# VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class Money:
    """
    Value Object: Monetary amount with currency
    Amounts are kept as Decimal and rounded to cents
    """
    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        """Normalise and validate money amount"""
        amount = self.amount
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        object.__setattr__(self, 'amount', amount.quantize(CENTS, rounding=ROUND_HALF_UP))

        if self.amount < Decimal('0'):
            raise ValueError("Money amount cannot be negative")

        if len(self.currency) != 3:
            raise ValueError(f"Currency must be 3-letter code: {self.currency}")

    @classmethod
    def of(cls, value: Any, currency: str = "USD") -> 'Money':
        """Build Money from an int, float, str or Decimal"""
        if isinstance(value, Money):
            return value
        return cls(Decimal(str(value)), currency)

    def _check_currency(self, other: 'Money') -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency} with {other.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        """Multiply money by a decimal"""
        multiplier = Decimal(str(multiplier))
        if multiplier < Decimal('0'):
            raise ValueError("Multiplier cannot be negative")
        return Money(self.amount * multiplier, self.currency)

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def format(self) -> str:
        """Format money for display"""
        return f"${self.amount:.2f} {self.currency}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": float(self.amount),
            "currency": self.currency
        }

    def __str__(self) -> str:
        return self.format()


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class Category(Enum):
    """
    Spot / client category

    COMPACT -> REGULAR -> LARGE is the upgrade order: a spot of a later
    category can host a client of an earlier one, never the reverse.
    RESERVED_ACCESSIBLE takes no part in upgrades.
    """
    COMPACT = "compact"
    REGULAR = "regular"
    LARGE = "large"
    RESERVED_ACCESSIBLE = "reserved_accessible"

    @property
    def code(self) -> str:
        """One-letter code used in spot ids"""
        return _CATEGORY_CODES[self]

    @property
    def upgrades(self) -> List['Category']:
        """Strictly larger categories, in ascending upgrade order"""
        if self not in UPGRADE_ORDER:
            return []
        return UPGRADE_ORDER[UPGRADE_ORDER.index(self) + 1:]

    def search_order(self) -> List['Category']:
        """Exact category first, then its upgrades"""
        return [self] + self.upgrades

    def can_host(self, required: 'Category') -> bool:
        """Check if a spot of this category can host a client requiring `required`"""
        return self in required.search_order()

    def __str__(self) -> str:
        return self.name


UPGRADE_ORDER: List[Category] = [Category.COMPACT, Category.REGULAR, Category.LARGE]

_CATEGORY_CODES = {
    Category.COMPACT: "C",
    Category.REGULAR: "R",
    Category.LARGE: "L",
    Category.RESERVED_ACCESSIBLE: "A",
}


class VehicleKind(Enum):
    """Kinds of vehicle the facility admits"""
    MOTORCYCLE = "motorcycle"   # two-wheeled
    CAR = "car"                 # standard
    TRUCK = "truck"             # oversized

    @property
    def required_category(self) -> Category:
        return REQUIRED_CATEGORY[self]

    @classmethod
    def parse(cls, value: str) -> 'VehicleKind':
        """Parse a vehicle kind from a (case-insensitive) name or value"""
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid vehicle type: {value}")

    def __str__(self) -> str:
        return self.name


REQUIRED_CATEGORY: Dict[VehicleKind, Category] = {
    VehicleKind.MOTORCYCLE: Category.COMPACT,
    VehicleKind.CAR: Category.REGULAR,
    VehicleKind.TRUCK: Category.LARGE,
}


class TicketStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Client:
    """
    Value Object: a vehicle requesting a spot

    The required category comes from the kind lookup table unless an
    explicit category is given (e.g. a permit holder who needs a
    RESERVED_ACCESSIBLE spot).
    """
    identifier: str
    kind: VehicleKind
    category_override: Optional[Category] = None

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise ValueError("Client identifier cannot be empty")
        object.__setattr__(self, 'identifier', self.identifier.strip().upper())

        if not isinstance(self.kind, VehicleKind):
            raise ValueError(f"Invalid vehicle type: {self.kind}")

    @property
    def required_category(self) -> Category:
        if self.category_override is not None:
            return self.category_override
        return self.kind.required_category

    @property
    def description(self) -> str:
        return f"{self.kind} ({self.identifier})"

    def __str__(self) -> str:
        return self.description


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class Entity:
    """
    Base class for all domain entities
    Entities are equal if they have the same ID and type
    """

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())

    @property
    def id(self) -> str:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id and type(self) == type(other)

    def __hash__(self) -> int:
        return hash((self.id, type(self).__name__))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class Spot(Entity):
    """
    Entity: one physical parking spot

    occupy() and vacate() must only be called by the owning SpotRegistry
    while it holds its lock.
    """

    def __init__(self, spot_id: str, category: Category, floor_number: int):
        super().__init__(spot_id)
        if floor_number < 1:
            raise ValueError("Floor number must be at least 1")
        self.category = category
        self.floor_number = floor_number
        self.is_occupied = False
        self.client: Optional[Client] = None
        self.occupied_since: Optional[datetime] = None

    @property
    def spot_id(self) -> str:
        return self.id

    def occupy(self, client: Client, at: datetime) -> None:
        if self.is_occupied:
            raise ValueError(f"Spot {self.spot_id} is already occupied")
        self.is_occupied = True
        self.client = client
        self.occupied_since = at

    def vacate(self) -> None:
        self.is_occupied = False
        self.client = None
        self.occupied_since = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spot_id": self.spot_id,
            "category": self.category.value,
            "floor_number": self.floor_number,
            "is_occupied": self.is_occupied,
            "client": self.client.identifier if self.client else None,
            "occupied_since": self.occupied_since.isoformat() if self.occupied_since else None,
        }

    def __str__(self) -> str:
        status = f"Occupied by {self.client}" if self.is_occupied else "Available"
        return f"Spot {self.spot_id} ({self.category}, Floor {self.floor_number}) - {status}"


class Ticket(Entity):
    """
    Entity: one occupancy episode

    Created ACTIVE when a spot is assigned; completed exactly once at
    settlement with the exit instant and the amount paid.
    """

    def __init__(self, ticket_id: str, client: Client, spot: Spot, entry_time: datetime):
        super().__init__(ticket_id)
        self.client = client
        self.spot = spot
        self.entry_time = entry_time
        self.exit_time: Optional[datetime] = None
        self.amount_paid: Optional[Money] = None
        self.status = TicketStatus.ACTIVE
        # Serialises settlement attempts on this ticket
        self.settlement_lock = threading.Lock()

    @property
    def ticket_id(self) -> str:
        return self.id

    @property
    def is_active(self) -> bool:
        return self.status is TicketStatus.ACTIVE

    def hours_parked(self, now: Optional[datetime] = None) -> int:
        """Elapsed whole hours, truncated; uses exit time once completed"""
        end = self.exit_time or now or datetime.now()
        seconds = (end - self.entry_time).total_seconds()
        return max(0, int(seconds // 3600))

    def complete(self, exit_time: datetime, amount_paid: Money) -> None:
        if self.status is not TicketStatus.ACTIVE:
            raise ValueError(f"Cannot complete ticket {self.ticket_id} with status {self.status.value}")
        if exit_time < self.entry_time:
            raise ValueError("Exit time must not be before entry time")

        self.exit_time = exit_time
        self.amount_paid = amount_paid
        self.status = TicketStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticket_id": self.ticket_id,
            "client": self.client.description,
            "vehicle_kind": self.client.kind.value,
            "spot_id": self.spot.spot_id,
            "spot_category": self.spot.category.value,
            "floor_number": self.spot.floor_number,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat() if self.exit_time else None,
            "amount_paid": self.amount_paid.to_dict() if self.amount_paid else None,
            "status": self.status.value,
        }

    def __str__(self) -> str:
        return (
            f"Ticket {self.ticket_id} - {self.client} in {self.spot.spot_id} "
            f"(Entry: {self.entry_time:%Y-%m-%d %H:%M:%S}, Status: {self.status.name})"
        )


@dataclass(frozen=True)
class Receipt:
    """Value Object: immutable snapshot of a settled ticket"""
    ticket_id: str
    client_description: str
    spot_id: str
    entry_time: datetime
    exit_time: datetime
    hours_parked: int
    fee: Money
    payment_method: str
    message: str = "Payment successful"

    @classmethod
    def from_ticket(cls, ticket: Ticket, hours_parked: int, payment_method: str,
                    message: str = "Payment successful") -> 'Receipt':
        if ticket.is_active:
            raise ValueError(f"Ticket {ticket.ticket_id} is not completed")
        return cls(
            ticket_id=ticket.ticket_id,
            client_description=ticket.client.description,
            spot_id=ticket.spot.spot_id,
            entry_time=ticket.entry_time,
            exit_time=ticket.exit_time,
            hours_parked=hours_parked,
            fee=ticket.amount_paid,
            payment_method=payment_method,
            message=message,
        )

    def render(self) -> str:
        """Printable receipt block"""
        fmt = "%Y-%m-%d %H:%M:%S"
        return "\n".join([
            "=== PARKING RECEIPT ===",
            f"Ticket ID: {self.ticket_id}",
            f"Vehicle: {self.client_description}",
            f"Spot: {self.spot_id}",
            f"Entry Time: {self.entry_time.strftime(fmt)}",
            f"Exit Time: {self.exit_time.strftime(fmt)}",
            f"Hours Parked: {self.hours_parked}",
            f"Amount Paid: ${self.fee.amount:.2f}",
            f"Payment Method: {self.payment_method}",
            f"Status: {self.message}",
            "======================",
        ])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticket_id": self.ticket_id,
            "client": self.client_description,
            "spot_id": self.spot_id,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat(),
            "hours_parked": self.hours_parked,
            "fee": self.fee.to_dict(),
            "payment_method": self.payment_method,
            "message": self.message,
        }


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the domain
    """

    event_type: str = "domain.event"

    def __init__(self, timestamp: Optional[datetime] = None):
        self.event_id = str(uuid.uuid4())
        self.timestamp = timestamp or datetime.now()

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class TicketIssuedEvent(DomainEvent):
    """Raised when a spot is assigned and a ticket issued"""

    event_type = "ticket.issued"

    def __init__(self, ticket_id: str, spot_id: str, client: Client,
                 spot_category: Category, timestamp: Optional[datetime] = None):
        super().__init__(timestamp)
        self.ticket_id = ticket_id
        self.spot_id = spot_id
        self.client = client
        self.spot_category = spot_category

    @property
    def is_upgrade(self) -> bool:
        return self.spot_category is not self.client.required_category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "data": {
                "ticket_id": self.ticket_id,
                "spot_id": self.spot_id,
                "client": self.client.identifier,
                "vehicle_kind": self.client.kind.value,
                "spot_category": self.spot_category.value,
                "is_upgrade": self.is_upgrade,
            }
        }


class TicketSettledEvent(DomainEvent):
    """Raised when a ticket is paid and its spot released"""

    event_type = "ticket.settled"

    def __init__(self, receipt: Receipt, timestamp: Optional[datetime] = None):
        super().__init__(timestamp)
        self.receipt = receipt

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "data": self.receipt.to_dict(),
        }
