# File: src/parkinglot/domain/exceptions.py
"""
Domain Exceptions for the Parking Facility Engine

Every error raised by the allocation and settlement engine derives from
ParkingError. Errors are raised synchronously to the caller and are never
retried inside the engine; a failed operation leaves no partial mutation.
"""

from decimal import Decimal
from typing import Optional


class ParkingError(Exception):
    """Base exception for parking engine errors"""
    pass


class CapacityExhaustedError(ParkingError):
    """No eligible spot on any floor for the category or its fallbacks"""

    def __init__(self, category, client_id: Optional[str] = None):
        self.category = category
        self.client_id = client_id
        target = f" for {client_id}" if client_id else ""
        super().__init__(f"Parking lot is full for {category} spots{target}")


class TicketNotFoundError(ParkingError):
    """Unknown or already settled ticket id"""

    def __init__(self, ticket_id: str):
        self.ticket_id = ticket_id
        super().__init__(f"Invalid ticket ID: {ticket_id}")


class PaymentDeclinedError(ParkingError):
    """Tendered payment failed validation against the computed fee"""

    def __init__(self, ticket_id: str, fee: Decimal, method_type):
        self.ticket_id = ticket_id
        self.fee = fee
        self.method_type = method_type
        super().__init__(
            f"Payment failed for ticket {ticket_id}: "
            f"{method_type} declined for fee {fee:.2f}"
        )


class UnsupportedMethodError(ParkingError):
    """Payment method variant has no registered validator"""

    def __init__(self, method_type):
        self.method_type = method_type
        super().__init__(f"Unsupported payment method: {method_type}")


class InvalidReleaseError(ParkingError):
    """
    Release of a spot that is not occupied (or not known to the registry).
    Signals a broken internal invariant rather than a recoverable condition.
    """

    def __init__(self, spot_id: str, reason: str = "spot is already free"):
        self.spot_id = spot_id
        super().__init__(f"Cannot release spot {spot_id}: {reason}")
