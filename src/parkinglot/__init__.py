# File: src/parkinglot/__init__.py
"""
Multi-floor parking facility engine

Spot allocation with category upgrade fallback, ticket issuance and
settlement against pluggable pricing and payment validation.
"""

from .domain.models import Category, VehicleKind, Client, Money, Receipt, Ticket
from .domain.payments import CashPayment, CardPayment, PaymentMethodType
from .domain.exceptions import (
    ParkingError, CapacityExhaustedError, TicketNotFoundError,
    PaymentDeclinedError, UnsupportedMethodError, InvalidReleaseError
)
from .application.facility import Facility
from .infrastructure.factories import FacilityFactory, FacilityBuilder
from .config import FacilitySettings

__version__ = "1.0.0"

__all__ = [
    "Category", "VehicleKind", "Client", "Money", "Receipt", "Ticket",
    "CashPayment", "CardPayment", "PaymentMethodType",
    "ParkingError", "CapacityExhaustedError", "TicketNotFoundError",
    "PaymentDeclinedError", "UnsupportedMethodError", "InvalidReleaseError",
    "Facility", "FacilityFactory", "FacilityBuilder", "FacilitySettings",
]
