# File: src/parkinglot/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Parking Facility Engine

Pydantic models carried across the boundary between the request-handling
layer and the facility. They validate raw input (vehicle kind names,
payment method names and details) and render domain objects for output.
"""

from typing import Dict, List, Optional, Any
from datetime import datetime
from decimal import Decimal, InvalidOperation
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import Category, Client, Money, Receipt, Ticket, VehicleKind
from ..domain.payments import CardPayment, CashPayment, PaymentMethod, PaymentMethodType
from ..domain.exceptions import UnsupportedMethodError


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        return cls(**json.loads(json_str))


class MoneyDTO(BaseDTO):
    amount: Decimal = Field(ge=0, description="Amount")
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @classmethod
    def from_money(cls, money: Money) -> 'MoneyDTO':
        return cls(amount=money.amount, currency=money.currency)


# ============================================================================
# REQUEST DTOs
# ============================================================================

class EntryRequestDTO(BaseDTO):
    """DTO for vehicle entry"""
    license_plate: str = Field(min_length=1, description="License plate or name")
    vehicle_type: str = Field(description="Vehicle kind: MOTORCYCLE, CAR or TRUCK")

    @field_validator('vehicle_type')
    @classmethod
    def validate_vehicle_type(cls, v: str) -> str:
        return VehicleKind.parse(v).value

    def to_client(self) -> Client:
        return Client(self.license_plate, VehicleKind.parse(self.vehicle_type))


class ExitRequestDTO(BaseDTO):
    """DTO for vehicle exit with payment"""
    ticket_id: str = Field(min_length=1, description="Parking ticket ID")
    payment_method: str = Field(description="CASH or CREDIT_CARD / CARD")
    payment_details: Dict[str, Any] = Field(default_factory=dict)

    def to_payment_method(self, currency: str = "USD") -> PaymentMethod:
        """
        Build the settlement method; cash is tendered in `currency`
        Raises: UnsupportedMethodError for unknown method names,
                ValueError for missing or malformed details
        """
        method_type = PaymentMethodType.parse(self.payment_method)
        details = self.payment_details

        if method_type is PaymentMethodType.CASH:
            if "amount" not in details:
                raise ValueError("Cash payment requires an 'amount' detail")
            try:
                return CashPayment(Money.of(details["amount"], currency))
            except InvalidOperation:
                raise ValueError(f"Invalid cash amount: {details['amount']}")

        if method_type is PaymentMethodType.CARD:
            return CardPayment(
                card_number=str(details.get("cardNumber", details.get("card_number", ""))),
                cvv=str(details.get("cvv", "")),
                expiry=str(details.get("expiryDate", details.get("expiry", ""))),
            )

        raise UnsupportedMethodError(self.payment_method)


# ============================================================================
# RESPONSE DTOs
# ============================================================================

class TicketDTO(BaseDTO):
    ticket_id: str
    license_plate: str
    vehicle_type: str
    spot_id: str
    spot_category: str
    floor_number: int
    entry_time: datetime
    status: str

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> 'TicketDTO':
        return cls(
            ticket_id=ticket.ticket_id,
            license_plate=ticket.client.identifier,
            vehicle_type=ticket.client.kind.value,
            spot_id=ticket.spot.spot_id,
            spot_category=ticket.spot.category.value,
            floor_number=ticket.spot.floor_number,
            entry_time=ticket.entry_time,
            status=ticket.status.value,
        )


class ReceiptDTO(BaseDTO):
    ticket_id: str
    vehicle: str
    spot_id: str
    entry_time: datetime
    exit_time: datetime
    hours_parked: int = Field(ge=0)
    amount_paid: MoneyDTO
    payment_method: str
    message: str

    @classmethod
    def from_receipt(cls, receipt: Receipt) -> 'ReceiptDTO':
        return cls(
            ticket_id=receipt.ticket_id,
            vehicle=receipt.client_description,
            spot_id=receipt.spot_id,
            entry_time=receipt.entry_time,
            exit_time=receipt.exit_time,
            hours_parked=receipt.hours_parked,
            amount_paid=MoneyDTO.from_money(receipt.fee),
            payment_method=receipt.payment_method,
            message=receipt.message,
        )


class AvailabilityDTO(BaseDTO):
    availability: Dict[str, int]
    active_tickets: int = Field(ge=0)
    timestamp: datetime

    @classmethod
    def from_summary(cls, summary: Dict[Category, int], active_tickets: int,
                     timestamp: Optional[datetime] = None) -> 'AvailabilityDTO':
        return cls(
            availability={category.value: count for category, count in summary.items()},
            active_tickets=active_tickets,
            timestamp=timestamp or datetime.now(),
        )


class EntryResultDTO(BaseDTO):
    success: bool
    ticket: Optional[TicketDTO] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class ExitResultDTO(BaseDTO):
    success: bool
    receipt: Optional[ReceiptDTO] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class StatusDTO(BaseDTO):
    floors: int
    availability: Dict[str, int]
    active_tickets: List[TicketDTO]
