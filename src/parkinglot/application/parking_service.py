# File: src/parkinglot/application/parking_service.py
"""
Parking Application Service

Maps request DTOs onto Facility calls and facility results or errors onto
response DTOs, the way the request-handling layer expects them:
{success: True, ...} on success, {success: False, error: ...} otherwise.

The facility itself is injected; the service holds no state of its own.
"""

from typing import Any, Dict, Union
import logging

from pydantic import ValidationError

from ..domain.exceptions import ParkingError, InvalidReleaseError
from .facility import Facility
from .dtos import (
    EntryRequestDTO, ExitRequestDTO, EntryResultDTO, ExitResultDTO,
    TicketDTO, ReceiptDTO, AvailabilityDTO, StatusDTO
)


class ParkingService:
    """
    Use-case facade over a Facility

    Use Cases:
    1. Vehicle entry (issue a ticket)
    2. Vehicle exit (settle a ticket)
    3. Availability and status queries
    """

    def __init__(self, facility: Facility):
        self.facility = facility
        self.logger = logging.getLogger(self.__class__.__name__)

    def vehicle_entry(self, request: Union[EntryRequestDTO, Dict[str, Any]]) -> EntryResultDTO:
        try:
            if not isinstance(request, EntryRequestDTO):
                request = EntryRequestDTO(**request)
            ticket = self.facility.issue(request.to_client())
        except InvalidReleaseError:
            # Broken internal invariant, not a request error
            raise
        except (ParkingError, ValidationError, ValueError) as e:
            self.logger.warning(f"Entry refused: {e}")
            return EntryResultDTO(success=False, error=str(e), error_type=type(e).__name__)

        return EntryResultDTO(
            success=True,
            ticket=TicketDTO.from_ticket(ticket),
            message="Vehicle parked successfully"
        )

    def vehicle_exit(self, request: Union[ExitRequestDTO, Dict[str, Any]]) -> ExitResultDTO:
        try:
            if not isinstance(request, ExitRequestDTO):
                request = ExitRequestDTO(**request)
            method = request.to_payment_method(self.facility.pricing.currency)
            receipt = self.facility.settle(request.ticket_id, method)
        except InvalidReleaseError:
            raise
        except (ParkingError, ValidationError, ValueError) as e:
            self.logger.warning(f"Exit refused: {e}")
            return ExitResultDTO(success=False, error=str(e), error_type=type(e).__name__)

        return ExitResultDTO(success=True, receipt=ReceiptDTO.from_receipt(receipt))

    def availability(self) -> AvailabilityDTO:
        return AvailabilityDTO.from_summary(
            self.facility.availability_summary(),
            active_tickets=len(self.facility.list_active_tickets())
        )

    def status(self) -> StatusDTO:
        summary = self.facility.availability_summary()
        return StatusDTO(
            floors=len(self.facility.floors),
            availability={category.value: count for category, count in summary.items()},
            active_tickets=[TicketDTO.from_ticket(t) for t in self.facility.list_active_tickets()]
        )
