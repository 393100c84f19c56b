# File: src/parkinglot/main.py
"""
Command-line entry point for the Parking Facility Engine

    python -m parkinglot demo [--scenario 1|2|3|all]
    python -m parkinglot status

The facility is built from FacilitySettings (PARKING_* environment
variables or .env) and passed explicitly to everything that uses it.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional
import argparse
import json
import logging
import sys

from .config import FacilitySettings
from .application.facility import Facility
from .application.parking_service import ParkingService
from .application.dtos import EntryRequestDTO, ExitRequestDTO
from .infrastructure.factories import FacilityFactory
from .infrastructure.messaging import EventBus, RevenueLedger


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup application logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    return logging.getLogger(__name__)


# ============================================================================
# DEMO SCENARIOS
# ============================================================================

def scenario_single_entry_exit(service: ParkingService) -> Dict[str, Any]:
    """One car enters, then leaves paying cash"""
    steps: List[str] = []

    entry = service.vehicle_entry(EntryRequestDTO(license_plate="ABC-1234", vehicle_type="CAR"))
    if not entry.success:
        return {"success": False, "error": entry.error, "steps": steps}
    steps.append(f"Car {entry.ticket.license_plate} entered and got ticket {entry.ticket.ticket_id}")
    steps.append(f"Current availability: {service.availability().availability}")

    exit_result = service.vehicle_exit(ExitRequestDTO(
        ticket_id=entry.ticket.ticket_id,
        payment_method="CASH",
        payment_details={"amount": 20.0}
    ))
    if not exit_result.success:
        return {"success": False, "error": exit_result.error, "steps": steps}
    steps.append(
        f"Car exited; paid ${exit_result.receipt.amount_paid.amount} "
        f"by {exit_result.receipt.payment_method}"
    )

    return {
        "success": True,
        "steps": steps,
        "final_availability": service.availability().availability,
    }


def scenario_mixed_vehicles(service: ParkingService) -> Dict[str, Any]:
    """Four vehicles of mixed kinds enter; a car pays by card, the motorcycle by cash"""
    steps: List[str] = []
    tickets = []

    arrivals = [("CAR-001", "CAR"), ("BIKE-001", "MOTORCYCLE"), ("TRUCK-001", "TRUCK"), ("CAR-002", "CAR")]
    for plate, kind in arrivals:
        entry = service.vehicle_entry(EntryRequestDTO(license_plate=plate, vehicle_type=kind))
        if not entry.success:
            return {"success": False, "error": entry.error, "steps": steps}
        tickets.append(entry.ticket)
        steps.append(f"{kind} ({plate}) entered and got ticket {entry.ticket.ticket_id}")

    steps.append(f"Current availability: {service.availability().availability}")

    payments = [
        (tickets[0], "CREDIT_CARD", {"cardNumber": "1234567890123456", "cvv": "123", "expiryDate": "12/25"}),
        (tickets[1], "CASH", {"amount": 10.0}),
    ]
    for ticket, method, details in payments:
        exit_result = service.vehicle_exit(ExitRequestDTO(
            ticket_id=ticket.ticket_id, payment_method=method, payment_details=details
        ))
        if not exit_result.success:
            return {"success": False, "error": exit_result.error, "steps": steps}
        steps.append(f"{exit_result.receipt.vehicle} exited. Paid ${exit_result.receipt.amount_paid.amount}")

    availability = service.availability()
    return {
        "success": True,
        "steps": steps,
        "final_availability": availability.availability,
        "remaining_tickets": availability.active_tickets,
    }


def scenario_concurrent_entries(service: ParkingService, clients: int = 5) -> Dict[str, Any]:
    """Several cars enter at the same time"""
    steps: List[str] = []

    def enter(index: int):
        return service.vehicle_entry(
            EntryRequestDTO(license_plate=f"CONCURRENT-{index:03d}", vehicle_type="CAR")
        )

    with ThreadPoolExecutor(max_workers=clients) as executor:
        results = list(executor.map(enter, range(clients)))

    issued = [result.ticket for result in results if result.success]
    for result in results:
        if result.success:
            steps.append(f"Concurrent entry: {result.ticket.license_plate} got ticket {result.ticket.ticket_id}")
        else:
            steps.append(f"Concurrent entry failed: {result.error}")
    steps.append(f"All concurrent entries completed. Total tickets: {len(issued)}")

    return {
        "success": True,
        "steps": steps,
        "concurrent_tickets": len(issued),
        "distinct_spots": len({ticket.spot_id for ticket in issued}),
        "final_availability": service.availability().availability,
    }


SCENARIOS: Dict[str, Callable[[ParkingService], Dict[str, Any]]] = {
    "1": scenario_single_entry_exit,
    "2": scenario_mixed_vehicles,
    "3": scenario_concurrent_entries,
}


# ============================================================================
# COMMANDS
# ============================================================================

def build_facility(settings: FacilitySettings, event_bus: Optional[EventBus] = None) -> Facility:
    return FacilityFactory.from_settings(settings, event_bus=event_bus)


def run_demo(settings: FacilitySettings, scenario: str = "all") -> int:
    logger = logging.getLogger(__name__)
    bus = EventBus()
    ledger = RevenueLedger(settings.currency).attach(bus)
    service = ParkingService(build_facility(settings, bus))

    names = sorted(SCENARIOS) if scenario == "all" else [scenario]
    failures = 0
    for name in names:
        logger.info(f"Running scenario {name}")
        result = SCENARIOS[name](service)
        print(f"--- Scenario {name}: {SCENARIOS[name].__doc__} ---")
        print(json.dumps(result, indent=2, default=str))
        if not result["success"]:
            failures += 1

    print(f"Settled {ledger.settled_count} tickets for {ledger.total_revenue.format()}")
    return 1 if failures else 0


def run_status(settings: FacilitySettings) -> int:
    facility = build_facility(settings)
    print(json.dumps(facility.get_status_report(), indent=2, default=str))
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parkinglot",
        description="Multi-floor parking facility engine"
    )
    parser.add_argument("--log-level", default=None, help="Override PARKING_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Run the demo scenarios")
    demo.add_argument("--scenario", choices=sorted(SCENARIOS) + ["all"], default="all")

    subparsers.add_parser("status", help="Print the facility status report")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    settings = FacilitySettings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level.upper()})

    logger = setup_logging(settings.log_level)
    logger.info("Starting Parking Facility Engine...")

    if args.command == "demo":
        return run_demo(settings, args.scenario)
    return run_status(settings)


if __name__ == "__main__":
    sys.exit(main())
