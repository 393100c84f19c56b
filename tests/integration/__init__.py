"""
Integration tests: components working together

- Facility issue / settle flows with an injected clock
- Concurrent entries and settlements
- ParkingService DTO mapping and the command-line entry point
"""

from datetime import datetime, timedelta


class FakeClock:
    """Controllable clock for facilities under test"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 10, 0, 0)):
        self.now = start

    def advance(self, hours: float = 0, minutes: float = 0) -> None:
        self.now = self.now + timedelta(hours=hours, minutes=minutes)

    def __call__(self) -> datetime:
        return self.now
