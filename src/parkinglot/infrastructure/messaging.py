# File: src/parkinglot/infrastructure/messaging.py
"""
In-process Messaging for the Parking Facility Engine

The facility publishes domain events (ticket issued, ticket settled) to an
EventBus after an operation has fully committed. Handlers run synchronously
on the publishing thread; a failing handler is logged and never affects the
operation that raised the event or the other handlers.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Callable, Union
from decimal import Decimal
import logging
import threading

from ..domain.models import DomainEvent, Money, TicketSettledEvent


class EventHandler(ABC):
    """Base class for event handlers"""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        return True


HandlerType = Union[EventHandler, Callable[[DomainEvent], None]]


class EventBus:
    """
    In-memory event bus for intra-process event publishing
    Subscriptions are keyed by the event's `event_type` string
    """

    def __init__(self):
        self._subscribers: Dict[str, List[HandlerType]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: str, handler: HandlerType) -> None:
        """Subscribe to events of a specific type"""
        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)
        self._logger.debug(f"Subscribed {self._handler_name(handler)} to {event_type}")

    def unsubscribe(self, event_type: str, handler: HandlerType) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                self._logger.debug(f"Unsubscribed {self._handler_name(handler)} from {event_type}")

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers"""
        self._logger.info(f"Publishing event: {event.event_type} (ID: {event.event_id})")

        with self._lock:
            handlers = list(self._subscribers.get(event.event_type, []))

        for handler in handlers:
            try:
                if isinstance(handler, EventHandler):
                    if handler.can_handle(event):
                        handler.handle(event)
                else:
                    handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error handling event {event.event_type} with "
                    f"{self._handler_name(handler)}: {e}",
                    exc_info=True
                )

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def clear_subscribers(self) -> None:
        """Clear all subscribers (for testing)"""
        with self._lock:
            self._subscribers.clear()

    @staticmethod
    def _handler_name(handler: HandlerType) -> str:
        return getattr(handler, '__name__', handler.__class__.__name__)


class RevenueLedger(EventHandler):
    """Keeps running settlement statistics from TicketSettledEvent"""

    def __init__(self, currency: str = "USD"):
        self._lock = threading.Lock()
        self.currency = currency
        self.settled_count = 0
        self.total_revenue = Money(Decimal('0'), currency)
        self._logger = logging.getLogger(self.__class__.__name__)

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, TicketSettledEvent)

    def handle(self, event: DomainEvent) -> None:
        with self._lock:
            self.settled_count += 1
            self.total_revenue = self.total_revenue + event.receipt.fee
        self._logger.debug(f"Revenue now {self.total_revenue.format()}")

    def attach(self, bus: EventBus) -> 'RevenueLedger':
        bus.subscribe(TicketSettledEvent.event_type, self)
        return self
