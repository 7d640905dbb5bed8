"""
In-process publish/subscribe bus for entity lifecycle events.

Services receive an ``EventBus`` in their constructor. The HTTP layer uses the
process default returned by ``get_event_bus()``; tests build their own.
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventTypes:
    """Event type constants"""

    # Lead events
    LEAD_CREATED = "lead.created"
    LEAD_UPDATED = "lead.updated"
    LEAD_DELETED = "lead.deleted"
    LEAD_CONVERTED = "lead.converted"
    LEAD_ACTIVITY_LOGGED = "lead.activity.logged"

    # Customer events
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_UPDATED = "customer.updated"
    CUSTOMER_DELETED = "customer.deleted"

    # Sale events
    SALE_CREATED = "sale.created"

    # Order events
    ORDER_CREATED = "order.created"
    ORDER_UPDATED = "order.updated"
    ORDER_STATUS_CHANGED = "order.status.changed"
    ORDER_PAYMENT_STATUS_CHANGED = "order.payment_status.changed"
    ORDER_DELETED = "order.deleted"

    # Product events
    PRODUCT_CREATED = "product.created"
    PRODUCT_UPDATED = "product.updated"
    PRODUCT_DELETED = "product.deleted"
    PRODUCT_STOCK_CHANGED = "product.stock.changed"

    # Activity events
    ACTIVITY_CREATED = "activity.created"
    ACTIVITY_UPDATED = "activity.updated"
    ACTIVITY_DELETED = "activity.deleted"


class EventBus:
    """
    Synchronous observer registry keyed by event type.

    ``emit`` calls listeners in registration order. A listener that raises
    stops delivery and the exception reaches the caller of ``emit``.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event_type: str, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def off(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event_type: str, payload: Any = None) -> int:
        """Deliver ``payload`` to every listener of ``event_type``; returns the count"""
        listeners = list(self._listeners.get(event_type, []))
        logger.debug(f"Emitting {event_type} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(payload)
        return len(listeners)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def clear(self) -> None:
        self._listeners.clear()


# Process default instance
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get or create the process default event bus"""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance
