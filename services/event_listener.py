"""
Subscribes the CRM side effects to the event bus: an INFO log line for every
lifecycle event and a sales team email for new leads and new orders.
"""
import logging
from typing import Any, Callable, Dict

from services.email_service import send_notification_email
from services.events import EventBus, EventTypes

logger = logging.getLogger(__name__)

LOGGED_EVENTS = (
    EventTypes.LEAD_CREATED,
    EventTypes.LEAD_UPDATED,
    EventTypes.LEAD_DELETED,
    EventTypes.LEAD_CONVERTED,
    EventTypes.LEAD_ACTIVITY_LOGGED,
    EventTypes.CUSTOMER_CREATED,
    EventTypes.CUSTOMER_UPDATED,
    EventTypes.CUSTOMER_DELETED,
    EventTypes.SALE_CREATED,
    EventTypes.ORDER_CREATED,
    EventTypes.ORDER_UPDATED,
    EventTypes.ORDER_STATUS_CHANGED,
    EventTypes.ORDER_PAYMENT_STATUS_CHANGED,
    EventTypes.ORDER_DELETED,
    EventTypes.PRODUCT_CREATED,
    EventTypes.PRODUCT_UPDATED,
    EventTypes.PRODUCT_DELETED,
    EventTypes.PRODUCT_STOCK_CHANGED,
    EventTypes.ACTIVITY_CREATED,
    EventTypes.ACTIVITY_UPDATED,
    EventTypes.ACTIVITY_DELETED,
)


def describe_event(event_type: str, payload: Any) -> str:
    """One-line summary of an event payload for the log"""
    if isinstance(payload, dict):
        if event_type == EventTypes.LEAD_CONVERTED:
            return f"lead {payload['lead'].id} -> customer {payload['customer'].id}"
        if event_type == EventTypes.PRODUCT_STOCK_CHANGED:
            return (
                f"product {payload['product'].id} stock "
                f"{payload['previous_stock']} -> {payload['new_stock']}"
            )
        if "order" in payload:
            return (
                f"order {payload['order'].order_number} "
                f"{payload['previous_status']} -> {payload['new_status']}"
            )
        return str(payload)
    if payload is None:
        return "-"
    return f"{type(payload).__name__} {getattr(payload, 'id', None)}"


class EventListenerService:
    """Registers the logging and notification handlers on an event bus"""

    def __init__(self, events: EventBus):
        self.events = events
        self._handlers: Dict[str, Callable[[Any], None]] = {}

    def register(self) -> None:
        """Subscribe every handler; calling it again does not add duplicates"""
        if self._handlers:
            return

        for event_type in LOGGED_EVENTS:
            self._handlers[event_type] = self._make_handler(event_type)
            self.events.on(event_type, self._handlers[event_type])

        logger.info(f"Event listeners registered for {len(self._handlers)} event types")

    def unregister(self) -> None:
        for event_type, handler in self._handlers.items():
            self.events.off(event_type, handler)
        self._handlers = {}

    def _make_handler(self, event_type: str) -> Callable[[Any], None]:
        def handler(payload: Any) -> None:
            logger.info(f"[{event_type}] {describe_event(event_type, payload)}")
            if event_type == EventTypes.LEAD_CREATED:
                self.notify_new_lead(payload)
            elif event_type == EventTypes.ORDER_CREATED:
                self.notify_new_order(payload)

        return handler

    def notify_new_lead(self, lead) -> None:
        subject = f"New lead: {lead.name}"
        message = (
            f"A new lead was registered.\n\n"
            f"Name: {lead.name}\n"
            f"Email: {lead.email or '-'}\n"
            f"Phone: {lead.phone or '-'}\n"
            f"Source: {lead.source}\n"
            f"Brand: {lead.brand}\n"
        )
        try:
            send_notification_email(subject, message)
        except Exception as e:
            logger.error(f"Could not notify sales team about lead {lead.id}: {e}", exc_info=True)

    def notify_new_order(self, order) -> None:
        lines = "\n".join(
            f"  - {item.quantity} x {item.product_name} @ {item.unit_price}"
            for item in order.items.all()
        )
        subject = f"New order {order.order_number}"
        message = (
            f"A new order was created.\n\n"
            f"Order: {order.order_number}\n"
            f"Customer: {order.customer.name}\n"
            f"Status: {order.status}\n"
            f"Total: {order.total_amount}\n"
            f"Items:\n{lines or '  (none)'}\n"
        )
        try:
            send_notification_email(subject, message)
        except Exception as e:
            logger.error(f"Could not notify sales team about order {order.id}: {e}", exc_info=True)
