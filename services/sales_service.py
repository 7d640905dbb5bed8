"""
Recorded sales. A customer with sales history is never removed.
"""
import logging
from typing import Any, Dict, Optional

from django.conf import settings

from customers.models import Customer, Sale
from orders.models import Order
from services.errors import NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.leads_service import BRANDS, check_choice, clean_text
from services.orders_service import PAYMENT_METHODS, to_decimal

logger = logging.getLogger(__name__)


class SalesService:
    """Service responsible for recording sales"""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or get_event_bus()

    def list_sales(self, customer_id: Optional[int] = None, status: Optional[str] = None):
        queryset = Sale.objects.select_related("customer").order_by("-created_at", "-id")
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def get_sale(self, sale_id: int) -> Sale:
        try:
            return Sale.objects.select_related("customer").get(id=sale_id)
        except Sale.DoesNotExist:
            raise NotFoundError("Sale", sale_id)

    def create_sale(self, data: Dict[str, Any]) -> Sale:
        """
        Record a sale for a customer, optionally linked to one of its orders.
        """
        if data.get("amount") is None:
            raise ValidationError("Amount is required", field="amount")
        amount = to_decimal(data["amount"], "amount")
        if amount < 0:
            raise ValidationError("must be zero or greater", field="amount")

        status = clean_text(data.get("status"))
        if not status:
            raise ValidationError("Status is required", field="status")

        brand = data.get("brand") or settings.DEFAULT_BRAND
        check_choice(brand, BRANDS, "brand")
        check_choice(data.get("payment_method"), PAYMENT_METHODS, "payment_method")

        try:
            customer = Customer.objects.get(id=data.get("customer_id"))
        except Customer.DoesNotExist:
            raise NotFoundError("Customer", data.get("customer_id"))

        order = None
        if data.get("order_id") is not None:
            try:
                order = Order.objects.get(id=data["order_id"])
            except Order.DoesNotExist:
                raise NotFoundError("Order", data["order_id"])
            if order.customer_id != customer.id:
                raise ValidationError("belongs to another customer", field="order_id")

        sale = Sale.objects.create(
            customer=customer,
            order=order,
            amount=amount,
            status=status,
            payment_method=data.get("payment_method"),
            brand=brand,
            notes=clean_text(data.get("notes")),
        )
        logger.info(f"Recorded sale {sale.id} for customer {customer.id} ({amount})")

        self.events.emit(EventTypes.SALE_CREATED, sale)
        return sale
