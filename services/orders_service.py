"""
Order creation, status tracking and the stock decrement that goes with it.
"""
import logging
import random
import string
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from customers.models import Customer
from inventory.models import Product
from leads.models import Lead
from orders.models import Order, OrderItem
from services.errors import NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.inventory_service import InventoryService
from services.leads_service import BRANDS, SOURCES, check_choice, clean_text, resolve_name_parts

logger = logging.getLogger(__name__)

ORDER_STATUSES = ["new", "preparing", "shipped", "completed", "cancelled"]
PAYMENT_STATUSES = ["pending", "paid", "refunded", "failed", "cancelled"]
PAYMENT_METHODS = [value for value, _ in Order.PAYMENT_METHOD_CHOICES]

CENT = Decimal("0.01")

ORDER_DETAIL_FIELDS = (
    "tax",
    "discount",
    "shipping_cost",
    "payment_method",
    "tracking_number",
    "shipping_method",
    "shipping_address",
    "billing_address",
    "coupon_code",
    "notes",
)


def to_decimal(value: Any, field: str) -> Decimal:
    try:
        return Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("must be a number", field=field)


def generate_order_number() -> str:
    """``ORD-`` + 5 random base36 characters + last 6 digits of epoch millis"""
    random_chars = "".join(random.choices(string.digits + string.ascii_uppercase, k=5))
    timestamp = str(int(time.time() * 1000))[-6:]
    return f"ORD-{random_chars}{timestamp}"


def append_note(notes: Optional[str], line: str) -> str:
    """Add a timestamped line to an order's audit trail"""
    entry = f"[{timezone.now().isoformat(timespec='seconds')}] {line}"
    return f"{notes}\n{entry}" if notes else entry


class OrdersService:
    """Service responsible for managing orders"""

    def __init__(self, events: Optional[EventBus] = None, inventory: Optional[InventoryService] = None):
        self.events = events or get_event_bus()
        self.inventory = inventory or InventoryService(self.events)

    def list_orders(
        self,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        customer_id: Optional[int] = None,
    ):
        queryset = (
            Order.objects.select_related("customer")
            .prefetch_related("items")
            .order_by("-created_at")
        )
        if status:
            queryset = queryset.filter(status=status)
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        return queryset

    def get_order(self, order_id: int) -> Order:
        try:
            return (
                Order.objects.select_related("customer")
                .prefetch_related("items")
                .get(id=order_id)
            )
        except Order.DoesNotExist:
            raise NotFoundError("Order", order_id)

    def _get_customer(self, customer_id: int) -> Customer:
        try:
            return Customer.objects.get(id=customer_id)
        except Customer.DoesNotExist:
            raise NotFoundError("Customer", customer_id)

    def _prepare_items(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Validate line items and fill in snapshot fields.

        Product name and unit price default to the product's current values;
        subtotal defaults to ``unit_price * quantity - discount``.
        """
        prepared = []
        for index, item in enumerate(items):
            field = f"items[{index}]"
            quantity = item.get("quantity")
            if quantity is None:
                quantity = 1
            if quantity < 1:
                raise ValidationError("quantity must be at least 1", field=field)

            product = None
            if item.get("product_id") is not None:
                try:
                    product = Product.objects.get(id=item["product_id"])
                except Product.DoesNotExist:
                    raise NotFoundError("Product", item["product_id"])

            product_name = clean_text(item.get("product_name")) or (product.name if product else None)
            if not product_name:
                raise ValidationError("product_name is required", field=field)

            if item.get("unit_price") is not None:
                unit_price = to_decimal(item["unit_price"], f"{field}.unit_price")
            elif product is not None:
                unit_price = product.price_discount or product.price
            else:
                raise ValidationError("unit_price is required", field=field)

            discount = to_decimal(item.get("discount") or 0, f"{field}.discount")
            if item.get("subtotal") is not None:
                subtotal = to_decimal(item["subtotal"], f"{field}.subtotal")
            else:
                subtotal = (unit_price * quantity - discount).quantize(CENT)

            prepared.append(
                {
                    "product": product,
                    "product_name": product_name,
                    "quantity": quantity,
                    "unit_price": unit_price,
                    "discount": discount,
                    "subtotal": subtotal,
                    "attributes": item.get("attributes") or {},
                }
            )
        return prepared

    def _validate_details(self, details: Dict[str, Any]) -> None:
        status = details.get("status")
        if status is not None and status not in ORDER_STATUSES + [Order.STATUS_PENDING_COMPLETION]:
            raise ValidationError(f"must be one of: {', '.join(ORDER_STATUSES)}", field="status")
        check_choice(details.get("payment_status"), PAYMENT_STATUSES, "payment_status")
        check_choice(details.get("payment_method"), PAYMENT_METHODS, "payment_method")
        check_choice(details.get("source"), SOURCES, "source")
        check_choice(details.get("brand"), BRANDS, "brand")

    def _insert_order(
        self,
        customer: Customer,
        items: List[Dict[str, Any]],
        details: Dict[str, Any],
    ) -> Tuple[Order, List[Dict[str, Any]]]:
        """
        Write the order, its items and the stock decrements.

        Runs inside the caller's transaction.

        Returns:
            ``(order, stock_changes)`` where each stock change is the payload of
            a ``product.stock.changed`` event
        """
        total_amount = details.get("total_amount")
        if total_amount is not None:
            total_amount = to_decimal(total_amount, "total_amount")
            if total_amount < 0:
                raise ValidationError("must be zero or greater", field="total_amount")
        else:
            total_amount = sum((item["subtotal"] for item in items), Decimal("0.00"))

        order_number = clean_text(details.get("order_number"))
        if order_number:
            if Order.objects.filter(order_number=order_number).exists():
                raise ValidationError("already exists", field="order_number")
        else:
            order_number = generate_order_number()
            while Order.objects.filter(order_number=order_number).exists():
                order_number = generate_order_number()

        lead = None
        if details.get("lead_id") is not None:
            try:
                lead = Lead.objects.get(id=details["lead_id"])
            except Lead.DoesNotExist:
                raise NotFoundError("Lead", details["lead_id"])

        extra = {field: details[field] for field in ORDER_DETAIL_FIELDS if details.get(field) is not None}
        order = Order.objects.create(
            customer=customer,
            lead=lead,
            order_number=order_number,
            total_amount=total_amount,
            subtotal=sum((item["subtotal"] for item in items), Decimal("0.00")),
            status=details.get("status") or Order.STATUS_NEW,
            payment_status=details.get("payment_status") or "pending",
            source=details.get("source") or "direct",
            brand=details.get("brand") or customer.brand or settings.DEFAULT_BRAND,
            is_from_web_form=bool(details.get("is_from_web_form")),
            **extra,
        )

        OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])

        stock_changes = []
        for item in items:
            if item["product"] is None:
                continue
            product, previous_stock, new_stock = self.inventory.adjust_stock(item["product"].id, item["quantity"])
            stock_changes.append(
                {
                    "product": product,
                    "previous_stock": previous_stock,
                    "new_stock": new_stock,
                    "reason": f"Order {order.order_number}",
                }
            )

        customer.last_purchase = timezone.now()
        customer.save(update_fields=["last_purchase", "updated_at"])
        return order, stock_changes

    def _emit_created(self, order: Order, stock_changes: List[Dict[str, Any]]) -> Order:
        for change in stock_changes:
            logger.info(
                f"Stock of product {change['product'].id} "
                f"{change['previous_stock']} -> {change['new_stock']} ({change['reason']})"
            )
            self.events.emit(EventTypes.PRODUCT_STOCK_CHANGED, change)

        complete_order = self.get_order(order.id)
        self.events.emit(EventTypes.ORDER_CREATED, complete_order)
        return complete_order

    def create_order(
        self,
        customer_id: int,
        items: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Create an order with its line items and take the ordered products out
        of stock.

        All writes share one transaction; events fire after it commits.
        """
        details = details or {}
        customer = self._get_customer(customer_id)
        self._validate_details(details)
        prepared = self._prepare_items(items or [])

        with transaction.atomic():
            order, stock_changes = self._insert_order(customer, prepared, details)

        logger.info(f"Created order {order.order_number} for customer {customer.id} ({order.total_amount})")
        return self._emit_created(order, stock_changes)

    def create_order_from_shipping_form(self, data: Dict[str, Any]) -> Order:
        """
        Create an order from the public shipping form.

        The customer is matched on ID number, email or phone, and created when
        none matches. Orders without items are left as ``pending_completion``.
        """
        items = data.get("items") or []
        prepared = self._prepare_items(items)

        first_name, last_name = resolve_name_parts(data)
        if not first_name and not last_name:
            raise ValidationError("Name is required", field="name")

        id_number = clean_text(data.get("id_number"))
        email = clean_text(data.get("email"))
        phone = clean_text(data.get("phone"))

        shipping_address = data.get("shipping_address") or {
            key: clean_text(data.get(key))
            for key in ("street", "city", "province", "delivery_instructions")
            if clean_text(data.get(key))
        }

        details = {
            "source": data.get("source") or "website",
            "brand": data.get("brand"),
            "notes": clean_text(data.get("notes")),
            "shipping_address": shipping_address,
            "shipping_method": data.get("shipping_method"),
            "is_from_web_form": True,
            "status": Order.STATUS_NEW if prepared else Order.STATUS_PENDING_COMPLETION,
        }
        self._validate_details(details)

        customer_created = False
        with transaction.atomic():
            customer = None
            for field, value in (("id_number", id_number), ("email", email), ("phone", phone)):
                if value:
                    customer = Customer.objects.filter(**{field: value}).order_by("id").first()
                    if customer:
                        break

            if customer is None:
                customer = Customer.objects.create(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    phone=phone,
                    id_number=id_number,
                    street=clean_text(data.get("street")),
                    city=clean_text(data.get("city")),
                    province=clean_text(data.get("province")),
                    delivery_instructions=clean_text(data.get("delivery_instructions")),
                    source="web_form",
                    brand=data.get("brand") or settings.DEFAULT_BRAND,
                )
                customer_created = True

            order, stock_changes = self._insert_order(customer, prepared, details)

        logger.info(
            f"Created web form order {order.order_number} for "
            f"{'new' if customer_created else 'existing'} customer {customer.id}"
        )
        if customer_created:
            self.events.emit(EventTypes.CUSTOMER_CREATED, customer)
        return self._emit_created(order, stock_changes)

    def update_order(self, order_id: int, data: Dict[str, Any]) -> Order:
        """
        Partial update. Sending ``items`` replaces every line item and
        recomputes the total; stock is not touched.
        """
        order = self.get_order(order_id)
        self._validate_details(data)

        with transaction.atomic():
            if data.get("customer_id") is not None:
                order.customer = self._get_customer(data["customer_id"])
            if "lead_id" in data:
                order.lead = Lead.objects.filter(id=data["lead_id"]).first() if data["lead_id"] else None

            for field in ("status", "payment_status", "source", "brand") + ORDER_DETAIL_FIELDS:
                if data.get(field) is not None:
                    setattr(order, field, data[field])
            if data.get("order_number"):
                if Order.objects.filter(order_number=data["order_number"]).exclude(id=order.id).exists():
                    raise ValidationError("already exists", field="order_number")
                order.order_number = data["order_number"]
            if data.get("total_amount") is not None:
                order.total_amount = to_decimal(data["total_amount"], "total_amount")

            if data.get("items"):
                prepared = self._prepare_items(data["items"])
                order.items.all().delete()
                OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in prepared])
                order.subtotal = sum((item["subtotal"] for item in prepared), Decimal("0.00"))
                order.total_amount = order.subtotal

            order.save()

        logger.info(f"Updated order {order.order_number}")
        complete_order = self.get_order(order.id)
        self.events.emit(EventTypes.ORDER_UPDATED, complete_order)
        return complete_order

    def delete_order(self, order_id: int) -> Order:
        order = self.get_order(order_id)
        deleted_id = order.id
        order.delete()
        order.id = deleted_id
        logger.info(f"Deleted order {order.order_number}")

        self.events.emit(EventTypes.ORDER_DELETED, order)
        return order

    def update_order_status(self, order_id: int, status: str, reason: Optional[str] = None) -> Order:
        if status not in ORDER_STATUSES:
            raise ValidationError(f"must be one of: {', '.join(ORDER_STATUSES)}", field="status")

        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(id=order_id)
            except Order.DoesNotExist:
                raise NotFoundError("Order", order_id)

            previous_status = order.status
            order.status = status
            if reason:
                order.notes = append_note(order.notes, f"Status changed to {status}: {reason}")
            order.save(update_fields=["status", "notes", "updated_at"])

        logger.info(f"Order {order.order_number} status {previous_status} -> {status}")
        self.events.emit(
            EventTypes.ORDER_STATUS_CHANGED,
            {
                "order": order,
                "previous_status": previous_status,
                "new_status": status,
                "reason": reason,
            },
        )
        return order

    def update_payment_status(
        self,
        order_id: int,
        payment_status: str,
        payment_method: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Order:
        if payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"must be one of: {', '.join(PAYMENT_STATUSES)}", field="payment_status")
        check_choice(payment_method, PAYMENT_METHODS, "payment_method")

        with transaction.atomic():
            try:
                order = Order.objects.select_for_update().get(id=order_id)
            except Order.DoesNotExist:
                raise NotFoundError("Order", order_id)

            previous_status = order.payment_status
            order.payment_status = payment_status
            if payment_method:
                order.payment_method = payment_method
            if payment_status == "paid" and order.payment_date is None:
                order.payment_date = timezone.now()
            if reason:
                order.notes = append_note(order.notes, f"Payment status changed to {payment_status}: {reason}")
            order.save(update_fields=["payment_status", "payment_method", "payment_date", "notes", "updated_at"])

        logger.info(f"Order {order.order_number} payment status {previous_status} -> {payment_status}")
        self.events.emit(
            EventTypes.ORDER_PAYMENT_STATUS_CHANGED,
            {
                "order": order,
                "previous_status": previous_status,
                "new_status": payment_status,
                "reason": reason,
            },
        )
        return order
