import logging
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from customers.models import Customer
from leads.models import Lead
from services.errors import ConflictError, NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.leads_service import (
    BRANDS,
    SOURCES,
    check_choice,
    clean_text,
    fill_phone_parts,
    resolve_name_parts,
)
from services.name_utils import split_full_name

logger = logging.getLogger(__name__)

CUSTOMER_TYPES = [value for value, _ in Customer.TYPE_CHOICES]
CUSTOMER_STATUSES = [value for value, _ in Customer.STATUS_CHOICES]

CUSTOMER_TEXT_FIELDS = (
    "email",
    "phone",
    "phone_country",
    "phone_number",
    "secondary_phone",
    "street",
    "city",
    "province",
    "delivery_instructions",
    "id_number",
    "ruc",
    "notes",
)

# Address fields a customer -> lead conversion may override
ADDRESS_FIELDS = ("phone_country", "street", "city", "province", "delivery_instructions")


def can_remove_customer(customer: Customer) -> Tuple[bool, Optional[str]]:
    """
    Decide whether a customer row may be removed.

    Returns:
        ``(allowed, reason)``; ``reason`` explains a refusal
    """
    if customer.sales.exists():
        return False, "Cannot remove customer with existing sales records. Please archive the customer instead."
    if customer.orders.exists():
        return False, "Cannot remove customer with existing orders. Please archive the customer instead."
    if customer.converted_leads.exists():
        return False, "Cannot remove customer that was converted from a lead."
    return True, None


class CustomersService:
    """Service responsible for managing customers"""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or get_event_bus()

    def list_customers(self, search: Optional[str] = None, brand: Optional[str] = None):
        queryset = Customer.objects.order_by("-created_at")
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
            )
        if brand:
            queryset = queryset.filter(brand=brand)
        return queryset

    def get_customer(self, customer_id: int) -> Customer:
        try:
            return Customer.objects.get(id=customer_id)
        except Customer.DoesNotExist:
            raise NotFoundError("Customer", customer_id)

    def create_customer(self, data: Dict[str, Any]) -> Customer:
        first_name, last_name = resolve_name_parts(data)
        if not first_name and not last_name:
            raise ValidationError("Name is required", field="name")

        source = data.get("source") or "direct"
        brand = data.get("brand") or settings.DEFAULT_BRAND
        status = data.get("status") or "active"
        customer_type = data.get("type") or "person"
        check_choice(source, SOURCES, "source")
        check_choice(brand, BRANDS, "brand")
        check_choice(status, CUSTOMER_STATUSES, "status")
        check_choice(customer_type, CUSTOMER_TYPES, "type")

        values = {field: clean_text(data.get(field)) for field in CUSTOMER_TEXT_FIELDS}
        fill_phone_parts(values)

        customer = Customer.objects.create(
            first_name=first_name,
            last_name=last_name,
            source=source,
            brand=brand,
            status=status,
            type=customer_type,
            billing_address=data.get("billing_address") or {},
            tags=data.get("tags") or [],
            **values,
        )
        logger.info(f"Created customer {customer.id} ({customer.name})")

        self.events.emit(EventTypes.CUSTOMER_CREATED, customer)
        return customer

    def update_customer(self, customer_id: int, data: Dict[str, Any]) -> Customer:
        customer = self.get_customer(customer_id)

        check_choice(data.get("source"), SOURCES, "source")
        check_choice(data.get("brand"), BRANDS, "brand")
        check_choice(data.get("status"), CUSTOMER_STATUSES, "status")
        check_choice(data.get("type"), CUSTOMER_TYPES, "type")

        if "name" in data or "first_name" in data or "last_name" in data:
            first_name, last_name = resolve_name_parts(data, customer.first_name, customer.last_name)
            if not first_name and not last_name:
                raise ValidationError("Name is required", field="name")
            customer.first_name, customer.last_name = first_name, last_name

        for field in CUSTOMER_TEXT_FIELDS:
            if field in data:
                setattr(customer, field, clean_text(data[field]))
        for field in ("source", "brand", "status", "type", "billing_address", "tags"):
            if data.get(field) is not None:
                setattr(customer, field, data[field])

        customer.save()
        logger.info(f"Updated customer {customer.id}")

        self.events.emit(EventTypes.CUSTOMER_UPDATED, customer)
        return customer

    def delete_customer(self, customer_id: int) -> Customer:
        customer = self.get_customer(customer_id)

        allowed, reason = can_remove_customer(customer)
        if not allowed:
            raise ConflictError(reason)

        deleted_id = customer.id
        customer.delete()
        customer.id = deleted_id
        logger.info(f"Deleted customer {deleted_id}")

        self.events.emit(EventTypes.CUSTOMER_DELETED, customer)
        return customer

    def convert_customer_to_lead(self, customer_id: int, data: Optional[Dict[str, Any]] = None) -> Lead:
        """
        Turn a customer back into a new lead and remove the customer row.

        Refused under the same policy as ``delete_customer``.
        """
        data = data or {}

        with transaction.atomic():
            try:
                customer = Customer.objects.select_for_update().get(id=customer_id)
            except Customer.DoesNotExist:
                raise NotFoundError("Customer", customer_id)

            allowed, reason = can_remove_customer(customer)
            if not allowed:
                raise ConflictError(reason)

            first_name, last_name = customer.first_name, customer.last_name
            if not first_name and not last_name:
                first_name, last_name = split_full_name(customer.name)
            if not first_name:
                first_name = "Unknown"

            address = {
                field: clean_text(data.get(field)) or getattr(customer, field)
                for field in ADDRESS_FIELDS
            }

            lead = Lead.objects.create(
                first_name=first_name,
                last_name=last_name,
                email=customer.email,
                phone=customer.phone,
                phone_number=customer.phone_number,
                id_number=customer.id_number,
                status=Lead.STATUS_NEW,
                source=customer.source if customer.source in SOURCES else "website",
                brand=customer.brand or settings.DEFAULT_BRAND,
                notes=f"Converted from customer ID {customer_id} on {timezone.now().isoformat()}",
                customer_lifecycle_stage="lead",
                converted_to_customer=False,
                **address,
            )

            customer.delete()
            customer.id = customer_id

        logger.info(f"Converted customer {customer_id} to lead {lead.id}")
        self.events.emit(EventTypes.CUSTOMER_DELETED, customer)
        self.events.emit(EventTypes.LEAD_CREATED, lead)
        return lead
