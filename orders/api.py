from typing import List, Optional
from ninja import Router

from authentication.mixed_auth import mixed_auth
from orders.schemas import (
    OrderCreateSchema,
    OrderResponseSchema,
    OrderStatusSchema,
    OrderUpdateSchema,
    PaymentStatusSchema,
    ShippingFormSchema,
)
from services.orders_service import OrdersService


router = Router(auth=mixed_auth)


@router.get("", response=List[OrderResponseSchema])
def list_orders(
    request,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    customer_id: Optional[int] = None,
):
    return OrdersService().list_orders(status=status, payment_status=payment_status, customer_id=customer_id)


@router.post("", response={201: OrderResponseSchema, 400: dict, 404: dict})
def create_order(request, data: OrderCreateSchema):
    """
    Create an order for an existing customer.

    Ordered products are taken out of stock in the same transaction.
    """
    details = data.dict(exclude={"customer_id", "items"})
    items = [item.dict() for item in data.items]
    order = OrdersService().create_order(data.customer_id, items, details)
    return 201, order


@router.post("/shipping-form", response={201: OrderResponseSchema, 400: dict, 404: dict}, auth=None)
def submit_shipping_form(request, data: ShippingFormSchema):
    """Public shipping form: matches or creates the customer, then records the order"""
    order = OrdersService().create_order_from_shipping_form(data.dict())
    return 201, order


@router.get("/{order_id}", response={200: OrderResponseSchema, 404: dict})
def get_order(request, order_id: int):
    return OrdersService().get_order(order_id)


@router.patch("/{order_id}", response={200: OrderResponseSchema, 400: dict, 404: dict})
def update_order(request, order_id: int, data: OrderUpdateSchema):
    return OrdersService().update_order(order_id, data.dict(exclude_unset=True))


@router.delete("/{order_id}", response={200: dict, 404: dict})
def delete_order(request, order_id: int):
    order = OrdersService().delete_order(order_id)
    return {"success": True, "id": order.id}


@router.patch("/{order_id}/status", response={200: OrderResponseSchema, 400: dict, 404: dict})
def update_order_status(request, order_id: int, data: OrderStatusSchema):
    """Move an order through new / preparing / shipped / completed / cancelled"""
    service = OrdersService()
    service.update_order_status(order_id, data.status, reason=data.reason)
    return service.get_order(order_id)


@router.patch("/{order_id}/payment-status", response={200: OrderResponseSchema, 400: dict, 404: dict})
def update_payment_status(request, order_id: int, data: PaymentStatusSchema):
    service = OrdersService()
    service.update_payment_status(
        order_id,
        data.payment_status,
        payment_method=data.payment_method,
        reason=data.reason,
    )
    return service.get_order(order_id)
