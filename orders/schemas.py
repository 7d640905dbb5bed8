from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ninja import Schema


class OrderItemSchema(Schema):
    """Line item in an order request"""
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    subtotal: Optional[Decimal] = None
    attributes: Optional[Dict[str, Any]] = None


class OrderCreateSchema(Schema):
    """Schema for creating an order"""
    customer_id: int
    lead_id: Optional[int] = None
    items: List[OrderItemSchema] = []
    order_number: Optional[str] = None
    total_amount: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    shipping_cost: Optional[Decimal] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    source: Optional[str] = None
    brand: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_method: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


class OrderUpdateSchema(Schema):
    """Schema for updating an order; ``items`` replaces every line item"""
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    items: Optional[List[OrderItemSchema]] = None
    order_number: Optional[str] = None
    total_amount: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    shipping_cost: Optional[Decimal] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    source: Optional[str] = None
    brand: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_method: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusSchema(Schema):
    status: str
    reason: Optional[str] = None


class PaymentStatusSchema(Schema):
    payment_status: str
    payment_method: Optional[str] = None
    reason: Optional[str] = None


class ShippingFormSchema(Schema):
    """Public shipping form submission"""
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    id_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    shipping_method: Optional[str] = None
    source: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemSchema] = []


class OrderItemResponseSchema(Schema):
    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    subtotal: Decimal
    attributes: Dict[str, Any] = {}

    class Config:
        from_attributes = True


class OrderResponseSchema(Schema):
    """Schema for order response"""
    id: int
    order_number: str
    customer_id: int
    customer_name: str
    lead_id: Optional[int] = None
    total_amount: Decimal
    subtotal: Optional[Decimal] = None
    tax: Decimal
    discount: Decimal
    shipping_cost: Decimal
    status: str
    payment_status: str
    payment_method: Optional[str] = None
    payment_date: Optional[datetime] = None
    source: str
    is_from_web_form: bool
    tracking_number: Optional[str] = None
    shipping_method: Optional[str] = None
    brand: str
    shipping_address: Dict[str, Any] = {}
    billing_address: Dict[str, Any] = {}
    coupon_code: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemResponseSchema] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @staticmethod
    def resolve_customer_name(obj):
        return obj.customer.name

    @staticmethod
    def resolve_items(obj):
        return list(obj.items.all())
