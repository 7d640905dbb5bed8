from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ninja import Schema


class CustomerCreateSchema(Schema):
    """Schema for creating a customer"""
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    type: Optional[str] = None
    id_number: Optional[str] = None
    ruc: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    phone_number: Optional[str] = None
    secondary_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None
    billing_address: Optional[Dict[str, Any]] = None
    source: Optional[str] = None
    brand: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None


class CustomerUpdateSchema(CustomerCreateSchema):
    """Schema for updating a customer; only the fields sent are changed"""


class ConvertToLeadSchema(Schema):
    """Optional address overrides for the lead created from a customer"""
    phone_country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None


class CustomerResponseSchema(Schema):
    """Schema for customer response"""
    id: int
    name: str
    first_name: str
    last_name: str
    type: str
    id_number: Optional[str] = None
    ruc: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    phone_number: Optional[str] = None
    secondary_phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None
    billing_address: Dict[str, Any] = {}
    source: str
    brand: Optional[str] = None
    status: str
    tags: List[str] = []
    total_value: Decimal
    assigned_user_id: Optional[int] = None
    last_purchase: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SaleCreateSchema(Schema):
    """Schema for recording a sale"""
    customer_id: int
    order_id: Optional[int] = None
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    brand: Optional[str] = None
    notes: Optional[str] = None


class SaleResponseSchema(Schema):
    id: int
    customer_id: int
    customer_name: str
    order_id: Optional[int] = None
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    brand: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @staticmethod
    def resolve_customer_name(obj):
        return obj.customer.name
