from datetime import datetime
from typing import Optional
from ninja import Schema


class LeadCreateSchema(Schema):
    """Schema for creating a lead"""
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    id_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    phone_number: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    source: Optional[str] = None
    brand: Optional[str] = None
    brand_interest: Optional[str] = None
    communication_preference: Optional[str] = None
    notes: Optional[str] = None
    last_contact: Optional[datetime] = None
    next_follow_up: Optional[datetime] = None


class LeadUpdateSchema(LeadCreateSchema):
    """Schema for updating a lead; only the fields sent are changed"""


class ConvertWithDetailsSchema(Schema):
    """Details collected when a lead becomes a customer"""
    id_number: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None


class LeadResponseSchema(Schema):
    """Schema for lead response"""
    id: int
    name: str
    first_name: str
    last_name: str
    id_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phone_country: Optional[str] = None
    phone_number: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    delivery_instructions: Optional[str] = None
    status: str
    priority: str
    source: str
    brand: str
    brand_interest: Optional[str] = None
    communication_preference: Optional[str] = None
    notes: Optional[str] = None
    converted_to_customer: bool
    converted_customer_id: Optional[int] = None
    customer_lifecycle_stage: Optional[str] = None
    assigned_user_id: Optional[int] = None
    last_contact: Optional[datetime] = None
    next_follow_up: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ConversionResponseSchema(Schema):
    """Result of a lead -> customer conversion"""
    lead: int
    customer: int
    success: bool


class LeadActivityCreateSchema(Schema):
    """Schema for logging a follow-up on a lead"""
    type: str
    title: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    result: Optional[str] = None


class LeadActivityResponseSchema(Schema):
    id: int
    lead_id: int
    type: str
    title: Optional[str] = None
    notes: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    assigned_user_id: Optional[int] = None
    result: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
