from typing import List, Optional
from ninja import Router

from authentication.mixed_auth import mixed_auth
from customers.schemas import (
    ConvertToLeadSchema,
    CustomerCreateSchema,
    CustomerResponseSchema,
    CustomerUpdateSchema,
    SaleCreateSchema,
    SaleResponseSchema,
)
from leads.schemas import LeadResponseSchema
from services.customers_service import CustomersService
from services.sales_service import SalesService


router = Router(auth=mixed_auth)
sales_router = Router(auth=mixed_auth)


@router.get("", response=List[CustomerResponseSchema])
def list_customers(request, search: Optional[str] = None, brand: Optional[str] = None):
    """List customers; ``search`` matches name, email or phone"""
    return CustomersService().list_customers(search=search, brand=brand)


@router.post("", response={201: CustomerResponseSchema, 400: dict})
def create_customer(request, data: CustomerCreateSchema):
    customer = CustomersService().create_customer(data.dict())
    return 201, customer


@router.get("/{customer_id}", response={200: CustomerResponseSchema, 404: dict})
def get_customer(request, customer_id: int):
    return CustomersService().get_customer(customer_id)


@router.patch("/{customer_id}", response={200: CustomerResponseSchema, 400: dict, 404: dict})
def update_customer(request, customer_id: int, data: CustomerUpdateSchema):
    return CustomersService().update_customer(customer_id, data.dict(exclude_unset=True))


@router.delete("/{customer_id}", response={200: dict, 400: dict, 404: dict})
def delete_customer(request, customer_id: int):
    """Delete a customer. Customers with orders or sales are kept."""
    customer = CustomersService().delete_customer(customer_id)
    return {"success": True, "id": customer.id}


@router.post("/{customer_id}/convert-to-lead", response={201: LeadResponseSchema, 400: dict, 404: dict})
def convert_to_lead(request, customer_id: int, data: Optional[ConvertToLeadSchema] = None):
    """Turn a customer back into a lead; the customer row is removed"""
    overrides = data.dict(exclude_unset=True) if data else {}
    lead = CustomersService().convert_customer_to_lead(customer_id, overrides)
    return 201, lead


@sales_router.get("", response=List[SaleResponseSchema])
def list_sales(request, customer_id: Optional[int] = None, status: Optional[str] = None):
    """List sales, newest first"""
    return SalesService().list_sales(customer_id=customer_id, status=status)


@sales_router.post("", response={201: SaleResponseSchema, 400: dict, 404: dict})
def create_sale(request, data: SaleCreateSchema):
    sale = SalesService().create_sale(data.dict())
    return 201, sale


@sales_router.get("/{sale_id}", response={200: SaleResponseSchema, 404: dict})
def get_sale(request, sale_id: int):
    return SalesService().get_sale(sale_id)
