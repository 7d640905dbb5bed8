from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ninja import Schema


class ProductCreateSchema(Schema):
    """Schema for creating a product"""
    name: str
    sku: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    price: Decimal
    price_discount: Optional[Decimal] = None
    stock: Optional[int] = None
    brand: Optional[str] = None
    active: Optional[bool] = None
    status: Optional[str] = None
    product_type: Optional[str] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[Dict[str, Any]] = None
    images: Optional[List[str]] = None
    attributes: Optional[Dict[str, Any]] = None


class ProductUpdateSchema(Schema):
    """Schema for updating a product; only the fields sent are changed"""
    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    price: Optional[Decimal] = None
    price_discount: Optional[Decimal] = None
    stock: Optional[int] = None
    brand: Optional[str] = None
    active: Optional[bool] = None
    status: Optional[str] = None
    product_type: Optional[str] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[Dict[str, Any]] = None
    images: Optional[List[str]] = None
    attributes: Optional[Dict[str, Any]] = None


class StockUpdateSchema(Schema):
    """Manual stock count"""
    stock: int
    reason: Optional[str] = None


class ProductResponseSchema(Schema):
    """Schema for product response"""
    id: int
    name: str
    sku: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    price: Decimal
    price_discount: Optional[Decimal] = None
    stock: int
    brand: Optional[str] = None
    active: bool
    status: str
    product_type: str
    weight: Optional[Decimal] = None
    dimensions: Dict[str, Any] = {}
    images: List[str] = []
    attributes: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryCreateSchema(Schema):
    """Schema for creating a product category"""
    name: str
    description: Optional[str] = None
    slug: Optional[str] = None
    brand: Optional[str] = None
    parent_category_id: Optional[int] = None
    active: Optional[bool] = None


class CategoryUpdateSchema(Schema):
    name: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[str] = None
    brand: Optional[str] = None
    parent_category_id: Optional[int] = None
    active: Optional[bool] = None


class CategoryResponseSchema(Schema):
    """Schema for category response"""
    id: int
    name: str
    description: Optional[str] = None
    slug: str
    brand: str
    parent_category_id: Optional[int] = None
    active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
