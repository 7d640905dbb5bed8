from typing import List, Optional
from ninja import Router

from authentication.mixed_auth import mixed_auth
from inventory.schemas import (
    CategoryCreateSchema,
    CategoryResponseSchema,
    CategoryUpdateSchema,
    ProductCreateSchema,
    ProductResponseSchema,
    ProductUpdateSchema,
    StockUpdateSchema,
)
from services.inventory_service import InventoryService


products_router = Router(auth=mixed_auth)
categories_router = Router(auth=mixed_auth)


@products_router.get("", response=List[ProductResponseSchema])
def list_products(
    request,
    search: Optional[str] = None,
    brand: Optional[str] = None,
    category: Optional[int] = None,
    active: Optional[bool] = None,
):
    return InventoryService().list_products(search=search, brand=brand, category=category, active=active)


@products_router.post("", response={201: ProductResponseSchema, 400: dict, 404: dict})
def create_product(request, data: ProductCreateSchema):
    """Create a product; a SKU is generated when none is given"""
    product = InventoryService().create_product(data.dict())
    return 201, product


@products_router.get("/{product_id}", response={200: ProductResponseSchema, 404: dict})
def get_product(request, product_id: int):
    return InventoryService().get_product(product_id)


@products_router.patch("/{product_id}", response={200: ProductResponseSchema, 400: dict, 404: dict})
def update_product(request, product_id: int, data: ProductUpdateSchema):
    return InventoryService().update_product(product_id, data.dict(exclude_unset=True))


@products_router.patch("/{product_id}/stock", response={200: ProductResponseSchema, 400: dict, 404: dict})
def update_stock(request, product_id: int, data: StockUpdateSchema):
    """Overwrite the stock counter after a manual count"""
    return InventoryService().set_stock(product_id, data.stock, reason=data.reason)


@products_router.delete("/{product_id}", response={200: dict, 404: dict})
def delete_product(request, product_id: int):
    product = InventoryService().delete_product(product_id)
    return {"success": True, "id": product.id}


@categories_router.get("", response=List[CategoryResponseSchema])
def list_categories(request):
    return InventoryService().list_categories()


@categories_router.post("", response={201: CategoryResponseSchema, 400: dict, 404: dict})
def create_category(request, data: CategoryCreateSchema):
    category = InventoryService().create_category(data.dict())
    return 201, category


@categories_router.get("/{category_id}", response={200: CategoryResponseSchema, 404: dict})
def get_category(request, category_id: int):
    return InventoryService().get_category(category_id)


@categories_router.get("/{category_id}/products", response={200: List[ProductResponseSchema], 404: dict})
def list_category_products(request, category_id: int):
    category = InventoryService().get_category(category_id)
    return category.products.order_by("name")


@categories_router.patch("/{category_id}", response={200: CategoryResponseSchema, 400: dict, 404: dict})
def update_category(request, category_id: int, data: CategoryUpdateSchema):
    return InventoryService().update_category(category_id, data.dict(exclude_unset=True))


@categories_router.delete("/{category_id}", response={200: dict, 404: dict})
def delete_category(request, category_id: int):
    """Delete a category; its products stay, without a category"""
    category = InventoryService().delete_category(category_id)
    return {"success": True, "id": category.id}
