import logging
import random
import string
from typing import Any, Dict, Optional, Tuple

from django.db import transaction
from django.db.models import Q
from django.utils.text import slugify

from inventory.models import Product, ProductCategory
from services.errors import NotFoundError, ValidationError
from services.events import EventBus, EventTypes, get_event_bus
from services.leads_service import BRANDS, check_choice

logger = logging.getLogger(__name__)

PRODUCT_STATUSES = [value for value, _ in Product.STATUS_CHOICES]
PRODUCT_TYPES = [value for value, _ in Product.TYPE_CHOICES]

PRODUCT_FIELDS = (
    "name",
    "sku",
    "description",
    "price",
    "price_discount",
    "stock",
    "brand",
    "active",
    "status",
    "product_type",
    "weight",
    "dimensions",
    "images",
    "attributes",
)


def generate_sku(name: str, brand: Optional[str] = None) -> str:
    """SKU like ``SLE-SILKPA-4F7Q`` from brand, name and a random suffix"""
    brand_part = (brand or "GEN")[:3].upper()
    name_part = "".join(ch for ch in slugify(name).upper() if ch.isalnum())[:6] or "ITEM"
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{brand_part}-{name_part}-{suffix}"


def unique_slug(name: str, exclude_id: Optional[int] = None) -> str:
    base = slugify(name) or "category"
    slug = base
    counter = 2
    queryset = ProductCategory.objects.all()
    if exclude_id is not None:
        queryset = queryset.exclude(id=exclude_id)
    while queryset.filter(slug=slug).exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug


class InventoryService:
    """Service responsible for products, categories and stock"""

    def __init__(self, events: Optional[EventBus] = None):
        self.events = events or get_event_bus()

    # Products

    def list_products(
        self,
        search: Optional[str] = None,
        brand: Optional[str] = None,
        category: Optional[int] = None,
        active: Optional[bool] = None,
    ):
        queryset = Product.objects.select_related("category").order_by("-created_at")
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(sku__icontains=search)
                | Q(description__icontains=search)
            )
        if brand:
            queryset = queryset.filter(brand=brand)
        if category is not None:
            queryset = queryset.filter(category_id=category)
        if active is not None:
            queryset = queryset.filter(active=active)
        return queryset

    def get_product(self, product_id: int) -> Product:
        try:
            return Product.objects.select_related("category").get(id=product_id)
        except Product.DoesNotExist:
            raise NotFoundError("Product", product_id)

    def _validate_product(self, data: Dict[str, Any]) -> None:
        check_choice(data.get("brand"), BRANDS, "brand")
        check_choice(data.get("status"), PRODUCT_STATUSES, "status")
        check_choice(data.get("product_type"), PRODUCT_TYPES, "product_type")
        if data.get("stock") is not None and data["stock"] < 0:
            raise ValidationError("must be zero or greater", field="stock")
        if data.get("price") is not None and data["price"] < 0:
            raise ValidationError("must be zero or greater", field="price")

    def _check_sku(self, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not sku:
            return
        queryset = Product.objects.filter(sku=sku)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        if queryset.exists():
            raise ValidationError("already exists", field="sku")

    def _resolve_category(self, category_id: Optional[int]) -> Optional[ProductCategory]:
        if category_id is None:
            return None
        try:
            return ProductCategory.objects.get(id=category_id)
        except ProductCategory.DoesNotExist:
            raise NotFoundError("Category", category_id)

    def create_product(self, data: Dict[str, Any]) -> Product:
        if not (data.get("name") or "").strip():
            raise ValidationError("Name is required", field="name")
        if data.get("price") is None:
            raise ValidationError("Price is required", field="price")
        self._validate_product(data)
        self._check_sku(data.get("sku"))

        values = {field: data[field] for field in PRODUCT_FIELDS if data.get(field) is not None}
        values["name"] = values["name"].strip()
        if not values.get("sku"):
            values["sku"] = generate_sku(values["name"], values.get("brand"))

        product = Product.objects.create(
            category=self._resolve_category(data.get("category_id")),
            **values,
        )
        logger.info(f"Created product {product.id} ({product.sku})")

        self.events.emit(EventTypes.PRODUCT_CREATED, product)
        return product

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Product:
        product = self.get_product(product_id)
        self._validate_product(data)
        self._check_sku(data.get("sku"), exclude_id=product.id)

        previous_stock = product.stock
        for field in PRODUCT_FIELDS:
            if data.get(field) is not None:
                setattr(product, field, data[field])
        if "category_id" in data:
            product.category = self._resolve_category(data["category_id"])

        product.save()
        logger.info(f"Updated product {product.id}")

        self.events.emit(EventTypes.PRODUCT_UPDATED, product)
        if product.stock != previous_stock:
            self.events.emit(
                EventTypes.PRODUCT_STOCK_CHANGED,
                {
                    "product": product,
                    "previous_stock": previous_stock,
                    "new_stock": product.stock,
                    "reason": "Product updated",
                },
            )
        return product

    def delete_product(self, product_id: int) -> Product:
        product = self.get_product(product_id)
        deleted_id = product.id
        product.delete()
        product.id = deleted_id
        logger.info(f"Deleted product {deleted_id}")

        self.events.emit(EventTypes.PRODUCT_DELETED, product)
        return product

    def set_stock(self, product_id: int, stock: int, reason: Optional[str] = None) -> Product:
        """Overwrite the stock counter (manual inventory count)"""
        if stock < 0:
            raise ValidationError("must be zero or greater", field="stock")

        with transaction.atomic():
            try:
                product = Product.objects.select_for_update().get(id=product_id)
            except Product.DoesNotExist:
                raise NotFoundError("Product", product_id)
            previous_stock = product.stock
            product.stock = stock
            product.save(update_fields=["stock", "updated_at"])

        logger.info(f"Stock of product {product.id} set {previous_stock} -> {stock}")
        self.events.emit(
            EventTypes.PRODUCT_STOCK_CHANGED,
            {
                "product": product,
                "previous_stock": previous_stock,
                "new_stock": stock,
                "reason": reason,
            },
        )
        return product

    def adjust_stock(self, product_id: int, quantity: int) -> Tuple[Product, int, int]:
        """
        Take ``quantity`` units out of stock, clamping at zero.

        Must run inside the caller's transaction; the row stays locked until
        it commits. No event is emitted, the caller does that after commit.

        Returns:
            ``(product, previous_stock, new_stock)``
        """
        try:
            product = Product.objects.select_for_update().get(id=product_id)
        except Product.DoesNotExist:
            raise NotFoundError("Product", product_id)

        previous_stock = product.stock
        new_stock = max(0, previous_stock - quantity)
        product.stock = new_stock
        product.save(update_fields=["stock", "updated_at"])
        return product, previous_stock, new_stock

    # Categories

    def list_categories(self):
        return ProductCategory.objects.order_by("-created_at")

    def get_category(self, category_id: int) -> ProductCategory:
        try:
            return ProductCategory.objects.get(id=category_id)
        except ProductCategory.DoesNotExist:
            raise NotFoundError("Category", category_id)

    def create_category(self, data: Dict[str, Any]) -> ProductCategory:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        check_choice(data.get("brand"), BRANDS, "brand")

        category = ProductCategory.objects.create(
            name=name,
            description=data.get("description"),
            slug=unique_slug(data.get("slug") or name),
            brand=data.get("brand") or "sleepwear",
            parent_category=(
                self.get_category(data["parent_category_id"]) if data.get("parent_category_id") else None
            ),
            active=data.get("active") is not False,
        )
        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def update_category(self, category_id: int, data: Dict[str, Any]) -> ProductCategory:
        category = self.get_category(category_id)
        check_choice(data.get("brand"), BRANDS, "brand")

        if data.get("name"):
            category.name = data["name"].strip()
        if data.get("slug"):
            category.slug = unique_slug(data["slug"], exclude_id=category.id)
        for field in ("description", "brand", "active"):
            if data.get(field) is not None:
                setattr(category, field, data[field])
        if "parent_category_id" in data:
            parent_id = data["parent_category_id"]
            if parent_id == category.id:
                raise ValidationError("A category cannot be its own parent", field="parent_category_id")
            category.parent_category = self.get_category(parent_id) if parent_id else None

        category.save()
        logger.info(f"Updated category {category.id}")
        return category

    def delete_category(self, category_id: int) -> ProductCategory:
        category = self.get_category(category_id)
        deleted_id = category.id
        category.delete()
        category.id = deleted_id
        logger.info(f"Deleted category {deleted_id}")
        return category
