from django.contrib import admin

from .models import Product, ProductCategory


@admin.register(ProductCategory)
class ProductCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "brand", "parent_category", "active")
    list_filter = ("brand", "active")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "category", "price", "stock", "brand", "active")
    list_filter = ("brand", "active", "status", "category")
    search_fields = ("name", "sku")
    readonly_fields = ("created_at", "updated_at")
