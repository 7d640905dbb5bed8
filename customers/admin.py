from django.contrib import admin

from .models import Customer, Sale


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "city", "brand", "status", "last_purchase", "created_at")
    list_filter = ("brand", "status", "source", "type")
    search_fields = ("name", "email", "phone", "id_number", "ruc")
    readonly_fields = ("name", "created_at", "updated_at")
    date_hierarchy = "created_at"


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("customer", "order", "amount", "status", "payment_method", "created_at")
    list_filter = ("status", "brand", "created_at")
    search_fields = ("customer__name", "order__order_number")
    readonly_fields = ("created_at", "updated_at")
