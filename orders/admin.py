from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("created_at",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer", "total_amount", "status", "payment_status", "brand", "created_at")
    list_filter = ("status", "payment_status", "brand", "is_from_web_form", "created_at")
    search_fields = ("order_number", "customer__name", "customer__email", "tracking_number")
    readonly_fields = ("created_at", "updated_at")
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
