from django.contrib import admin

from .models import Lead, LeadActivity


class LeadActivityInline(admin.TabularInline):
    model = LeadActivity
    extra = 0
    fields = ("type", "title", "status", "priority", "due_date", "completed_date", "result")


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    inlines = [LeadActivityInline]
    list_display = (
        "name",
        "email",
        "phone",
        "status",
        "source",
        "brand",
        "converted_to_customer",
        "created_at",
    )
    search_fields = ("name", "email", "phone", "id_number")
    list_filter = ("status", "source", "brand", "converted_to_customer")
    ordering = ("-created_at",)
    readonly_fields = ("name", "converted_customer", "created_at", "updated_at")
