from django.contrib import admin

from .models import Activity, Interaction, Opportunity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "start_time", "end_time", "status", "priority", "assigned_user")
    list_filter = ("type", "status", "priority")
    search_fields = ("title", "lead__name", "customer__name")
    date_hierarchy = "start_time"


@admin.register(Opportunity)
class OpportunityAdmin(admin.ModelAdmin):
    list_display = ("name", "customer", "estimated_value", "probability", "status", "stage")
    list_filter = ("status", "brand")
    search_fields = ("name", "customer__name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Interaction)
class InteractionAdmin(admin.ModelAdmin):
    list_display = ("channel", "type", "customer", "lead", "is_resolved", "created_at")
    list_filter = ("channel", "type", "is_resolved")
    search_fields = ("content", "customer__name", "lead__name")
    readonly_fields = ("created_at",)
