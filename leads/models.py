from django.conf import settings
from django.db import models

from customers.models import BRAND_CHOICES, SOURCE_CHOICES
from services.name_utils import generate_full_name


class Lead(models.Model):
    """A prospective contact that has not been converted to a customer yet"""

    STATUS_NEW = "new"
    STATUS_CONVERTED = "converted"

    STATUS_CHOICES = [
        ("new", "New"),
        ("contacted", "Contacted"),
        ("qualified", "Qualified"),
        ("proposal", "Proposal"),
        ("negotiation", "Negotiation"),
        ("won", "Won"),
        ("lost", "Lost"),
        ("scheduled", "Scheduled"),
        ("pending", "Pending"),
        ("converted", "Converted"),
    ]

    PRIORITY_CHOICES = [
        ("high", "High"),
        ("medium", "Medium"),
        ("low", "Low"),
    ]

    name = models.CharField(max_length=255, blank=True)
    first_name = models.CharField(max_length=120, blank=True)
    last_name = models.CharField(max_length=120, blank=True)
    id_number = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    phone_country = models.CharField(max_length=8, blank=True, null=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    street = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=120, blank=True, null=True)
    province = models.CharField(max_length=120, blank=True, null=True)
    delivery_instructions = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_NEW)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="medium")
    source = models.CharField(max_length=32, choices=SOURCE_CHOICES, default="instagram")
    brand = models.CharField(max_length=20, choices=BRAND_CHOICES, default="sleepwear")
    brand_interest = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="leads",
    )
    communication_preference = models.CharField(max_length=32, blank=True, null=True)
    converted_to_customer = models.BooleanField(default=False)
    converted_customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="converted_leads",
    )
    last_contact = models.DateTimeField(null=True, blank=True)
    next_follow_up = models.DateTimeField(null=True, blank=True)
    customer_lifecycle_stage = models.CharField(max_length=32, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["converted_to_customer"]),
        ]

    def save(self, *args, **kwargs):
        if self.first_name or self.last_name:
            self.name = generate_full_name(self.first_name, self.last_name)
        super().save(*args, **kwargs)

    @property
    def is_converted(self) -> bool:
        return bool(self.converted_to_customer and self.converted_customer_id)

    def __str__(self) -> str:
        return f"{self.id} - {self.name}"


class LeadActivity(models.Model):
    """Entry in a lead's follow-up history (call made, message sent, visit planned)"""

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    ]

    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name="activity_log")
    type = models.CharField(max_length=32)
    title = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    priority = models.CharField(max_length=10, choices=Lead.PRIORITY_CHOICES, default="medium")
    due_date = models.DateTimeField(null=True, blank=True)
    completed_date = models.DateTimeField(null=True, blank=True)
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lead_activities",
    )
    result = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "lead activities"

    def __str__(self) -> str:
        return f"{self.lead_id} - {self.type}"
