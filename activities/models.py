from django.conf import settings
from django.db import models

from customers.models import BRAND_CHOICES


PRIORITY_CHOICES = [
    ("high", "High"),
    ("medium", "Medium"),
    ("low", "Low"),
]


class Activity(models.Model):
    """Calendar entry (call, meeting, task) tied to a customer or a lead"""

    TYPE_CHOICES = [
        ("call", "Call"),
        ("meeting", "Meeting"),
        ("task", "Task"),
        ("followup", "Follow-up"),
    ]

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
    ]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="task")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="activities",
    )
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="activities",
    )
    opportunity = models.ForeignKey(
        "activities.Opportunity",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="medium")
    reminder_time = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_time"]
        verbose_name_plural = "activities"
        indexes = [
            models.Index(fields=["start_time", "end_time"]),
        ]

    def __str__(self) -> str:
        return f"{self.type}: {self.title} ({self.start_time:%Y-%m-%d %H:%M})"


class Opportunity(models.Model):
    """Sales pipeline entry"""

    STATUS_CHOICES = [
        ("negotiation", "Negotiation"),
        ("proposal", "Proposal"),
        ("closed_won", "Closed won"),
        ("closed_lost", "Closed lost"),
    ]

    name = models.CharField(max_length=255)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="opportunities",
    )
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="opportunities",
    )
    estimated_value = models.DecimalField(max_digits=12, decimal_places=2)
    probability = models.PositiveSmallIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="negotiation")
    stage = models.CharField(max_length=64)
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="opportunities",
    )
    brand = models.CharField(max_length=20, choices=BRAND_CHOICES, default="sleepwear")
    estimated_close_date = models.DateTimeField(null=True, blank=True)
    next_action_date = models.DateTimeField(null=True, blank=True)
    products_interested = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "opportunities"

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


class Interaction(models.Model):
    """Logged communication with a customer or lead"""

    TYPE_CHOICES = [
        ("query", "Query"),
        ("complaint", "Complaint"),
        ("followup", "Follow-up"),
        ("order", "Order"),
        ("support", "Support"),
    ]

    CHANNEL_CHOICES = [
        ("whatsapp", "WhatsApp"),
        ("instagram", "Instagram"),
        ("phone", "Phone"),
        ("email", "Email"),
        ("meeting", "Meeting"),
    ]

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="interactions",
    )
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="interactions",
    )
    opportunity = models.ForeignKey(
        Opportunity,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="interactions",
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="query")
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES, default="whatsapp")
    content = models.TextField()
    attachments = models.JSONField(default=list, blank=True)
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="interactions",
    )
    is_resolved = models.BooleanField(default=False)
    resolution_notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.channel} {self.type} - {self.created_at:%Y-%m-%d}"
