from django.conf import settings
from django.db import models

from services.name_utils import generate_full_name


BRAND_CHOICES = [
    ("sleepwear", "Sleepwear"),
    ("bride", "Bride"),
]

SOURCE_CHOICES = [
    ("instagram", "Instagram"),
    ("facebook", "Facebook"),
    ("tiktok", "TikTok"),
    ("website", "Website"),
    ("woocommerce", "WooCommerce"),
    ("whatsapp", "WhatsApp"),
    ("email", "Email"),
    ("event", "Event"),
    ("referral", "Referral"),
    ("store", "Store"),
    ("mass_media", "Mass media"),
    ("call", "Call"),
    ("direct", "Direct"),
    ("manual", "Manual"),
    ("web_form", "Web form"),
    ("other", "Other"),
]


class Customer(models.Model):
    """A converted contact that can place orders"""

    TYPE_CHOICES = [
        ("person", "Person"),
        ("company", "Company"),
    ]

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("vip", "VIP"),
    ]

    name = models.CharField(max_length=255, blank=True)
    first_name = models.CharField(max_length=120)
    last_name = models.CharField(max_length=120, blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="person")
    id_number = models.CharField(max_length=32, blank=True, null=True)
    ruc = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    phone_country = models.CharField(max_length=8, blank=True, null=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    secondary_phone = models.CharField(max_length=32, blank=True, null=True)
    street = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=120, blank=True, null=True)
    province = models.CharField(max_length=120, blank=True, null=True)
    delivery_instructions = models.TextField(blank=True, null=True)
    billing_address = models.JSONField(default=dict, blank=True)
    source = models.CharField(max_length=32, choices=SOURCE_CHOICES, default="manual")
    brand = models.CharField(max_length=20, choices=BRAND_CHOICES, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    tags = models.JSONField(default=list, blank=True)
    total_value = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    assigned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )
    last_purchase = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if self.first_name or self.last_name:
            self.name = generate_full_name(self.first_name, self.last_name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.id} - {self.name}"


class Sale(models.Model):
    """Recorded sale; a customer with sales history cannot be removed"""

    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="sales")
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=32)
    payment_method = models.CharField(max_length=32, blank=True, null=True)
    brand = models.CharField(max_length=20, choices=BRAND_CHOICES, default="sleepwear")
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Sale {self.id} - {self.customer} ({self.amount})"
