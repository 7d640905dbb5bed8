from django.db import models

from customers.models import BRAND_CHOICES, SOURCE_CHOICES


class Order(models.Model):
    """Purchase record owned by exactly one customer"""

    STATUS_NEW = "new"
    STATUS_PENDING_COMPLETION = "pending_completion"

    STATUS_CHOICES = [
        ("new", "New"),
        ("preparing", "Preparing"),
        ("shipped", "Shipped"),
        ("completed", "Completed"),
        ("cancelled", "Cancelled"),
        ("pending_completion", "Pending completion"),
    ]

    PAYMENT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("paid", "Paid"),
        ("refunded", "Refunded"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("cash", "Cash"),
        ("transfer", "Transfer"),
        ("card", "Card"),
        ("paypal", "PayPal"),
        ("other", "Other"),
    ]

    customer = models.ForeignKey("customers.Customer", on_delete=models.PROTECT, related_name="orders")
    lead = models.ForeignKey(
        "leads.Lead",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    order_number = models.CharField(max_length=32, unique=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_NEW)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="pending")
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True, null=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    source = models.CharField(max_length=32, choices=SOURCE_CHOICES, default="direct")
    is_from_web_form = models.BooleanField(default=False)
    tracking_number = models.CharField(max_length=64, blank=True, null=True)
    shipping_method = models.CharField(max_length=64, blank=True, null=True)
    brand = models.CharField(max_length=20, choices=BRAND_CHOICES, default="sleepwear")
    shipping_address = models.JSONField(default=dict, blank=True)
    billing_address = models.JSONField(default=dict, blank=True)
    coupon_code = models.CharField(max_length=64, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["payment_status"]),
        ]

    def __str__(self) -> str:
        return f"{self.order_number} - {self.customer}"


class OrderItem(models.Model):
    """
    Product line within an order.

    ``product_name`` and ``unit_price`` are snapshots, so the line survives the
    product being deleted later.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "inventory.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    attributes = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.order.order_number} - {self.product_name} x{self.quantity}"
