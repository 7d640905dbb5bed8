"""
Dashboard counters computed with ORM aggregates.

Monthly figures cover the current calendar month in ``TIME_ZONE``.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db.models import Count, Sum
from django.utils import timezone

from customers.models import Customer, Sale
from leads.models import Lead
from orders.models import Order

CENT = Decimal("0.01")


def start_of_month(now: Optional[datetime] = None) -> datetime:
    now = timezone.localtime(now)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def count_by(queryset, field: str) -> Dict[str, int]:
    rows = queryset.order_by().values(field).annotate(count=Count("id"))
    return {row[field]: row["count"] for row in rows}


class StatsService:
    """Read-only figures for the dashboard"""

    def __init__(self, now: Optional[datetime] = None):
        self.month_start = start_of_month(now)

    def lead_stats(self) -> Dict[str, Any]:
        """Open (not converted) leads"""
        open_leads = Lead.objects.filter(converted_to_customer=False)
        return {
            "count": open_leads.count(),
            "by_status": count_by(open_leads, "status"),
        }

    def customer_stats(self) -> Dict[str, Any]:
        return {
            "count": Customer.objects.count(),
            "new_this_month": Customer.objects.filter(created_at__gte=self.month_start).count(),
        }

    def order_stats(self) -> Dict[str, Any]:
        """Orders placed this month"""
        orders = Order.objects.filter(created_at__gte=self.month_start)
        total = orders.aggregate(total=Sum("total_amount"))["total"] or Decimal("0")
        return {
            "count": orders.count(),
            "total": str(total.quantize(CENT)),
            "by_status": count_by(orders, "status"),
        }

    def sales_stats(self) -> Dict[str, Any]:
        """Sales recorded this month; ``total`` is a two-decimal string"""
        sales = Sale.objects.filter(created_at__gte=self.month_start)
        summary = sales.aggregate(count=Count("id"), total=Sum("amount"))
        total = summary["total"] or Decimal("0")
        return {
            "count": summary["count"],
            "total": str(total.quantize(CENT)),
        }
