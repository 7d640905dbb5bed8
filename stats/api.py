from ninja import Router

from authentication.mixed_auth import mixed_auth
from services.stats_service import StatsService
from stats.schemas import CustomerStatsSchema, LeadStatsSchema, OrderStatsSchema, SalesStatsSchema


router = Router(auth=mixed_auth)


@router.get("/leads", response=LeadStatsSchema)
def lead_stats(request):
    """Open leads, grouped by status"""
    return StatsService().lead_stats()


@router.get("/customers", response=CustomerStatsSchema)
def customer_stats(request):
    return StatsService().customer_stats()


@router.get("/orders", response=OrderStatsSchema)
def order_stats(request):
    """Orders placed this month"""
    return StatsService().order_stats()


@router.get("/sales", response=SalesStatsSchema)
def sales_stats(request):
    """Sales recorded this month"""
    return StatsService().sales_stats()
