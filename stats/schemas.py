from typing import Dict
from ninja import Schema


class LeadStatsSchema(Schema):
    count: int
    by_status: Dict[str, int]


class CustomerStatsSchema(Schema):
    count: int
    new_this_month: int


class OrderStatsSchema(Schema):
    count: int
    total: str
    by_status: Dict[str, int]


class SalesStatsSchema(Schema):
    count: int
    total: str
