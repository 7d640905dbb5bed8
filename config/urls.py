"""
URL configuration for config project.
"""
import logging

from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI
from ninja.errors import AuthenticationError, HttpError, ValidationError as SchemaValidationError

from activities.api import interactions_router, opportunities_router, router as activities_router
from authentication.api import router as auth_router
from customers.api import router as customers_router, sales_router
from inventory.api import categories_router, products_router
from leads.api import router as leads_router
from orders.api import router as orders_router
from services.errors import CRMError
from stats.api import router as stats_router

logger = logging.getLogger(__name__)

# Create NinjaAPI instance
api = NinjaAPI(
    title="CRM API",
    description="Leads, customers, orders and inventory for a small retail business",
    version="1.0.0"
)

# Register API routers
api.add_router("/auth", auth_router, tags=["Authentication"])
api.add_router("/leads", leads_router, tags=["Leads"])
api.add_router("/customers", customers_router, tags=["Customers"])
api.add_router("/sales", sales_router, tags=["Customers"])
api.add_router("/orders", orders_router, tags=["Orders"])
api.add_router("/products", products_router, tags=["Products"])
api.add_router("/product-categories", categories_router, tags=["Products"])
api.add_router("/activities", activities_router, tags=["Activities"])
api.add_router("/opportunities", opportunities_router, tags=["Activities"])
api.add_router("/interactions", interactions_router, tags=["Activities"])
api.add_router("/stats", stats_router, tags=["Dashboard"])


def format_schema_error(error: dict) -> str:
    """``field: message`` from one pydantic error entry"""
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "data")]
    field = ".".join(location)
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


@api.exception_handler(CRMError)
def handle_crm_error(request, exc: CRMError):
    return api.create_response(request, {"error": exc.message}, status=exc.status_code)


@api.exception_handler(SchemaValidationError)
def handle_schema_error(request, exc: SchemaValidationError):
    message = format_schema_error(exc.errors[0]) if exc.errors else "Invalid request"
    return api.create_response(request, {"error": message}, status=400)


@api.exception_handler(AuthenticationError)
def handle_authentication_error(request, exc: AuthenticationError):
    return api.create_response(request, {"error": "Authentication required"}, status=401)


@api.exception_handler(HttpError)
def handle_http_error(request, exc: HttpError):
    return api.create_response(request, {"error": str(exc)}, status=exc.status_code)


@api.exception_handler(Exception)
def handle_unexpected_error(request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.path}: {exc}", exc_info=True)
    return api.create_response(request, {"error": "Internal server error"}, status=500)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
