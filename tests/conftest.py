"""
Pytest configuration and fixtures
"""
import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.test import Client

from customers.models import Customer
from inventory.models import Product, ProductCategory
from leads.models import Lead
from services.events import EventBus

User = get_user_model()


@pytest.fixture(autouse=True)
def reset_event_bus():
    """Give every test a fresh default event bus"""
    from services import events
    events._event_bus_instance = None
    yield
    events._event_bus_instance = None


@pytest.fixture
def event_bus():
    """Event bus injected into services under test"""
    return EventBus()


@pytest.fixture
def test_user(db):
    """Create a test user"""
    user, _ = User.objects.get_or_create(
        username='testuser',
        defaults={
            'email': 'test@example.com',
        }
    )
    user.set_password('testpass123')
    user.save()
    return user


@pytest.fixture
def authenticated_client(test_user):
    """Create an authenticated Django test client"""
    client = Client()
    client.force_login(test_user)
    return client


@pytest.fixture
def api_client(test_user):
    """Create an API client sending a JWT bearer token"""
    from authentication.jwt_auth import create_access_token

    token = create_access_token(test_user)
    client = Client(HTTP_AUTHORIZATION=f"Bearer {token}")
    client.token = token
    return client


@pytest.fixture
def sample_lead_data():
    """Sample lead data for testing"""
    return {
        'name': 'Ana Torres',
        'email': 'ana@example.com',
        'phone': '+593987654321',
        'city': 'Quito',
        'source': 'instagram',
        'brand': 'sleepwear',
        'brand_interest': 'Silk pajamas',
        'notes': 'Asked about sizes',
    }


@pytest.fixture
def lead(db, sample_lead_data):
    return Lead.objects.create(
        first_name='Ana',
        last_name='Torres',
        email=sample_lead_data['email'],
        phone=sample_lead_data['phone'],
        city='Quito',
        source='instagram',
        brand='sleepwear',
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        first_name='Luis',
        last_name='Mora',
        email='luis@example.com',
        phone='+593991112233',
        city='Guayaquil',
        brand='sleepwear',
    )


@pytest.fixture
def category(db):
    return ProductCategory.objects.create(name='Pajamas', slug='pajamas', brand='sleepwear')


@pytest.fixture
def product(category):
    return Product.objects.create(
        name='Silk pajama set',
        sku='SLE-SILKPA-0001',
        category=category,
        price=Decimal('49.99'),
        stock=10,
        brand='sleepwear',
    )
