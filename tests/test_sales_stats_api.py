"""
Tests for sales, dashboard stats and the lead activity log
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from customers.models import Customer, Sale
from leads.models import Lead, LeadActivity
from orders.models import Order
from services.errors import ValidationError
from services.events import EventTypes
from services.leads_service import LeadsService
from services.sales_service import SalesService
from services.stats_service import StatsService, start_of_month
from tests.helpers import RecordingListener


@pytest.mark.django_db
class TestSalesAPI:
    """Test /api/sales"""

    def test_record_and_list_sale(self, api_client, customer):
        response = api_client.post('/api/sales', {
            'customer_id': customer.id,
            'amount': '45.50',
            'status': 'completed',
            'payment_method': 'cash',
        }, content_type='application/json')

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data['amount']) == Decimal('45.50')
        assert data['customer_name'] == 'Luis Mora'
        assert data['brand'] == 'sleepwear'

        response = api_client.get(f"/api/sales?customer_id={customer.id}")
        assert [item['id'] for item in response.json()] == [data['id']]

        response = api_client.get(f"/api/sales/{data['id']}")
        assert response.status_code == 200

    def test_missing_sale(self, api_client):
        response = api_client.get('/api/sales/777')

        assert response.status_code == 404
        assert response.json() == {'error': 'Sale 777 not found'}

    def test_unknown_customer(self, api_client):
        response = api_client.post('/api/sales', {
            'customer_id': 999,
            'amount': '10.00',
            'status': 'completed',
        }, content_type='application/json')

        assert response.status_code == 404

    def test_negative_amount_rejected(self, api_client, customer):
        response = api_client.post('/api/sales', {
            'customer_id': customer.id,
            'amount': '-1.00',
            'status': 'completed',
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('amount')

    def test_order_of_another_customer_rejected(self, event_bus, customer):
        other = Customer.objects.create(first_name='Eva', last_name='Rios')
        order = Order.objects.create(customer=other, order_number='ORD-EVA', total_amount=Decimal('5.00'))

        with pytest.raises(ValidationError, match='order_id'):
            SalesService(event_bus).create_sale({
                'customer_id': customer.id,
                'order_id': order.id,
                'amount': '5.00',
                'status': 'completed',
            })
        assert Sale.objects.count() == 0

    def test_customer_with_recorded_sale_cannot_be_deleted(self, api_client, customer):
        api_client.post('/api/sales', {
            'customer_id': customer.id,
            'amount': '20.00',
            'status': 'completed',
        }, content_type='application/json')

        response = api_client.delete(f'/api/customers/{customer.id}')

        assert response.status_code == 400
        assert 'sales' in response.json()['error']

    def test_sale_created_event(self, event_bus, customer):
        recorder = RecordingListener(event_bus, EventTypes.SALE_CREATED)

        sale = SalesService(event_bus).create_sale({
            'customer_id': customer.id,
            'amount': 12,
            'status': 'completed',
        })

        assert recorder.of_type(EventTypes.SALE_CREATED) == [sale]


@pytest.mark.django_db
class TestStatsAPI:
    """Test /api/stats"""

    def test_lead_stats_count_open_leads(self, api_client, event_bus, lead):
        converted = Lead.objects.create(first_name='Old', last_name='Lead', status='contacted')
        LeadsService(event_bus).convert_lead_by_id(converted.id)

        response = api_client.get('/api/stats/leads')

        assert response.status_code == 200
        assert response.json() == {'count': 1, 'by_status': {'new': 1}}

    def test_customer_stats(self, api_client, customer):
        response = api_client.get('/api/stats/customers')

        assert response.json() == {'count': 1, 'new_this_month': 1}

    def test_order_stats(self, api_client, customer):
        Order.objects.create(customer=customer, order_number='ORD-A', total_amount=Decimal('10.50'))
        Order.objects.create(customer=customer, order_number='ORD-B', total_amount=Decimal('4.25'), status='shipped')

        response = api_client.get('/api/stats/orders')

        assert response.json() == {
            'count': 2,
            'total': '14.75',
            'by_status': {'new': 1, 'shipped': 1},
        }

    def test_sales_stats_only_this_month(self, api_client, customer):
        Sale.objects.create(customer=customer, amount=Decimal('30.00'), status='completed')
        old = Sale.objects.create(customer=customer, amount=Decimal('99.00'), status='completed')
        Sale.objects.filter(id=old.id).update(created_at=start_of_month() - timedelta(days=3))

        response = api_client.get('/api/stats/sales')

        assert response.json() == {'count': 1, 'total': '30.00'}

    def test_empty_sales_total(self, db):
        assert StatsService().sales_stats() == {'count': 0, 'total': '0.00'}

    def test_start_of_month(self):
        month_start = start_of_month()
        assert month_start.day == 1
        assert month_start.hour == 0
        assert month_start <= timezone.now()

    def test_requires_authentication(self, client, db):
        assert client.get('/api/stats/leads').status_code == 401


@pytest.mark.django_db
class TestLeadActivityLog:
    """Test /api/leads/{id}/activities"""

    def test_log_and_list(self, api_client, test_user, lead):
        response = api_client.post(f'/api/leads/{lead.id}/activities', {
            'type': 'call',
            'title': 'Asked about sizes',
            'status': 'completed',
            'result': 'Will visit the store',
        }, content_type='application/json')

        assert response.status_code == 201
        data = response.json()
        assert data['lead_id'] == lead.id
        assert data['assigned_user_id'] == test_user.id
        assert data['completed_date'] is not None

        lead.refresh_from_db()
        assert lead.last_contact is not None

        response = api_client.get(f'/api/leads/{lead.id}/activities')
        assert [item['id'] for item in response.json()] == [data['id']]

    def test_unknown_lead(self, api_client):
        response = api_client.post('/api/leads/4242/activities', {
            'type': 'call',
        }, content_type='application/json')

        assert response.status_code == 404
        assert LeadActivity.objects.count() == 0

    def test_bad_status_rejected(self, api_client, lead):
        response = api_client.post(f'/api/leads/{lead.id}/activities', {
            'type': 'visit',
            'status': 'someday',
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('status')

    def test_history_removed_with_lead(self, event_bus, lead):
        service = LeadsService(event_bus)
        service.add_lead_activity(lead.id, {'type': 'message'})

        service.delete_lead(lead.id)

        assert LeadActivity.objects.count() == 0
