"""
Tests for the leads, customers and orders endpoints
"""
from decimal import Decimal
from unittest.mock import patch

import pytest

from customers.models import Customer
from leads.models import Lead
from orders.models import Order


@pytest.mark.django_db
class TestLeadsAPI:
    """Test /api/leads"""

    def test_create_and_get_lead(self, api_client, sample_lead_data):
        response = api_client.post('/api/leads', sample_lead_data, content_type='application/json')

        assert response.status_code == 201
        data = response.json()
        assert data['first_name'] == 'Ana'
        assert data['last_name'] == 'Torres'
        assert data['converted_to_customer'] is False

        response = api_client.get(f"/api/leads/{data['id']}")
        assert response.status_code == 200
        assert response.json()['email'] == sample_lead_data['email']

    def test_create_lead_with_bad_source(self, api_client):
        response = api_client.post('/api/leads', {
            'name': 'Ana',
            'source': 'carrier-pigeon',
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('source:')

    def test_schema_errors_are_400_with_field(self, api_client):
        response = api_client.post('/api/leads', {
            'name': 'Ana',
            'last_contact': 'not-a-date',
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('last_contact:')

    def test_list_filters_by_status(self, api_client, lead):
        Lead.objects.create(first_name='Other', status='contacted')

        response = api_client.get('/api/leads?status=new')

        assert response.status_code == 200
        assert [item['id'] for item in response.json()] == [lead.id]

    def test_put_is_partial(self, api_client, lead):
        response = api_client.put(f'/api/leads/{lead.id}', {
            'priority': 'high',
        }, content_type='application/json')

        assert response.status_code == 200
        assert response.json()['priority'] == 'high'
        assert response.json()['email'] == lead.email

    def test_convert_endpoint(self, api_client, lead):
        response = api_client.post(f'/api/leads/{lead.id}/convert')

        assert response.status_code == 200
        data = response.json()
        assert data['lead'] == lead.id
        assert data['success'] is True
        assert Customer.objects.filter(id=data['customer']).exists()

        again = api_client.post(f'/api/leads/{lead.id}/convert')
        assert again.json() == data

    def test_convert_with_id_requires_id_number(self, api_client, lead):
        response = api_client.put(f'/api/leads/{lead.id}/convert-with-id', {
            'city': 'Quito',
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('id_number')

    def test_missing_lead(self, api_client):
        response = api_client.get('/api/leads/4242')

        assert response.status_code == 404
        assert response.json() == {'error': 'Lead 4242 not found'}

    def test_delete_lead(self, api_client, lead):
        response = api_client.delete(f'/api/leads/{lead.id}')

        assert response.status_code == 200
        assert response.json() == {'success': True, 'id': lead.id}

    def test_unexpected_error_is_hidden(self, api_client):
        with patch('leads.api.LeadsService.list_leads', side_effect=RuntimeError('db exploded')):
            response = api_client.get('/api/leads')

        assert response.status_code == 500
        assert response.json() == {'error': 'Internal server error'}


@pytest.mark.django_db
class TestCustomersAPI:
    """Test /api/customers"""

    def test_create_and_patch(self, api_client):
        response = api_client.post('/api/customers', {
            'first_name': 'Luis',
            'last_name': 'Mora',
            'email': 'luis@example.com',
        }, content_type='application/json')
        assert response.status_code == 201
        customer_id = response.json()['id']

        response = api_client.patch(f'/api/customers/{customer_id}', {
            'city': 'Cuenca',
        }, content_type='application/json')
        assert response.status_code == 200
        assert response.json()['city'] == 'Cuenca'
        assert response.json()['name'] == 'Luis Mora'

    def test_delete_refused_when_customer_has_orders(self, api_client, customer):
        Order.objects.create(customer=customer, order_number='ORD-KEEP', total_amount=Decimal('5.00'))

        response = api_client.delete(f'/api/customers/{customer.id}')

        assert response.status_code == 400
        assert 'orders' in response.json()['error']
        assert Customer.objects.filter(id=customer.id).exists()

    def test_convert_to_lead(self, api_client, customer):
        response = api_client.post(f'/api/customers/{customer.id}/convert-to-lead', {
            'city': 'Ibarra',
        }, content_type='application/json')

        assert response.status_code == 201
        assert response.json()['city'] == 'Ibarra'
        assert response.json()['status'] == 'new'
        assert not Customer.objects.filter(id=customer.id).exists()


@pytest.mark.django_db
class TestOrdersAPI:
    """Test /api/orders"""

    def test_create_order(self, api_client, customer, product):
        response = api_client.post('/api/orders', {
            'customer_id': customer.id,
            'items': [{'product_id': product.id, 'quantity': 3}],
        }, content_type='application/json')

        assert response.status_code == 201
        data = response.json()
        assert data['order_number'].startswith('ORD-')
        assert data['customer_name'] == customer.name
        assert Decimal(data['total_amount']) == Decimal('149.97')
        assert len(data['items']) == 1
        product.refresh_from_db()
        assert product.stock == 7

    def test_create_order_unknown_customer(self, api_client):
        response = api_client.post('/api/orders', {
            'customer_id': 999,
            'items': [],
        }, content_type='application/json')

        assert response.status_code == 404

    def test_status_endpoint(self, api_client, customer, product):
        order_id = api_client.post('/api/orders', {
            'customer_id': customer.id,
            'items': [{'product_id': product.id}],
        }, content_type='application/json').json()['id']

        response = api_client.patch(f'/api/orders/{order_id}/status', {
            'status': 'preparing',
            'reason': 'Paid by transfer',
        }, content_type='application/json')
        assert response.status_code == 200
        assert response.json()['status'] == 'preparing'

        response = api_client.patch(f'/api/orders/{order_id}/status', {
            'status': 'lost-in-mail',
        }, content_type='application/json')
        assert response.status_code == 400
        assert Order.objects.get(id=order_id).status == 'preparing'

    def test_payment_status_endpoint(self, api_client, customer, product):
        order_id = api_client.post('/api/orders', {
            'customer_id': customer.id,
            'items': [{'product_id': product.id}],
        }, content_type='application/json').json()['id']

        response = api_client.patch(f'/api/orders/{order_id}/payment-status', {
            'payment_status': 'paid',
        }, content_type='application/json')

        assert response.status_code == 200
        assert response.json()['payment_status'] == 'paid'
        assert response.json()['payment_date'] is not None
