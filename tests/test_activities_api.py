"""
Tests for activity scheduling, opportunities and interactions
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from activities.models import Activity, Interaction


def iso(value):
    return value.isoformat()


@pytest.mark.django_db
class TestActivitiesAPI:
    """Test /api/activities"""

    def setup_method(self):
        self.start = timezone.now().replace(microsecond=0) + timedelta(days=1)
        self.end = self.start + timedelta(hours=1)

    def test_create_activity_for_lead(self, authenticated_client, test_user, lead):
        response = authenticated_client.post('/api/activities', {
            'type': 'call',
            'title': 'Call about sizes',
            'start_time': iso(self.start),
            'end_time': iso(self.end),
            'lead_id': lead.id,
        }, content_type='application/json')

        assert response.status_code == 201
        data = response.json()
        assert data['lead_id'] == lead.id
        assert data['status'] == 'pending'
        assert data['priority'] == 'medium'
        assert data['assigned_user_id'] == test_user.id

    def test_end_before_start_rejected(self, authenticated_client, lead):
        response = authenticated_client.post('/api/activities', {
            'title': 'Backwards',
            'start_time': iso(self.end),
            'end_time': iso(self.start),
            'lead_id': lead.id,
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('end_time')
        assert Activity.objects.count() == 0

    def test_requires_customer_or_lead(self, authenticated_client):
        response = authenticated_client.post('/api/activities', {
            'title': 'Orphan task',
            'start_time': iso(self.start),
            'end_time': iso(self.end),
        }, content_type='application/json')

        assert response.status_code == 400

    def test_unknown_type_rejected(self, authenticated_client, customer):
        response = authenticated_client.post('/api/activities', {
            'type': 'party',
            'title': 'Launch party',
            'start_time': iso(self.start),
            'end_time': iso(self.end),
            'customer_id': customer.id,
        }, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('type')

    def test_calendar_window(self, authenticated_client, customer):
        inside = Activity.objects.create(
            title='Fitting', start_time=self.start, end_time=self.end, customer=customer
        )
        Activity.objects.create(
            title='Next week', start_time=self.start + timedelta(days=7),
            end_time=self.end + timedelta(days=7), customer=customer
        )

        response = authenticated_client.get('/api/activities/calendar', {
            'start': iso(self.start - timedelta(hours=2)),
            'end': iso(self.start + timedelta(hours=2)),
        })

        assert response.status_code == 200
        assert [item['id'] for item in response.json()] == [inside.id]

    def test_calendar_rejects_inverted_window(self, authenticated_client):
        response = authenticated_client.get('/api/activities/calendar', {
            'start': iso(self.end),
            'end': iso(self.start),
        })

        assert response.status_code == 400

    def test_update_and_delete(self, authenticated_client, customer):
        activity = Activity.objects.create(
            title='Follow up', start_time=self.start, end_time=self.end, customer=customer
        )

        response = authenticated_client.patch(f'/api/activities/{activity.id}', {
            'status': 'completed',
        }, content_type='application/json')
        assert response.status_code == 200
        assert response.json()['status'] == 'completed'
        assert response.json()['title'] == 'Follow up'

        response = authenticated_client.delete(f'/api/activities/{activity.id}')
        assert response.status_code == 200
        assert Activity.objects.count() == 0


@pytest.mark.django_db
class TestOpportunitiesAndInteractions:
    """Test /api/opportunities and /api/interactions"""

    def test_opportunity_lifecycle(self, authenticated_client, customer):
        response = authenticated_client.post('/api/opportunities', {
            'name': 'Bridal collection',
            'customer_id': customer.id,
            'estimated_value': '1200.00',
            'probability': 60,
        }, content_type='application/json')
        assert response.status_code == 201
        opportunity_id = response.json()['id']

        response = authenticated_client.patch(f'/api/opportunities/{opportunity_id}/status', {
            'status': 'closed_won',
            'stage': 'signed',
        }, content_type='application/json')
        assert response.status_code == 200
        assert response.json()['status'] == 'closed_won'
        assert response.json()['stage'] == 'signed'

    def test_probability_range(self, authenticated_client, customer):
        response = authenticated_client.post('/api/opportunities', {
            'name': 'Too sure',
            'customer_id': customer.id,
            'probability': 150,
        }, content_type='application/json')

        assert response.status_code == 400

    def test_log_and_resolve_interaction(self, authenticated_client, lead):
        response = authenticated_client.post('/api/interactions', {
            'lead_id': lead.id,
            'channel': 'instagram',
            'content': 'Asked for the price list',
        }, content_type='application/json')
        assert response.status_code == 201
        interaction_id = response.json()['id']

        response = authenticated_client.get('/api/interactions?resolved=false')
        assert [item['id'] for item in response.json()] == [interaction_id]

        response = authenticated_client.post(f'/api/interactions/{interaction_id}/resolve', {
            'resolution_notes': 'Sent catalogue',
        }, content_type='application/json')
        assert response.status_code == 200
        assert Interaction.objects.get(id=interaction_id).is_resolved is True
