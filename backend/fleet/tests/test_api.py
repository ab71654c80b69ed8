"""
API tests for the fleet endpoints.
"""

import pytest

from fleet.models import Tire


@pytest.mark.django_db
class TestTruckAPI:

    def test_create_truck_normalises_plate(self, api_client):
        response = api_client.post('/api/fleet/trucks/', {
            'plate_number': 'od02cd5555',
            'fleet_type': 'COAL',
        }, format='json')

        assert response.status_code == 201
        assert response.data['plate_number'] == 'OD02CD5555'

    def test_sub_type_rejected_for_coal_truck(self, api_client):
        response = api_client.post('/api/fleet/trucks/', {
            'plate_number': 'OD02CD5556',
            'fleet_type': 'COAL',
            'sub_type': 'DISPATCH',
        }, format='json')

        assert response.status_code == 400
        assert 'sub_type' in response.data

    def test_filter_by_fleet_type(self, api_client, coal_truck, mining_truck):
        response = api_client.get('/api/fleet/trucks/', {'fleet_type': 'mining'})

        assert response.status_code == 200
        plates = [row['plate_number'] for row in response.data]
        assert plates == ['OD15MN9876']

    def test_change_status(self, api_client, coal_truck):
        response = api_client.post(
            f'/api/fleet/trucks/{coal_truck.id}/change-status/',
            {'status': 'BREAKDOWN', 'remarks': 'Axle', 'date': '2024-05-01'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['status'] == 'BREAKDOWN'
        assert response.data['status_history'][0]['remarks'] == 'Axle'

    def test_compliance_endpoint(self, api_client, coal_truck):
        response = api_client.get(f'/api/fleet/trucks/{coal_truck.id}/compliance/')

        assert response.status_code == 200
        assert len(response.data['documents']) == 6


@pytest.mark.django_db
class TestTireAPI:

    def test_mount_then_unmount(self, api_client, coal_truck):
        tire = Tire.objects.create(serial_number='APOLLO-9')

        response = api_client.post(f'/api/fleet/tires/{tire.id}/mount/', {
            'truck': str(coal_truck.id), 'position': 'RL', 'odometer': 10000,
        }, format='json')
        assert response.status_code == 200
        assert response.data['plate_number'] == 'OD02AB1234'

        response = api_client.post(f'/api/fleet/tires/{tire.id}/unmount/', {
            'odometer': 10800,
        }, format='json')
        assert response.status_code == 200
        assert response.data['status'] == 'SPARE'
        assert response.data['total_mileage'] == 800

    def test_unmount_unmounted_tyre_is_bad_request(self, api_client):
        tire = Tire.objects.create(serial_number='APOLLO-10')
        response = api_client.post(f'/api/fleet/tires/{tire.id}/unmount/', {}, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestBenchmarkAPI:

    def test_get_and_patch(self, api_client):
        response = api_client.get('/api/fleet/benchmarks/')
        assert response.status_code == 200
        assert response.data['mining_liters_per_trip'] == [30, 45]

        response = api_client.patch('/api/fleet/benchmarks/', {
            'coal_liters_per_trip': [35, 55],
        }, format='json')
        assert response.status_code == 200
        assert response.data['coal_liters_per_trip'] == [35.0, 55.0]

    def test_inverted_range_rejected(self, api_client):
        response = api_client.put('/api/fleet/benchmarks/', {
            'coal_liters_per_trip': [60, 40],
        }, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestRootAPI:

    def test_api_root_lists_apps(self, client):
        response = client.get('/api/')
        assert response.status_code == 200
        assert set(response.json()['endpoints']) >= {'fleet', 'fuel', 'diesel_ledger', 'hauling'}

    def test_health(self, client):
        response = client.get('/api/health/')
        assert response.json()['status'] == 'healthy'
