"""
API tests for the hauling endpoints.
"""

from datetime import date
from decimal import Decimal

import pytest

from hauling.models import CoalLog, MiningLog


@pytest.mark.django_db
class TestCoalLogAPI:

    def test_create_derives_net_weight(self, api_client, coal_truck):
        response = api_client.post('/api/hauling/coal-logs/', {
            'truck': str(coal_truck.id),
            'date': '2024-06-10',
            'gross_weight': '40.000',
            'tare_weight': '15.000',
        }, format='json')

        assert response.status_code == 201
        assert response.data['plate_number'] == 'OD02AB1234'
        assert response.data['driver_name'] is None
        assert CoalLog.objects.get().net_weight == Decimal('25.000')

    def test_tare_above_gross_rejected(self, api_client, coal_truck):
        response = api_client.post('/api/hauling/coal-logs/', {
            'truck': str(coal_truck.id),
            'date': '2024-06-10',
            'gross_weight': '15',
            'tare_weight': '40',
        }, format='json')

        assert response.status_code == 400
        assert 'tare_weight' in response.data

    def test_batches(self, api_client, coal_truck):
        for _ in range(5):
            CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 10), net_weight=Decimal('25'))

        response = api_client.get('/api/hauling/coal-logs/batches/', {'truck_id': str(coal_truck.id)})

        assert response.status_code == 200
        assert response.data['count'] == 1
        assert response.data['batches'][0]['roll_amount'] == Decimal('100')
        assert response.data['totals']['trips'] == 5

    def test_batches_reject_inverted_range(self, api_client):
        response = api_client.get('/api/hauling/coal-logs/batches/', {
            'start_date': '2024-06-10', 'end_date': '2024-06-01',
        })

        assert response.status_code == 400

    def test_mtd(self, api_client, coal_truck):
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 3), net_weight=Decimal('25'))
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 15), net_weight=Decimal('30'))

        response = api_client.get('/api/hauling/coal-logs/mtd/', {'anchor': '2024-06-15'})

        assert response.status_code == 200
        assert response.data['window1']['label'] == '01-06-2024 to 14-06-2024'
        assert response.data['window2']['net_weight'] == Decimal('30.000')
        assert response.data['period_total']['physical_trips'] == 2


    def test_batch_adjust(self, api_client, coal_truck):
        for _ in range(5):
            CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 10), net_weight=Decimal('25'))

        response = api_client.post('/api/hauling/coal-logs/batch-adjust/', {
            'date': '2024-06-10',
            'truck_id': str(coal_truck.id),
            'field': 'trip',
            'value': '2',
            'remarks': 'Night shift trips',
            'include_extra_in_roll': True,
        }, format='json')

        assert response.status_code == 200
        assert response.data['roll_amount'] == Decimal('300')
        assert set(CoalLog.objects.values_list('trip_adjustment', flat=True)) == {2}

    def test_batch_adjust_requires_remarks(self, api_client, coal_truck):
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 10), net_weight=Decimal('25'))

        response = api_client.post('/api/hauling/coal-logs/batch-adjust/', {
            'date': '2024-06-10', 'truck_id': str(coal_truck.id), 'field': 'air', 'value': '3', 'remarks': '',
        }, format='json')

        assert response.status_code == 400
        assert 'remarks' in response.data

    def test_batch_adjust_unknown_batch(self, api_client, coal_truck):
        response = api_client.post('/api/hauling/coal-logs/batch-adjust/', {
            'date': '2024-06-10', 'truck_id': str(coal_truck.id), 'field': 'air', 'value': '3', 'remarks': 'Air',
        }, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Batch edit rejected'

    def test_batch_edit_moves_batch(self, api_client, coal_truck, driver):
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 10), net_weight=Decimal('25'))

        response = api_client.post('/api/hauling/coal-logs/batch-edit/', {
            'date': '2024-06-10',
            'truck_id': str(coal_truck.id),
            'new_date': '2024-06-11',
            'driver': str(driver.id),
            'destination_site': 'Jharsuguda Siding',
        }, format='json')

        assert response.status_code == 200
        log = CoalLog.objects.get()
        assert log.date == date(2024, 6, 11)
        assert log.driver_id == driver.id
        assert log.destination_site == 'Jharsuguda Siding'

    def test_batch_add(self, api_client, coal_truck):
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 10), net_weight=Decimal('25'))

        response = api_client.post('/api/hauling/coal-logs/batch-add/', {
            'date': '2024-06-10', 'truck_id': str(coal_truck.id), 'count': 3,
        }, format='json')

        assert response.status_code == 200
        assert response.data['count'] == 4
        assert CoalLog.objects.count() == 4


@pytest.mark.django_db
class TestMiningLogAPI:

    def test_create_derives_shortage(self, api_client, mining_truck):
        response = api_client.post('/api/hauling/mining-logs/', {
            'truck': str(mining_truck.id),
            'date': '2024-06-10',
            'material': 'Iron Ore',
            'loading_gross': '40',
            'loading_tare': '10',
            'unloading_gross': '39.75',
            'unloading_tare': '10',
        }, format='json')

        assert response.status_code == 201
        log = MiningLog.objects.get()
        assert log.shortage == Decimal('-0.250')
        assert log.net == Decimal('29.750')

    def test_report(self, api_client, mining_truck):
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 1), net=Decimal('30'), material='Iron Ore')
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 2), net=Decimal('20'), material='Dolomite')

        response = api_client.get('/api/hauling/mining-logs/report/', {'material': 'iron ore'})

        assert response.status_code == 200
        assert len(response.data['logs']) == 1
        assert response.data['logs'][0]['plate_number'] == 'OD15MN9876'
        assert response.data['stats']['trips'] == 1
        assert set(response.data['summaries']) == {'material', 'vehicle', 'customer', 'agent'}

    def test_report_rejects_unknown_log_type(self, api_client):
        response = api_client.get('/api/hauling/mining-logs/report/', {'log_type': 'RENTAL'})

        assert response.status_code == 400
        assert 'log_type' in response.data

    def test_mtd_uses_start_date_as_override(self, api_client, mining_truck):
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 5), net=Decimal('30'))
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 12), net=Decimal('28'))

        response = api_client.get('/api/hauling/mining-logs/mtd/', {
            'anchor': '2024-06-15', 'start_date': '2024-06-10',
        })

        assert response.status_code == 200
        assert response.data['window1']['label'] == '10-06-2024 to 14-06-2024'
        assert response.data['window1']['trips'] == 1

    def test_batches(self, api_client, mining_truck):
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 10), net=Decimal('25'), material='Iron Ore')
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 10), net=Decimal('27'), material='Iron Ore')

        response = api_client.get('/api/hauling/mining-logs/batches/', {'material': 'Iron Ore'})

        assert response.status_code == 200
        assert response.data['count'] == 1
        assert response.data['batches'][0]['entries'] == 2
        assert response.data['totals']['net_weight'] == Decimal('52.000')

    def test_batch_adjust_stock(self, api_client, mining_truck):
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 10), net=Decimal('25'))

        response = api_client.post('/api/hauling/mining-logs/batch-adjust/', {
            'date': '2024-06-10',
            'truck_id': str(mining_truck.id),
            'log_type': 'DISPATCH',
            'field': 'stock',
            'value': '18.5',
            'remarks': 'Left in tank',
        }, format='json')

        assert response.status_code == 200
        log = MiningLog.objects.get()
        assert log.diesel_adj_type == MiningLog.DieselAdjTypeChoices.STOCK
        assert log.diesel_adjustment == Decimal('18.5')
        assert log.roll_amount == Decimal('100')
