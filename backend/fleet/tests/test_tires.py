"""
Tests for the tyre lifecycle: mount, unmount, scrap and mileage.
"""

from datetime import date

import pytest

from fleet.models import Tire
from fleet.services import TireLifecycleService, TireLifecycleError


@pytest.fixture
def service():
    return TireLifecycleService()


@pytest.fixture
def tire(db):
    return Tire.objects.create(serial_number='MRF-0001', brand='MRF')


@pytest.mark.django_db
class TestTireLifecycle:

    def test_mount_records_history(self, service, tire, coal_truck):
        service.mount(tire, coal_truck, 'FL', odometer=10000, on_date=date(2024, 1, 1))
        tire.refresh_from_db()

        assert tire.status == Tire.StatusChoices.MOUNTED
        assert tire.truck_id == coal_truck.id
        assert tire.mounted_at_odometer == 10000
        assert tire.history[-1]['event'] == 'Mounted'
        assert tire.history[-1]['description'] == 'Mounted on OD02AB1234 at FL. ODO: 10000'

    def test_cannot_mount_twice(self, service, tire, coal_truck, mining_truck):
        service.mount(tire, coal_truck, 'FL')
        with pytest.raises(TireLifecycleError):
            service.mount(tire, mining_truck, 'RR')

    def test_unmount_below_mount_odometer_rejected(self, service, tire, coal_truck):
        service.mount(tire, coal_truck, 'FL', odometer=10000)
        with pytest.raises(TireLifecycleError):
            service.unmount(tire, odometer=9000)

    def test_total_mileage_sums_runs_and_ongoing(self, service, tire, coal_truck, mining_truck):
        service.mount(tire, coal_truck, 'FL', odometer=10000)
        service.unmount(tire, odometer=15000)
        service.mount(tire, mining_truck, 'RR', odometer=50000)
        mining_truck.current_odometer = 52000
        mining_truck.save()
        tire.refresh_from_db()

        details = service.mileage_details(tire)

        assert details['total_mileage'] == 5000 + 2000
        runs = [entry['run_distance'] for entry in details['history']]
        assert 5000 in runs
        assert 2000 in runs

    def test_scrap_unmounts_and_freezes_mileage(self, service, tire, coal_truck):
        service.mount(tire, coal_truck, 'FL', odometer=10000)
        coal_truck.current_odometer = 13000
        coal_truck.save()
        tire.refresh_from_db()

        service.scrap(tire, 'Sidewall cut')
        tire.refresh_from_db()

        assert tire.status == Tire.StatusChoices.SCRAPPED
        assert tire.truck is None
        assert tire.mileage == 3000
        assert tire.history[-1]['description'] == 'Scrapped: Sidewall cut'

    def test_scrapped_tyre_cannot_be_mounted(self, service, tire, coal_truck):
        service.scrap(tire, 'Burst')
        with pytest.raises(TireLifecycleError):
            service.mount(tire, coal_truck, 'FL')
