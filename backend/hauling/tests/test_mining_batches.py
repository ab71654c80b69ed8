"""
Tests for mining daily batch aggregation.
"""

from datetime import date
from decimal import Decimal

import pytest

from fuel.models import FuelLog
from hauling.models import MiningLog
from hauling.services import MiningBatchAggregatorService


def mining_trip(truck, day, net='25', **extra):
    return MiningLog.objects.create(truck=truck, date=date(2024, 6, day), net=Decimal(net), **extra)


@pytest.fixture
def service():
    return MiningBatchAggregatorService()


class TestBatchFinancials:

    def test_roll_paid_on_every_trip(self, service):
        assert service.batch_financials(3) == {
            'staff_welfare': Decimal('300'),
            'roll_amount': Decimal('300'),
            'total_payable': Decimal('600'),
        }

    def test_trip_adjustment_counts_toward_roll(self, service):
        assert service.batch_financials(1, trip_adjustment=2)['roll_amount'] == Decimal('300')

    def test_nothing_paid_when_adjusted_to_zero(self, service):
        assert service.batch_financials(2, trip_adjustment=-2)['total_payable'] == Decimal('0')


@pytest.mark.django_db
class TestAggregateMiningBatches:

    def test_grouped_by_day_truck_and_type(self, service, mining_truck, driver):
        for _ in range(3):
            mining_trip(mining_truck, 10, driver=driver)
        mining_trip(mining_truck, 10, net='20', log_type=MiningLog.LogTypeChoices.PURCHASE)
        mining_trip(mining_truck, 11)

        batches = service.aggregate_mining_batches()

        assert [(batch['date'].day, batch['log_type'], batch['entries']) for batch in batches] == [
            (11, 'DISPATCH', 1), (10, 'DISPATCH', 3), (10, 'PURCHASE', 1),
        ]
        dispatch = batches[1]
        assert dispatch['key'] == f"2024-06-10_{mining_truck.id}_DISPATCH"
        assert dispatch['net_weight'] == Decimal('75.000')
        assert dispatch['driver_name'] == 'Ramesh Sahu'
        assert dispatch['plate_number'] == 'OD15MN9876'

    def test_diesel_from_attributed_fuel_log(self, service, mining_truck):
        for _ in range(3):
            mining_trip(mining_truck, 10)
        FuelLog.objects.create(
            truck=mining_truck, date=date(2024, 6, 9), attribution_date=date(2024, 6, 10),
            entry_type=FuelLog.EntryTypeChoices.FULL_TANK, odometer=50300,
            fuel_liters=Decimal('120'), diesel_price=Decimal('92'),
        )

        batch = service.aggregate_mining_batches()[0]

        assert batch['diesel'] == Decimal('120.000')
        assert batch['actual_fuel_date'] == date(2024, 6, 9)
        assert batch['rate'] == Decimal('92')
        assert batch['filling_types'] == 'full diesel'
        assert batch['net_diesel'] == Decimal('120.000')
        assert batch['diesel_per_trip'] == Decimal('40.000')

    def test_no_fuel_log_uses_default_rate(self, service, mining_truck):
        mining_trip(mining_truck, 10)

        batch = service.aggregate_mining_batches()[0]

        assert batch['diesel'] == Decimal('0.000')
        assert batch['rate'] == Decimal('90.55')
        assert batch['filling_types'] == 'per trip'

    def test_stock_carried_from_previous_working_day(self, service, mining_truck, coal_truck):
        mining_trip(
            mining_truck, 8, diesel_adjustment=Decimal('15'),
            diesel_adj_type=MiningLog.DieselAdjTypeChoices.STOCK, diesel_remarks='Left in tank',
        )
        mining_trip(coal_truck, 9)
        mining_trip(mining_truck, 10)
        FuelLog.objects.create(truck=mining_truck, date=date(2024, 6, 10), odometer=50100, fuel_liters=Decimal('100'))

        current = next(
            batch for batch in service.aggregate_mining_batches()
            if batch['truck_id'] == str(mining_truck.id) and batch['date'].day == 10
        )

        assert current['advance_from_yesterday'] == Decimal('15')
        assert current['net_diesel'] == Decimal('115.000')

    def test_other_adjustments_are_not_carried(self, service, mining_truck):
        mining_trip(mining_truck, 9, diesel_adjustment=Decimal('15'))
        mining_trip(mining_truck, 10)

        assert service.aggregate_mining_batches()[0]['advance_from_yesterday'] == Decimal('0')

    def test_same_day_adjustments_reduce_net_diesel(self, service, mining_truck):
        mining_trip(mining_truck, 10)
        mining_trip(
            mining_truck, 10, diesel_adjustment=Decimal('10'),
            diesel_adj_type=MiningLog.DieselAdjTypeChoices.STOCK,
            air_adjustment=Decimal('5'), air_remarks='Air lock',
        )
        FuelLog.objects.create(truck=mining_truck, date=date(2024, 6, 10), odometer=50100, fuel_liters=Decimal('120'))

        batch = service.aggregate_mining_batches()[0]

        assert batch['net_diesel'] == Decimal('105.000')
        assert batch['air_remarks'] == 'Air lock'
        assert batch['diesel_adj_type'] == 'STOCK'

    def test_payable_sums_stored_payouts(self, service, mining_truck):
        mining_trip(mining_truck, 10, staff_welfare=Decimal('300'), roll_amount=Decimal('300'), trip_adjustment=1)
        mining_trip(mining_truck, 10, trip_adjustment=1)

        batch = service.aggregate_mining_batches()[0]

        assert batch['total_payable'] == Decimal('600')
        assert batch['net_trips'] == 3


@pytest.mark.django_db
class TestMiningBatchReport:

    @pytest.fixture
    def batches(self, mining_truck, coal_truck):
        mining_trip(mining_truck, 10, material='Iron Ore', chalan_no='CH-101', agent_id='agent-1')
        mining_trip(mining_truck, 10, material='Iron Ore', chalan_no='CH-102')
        mining_trip(coal_truck, 11, material='Manganese', supplier='Barbil Mines',
                    log_type=MiningLog.LogTypeChoices.PURCHASE)

    def test_newest_first_with_totals(self, service, batches):
        report = service.batch_report()

        assert report['count'] == 2
        assert [batch['date'].day for batch in report['batches']] == [11, 10]
        assert report['totals']['trips'] == 3
        assert report['totals']['net_weight'] == Decimal('75.000')

    def test_search_matches_chalan_and_plate(self, service, batches):
        assert service.batch_report({'search': 'ch-102'})['batches'][0]['entries'] == 1
        assert service.batch_report({'search': 'od15'})['count'] == 1

    def test_material_and_supplier_filters(self, service, batches):
        assert service.batch_report({'material': 'Manganese'})['count'] == 1
        assert service.batch_report({'supplier': 'Barbil Mines'})['batches'][0]['log_type'] == 'PURCHASE'

    def test_agent_filter_keeps_whole_batch(self, service, batches):
        report = service.batch_report({'agent_id': 'agent-1'})

        assert report['count'] == 1
        assert report['batches'][0]['entries'] == 2
