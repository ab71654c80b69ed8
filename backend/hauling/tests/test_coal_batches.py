"""
Tests for coal daily batch aggregation.
"""

from datetime import date
from decimal import Decimal

import pytest

from fuel.models import FuelLog
from hauling.models import CoalLog
from hauling.services import CoalBatchAggregatorService


def coal_trip(truck, day, net='25', **extra):
    return CoalLog.objects.create(truck=truck, date=date(2024, 6, day), net_weight=Decimal(net), **extra)


@pytest.fixture
def service():
    return CoalBatchAggregatorService()


class TestBatchFinancials:

    def test_welfare_paid_once_per_batch(self, service):
        result = service.batch_financials(3)
        assert result == {
            'staff_welfare': Decimal('300'),
            'roll_amount': Decimal('0'),
            'total_payable': Decimal('300'),
        }

    def test_roll_for_trips_beyond_four(self, service):
        assert service.batch_financials(6)['roll_amount'] == Decimal('200')

    def test_adjusted_trips_count_only_when_included(self, service):
        assert service.batch_financials(5, trip_adjustment=2)['roll_amount'] == Decimal('100')
        assert service.batch_financials(5, trip_adjustment=2, include_extra_in_roll=True)['roll_amount'] == Decimal('300')

    def test_empty_batch_pays_nothing(self, service):
        assert service.batch_financials(0)['total_payable'] == Decimal('0')


@pytest.mark.django_db
class TestAggregateCoalBatches:

    def test_zero_tare_still_derives_net(self, coal_truck):
        log = CoalLog.objects.create(
            truck=coal_truck, date=date(2024, 6, 1), gross_weight=Decimal('30'), tare_weight=Decimal('0'),
        )

        assert log.net_weight == Decimal('30')

    def test_trips_grouped_per_truck_and_day(self, service, coal_truck, mining_truck):
        for _ in range(3):
            coal_trip(coal_truck, 10)
        coal_trip(mining_truck, 10, net='30')
        coal_trip(coal_truck, 11)

        batches = service.aggregate_coal_batches()

        assert [(batch['date'].day, batch['entries']) for batch in batches] == [(10, 3), (10, 1), (11, 1)]
        first = next(batch for batch in batches if batch['truck_id'] == str(coal_truck.id) and batch['date'].day == 10)
        assert first['key'] == f"2024-06-10_{coal_truck.id}"
        assert first['net_weight'] == Decimal('75.000')
        assert first['net_trips'] == 3
        assert first['staff_welfare'] == Decimal('300')
        assert len(first['log_ids']) == 3

    def test_fuel_matched_on_attribution_date(self, service, coal_truck, driver):
        coal_trip(coal_truck, 10)
        FuelLog.objects.create(
            truck=coal_truck, driver=driver, date=date(2024, 6, 9), attribution_date=date(2024, 6, 10),
            entry_type=FuelLog.EntryTypeChoices.FULL_TANK, odometer=10300,
            fuel_liters=Decimal('150'), diesel_price=Decimal('92'),
        )

        batch = service.aggregate_coal_batches()[0]

        assert batch['diesel'] == Decimal('150.000')
        assert batch['actual_fuel_date'] == date(2024, 6, 9)
        assert batch['rate'] == Decimal('92')
        assert batch['filling_types'] == 'full diesel'
        assert batch['driver_name'] == 'Ramesh Sahu'

    def test_mixed_filling_types(self, service, coal_truck):
        coal_trip(coal_truck, 10)
        FuelLog.objects.create(
            truck=coal_truck, date=date(2024, 6, 10), odometer=10100, fuel_liters=Decimal('40'),
        )
        FuelLog.objects.create(
            truck=coal_truck, date=date(2024, 6, 10), odometer=10200, fuel_liters=Decimal('60'),
            entry_type=FuelLog.EntryTypeChoices.FULL_TANK,
        )

        batch = service.aggregate_coal_batches()[0]

        assert batch['diesel'] == Decimal('100.000')
        assert batch['filling_types'] == 'per trip / full diesel'

    def test_rate_falls_back_to_default(self, service, coal_truck):
        coal_trip(coal_truck, 10)

        batch = service.aggregate_coal_batches()[0]

        assert batch['rate'] == Decimal('90.55')
        assert batch['filling_types'] == ''
        assert batch['driver_name'] is None

    def test_stored_rate_wins(self, service, coal_truck):
        coal_trip(coal_truck, 10, diesel_rate=Decimal('89.10'))

        assert service.aggregate_coal_batches()[0]['rate'] == Decimal('89.10')

    def test_advance_carried_from_previous_day(self, service, coal_truck):
        coal_trip(coal_truck, 9, diesel_adjustment=Decimal('20'), diesel_adj_type=CoalLog.DieselAdjTypeChoices.STOCK)
        coal_trip(coal_truck, 10, air_adjustment=Decimal('5'))
        FuelLog.objects.create(
            truck=coal_truck, date=date(2024, 6, 10), odometer=10100, fuel_liters=Decimal('150'),
        )

        previous, current = service.aggregate_coal_batches()

        assert previous['net_diesel'] == Decimal('-20.000')
        assert current['advance_from_yesterday'] == Decimal('20')
        assert current['net_diesel'] == Decimal('165.000')

    def test_no_advance_across_gap(self, service, coal_truck):
        coal_trip(coal_truck, 8, diesel_adjustment=Decimal('20'))
        coal_trip(coal_truck, 10)

        assert service.aggregate_coal_batches()[1]['advance_from_yesterday'] == Decimal('0')

    def test_trip_adjustment_and_roll(self, service, coal_truck):
        for _ in range(4):
            coal_trip(coal_truck, 10)
        coal_trip(coal_truck, 10, trip_adjustment=2, trip_remarks='Weighbridge down')

        default_batch = service.aggregate_coal_batches()[0]
        included_batch = service.aggregate_coal_batches(include_extra_in_roll=True)[0]

        assert default_batch['net_trips'] == 7
        assert default_batch['trip_remarks'] == 'Weighbridge down'
        assert default_batch['roll_amount'] == Decimal('100')
        assert included_batch['roll_amount'] == Decimal('300')
        assert included_batch['total_payable'] == Decimal('600')


@pytest.mark.django_db
class TestBatchReport:

    @pytest.fixture
    def batches(self, coal_truck, mining_truck):
        coal_trip(coal_truck, 9, agent_id='agent-1')
        coal_trip(coal_truck, 10, agent_id='agent-2')
        coal_trip(mining_truck, 10, agent_id='agent-1')
        FuelLog.objects.create(
            truck=coal_truck, date=date(2024, 6, 10), odometer=10100,
            fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
        )

    def test_filters_sort_newest_first(self, service, coal_truck, batches):
        report = service.batch_report({'search': 'od02'})

        assert report['count'] == 2
        assert [batch['date'].day for batch in report['batches']] == [10, 9]

    def test_filter_by_agent_and_dates(self, service, batches):
        report = service.batch_report({'agent_id': 'agent-1', 'start_date': date(2024, 6, 10)})

        assert report['count'] == 1
        assert report['batches'][0]['plate_number'] == 'OD15MN9876'

    def test_totals(self, service, batches):
        totals = service.batch_report()['totals']

        assert totals['tonnage'] == Decimal('75.000')
        assert totals['diesel'] == Decimal('100.000')
        assert totals['trips'] == 3
        assert totals['amount'] == Decimal('9000.00')


@pytest.mark.django_db
def test_net_weight_derived_from_gross_and_tare(coal_truck):
    log = CoalLog.objects.create(
        truck=coal_truck, date=date(2024, 6, 1),
        gross_weight=Decimal('40.5'), tare_weight=Decimal('15.2'),
    )

    assert log.net_weight == Decimal('25.3')
