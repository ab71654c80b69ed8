"""
Tests for station and tanker ledgers.
"""

from datetime import date
from decimal import Decimal

import pytest

from fuel.models import FuelLog, MiscFuelEntry, StationPayment
from fuel.services import StationLedgerService


@pytest.fixture
def service():
    return StationLedgerService()


@pytest.fixture
def pump_activity(coal_truck, station, tanker):
    FuelLog.objects.create(
        truck=coal_truck, station=station, date=date(2024, 6, 1),
        odometer=10200, previous_odometer=10000,
        fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
    )
    MiscFuelEntry.objects.create(
        station=station, date=date(2024, 6, 2), vehicle_description='Office Bolero',
        usage_type=MiscFuelEntry.UsageTypeChoices.OFFICE,
        fuel_liters=Decimal('10'), diesel_price=Decimal('90'),
    )
    MiscFuelEntry.objects.create(
        station=station, destination_station=tanker, date=date(2024, 6, 3),
        usage_type=MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER,
        fuel_liters=Decimal('500'), diesel_price=Decimal('90'), invoice_no='INV-77',
    )
    StationPayment.objects.create(
        station=station, date=date(2024, 6, 4), amount=Decimal('20000'), reference_no='UTR123',
    )


@pytest.mark.django_db
class TestExternalStationLedger:

    def test_rows_newest_first(self, service, station, pump_activity):
        rows = service.build_ledger(station)

        assert [row['type'] for row in rows] == ['PAYMENT', 'PURCHASE', 'PURCHASE', 'PURCHASE']
        assert rows[0]['description'] == 'Online Transfer (UTR123)'
        assert rows[1]['description'] == 'Bulk Transfer to Site Tanker 1'
        assert rows[3]['description'] == 'OD02AB1234'

    def test_summary_balance(self, service, station, pump_activity):
        result = service.station_ledger(station)

        summary = result['summary']
        assert summary['total_purchased'] == Decimal('54900.00')
        assert summary['total_paid'] == Decimal('20000.00')
        assert summary['total_liters'] == Decimal('610.000')
        assert summary['balance'] == Decimal('34900.00')

    def test_filters_apply_before_summary(self, service, station, pump_activity):
        result = service.station_ledger(station, {'type': 'PURCHASE', 'end_date': date(2024, 6, 2)})

        assert len(result['entries']) == 2
        assert result['summary']['total_purchased'] == Decimal('9900.00')
        assert result['summary']['total_paid'] == Decimal('0.00')

    def test_search_matches_description(self, service, station, pump_activity):
        rows = service.filter_ledger(service.build_ledger(station), search='bolero')
        assert [row['description'] for row in rows] == ['Office Bolero']


@pytest.mark.django_db
class TestTankerLedger:

    def test_internal_balance_is_stock_in_minus_dispensed(self, service, tanker, station, pump_activity, mining_truck):
        FuelLog.objects.create(
            truck=mining_truck, station=tanker, date=date(2024, 6, 5),
            odometer=50300, previous_odometer=50000,
            fuel_liters=Decimal('120'), diesel_price=Decimal('90'),
        )

        result = service.station_ledger(tanker)

        assert result['summary'] == {
            'is_internal': True,
            'total_stock_in': Decimal('500.000'),
            'total_dispensed': Decimal('120.000'),
            'balance': Decimal('380.000'),
        }
        stock_in = [row for row in result['entries'] if row['type'] == 'STOCK_IN']
        assert stock_in[0]['description'] == 'Source: Highway Fuels | Inv: INV-77'

    def test_self_transfer_counts_only_as_stock_in(self, service, tanker):
        MiscFuelEntry.objects.create(
            station=tanker, destination_station=tanker, date=date(2024, 6, 1),
            usage_type=MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER,
            fuel_liters=Decimal('200'), diesel_price=Decimal('0'),
        )

        result = service.station_ledger(tanker)

        assert [row['type'] for row in result['entries']] == ['STOCK_IN']
        assert result['summary']['balance'] == Decimal('200.000')
