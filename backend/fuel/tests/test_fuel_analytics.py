"""
Tests for per-truck fuel analytics, station liability and leaderboards.
"""

from datetime import date
from decimal import Decimal

import pytest

from fuel.models import FuelLog, MiscFuelEntry
from fuel.services import FuelAnalyticsService, FuelAnalyticsError
from hauling.models import CoalLog, MiningLog


@pytest.fixture
def fleet_activity(coal_truck, mining_truck, station, tanker):
    FuelLog.objects.create(
        truck=coal_truck, station=station, date=date(2024, 6, 1),
        previous_odometer=10000, odometer=10200,
        fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
    )
    FuelLog.objects.create(
        truck=coal_truck, station=station, date=date(2024, 6, 2),
        previous_odometer=10200, odometer=10400,
        fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
    )
    for _ in range(4):
        CoalLog.objects.create(truck=coal_truck, date=date(2024, 6, 1), net_weight=Decimal('25'))

    FuelLog.objects.create(
        truck=mining_truck, station=station, date=date(2024, 6, 1),
        previous_odometer=50000, odometer=50350,
        fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
    )
    for _ in range(3):
        MiningLog.objects.create(truck=mining_truck, date=date(2024, 6, 1), net=Decimal('30'))

    MiscFuelEntry.objects.create(
        station=station, date=date(2024, 6, 2), vehicle_description='Generator',
        fuel_liters=Decimal('10'), diesel_price=Decimal('90'),
    )
    MiscFuelEntry.objects.create(
        station=tanker, date=date(2024, 6, 2), vehicle_description='Loader',
        fuel_liters=Decimal('40'), diesel_price=Decimal('90'),
    )


@pytest.mark.django_db
class TestFuelAnalytics:

    def test_truck_rows(self, fleet_activity):
        result = FuelAnalyticsService().fuel_analytics()
        rows = {row['plate_number']: row for row in result['trucks']}

        coal = rows['OD02AB1234']
        assert coal['total_liters'] == Decimal('200.000')
        assert coal['total_cost'] == Decimal('18000.00')
        assert coal['total_km'] == 400
        assert coal['avg_kml'] == Decimal('2.00')
        assert coal['trips'] == 4
        assert coal['l_per_trip'] == Decimal('50.00')
        assert coal['l_per_ton'] == Decimal('2.00')
        assert coal['kml_status'] == 'N/A'
        assert coal['trip_status'] == 'GOOD'
        assert coal['ton_status'] == 'POOR'

        mining = rows['OD15MN9876']
        assert mining['avg_kml'] == Decimal('3.50')
        assert mining['trips'] == 3
        assert mining['l_per_trip'] == Decimal('33.33')
        assert mining['kml_status'] == 'GOOD'
        assert mining['trip_status'] == 'GOOD'
        assert mining['ton_status'] == 'GOOD'

    def test_aggregate(self, fleet_activity):
        aggregate = FuelAnalyticsService().fuel_analytics()['aggregate']

        assert aggregate['total_liters'] == Decimal('300.000')
        assert aggregate['total_cost'] == Decimal('27000.00')
        assert aggregate['avg_kml'] == Decimal('2.75')

    def test_station_liability_excludes_tankers(self, fleet_activity):
        liability = FuelAnalyticsService().fuel_analytics()['station_liability']

        assert len(liability) == 1
        assert liability[0]['station_name'] == 'Highway Fuels'
        assert liability[0]['liters'] == Decimal('310.000')
        assert liability[0]['cost'] == Decimal('27900.00')

    def test_leaderboard_by_liters_per_ton(self, fleet_activity):
        leaderboard = FuelAnalyticsService().fuel_analytics()['leaderboard']

        assert leaderboard['metric'] == 'L/TON'
        assert [row['plate_number'] for row in leaderboard['best']] == ['OD15MN9876']
        assert [row['plate_number'] for row in leaderboard['worst']] == ['OD02AB1234']

    def test_fleet_type_filter(self, fleet_activity):
        result = FuelAnalyticsService().fuel_analytics({'fleet_type': 'MINING'})
        assert [row['plate_number'] for row in result['trucks']] == ['OD15MN9876']

    def test_date_range_limits_trips_and_fills(self, fleet_activity):
        result = FuelAnalyticsService().fuel_analytics({'start_date': date(2024, 6, 2)})
        rows = {row['plate_number']: row for row in result['trucks']}

        assert list(rows) == ['OD02AB1234']
        assert rows['OD02AB1234']['trips'] == 0
        assert rows['OD02AB1234']['trip_status'] == 'N/A'

    def test_unknown_metric_rejected(self):
        with pytest.raises(FuelAnalyticsError):
            FuelAnalyticsService().leaderboard([], 'KM/TON')
