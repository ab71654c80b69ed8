"""
Shared pytest fixtures for the fleet back-office apps.
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from fleet.models import Truck, Driver
from fuel.models import FuelStation
from diesel_ledger.models import DieselParty


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def coal_truck(db):
    return Truck.objects.create(
        plate_number='od02ab1234',
        transporter_name='Mahanadi Carriers',
        wheel_config=Truck.WheelConfigChoices.TEN,
        current_odometer=10000,
        fleet_type=Truck.FleetTypeChoices.COAL,
    )


@pytest.fixture
def truck(coal_truck):
    return coal_truck


@pytest.fixture
def mining_truck(db):
    return Truck.objects.create(
        plate_number='OD15MN9876',
        wheel_config=Truck.WheelConfigChoices.TWELVE,
        current_odometer=50000,
        fleet_type=Truck.FleetTypeChoices.MINING,
        sub_type=Truck.SubTypeChoices.DISPATCH,
    )


@pytest.fixture
def driver(db):
    return Driver.objects.create(name='Ramesh Sahu', license_number='OD0220190001234')


@pytest.fixture
def station(db):
    return FuelStation.objects.create(name='Highway Fuels', location='Jharsuguda', is_internal=False)


@pytest.fixture
def tanker(db):
    return FuelStation.objects.create(name='Site Tanker 1', location='Belpahar', is_internal=True)


@pytest.fixture
def supplier_party(db):
    return DieselParty.objects.create(name='Shree Petroleum', party_type=DieselParty.PartyTypeChoices.SUPPLIER)


@pytest.fixture
def customer_party(db):
    return DieselParty.objects.create(name='Kalinga Minerals', party_type=DieselParty.PartyTypeChoices.CUSTOMER)


@pytest.fixture
def diesel_price():
    return Decimal('90.00')
