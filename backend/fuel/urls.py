"""
URL configuration for fuel API endpoints.

Provides URL routing for stations, fuel logs, misc entries, payments,
the daily odometer registry and fuel analytics.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    FuelStationViewSet,
    FuelLogViewSet,
    MiscFuelEntryViewSet,
    StationPaymentViewSet,
    DailyOdoEntryViewSet,
    FuelAnalyticsViewSet,
)

router = DefaultRouter()
router.register(r'stations', FuelStationViewSet, basename='fuel-station')
router.register(r'fuel-logs', FuelLogViewSet, basename='fuel-log')
router.register(r'misc-entries', MiscFuelEntryViewSet, basename='misc-entry')
router.register(r'payments', StationPaymentViewSet, basename='station-payment')
router.register(r'daily-odo', DailyOdoEntryViewSet, basename='daily-odo')
router.register(r'analytics', FuelAnalyticsViewSet, basename='fuel-analytics')

urlpatterns = [
    path('', include(router.urls)),
]

# API Documentation - Available Endpoints:
"""
GET Endpoints:
- /api/fuel/stations/?is_internal= - List stations and tankers
- /api/fuel/stations/<uuid>/ledger/?search=&type=&start_date=&end_date= - Station ledger
- /api/fuel/fuel-logs/?truck_id=&station_id=&status=&start_date=&end_date=&agent_id=
- /api/fuel/fuel-logs/<uuid>/efficiency/ - True km/L of a full tank fill
- /api/fuel/misc-entries/?station_id=&usage_type=
- /api/fuel/payments/?station_id=
- /api/fuel/daily-odo/?truck_id=&date=
- /api/fuel/analytics/?start_date=&end_date=&station_id=&search=&fleet_type=&metric=

POST/PUT/PATCH/DELETE Endpoints:
- /api/fuel/fuel-logs/ - Record fuel log with odometer, coal and party side effects
- /api/fuel/stations/, misc-entries/, payments/, daily-odo/ - CRUD
"""
