"""
URL configuration for hauling API endpoints.

Provides URL routing for coal and mining trip logs and their analytics.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CoalLogViewSet, MiningLogViewSet

router = DefaultRouter()
router.register(r'coal-logs', CoalLogViewSet, basename='coal-log')
router.register(r'mining-logs', MiningLogViewSet, basename='mining-log')

urlpatterns = [
    path('', include(router.urls)),
]

# API Documentation - Available Endpoints:
"""
GET Endpoints:
- /api/hauling/coal-logs/?truck_id=&start_date=&end_date=&agent_id= - List coal trips
- /api/hauling/coal-logs/batches/ - Coal daily batches with totals
- /api/hauling/coal-logs/mtd/?anchor=&truck_id=&search= - Coal MTD
- /api/hauling/mining-logs/?log_type=&truck_id=&agent_id= - List mining trips
- /api/hauling/mining-logs/batches/?search=&material=&supplier=&truck_id=&date=&log_type=&agent_id= - Mining daily batches with totals
- /api/hauling/mining-logs/report/ - Mining report with breakdowns
- /api/hauling/mining-logs/mtd/?anchor=&start_date= - Mining MTD

POST/PUT/PATCH/DELETE Endpoints:
- /api/hauling/coal-logs/ and /api/hauling/coal-logs/<uuid>/
- /api/hauling/mining-logs/ and /api/hauling/mining-logs/<uuid>/
- /api/hauling/coal-logs/batch-adjust/ and /api/hauling/mining-logs/batch-adjust/ - Trip, stock or air adjustment for a batch (remarks required)
- /api/hauling/coal-logs/batch-edit/ and /api/hauling/mining-logs/batch-edit/ - Move a batch, set its driver and sites
- /api/hauling/coal-logs/batch-add/ and /api/hauling/mining-logs/batch-add/ - Add blank trips to a batch
"""
