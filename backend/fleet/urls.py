"""
URL configuration for fleet API endpoints.

Provides URL routing for trucks, drivers, tyres and fuel benchmarks.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import TruckViewSet, DriverViewSet, TireViewSet, BenchmarkViewSet

router = DefaultRouter()
router.register(r'trucks', TruckViewSet, basename='truck')
router.register(r'drivers', DriverViewSet, basename='driver')
router.register(r'tires', TireViewSet, basename='tire')

urlpatterns = [
    path('benchmarks/',
         BenchmarkViewSet.as_view({
             'get': 'retrieve_benchmarks',
             'put': 'update_benchmarks',
             'patch': 'update_benchmarks',
         }),
         name='fleet-benchmarks'),

    path('', include(router.urls)),
]

# API Documentation - Available Endpoints:
"""
GET Endpoints:
- /api/fleet/trucks/?fleet_type=&sub_type=&status=&search= - List trucks
- /api/fleet/trucks/<uuid>/compliance/ - Document compliance for one truck
- /api/fleet/trucks/expiry-alerts/ - CRITICAL/WARNING document expiries
- /api/fleet/drivers/ - List drivers
- /api/fleet/tires/?status=&truck_id=&search= - List tyres
- /api/fleet/benchmarks/ - Current fuel benchmarks

POST Endpoints:
- /api/fleet/trucks/<uuid>/change-status/ - Change status, append history
- /api/fleet/tires/<uuid>/mount/ - Mount tyre on truck
- /api/fleet/tires/<uuid>/unmount/ - Remove tyre from truck
- /api/fleet/tires/<uuid>/scrap/ - Scrap tyre

PUT/PATCH Endpoints:
- /api/fleet/benchmarks/ - Update fuel benchmarks
"""
