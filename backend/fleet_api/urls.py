"""
URL configuration for fleet_api project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def api_root(request):
    """API root endpoint with available endpoints."""
    return JsonResponse({
        'message': 'Fleet Back-Office API',
        'version': '1.0',
        'endpoints': {
            'fleet': '/api/fleet/',
            'fuel': '/api/fuel/',
            'diesel_ledger': '/api/diesel/',
            'hauling': '/api/hauling/',
            'health': '/api/health/',
            'admin': '/admin/',
        },
        'documentation': {
            'diesel_ledger': {
                'description': 'Diesel party accounts, settlements and tanker bridge entries',
                'endpoints': {
                    'parties': 'GET /api/diesel/parties/ - List diesel parties',
                    'ledger': 'GET /api/diesel/parties/<uuid>/ledger/ - Party ledger with totals',
                    'summaries': 'GET /api/diesel/parties/summaries/ - Net balance per party',
                    'transactions': 'POST /api/diesel/transactions/ - Record a party transaction',
                }
            },
            'hauling': {
                'description': 'Coal and mining trip logs with daily and MTD analytics',
                'endpoints': {
                    'coal_batches': 'GET /api/hauling/coal-logs/batches/ - Daily truck batches',
                    'coal_mtd': 'GET /api/hauling/coal-logs/mtd/?anchor=<date> - Coal MTD',
                    'mining_report': 'GET /api/hauling/mining-logs/report/ - Mining report',
                    'mining_mtd': 'GET /api/hauling/mining-logs/mtd/?anchor=<date> - Mining MTD',
                }
            },
            'fuel': {
                'description': 'Fuel logs, station ledgers and fuel efficiency analytics',
                'endpoints': {
                    'fuel_logs': 'GET /api/fuel/fuel-logs/ - List fuel logs',
                    'station_ledger': 'GET /api/fuel/stations/<uuid>/ledger/ - Station ledger',
                    'analytics': 'GET /api/fuel/analytics/ - Fleet fuel analytics',
                }
            }
        }
    })


def health_check(request):
    """Simple health check endpoint for monitoring."""
    return JsonResponse(
        {"status": "healthy", "message": "Fleet Back-Office API is running"}
    )


urlpatterns = [
    # Admin interface
    path("admin/", admin.site.urls),

    # API root
    path("api/", api_root, name='api-root'),
    path("api/health/", health_check, name='health-check'),

    # Fleet registry API
    path("api/fleet/", include("fleet.urls")),

    # Fuel API
    path("api/fuel/", include("fuel.urls")),

    # Diesel party ledger API
    path("api/diesel/", include("diesel_ledger.urls")),

    # Coal and mining hauling API
    path("api/hauling/", include("hauling.urls")),
]
