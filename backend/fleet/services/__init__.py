"""
Fleet Services Package.

Services:
- ComplianceCheckerService: Document expiry classification and alerts
- TireLifecycleService: Tyre mount/unmount/scrap and mileage
- BenchmarkService: Fuel benchmark settings
"""

from .compliance_checker import ComplianceCheckerService
from .tire_lifecycle import TireLifecycleService, TireLifecycleError
from .benchmarks import BenchmarkService, BenchmarkError

__all__ = [
    'ComplianceCheckerService',
    'TireLifecycleService',
    'TireLifecycleError',
    'BenchmarkService',
    'BenchmarkError',
]
