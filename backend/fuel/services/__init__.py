"""
Fuel Services Package.

Services:
- FuelLogRecorderService: Fuel log writes with odometer, coal and party side effects
- EfficiencyCalculatorService: True km/L across partial fills
- StationLedgerService: Per-station purchase/payment/stock ledger
- FuelAnalyticsService: Per-truck performance, liability and leaderboards
"""

from .fuel_log_recorder import FuelLogRecorderService, FuelLogError
from .efficiency import EfficiencyCalculatorService
from .station_ledger import StationLedgerService
from .fuel_analytics import FuelAnalyticsService, FuelAnalyticsError

__all__ = [
    'FuelLogRecorderService',
    'FuelLogError',
    'EfficiencyCalculatorService',
    'StationLedgerService',
    'FuelAnalyticsService',
    'FuelAnalyticsError',
]
