"""
Fuel models package.

Contains fuel stations and tankers, fleet fuel logs, misc fuel entries,
station payments and the daily odometer registry.
"""

from .station import FuelStation
from .fuel_log import FuelLog
from .misc_entry import MiscFuelEntry
from .station_payment import StationPayment
from .daily_odo import DailyOdoEntry

__all__ = ['FuelStation', 'FuelLog', 'MiscFuelEntry', 'StationPayment', 'DailyOdoEntry']
