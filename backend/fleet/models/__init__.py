"""
Fleet models package.

This package contains the fleet registry models: trucks, drivers, tyres and
system settings.
"""

from .truck import Truck
from .driver import Driver
from .tire import Tire
from .system_setting import SystemSetting

__all__ = ['Truck', 'Driver', 'Tire', 'SystemSetting']
