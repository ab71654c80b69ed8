"""
Hauling models package.

Contains coal trip logs and mining dispatch/purchase logs.
"""

from .coal_log import CoalLog
from .mining_log import MiningLog

__all__ = ['CoalLog', 'MiningLog']
