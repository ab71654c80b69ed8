"""
Fuel Benchmarks Service.

Reads and writes the fleet fuel benchmarks stored in SystemSetting under the
``benchmarks`` key, falling back to company defaults.

Single Responsibility: Benchmark persistence only.
"""

import logging
from typing import Dict
from django.db import transaction

from ..models import SystemSetting

logger = logging.getLogger(__name__)


class BenchmarkService:
    """Service for the [low, high] fuel benchmark ranges."""

    DEFAULT_BENCHMARKS = {
        'coal_liters_per_trip': [40, 60],
        'mining_km_per_liter': [3.0, 3.5],
        'mining_liters_per_trip': [30, 45],
        'global_liters_per_ton': [0.5, 1.5],
    }

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_benchmarks(self) -> Dict:
        """
        Get current benchmarks, merged over defaults.

        Returns:
            Dict of benchmark name to [low, high]
        """
        benchmarks = {key: list(value) for key, value in self.DEFAULT_BENCHMARKS.items()}
        setting = SystemSetting.objects.filter(key=SystemSetting.BENCHMARKS_KEY).first()
        if setting and isinstance(setting.value, dict):
            for key, value in setting.value.items():
                if key in benchmarks:
                    benchmarks[key] = list(value)
        return benchmarks

    def update_benchmarks(self, data: Dict) -> Dict:
        """
        Update some or all benchmark ranges.

        Args:
            data: Validated mapping of benchmark name to [low, high]

        Returns:
            The full stored benchmark set
        """
        try:
            with transaction.atomic():
                benchmarks = self.get_benchmarks()
                for key, value in data.items():
                    if key not in self.DEFAULT_BENCHMARKS:
                        raise BenchmarkError(f"Unknown benchmark: {key}")
                    benchmarks[key] = [float(value[0]), float(value[1])]

                SystemSetting.objects.update_or_create(
                    key=SystemSetting.BENCHMARKS_KEY,
                    defaults={'value': benchmarks}
                )

            self.logger.info(f"Updated fuel benchmarks: {sorted(data.keys())}")
            return benchmarks

        except BenchmarkError:
            raise
        except Exception as e:
            self.logger.error(f"Benchmark update failed: {str(e)}")
            raise BenchmarkError(f"Failed to update benchmarks: {str(e)}")


class BenchmarkError(Exception):
    """Exception raised when benchmark settings cannot be stored."""

    pass
