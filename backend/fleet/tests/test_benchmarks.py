"""
Tests for fuel benchmark settings.
"""

import pytest

from fleet.models import SystemSetting
from fleet.services import BenchmarkService, BenchmarkError


@pytest.mark.django_db
class TestBenchmarkService:

    def test_defaults_when_unset(self):
        benchmarks = BenchmarkService().get_benchmarks()
        assert benchmarks['coal_liters_per_trip'] == [40, 60]
        assert benchmarks['global_liters_per_ton'] == [0.5, 1.5]

    def test_update_merges_over_defaults(self):
        service = BenchmarkService()
        service.update_benchmarks({'mining_km_per_liter': [2.5, 3.0]})

        benchmarks = service.get_benchmarks()
        assert benchmarks['mining_km_per_liter'] == [2.5, 3.0]
        assert benchmarks['coal_liters_per_trip'] == [40, 60]
        assert SystemSetting.objects.filter(key=SystemSetting.BENCHMARKS_KEY).exists()

    def test_unknown_key_rejected(self):
        with pytest.raises(BenchmarkError):
            BenchmarkService().update_benchmarks({'tyre_life': [1, 2]})
