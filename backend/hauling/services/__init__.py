"""
Hauling Services Package.

Services:
- CoalBatchAggregatorService: Coal daily batches, payouts and totals
- MiningBatchAggregatorService: Mining daily batches, payouts and stock carry-over
- BatchEditorService: Batch-wide adjustments, edits and added trips
- MTDAnalyticsService: Month-to-date window comparisons for coal and mining
- MiningReportService: Mining trip filters, stats and breakdowns
"""

from .batch_editor import BatchEditorService, BatchEditError
from .coal_batches import CoalBatchAggregatorService
from .mining_batches import MiningBatchAggregatorService
from .mining_report import MiningReportService
from .mtd_analytics import MTDAnalyticsService

__all__ = [
    'BatchEditorService',
    'BatchEditError',
    'CoalBatchAggregatorService',
    'MiningBatchAggregatorService',
    'MTDAnalyticsService',
    'MiningReportService',
]
