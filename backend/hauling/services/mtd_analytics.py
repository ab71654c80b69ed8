"""
Month-To-Date Analytics Service.

Compares "prior days of the month" with "the anchor day" for coal and
mining haulage. Window 1 runs from the first of the anchor's month (or a
start override for mining) through the day before the anchor; window 2 is
the anchor day itself. A period total covers both windows.

Single Responsibility: MTD window analytics only.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.utils import timezone

from common.validators import (
    to_decimal,
    safe_divide,
    quantize_liters,
    quantize_weight,
    quantize_money,
    first_of_month,
    previous_day,
    format_date_label,
    date_in_range,
)
from ..models import CoalLog, MiningLog
from .coal_batches import CoalBatchAggregatorService
from .mining_report import MiningReportService

logger = logging.getLogger(__name__)


class MTDAnalyticsService:
    """Service for month-to-date comparisons."""

    EMPTY_WINDOW_LABEL = 'Prev. Data'
    RATIO_PLACES = Decimal('0.01')

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.batch_service = CoalBatchAggregatorService()
        self.mining_service = MiningReportService()

    def windows(
        self,
        anchor: Optional[date] = None,
        start_override: Optional[date] = None,
        single_day_label: bool = False,
    ) -> Dict:
        """
        Resolve the two MTD windows for an anchor date.

        Args:
            anchor: Anchor day; today when omitted
            start_override: Replaces the first of the month as window 1 start
            single_day_label: Label a one-day window 1 as previous data too
                (mining); its figures still cover that day

        Returns:
            Dict with anchor, window1_start, window1_end, labels and whether
            window 1 is empty
        """
        anchor = anchor or timezone.localdate()
        window1_start = start_override or first_of_month(anchor)
        window1_end = previous_day(anchor)
        window1_empty = window1_start > window1_end

        if window1_empty or (single_day_label and window1_start >= window1_end):
            window1_label = self.EMPTY_WINDOW_LABEL
        else:
            window1_label = f"{format_date_label(window1_start)} to {format_date_label(window1_end)}"

        return {
            'anchor': anchor,
            'window1_start': window1_start,
            'window1_end': window1_end,
            'window1_empty': window1_empty,
            'window1_label': window1_label,
            'window2_label': format_date_label(anchor),
        }

    def _in_window1(self, value: date, windows: Dict) -> bool:
        return not windows['window1_empty'] and date_in_range(
            value, windows['window1_start'], windows['window1_end']
        )

    # Coal

    def coal_mtd(self, anchor: Optional[date] = None, truck_id=None, search: Optional[str] = None) -> Dict:
        """
        Coal MTD over daily batches.

        Args:
            anchor: Anchor day; today when omitted
            truck_id: Restrict to one truck
            search: Plate number search, used when no truck is given

        Returns:
            Dict with labels and window1, window2, period_total metrics
        """
        windows = self.windows(anchor)
        batches = self.batch_service.aggregate_coal_batches(
            CoalLog.objects.select_related('truck', 'driver').filter(
                date__gte=previous_day(min(windows['window1_start'], windows['anchor'])),
                date__lte=windows['anchor'],
            )
        )

        if truck_id:
            batches = [batch for batch in batches if batch['truck_id'] == str(truck_id)]
        elif search:
            needle = search.strip().lower()
            batches = [batch for batch in batches if needle in batch['plate_number'].lower()]

        window1 = [batch for batch in batches if self._in_window1(batch['date'], windows)]
        window2 = [batch for batch in batches if batch['date'] == windows['anchor']]

        totals1 = self._coal_sums(window1)
        totals2 = self._coal_sums(window2)
        period = {key: totals1[key] + totals2[key] for key in totals1}

        return self._result(windows, [
            self._coal_metrics(totals1),
            self._coal_metrics(totals2),
            self._coal_metrics(period),
        ])

    def _coal_sums(self, batches: List[Dict]) -> Dict:
        sums = {
            'net_weight': Decimal('0'),
            'diesel_pumped': Decimal('0'),
            'net_diesel': Decimal('0'),
            'amount': Decimal('0'),
            'diesel_for_rate': Decimal('0'),
            'physical_trips': 0,
            'net_trips': 0,
        }
        for batch in batches:
            sums['net_weight'] += batch['net_weight']
            sums['diesel_pumped'] += batch['diesel']
            sums['net_diesel'] += batch['net_diesel']
            sums['amount'] += batch['diesel'] * batch['rate']
            if batch['diesel'] > 0:
                sums['diesel_for_rate'] += batch['diesel']
            sums['physical_trips'] += batch['entries']
            sums['net_trips'] += batch['net_trips']
        return sums

    def _coal_metrics(self, sums: Dict) -> Dict:
        return {
            'net_weight': quantize_weight(sums['net_weight']),
            'diesel_pumped': quantize_liters(sums['diesel_pumped']),
            'net_diesel': quantize_liters(sums['net_diesel']),
            'amount': quantize_money(sums['amount']),
            'physical_trips': sums['physical_trips'],
            'net_trips': sums['net_trips'],
            'avg_load': self._ratio(sums['net_weight'], sums['physical_trips']),
            'avg_diesel_per_trip': self._ratio(sums['net_diesel'], sums['net_trips']),
            'rate': self._ratio(sums['amount'], sums['diesel_for_rate']),
        }

    # Mining

    def mining_mtd(
        self,
        anchor: Optional[date] = None,
        start_override: Optional[date] = None,
        filters: Optional[Dict] = None,
    ) -> Dict:
        """
        Mining MTD over individual trips.

        Args:
            anchor: Anchor day; today when omitted
            start_override: Window 1 start instead of the first of the month
            filters: Mining report filters except the date range

        Returns:
            Dict with labels and window1, window2, period_total metrics
        """
        windows = self.windows(anchor, start_override, single_day_label=True)
        filters = {
            key: value for key, value in (filters or {}).items()
            if key not in ('start_date', 'end_date')
        }
        logs = list(self.mining_service.filter_logs(filters))

        window1 = [log for log in logs if self._in_window1(log.date, windows)]
        window2 = [log for log in logs if log.date == windows['anchor']]

        return self._result(windows, [
            self._mining_metrics(window1),
            self._mining_metrics(window2),
            self._mining_metrics(window1 + window2),
        ])

    def _mining_metrics(self, logs: List[MiningLog]) -> Dict:
        net = sum((log.effective_net for log in logs), Decimal('0'))
        shortage = sum((to_decimal(log.shortage) for log in logs), Decimal('0'))
        return {
            'trips': len(logs),
            'net_weight': quantize_weight(net),
            'shortage': quantize_weight(shortage),
            'avg_load': self._ratio(net, len(logs)),
        }

    def _ratio(self, numerator, denominator) -> Decimal:
        return safe_divide(numerator, denominator).quantize(self.RATIO_PLACES)

    def _result(self, windows: Dict, metrics: List[Dict]) -> Dict:
        window1, window2, period_total = metrics
        return {
            'anchor': windows['anchor'],
            'window1': {
                'label': windows['window1_label'],
                'start': None if windows['window1_empty'] else windows['window1_start'],
                'end': None if windows['window1_empty'] else windows['window1_end'],
                **window1,
            },
            'window2': {
                'label': windows['window2_label'],
                'start': windows['anchor'],
                'end': windows['anchor'],
                **window2,
            },
            'period_total': {'label': 'Period Total', **period_total},
        }
