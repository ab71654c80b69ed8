"""
Mining Report Service.

Filters mining dispatch/purchase trips and summarises them:
- headline stats (trips, net, shortage, distinct vehicles and materials)
- per material, vehicle, customer and carting agent breakdowns

Single Responsibility: Mining report calculations only.
"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.db.models import QuerySet

from common.validators import to_decimal, safe_divide, quantize_weight
from ..models import MiningLog

logger = logging.getLogger(__name__)


class MiningReportService:
    """Service for mining trip reports."""

    UNKNOWN = 'Unknown'
    RATIO_PLACES = Decimal('0.001')

    # Summary name -> function giving the grouping label of a log
    DIMENSIONS = OrderedDict([
        ('material', lambda log: log.material),
        ('vehicle', lambda log: log.truck.plate_number if log.truck_id else ''),
        ('customer', lambda log: log.customer_name),
        ('agent', lambda log: log.carting_agent),
    ])

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def filter_logs(self, filters: Optional[Dict] = None) -> QuerySet:
        """
        Filter mining logs, newest first.

        Args:
            filters: Optional start_date, end_date, log_type, truck_id,
                driver_id, customer, material, supplier, agent (carting
                agent) and agent_id (recording agent)

        Returns:
            Filtered queryset
        """
        filters = filters or {}
        queryset = MiningLog.objects.select_related('truck', 'driver')

        if filters.get('start_date'):
            queryset = queryset.filter(date__gte=filters['start_date'])
        if filters.get('end_date'):
            queryset = queryset.filter(date__lte=filters['end_date'])
        if filters.get('log_type'):
            queryset = queryset.filter(log_type=filters['log_type'])
        if filters.get('truck_id'):
            queryset = queryset.filter(truck_id=filters['truck_id'])
        if filters.get('driver_id'):
            queryset = queryset.filter(driver_id=filters['driver_id'])
        if filters.get('customer'):
            queryset = queryset.filter(customer_name__iexact=filters['customer'])
        if filters.get('material'):
            queryset = queryset.filter(material__iexact=filters['material'])
        if filters.get('supplier'):
            queryset = queryset.filter(supplier__iexact=filters['supplier'])
        if filters.get('agent'):
            queryset = queryset.filter(carting_agent__iexact=filters['agent'])
        if filters.get('agent_id'):
            queryset = queryset.filter(agent_id=filters['agent_id'])

        return queryset.order_by('-date', '-created_at')

    def stats(self, logs: List[MiningLog]) -> Dict:
        """Headline figures for a set of trips."""
        return {
            'trips': len(logs),
            'total_net': quantize_weight(sum((log.effective_net for log in logs), Decimal('0'))),
            'total_shortage': quantize_weight(sum((to_decimal(log.shortage) for log in logs), Decimal('0'))),
            'vehicles': len({log.truck_id for log in logs}),
            'materials': len({log.material for log in logs if log.material}),
        }

    def summarize_by(self, logs: Iterable[MiningLog], label_of) -> List[Dict]:
        """
        Group trips by a label and total them.

        Returns:
            Rows of name, trips, net, shortage and avg_load, largest net first
        """
        groups = OrderedDict()
        for log in logs:
            name = label_of(log) or self.UNKNOWN
            group = groups.setdefault(name, {'name': name, 'trips': 0, 'net': Decimal('0'), 'shortage': Decimal('0')})
            group['trips'] += 1
            group['net'] += log.effective_net
            group['shortage'] += to_decimal(log.shortage)

        rows = []
        for group in groups.values():
            rows.append({
                'name': group['name'],
                'trips': group['trips'],
                'net': quantize_weight(group['net']),
                'shortage': quantize_weight(group['shortage']),
                'avg_load': safe_divide(group['net'], group['trips']).quantize(self.RATIO_PLACES),
            })
        rows.sort(key=lambda row: (-row['net'], row['name']))
        return rows

    def mining_report(self, filters: Optional[Dict] = None) -> Dict:
        """
        Build the mining report.

        Returns:
            Dict with logs, stats and summaries keyed by dimension
        """
        logs = list(self.filter_logs(filters))
        summaries = {
            dimension: self.summarize_by(logs, label_of)
            for dimension, label_of in self.DIMENSIONS.items()
        }

        self.logger.info(f"Built mining report over {len(logs)} trips")
        return {
            'logs': logs,
            'stats': self.stats(logs),
            'summaries': summaries,
        }
