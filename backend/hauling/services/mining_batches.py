"""
Mining Batch Aggregator Service.

Groups mining trips into daily batches per truck and trip type:
- diesel from the fuel log attributed to the batch date
- stock carried from the truck's previous working day
- stored welfare and roll payouts, net trips and net diesel

Mining payouts differ from coal: roll is paid on every adjusted trip.

Single Responsibility: Mining daily batch aggregation only.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from common.validators import (
    to_decimal,
    safe_divide,
    quantize_liters,
    quantize_weight,
    quantize_money,
    get_default_diesel_rate,
)
from fuel.models import FuelLog
from ..models import MiningLog

logger = logging.getLogger(__name__)


class MiningBatchAggregatorService:
    """
    Service for mining daily batches.

    A batch is keyed ``<date>_<truck id>_<log type>``.
    """

    STAFF_WELFARE = Decimal('300')
    ROLL_PER_TRIP = Decimal('100')

    FILLING_FULL = 'full diesel'
    FILLING_PER_TRIP = 'per trip'

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def batch_financials(self, entries: int, trip_adjustment: int = 0) -> Dict:
        """
        Welfare and roll payout for a mining batch.

        Welfare is fixed per batch and roll is paid on every adjusted trip;
        nothing is paid when the adjusted trips drop to zero.
        """
        adjusted_trips = max(0, entries + trip_adjustment)
        if adjusted_trips == 0:
            welfare, roll = Decimal('0'), Decimal('0')
        else:
            welfare, roll = self.STAFF_WELFARE, adjusted_trips * self.ROLL_PER_TRIP
        return {
            'staff_welfare': welfare,
            'roll_amount': roll,
            'total_payable': welfare + roll,
        }

    def aggregate_mining_batches(self, logs: Optional[Iterable[MiningLog]] = None) -> List[Dict]:
        """
        Aggregate mining trips into daily batches, newest first.

        Args:
            logs: Mining logs to aggregate; all logs when omitted

        Returns:
            List of batch dicts
        """
        if logs is None:
            logs = MiningLog.objects.select_related('truck', 'driver')
        logs = sorted(logs, key=lambda log: (log.date, log.created_at))

        truck_ids = {log.truck_id for log in logs}
        fuel_by_key = self._fuel_log_by_attribution(truck_ids)
        working_days, stock_by_day = self._working_days(truck_ids)
        default_rate = get_default_diesel_rate()

        groups = {}
        for log in logs:
            key = f"{log.date.isoformat()}_{log.truck_id}_{log.log_type}"
            group = groups.get(key)
            if group is None:
                group = self._new_group(key, log, fuel_by_key.get((log.truck_id, log.date)), default_rate)
                group['advance_from_yesterday'] = self._previous_stock(
                    working_days[log.truck_id], stock_by_day, log.truck_id, log.date
                )
                groups[key] = group
            self._add_trip(group, log)

        batches = list(groups.values())
        for batch in batches:
            batch['net_trips'] = batch['entries'] + batch['trip_adjustment']
            batch['net_diesel'] = quantize_liters(
                batch['diesel'] + batch['advance_from_yesterday']
                - batch['diesel_adjustment'] - batch['air_adjustment']
            )
            batch['diesel_per_trip'] = quantize_liters(
                safe_divide(batch['net_diesel'], max(1, batch['entries']))
            )
            batch['net_weight'] = quantize_weight(batch['net_weight'])
            batch['total_shortage'] = quantize_weight(batch['total_shortage'])
            batch['total_payable'] = batch['staff_welfare'] + batch['roll_amount']

        batches.sort(key=lambda batch: batch['date'], reverse=True)
        self.logger.debug(f"Aggregated {len(logs)} mining logs into {len(batches)} batches")
        return batches

    def _fuel_log_by_attribution(self, truck_ids) -> Dict:
        """First fuel log per (truck, attribution date)."""
        fuel_by_key = {}
        fuel_logs = FuelLog.objects.filter(truck_id__in=truck_ids).order_by('date', 'created_at')
        for fuel_log in fuel_logs:
            fuel_by_key.setdefault((fuel_log.truck_id, fuel_log.attribution_date), fuel_log)
        return fuel_by_key

    def _working_days(self, truck_ids):
        """Dates each truck worked and its STOCK adjustment per day, over all its trips."""
        working_days = defaultdict(set)
        stock_by_day = {}
        rows = MiningLog.objects.filter(truck_id__in=truck_ids).order_by('created_at').values_list(
            'truck_id', 'date', 'diesel_adj_type', 'diesel_adjustment'
        )
        for truck_id, day, adj_type, adjustment in rows:
            working_days[truck_id].add(day)
            if adj_type == MiningLog.DieselAdjTypeChoices.STOCK and adjustment:
                stock_by_day[(truck_id, day)] = to_decimal(adjustment)
        return working_days, stock_by_day

    def _previous_stock(self, days, stock_by_day, truck_id, on_date: date) -> Decimal:
        earlier = [day for day in days if day < on_date]
        if not earlier:
            return Decimal('0')
        return stock_by_day.get((truck_id, max(earlier)), Decimal('0'))

    def _new_group(self, key: str, log: MiningLog, fuel_log: Optional[FuelLog], default_rate: Decimal) -> Dict:
        rate = to_decimal(fuel_log.diesel_price) if fuel_log else Decimal('0')
        if rate <= 0:
            rate = default_rate
        if fuel_log is not None and fuel_log.entry_type == FuelLog.EntryTypeChoices.FULL_TANK:
            filling_type = self.FILLING_FULL
        else:
            filling_type = self.FILLING_PER_TRIP

        return {
            'key': key,
            'date': log.date,
            'truck_id': str(log.truck_id),
            'plate_number': log.truck.plate_number,
            'wheel_config': log.truck.wheel_config or '',
            'log_type': log.log_type,
            'entries': 0,
            'net_weight': Decimal('0'),
            'total_shortage': Decimal('0'),
            'diesel': quantize_liters(fuel_log.fuel_liters) if fuel_log else Decimal('0.000'),
            'actual_fuel_date': fuel_log.date if fuel_log else None,
            'rate': rate,
            'filling_types': filling_type,
            'driver_id': str(log.driver_id) if log.driver_id else None,
            'driver_name': log.driver.name if log.driver_id else None,
            'trip_adjustment': 0,
            'diesel_adjustment': Decimal('0'),
            'air_adjustment': Decimal('0'),
            'diesel_adj_type': MiningLog.DieselAdjTypeChoices.OTHER,
            'trip_remarks': '',
            'diesel_remarks': '',
            'air_remarks': '',
            'staff_welfare': Decimal('0'),
            'roll_amount': Decimal('0'),
            'agent_ids': [],
            'log_ids': [],
        }

    def _add_trip(self, group: Dict, log: MiningLog) -> None:
        group['entries'] += 1
        group['net_weight'] += log.effective_net
        group['total_shortage'] += to_decimal(log.shortage)
        group['staff_welfare'] += to_decimal(log.staff_welfare)
        group['roll_amount'] += to_decimal(log.roll_amount)
        group['log_ids'].append(str(log.id))
        if log.agent_id and log.agent_id not in group['agent_ids']:
            group['agent_ids'].append(log.agent_id)

        # Last non-empty value wins
        if log.trip_adjustment:
            group['trip_adjustment'] = log.trip_adjustment
        if log.diesel_adjustment:
            group['diesel_adjustment'] = to_decimal(log.diesel_adjustment)
            group['diesel_adj_type'] = log.diesel_adj_type
        if log.air_adjustment:
            group['air_adjustment'] = to_decimal(log.air_adjustment)
        if log.trip_remarks:
            group['trip_remarks'] = log.trip_remarks
        if log.diesel_remarks:
            group['diesel_remarks'] = log.diesel_remarks
        if log.air_remarks:
            group['air_remarks'] = log.air_remarks

    def filter_logs(self, logs, filters: Dict) -> List[MiningLog]:
        """Trip-level filters applied before grouping."""
        needle = (filters.get('search') or '').strip().lower()
        truck_id = filters.get('truck_id')
        filtered = []
        for log in logs:
            if needle:
                haystack = f"{log.chalan_no} {log.customer_name} {log.supplier} {log.truck.plate_number}".lower()
                if needle not in haystack:
                    continue
            if filters.get('material') and log.material != filters['material']:
                continue
            if filters.get('supplier') and log.supplier != filters['supplier']:
                continue
            if truck_id and str(log.truck_id) != str(truck_id):
                continue
            if filters.get('date') and log.date != filters['date']:
                continue
            if filters.get('log_type') and log.log_type != filters['log_type']:
                continue
            filtered.append(log)
        return filtered

    def totals(self, batches: List[Dict]) -> Dict:
        """Trips, tonnage, shortage and payouts over batches."""
        return {
            'trips': sum(batch['net_trips'] for batch in batches),
            'net_weight': quantize_weight(sum((batch['net_weight'] for batch in batches), Decimal('0'))),
            'shortage': quantize_weight(sum((batch['total_shortage'] for batch in batches), Decimal('0'))),
            'payable': quantize_money(sum((batch['total_payable'] for batch in batches), Decimal('0'))),
        }

    def batch_report(self, filters: Optional[Dict] = None) -> Dict:
        """
        Filter trips, group them into batches and total them.

        Filters:
            search (chalan, customer, supplier, plate), material, supplier,
            truck_id, date, log_type, agent_id (batches with a trip by the agent)
        """
        filters = filters or {}
        logs = self.filter_logs(MiningLog.objects.select_related('truck', 'driver'), filters)
        batches = self.aggregate_mining_batches(logs)

        agent_id = filters.get('agent_id')
        if agent_id:
            batches = [batch for batch in batches if agent_id in batch['agent_ids']]

        return {
            'count': len(batches),
            'batches': batches,
            'totals': self.totals(batches),
        }
