"""
Coal Batch Aggregator Service.

Groups coal trips into daily batches per truck and derives the batch
figures used for driver payouts and diesel reconciliation:
- diesel pumped from fuel logs attributed to the batch date
- synced driver and diesel rate
- advance carried from the previous day
- staff welfare, roll bonus, net trips and net diesel

Single Responsibility: Daily batch aggregation only.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from common.validators import (
    to_decimal,
    quantize_liters,
    quantize_weight,
    quantize_money,
    get_default_diesel_rate,
    previous_day,
    date_in_range,
)
from fuel.models import FuelLog
from ..models import CoalLog

logger = logging.getLogger(__name__)


class CoalBatchAggregatorService:
    """
    Service for coal daily batches.

    A batch is keyed ``<date>_<truck id>``. Fuel logs are matched on
    attribution date, not fill date.
    """

    STAFF_WELFARE = Decimal('300')
    ROLL_FREE_TRIPS = 4
    ROLL_PER_TRIP = Decimal('100')

    FILLING_FULL = 'full diesel'
    FILLING_PER_TRIP = 'per trip'

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def batch_financials(self, entries: int, trip_adjustment: int = 0, include_extra_in_roll: bool = False) -> Dict:
        """
        Welfare and roll payout for a batch.

        Args:
            entries: Physical trips in the batch
            trip_adjustment: Extra trips credited to the batch
            include_extra_in_roll: Whether credited trips count toward the roll

        Returns:
            Dict with staff_welfare, roll_amount and total_payable
        """
        welfare = self.STAFF_WELFARE if entries > 0 else Decimal('0')
        counted_trips = entries + (trip_adjustment if include_extra_in_roll else 0)
        roll = max(0, counted_trips - self.ROLL_FREE_TRIPS) * self.ROLL_PER_TRIP
        return {
            'staff_welfare': welfare,
            'roll_amount': roll,
            'total_payable': welfare + roll,
        }

    def aggregate_coal_batches(
        self,
        logs: Optional[Iterable[CoalLog]] = None,
        include_extra_in_roll: bool = False,
    ) -> List[Dict]:
        """
        Aggregate coal trips into daily batches, oldest first.

        Args:
            logs: Coal logs to aggregate; all logs when omitted
            include_extra_in_roll: Whether trip adjustments count toward the roll

        Returns:
            List of batch dicts
        """
        if logs is None:
            logs = CoalLog.objects.select_related('truck', 'driver')
        logs = sorted(logs, key=lambda log: (log.date, log.created_at))

        fuel_by_key = self._fuel_logs_by_attribution({log.truck_id for log in logs})
        default_rate = get_default_diesel_rate()

        groups = {}
        for log in logs:
            key = f"{log.date.isoformat()}_{log.truck_id}"
            group = groups.get(key)
            if group is None:
                group = self._new_group(key, log, fuel_by_key.get((log.truck_id, log.date), []), default_rate)
                groups[key] = group
            self._add_trip(group, log)

        batches = sorted(groups.values(), key=lambda group: group['date'])
        for batch in batches:
            previous_key = f"{previous_day(batch['date']).isoformat()}_{batch['truck_id']}"
            previous_batch = groups.get(previous_key)
            if previous_batch and previous_batch['diesel_adjustment'] > 0:
                batch['advance_from_yesterday'] = abs(previous_batch['diesel_adjustment'])

            batch.update(self.batch_financials(
                batch['entries'], batch['trip_adjustment'], include_extra_in_roll
            ))
            batch['net_trips'] = batch['entries'] + batch['trip_adjustment']
            batch['net_diesel'] = quantize_liters(
                batch['diesel'] + batch['advance_from_yesterday']
                - batch['diesel_adjustment'] - batch['air_adjustment']
            )
            batch['net_weight'] = quantize_weight(batch['net_weight'])
            batch['gross_weight_total'] = quantize_weight(batch['gross_weight_total'])

        self.logger.debug(f"Aggregated {len(logs)} coal logs into {len(batches)} batches")
        return batches

    def _fuel_logs_by_attribution(self, truck_ids) -> Dict:
        fuel_by_key = defaultdict(list)
        fuel_logs = FuelLog.objects.filter(truck_id__in=truck_ids).select_related('driver')
        for fuel_log in fuel_logs.order_by('date', 'created_at'):
            fuel_by_key[(fuel_log.truck_id, fuel_log.attribution_date)].append(fuel_log)
        return fuel_by_key

    def _new_group(self, key: str, log: CoalLog, fuel_logs: List[FuelLog], default_rate: Decimal) -> Dict:
        filling_types = []
        for fuel_log in fuel_logs:
            filling = (
                self.FILLING_FULL
                if fuel_log.entry_type == FuelLog.EntryTypeChoices.FULL_TANK
                else self.FILLING_PER_TRIP
            )
            if filling not in filling_types:
                filling_types.append(filling)

        first_fuel = fuel_logs[0] if fuel_logs else None
        driver = log.driver or (first_fuel.driver if first_fuel else None)

        rate = to_decimal(log.diesel_rate)
        if rate <= 0 and first_fuel:
            rate = to_decimal(first_fuel.diesel_price)
        if rate <= 0:
            rate = default_rate

        return {
            'key': key,
            'date': log.date,
            'actual_fuel_date': first_fuel.date if first_fuel else None,
            'truck_id': str(log.truck_id),
            'plate_number': log.truck.plate_number,
            'wheel_config': log.truck.wheel_config or 'N/A',
            'entries': 0,
            'net_weight': Decimal('0'),
            'gross_weight_total': Decimal('0'),
            'from_site': log.origin_site or 'N/A',
            'to_site': log.destination_site or 'N/A',
            'diesel': quantize_liters(sum((to_decimal(f.fuel_liters) for f in fuel_logs), Decimal('0'))),
            'diesel_adjustment': to_decimal(log.diesel_adjustment),
            'air_adjustment': to_decimal(log.air_adjustment),
            'diesel_adj_type': log.diesel_adj_type or CoalLog.DieselAdjTypeChoices.OTHER,
            'trip_adjustment': log.trip_adjustment or 0,
            'trip_remarks': log.trip_remarks,
            'diesel_remarks': log.diesel_remarks,
            'air_remarks': log.air_remarks,
            'driver_id': str(driver.id) if driver else None,
            'driver_name': driver.name if driver else None,
            'rate': rate,
            'filling_types': ' / '.join(filling_types),
            'advance_from_yesterday': Decimal('0'),
            'agent_ids': [],
            'log_ids': [],
        }

    def _add_trip(self, group: Dict, log: CoalLog) -> None:
        group['entries'] += 1
        group['net_weight'] += to_decimal(log.net_weight)
        group['gross_weight_total'] += to_decimal(log.gross_weight)
        group['log_ids'].append(str(log.id))
        if log.agent_id and log.agent_id not in group['agent_ids']:
            group['agent_ids'].append(log.agent_id)

        # Last non-empty value wins
        if log.trip_remarks:
            group['trip_remarks'] = log.trip_remarks
        if log.diesel_remarks:
            group['diesel_remarks'] = log.diesel_remarks
        if log.air_remarks:
            group['air_remarks'] = log.air_remarks
        if log.trip_adjustment:
            group['trip_adjustment'] = log.trip_adjustment
        if log.diesel_adjustment:
            group['diesel_adjustment'] = to_decimal(log.diesel_adjustment)
        if log.air_adjustment:
            group['air_adjustment'] = to_decimal(log.air_adjustment)
        if log.origin_site and log.origin_site != 'N/A':
            group['from_site'] = log.origin_site
        if log.destination_site and log.destination_site != 'N/A':
            group['to_site'] = log.destination_site

    def filter_batches(
        self,
        batches: List[Dict],
        truck_id: Optional[str] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        agent_id: Optional[str] = None,
    ) -> List[Dict]:
        """Filter batches and order them newest first."""
        needle = (search or '').strip().lower()
        filtered = [
            batch for batch in batches
            if (not truck_id or batch['truck_id'] == str(truck_id))
            and (not needle or needle in batch['plate_number'].lower())
            and date_in_range(batch['date'], start, end)
            and (not agent_id or agent_id in batch['agent_ids'])
        ]
        filtered.sort(key=lambda batch: batch['date'], reverse=True)
        return filtered

    def totals(self, batches: List[Dict]) -> Dict:
        """Tonnage, diesel, net trips and diesel amount over batches."""
        tonnage = sum((batch['net_weight'] for batch in batches), Decimal('0'))
        diesel = sum((batch['diesel'] for batch in batches), Decimal('0'))
        amount = sum((batch['diesel'] * batch['rate'] for batch in batches), Decimal('0'))
        return {
            'tonnage': quantize_weight(tonnage),
            'diesel': quantize_liters(diesel),
            'trips': sum(batch['net_trips'] for batch in batches),
            'amount': quantize_money(amount),
        }

    def batch_report(self, filters: Optional[Dict] = None) -> Dict:
        """
        Aggregate all coal logs, then filter and total the batches.

        Aggregation runs over every log so that the advance from yesterday
        is known even when the previous day is filtered out.
        """
        filters = filters or {}
        batches = self.aggregate_coal_batches(
            include_extra_in_roll=filters.get('include_extra_in_roll', False)
        )
        batches = self.filter_batches(
            batches,
            truck_id=filters.get('truck_id'),
            search=filters.get('search'),
            start=filters.get('start_date'),
            end=filters.get('end_date'),
            agent_id=filters.get('agent_id'),
        )
        return {
            'count': len(batches),
            'batches': batches,
            'totals': self.totals(batches),
        }
