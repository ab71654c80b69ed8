"""
Fuel Analytics Service.

Per-truck fuel performance for a date range, judged against the fleet
benchmarks:
- litres, cost, distance and km/L from fuel logs
- trips and tonnage from coal or mining logs depending on fleet type
- L/trip and L/ton with GOOD/POOR statuses
- fleet aggregate, station liability and best/worst leaderboards

Single Responsibility: Fuel analytics calculations only.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional

from common.validators import (
    to_decimal,
    safe_divide,
    quantize_liters,
    quantize_money,
    date_in_range,
)
from fleet.models import Truck
from fleet.services import BenchmarkService
from hauling.models import CoalLog, MiningLog
from ..models import FuelLog, MiscFuelEntry

logger = logging.getLogger(__name__)


class FuelAnalyticsService:
    """Service for fleet fuel analytics."""

    STATUS_GOOD = 'GOOD'
    STATUS_POOR = 'POOR'
    STATUS_NA = 'N/A'

    METRIC_L_PER_TON = 'L/TON'
    METRIC_L_PER_TRIP = 'L/TRIP'
    METRIC_KM_PER_L = 'KM/L'
    METRICS = [METRIC_L_PER_TON, METRIC_L_PER_TRIP, METRIC_KM_PER_L]
    LEADERBOARD_SIZE = 5

    RATIO_PLACES = Decimal('0.01')

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.benchmark_service = BenchmarkService()

    def fuel_analytics(self, filters: Optional[Dict] = None) -> Dict:
        """
        Build the full analytics payload.

        Args:
            filters: Optional start_date, end_date, station_id, search (plate),
                fleet_type and metric (leaderboard sort)

        Returns:
            Dict with trucks, aggregate, station_liability and leaderboard
        """
        filters = filters or {}
        benchmarks = self.benchmark_service.get_benchmarks()

        fuel_logs = self._filtered_fuel_logs(filters)
        trucks = self.truck_performance(fuel_logs, filters, benchmarks)
        metric = (filters.get('metric') or self.METRIC_L_PER_TON).upper()

        result = {
            'benchmarks': benchmarks,
            'trucks': trucks,
            'aggregate': self.aggregate(trucks),
            'station_liability': self.station_liability(fuel_logs, filters),
            'leaderboard': self.leaderboard(trucks, metric),
        }
        self.logger.info(f"Built fuel analytics for {len(trucks)} trucks")
        return result

    def _filtered_fuel_logs(self, filters: Dict) -> List[FuelLog]:
        queryset = FuelLog.objects.select_related('truck', 'station')

        if filters.get('start_date'):
            queryset = queryset.filter(date__gte=filters['start_date'])
        if filters.get('end_date'):
            queryset = queryset.filter(date__lte=filters['end_date'])
        if filters.get('station_id'):
            queryset = queryset.filter(station_id=filters['station_id'])
        if filters.get('search'):
            queryset = queryset.filter(truck__plate_number__icontains=filters['search'])
        if filters.get('fleet_type'):
            queryset = queryset.filter(truck__fleet_type=filters['fleet_type'])

        return list(queryset)

    def truck_performance(self, fuel_logs: List[FuelLog], filters: Dict, benchmarks: Dict) -> List[Dict]:
        """Per-truck totals, ratios and benchmark statuses."""
        logs_by_truck = defaultdict(list)
        for log in fuel_logs:
            logs_by_truck[log.truck_id].append(log)

        start, end = filters.get('start_date'), filters.get('end_date')
        coal_counts, coal_tons = self._trip_totals(
            CoalLog.objects.filter(truck_id__in=logs_by_truck.keys()), start, end,
            lambda log: to_decimal(log.net_weight),
        )
        mining_counts, mining_tons = self._trip_totals(
            MiningLog.objects.filter(truck_id__in=logs_by_truck.keys()), start, end,
            lambda log: log.effective_net,
        )

        rows = []
        for truck_id, logs in logs_by_truck.items():
            truck = logs[0].truck
            ordered = sorted(logs, key=lambda log: (log.date, log.odometer, log.created_at))

            total_liters = sum((to_decimal(log.fuel_liters) for log in logs), Decimal('0'))
            total_cost = sum((log.amount for log in logs), Decimal('0'))
            total_km = max(0, ordered[-1].odometer - ordered[0].previous_odometer)

            is_mining = truck.fleet_type == Truck.FleetTypeChoices.MINING
            if is_mining:
                trips, tons = mining_counts[truck_id], mining_tons[truck_id]
            else:
                trips, tons = coal_counts[truck_id], coal_tons[truck_id]

            avg_kml = self._ratio(total_km, total_liters)
            l_per_trip = self._ratio(total_liters, trips)
            l_per_ton = self._ratio(total_liters, tons)

            rows.append({
                'truck_id': str(truck_id),
                'plate_number': truck.plate_number,
                'fleet_type': truck.fleet_type,
                'total_liters': quantize_liters(total_liters),
                'total_cost': quantize_money(total_cost),
                'total_km': total_km,
                'avg_kml': avg_kml,
                'trips': trips,
                'tonnage': quantize_liters(tons),
                'l_per_trip': l_per_trip,
                'l_per_ton': l_per_ton,
                'kml_status': self._kml_status(is_mining, avg_kml, benchmarks),
                'trip_status': self._trip_status(is_mining, l_per_trip, benchmarks),
                'ton_status': self._upper_bound_status(l_per_ton, benchmarks['global_liters_per_ton'][1]),
            })

        rows.sort(key=lambda row: row['plate_number'])
        return rows

    def _trip_totals(self, queryset, start, end, weight_of):
        counts = defaultdict(int)
        tons = defaultdict(Decimal)
        for log in queryset:
            if not date_in_range(log.date, start, end):
                continue
            counts[log.truck_id] += 1
            tons[log.truck_id] += weight_of(log)
        return counts, tons

    def _ratio(self, numerator, denominator) -> Decimal:
        return to_decimal(safe_divide(to_decimal(numerator), to_decimal(denominator))).quantize(self.RATIO_PLACES)

    def _kml_status(self, is_mining: bool, avg_kml: Decimal, benchmarks: Dict) -> str:
        if not is_mining:
            return self.STATUS_NA
        if avg_kml >= Decimal(str(benchmarks['mining_km_per_liter'][0])):
            return self.STATUS_GOOD
        return self.STATUS_POOR

    def _trip_status(self, is_mining: bool, l_per_trip: Decimal, benchmarks: Dict) -> str:
        key = 'mining_liters_per_trip' if is_mining else 'coal_liters_per_trip'
        return self._upper_bound_status(l_per_trip, benchmarks[key][1])

    def _upper_bound_status(self, value: Decimal, high) -> str:
        if value <= 0:
            return self.STATUS_NA
        if value <= Decimal(str(high)):
            return self.STATUS_GOOD
        return self.STATUS_POOR

    def aggregate(self, trucks: List[Dict]) -> Dict:
        """Fleet totals; average km/L over trucks that have a positive km/L."""
        kml_values = [row['avg_kml'] for row in trucks if row['avg_kml'] > 0]
        avg_kml = sum(kml_values, Decimal('0')) / len(kml_values) if kml_values else Decimal('0')
        return {
            'total_liters': quantize_liters(sum((row['total_liters'] for row in trucks), Decimal('0'))),
            'total_cost': quantize_money(sum((row['total_cost'] for row in trucks), Decimal('0'))),
            'avg_kml': avg_kml.quantize(self.RATIO_PLACES),
            'truck_count': len(trucks),
        }

    def station_liability(self, fuel_logs: List[FuelLog], filters: Dict) -> List[Dict]:
        """
        Litres and cost owed per external station.

        Fleet fuel logs and misc entries drawn in the date range are combined;
        internal tankers are excluded.
        """
        totals = {}

        def add(station, liters, cost):
            if station is None or station.is_internal:
                return
            row = totals.setdefault(station.id, {
                'station_id': str(station.id),
                'station_name': station.name,
                'liters': Decimal('0'),
                'cost': Decimal('0'),
            })
            row['liters'] += to_decimal(liters)
            row['cost'] += to_decimal(cost)

        for log in fuel_logs:
            add(log.station, log.fuel_liters, log.amount)

        misc_entries = MiscFuelEntry.objects.select_related('station')
        if filters.get('start_date'):
            misc_entries = misc_entries.filter(date__gte=filters['start_date'])
        if filters.get('end_date'):
            misc_entries = misc_entries.filter(date__lte=filters['end_date'])
        for entry in misc_entries:
            add(entry.station, entry.fuel_liters, entry.amount)

        rows = list(totals.values())
        for row in rows:
            row['liters'] = quantize_liters(row['liters'])
            row['cost'] = quantize_money(row['cost'])
        rows.sort(key=lambda row: row['cost'], reverse=True)
        return rows

    def leaderboard(self, trucks: List[Dict], metric: str = METRIC_L_PER_TON) -> Dict:
        """
        Best and worst five trucks for a metric.

        L/TON and L/TRIP rank ascending, KM/L descending. Best are the first
        GOOD trucks in rank order; worst are the first POOR trucks from the
        bottom of the ranking.
        """
        if metric not in self.METRICS:
            raise FuelAnalyticsError(f"Unknown leaderboard metric: {metric}")

        value_key, status_key, descending = {
            self.METRIC_L_PER_TON: ('l_per_ton', 'ton_status', False),
            self.METRIC_L_PER_TRIP: ('l_per_trip', 'trip_status', False),
            self.METRIC_KM_PER_L: ('avg_kml', 'kml_status', True),
        }[metric]

        ranked = sorted(
            (row for row in trucks if row['total_liters'] > 0),
            key=lambda row: row[value_key],
            reverse=descending,
        )
        best = [row for row in ranked if row[status_key] == self.STATUS_GOOD][:self.LEADERBOARD_SIZE]
        worst = [row for row in reversed(ranked) if row[status_key] == self.STATUS_POOR][:self.LEADERBOARD_SIZE]

        return {'metric': metric, 'best': best, 'worst': worst}


class FuelAnalyticsError(Exception):
    """Exception raised when analytics cannot be computed."""

    pass
