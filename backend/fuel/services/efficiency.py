"""
Fuel Efficiency Calculator Service.

Computes the true km/L of a FULL_TANK fill. Partial fills since the
previous full tank are added back, so the distance from the end of the
previous full tank is divided by every litre put in since.

Single Responsibility: Fill-to-fill efficiency only.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from common.validators import to_decimal
from ..models import FuelLog

logger = logging.getLogger(__name__)


class EfficiencyCalculatorService:
    """Service for true km/L calculations."""

    PLACES = Decimal('0.01')

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def true_efficiency(self, fuel_log: FuelLog, truck_logs: Optional[List[FuelLog]] = None) -> Optional[Decimal]:
        """
        Calculate true km/L for a fill.

        Args:
            fuel_log: Fill to evaluate
            truck_logs: All logs of the same truck; loaded when omitted

        Returns:
            km/L rounded to 2 dp, 0 when distance or litres are not positive,
            None for fills that are not FULL_TANK
        """
        if fuel_log.entry_type != FuelLog.EntryTypeChoices.FULL_TANK:
            return None

        if truck_logs is None:
            truck_logs = list(FuelLog.objects.filter(truck_id=fuel_log.truck_id))

        ordered = sorted(truck_logs, key=self._chronological_key)
        ids = [log.id for log in ordered]
        if fuel_log.id not in ids:
            return None
        current_index = ids.index(fuel_log.id)

        total_liters = to_decimal(fuel_log.fuel_liters)
        start_odometer = fuel_log.previous_odometer

        for previous in reversed(ordered[:current_index]):
            if previous.entry_type == FuelLog.EntryTypeChoices.PARTIAL_FILL:
                total_liters += to_decimal(previous.fuel_liters)
                start_odometer = previous.previous_odometer
            elif previous.entry_type == FuelLog.EntryTypeChoices.FULL_TANK:
                start_odometer = previous.odometer
                break

        distance = fuel_log.odometer - start_odometer
        if distance <= 0 or total_liters <= 0:
            return Decimal('0')

        return (Decimal(distance) / total_liters).quantize(self.PLACES)

    def efficiency_report(self, fuel_log: FuelLog) -> dict:
        """Efficiency together with the fill details it was computed from."""
        km_per_liter = self.true_efficiency(fuel_log)
        return {
            'fuel_log_id': str(fuel_log.id),
            'truck_id': str(fuel_log.truck_id),
            'entry_type': fuel_log.entry_type,
            'date': fuel_log.date,
            'odometer': fuel_log.odometer,
            'fuel_liters': fuel_log.fuel_liters,
            'km_per_liter': km_per_liter,
            'applicable': km_per_liter is not None,
        }

    @staticmethod
    def _chronological_key(log: FuelLog):
        return (log.date, log.odometer, log.created_at)
