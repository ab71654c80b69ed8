"""
Fuel Log Recorder Service.

Records, updates and deletes fleet fuel logs together with their side
effects:
- truck current odometer follows the latest completed fill
- the daily odometer registry row for (truck, date) is upserted
- coal logs of (truck, attribution date) are back-filled with driver,
  litres per trip and diesel rate
- fills drawn on a diesel party account keep a linked BORROW transaction

Single Responsibility: Fuel log persistence and its side effects only.
"""

import logging
from typing import Dict
from django.db import transaction

from common.validators import (
    to_decimal,
    quantize_liters,
    get_default_diesel_rate,
    validate_odometer_readings,
)
from diesel_ledger.services import PartyTransactionService
from hauling.models import CoalLog
from ..models import FuelLog, DailyOdoEntry

logger = logging.getLogger(__name__)


class FuelLogRecorderService:
    """
    Service for fuel log writes.

    Side effects only apply to COMPLETED logs, except the party BORROW
    which always mirrors the diesel drawn.
    """

    EDITABLE_FIELDS = [
        'truck', 'driver', 'station', 'party', 'date', 'attribution_date',
        'entry_type', 'odometer', 'previous_odometer', 'fuel_liters',
        'diesel_price', 'agent_id', 'status', 'verification_photos',
        'performance_remarks',
    ]

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.party_service = PartyTransactionService()

    def record_fuel_log(self, data: Dict) -> FuelLog:
        """
        Create a fuel log and apply its side effects.

        Args:
            data: Validated fuel log fields; previous_odometer defaults to the
                truck's current odometer

        Returns:
            Saved fuel log
        """
        truck = data['truck']
        if data.get('previous_odometer') is None:
            data = {**data, 'previous_odometer': truck.current_odometer}

        self._validate_odometers(data['previous_odometer'], data['odometer'])

        try:
            with transaction.atomic():
                fuel_log = FuelLog(**{
                    field: data[field] for field in self.EDITABLE_FIELDS if field in data
                })
                fuel_log.save()
                self._apply_side_effects(fuel_log)

            self.logger.info(
                f"Recorded fuel log {fuel_log.id} for {truck.plate_number}: {fuel_log.fuel_liters}L"
            )
            return fuel_log

        except Exception as e:
            self.logger.error(f"Recording fuel log failed: {str(e)}")
            raise FuelLogError(f"Failed to record fuel log: {str(e)}")

    def update_fuel_log(self, fuel_log: FuelLog, data: Dict) -> FuelLog:
        """Update a fuel log and re-apply its side effects."""
        previous_odometer = data.get('previous_odometer', fuel_log.previous_odometer)
        odometer = data.get('odometer', fuel_log.odometer)
        self._validate_odometers(previous_odometer, odometer)

        old_truck_id = fuel_log.truck_id
        old_date = fuel_log.date
        follows_date = fuel_log.attribution_date == old_date

        try:
            with transaction.atomic():
                for field in self.EDITABLE_FIELDS:
                    if field in data:
                        setattr(fuel_log, field, data[field])
                if 'date' in data and 'attribution_date' not in data and follows_date:
                    fuel_log.attribution_date = None
                fuel_log.save()

                if (old_truck_id, old_date) != (fuel_log.truck_id, fuel_log.date):
                    DailyOdoEntry.objects.filter(truck_id=old_truck_id, date=old_date).delete()

                self._apply_side_effects(fuel_log)

            self.logger.info(f"Updated fuel log {fuel_log.id}")
            return fuel_log

        except Exception as e:
            self.logger.error(f"Updating fuel log {fuel_log.id} failed: {str(e)}")
            raise FuelLogError(f"Failed to update fuel log: {str(e)}")

    def delete_fuel_log(self, fuel_log: FuelLog) -> None:
        """Delete a fuel log with its daily odometer row and party BORROW."""
        try:
            with transaction.atomic():
                log_id = fuel_log.id
                DailyOdoEntry.objects.filter(truck_id=fuel_log.truck_id, date=fuel_log.date).delete()
                self.party_service.remove_fuel_log_borrow(fuel_log)
                fuel_log.delete()

            self.logger.info(f"Deleted fuel log {log_id}")

        except Exception as e:
            self.logger.error(f"Deleting fuel log failed: {str(e)}")
            raise FuelLogError(f"Failed to delete fuel log: {str(e)}")

    def _validate_odometers(self, previous_odometer, odometer):
        errors = validate_odometer_readings(previous_odometer, odometer)
        if errors:
            raise FuelLogError("; ".join(errors))

    def _apply_side_effects(self, fuel_log: FuelLog) -> None:
        if fuel_log.is_completed:
            truck = fuel_log.truck
            truck.current_odometer = fuel_log.odometer
            truck.save(update_fields=['current_odometer', 'updated_at'])

            self.upsert_daily_odo(fuel_log)
            self.backfill_coal_logs(
                fuel_log.truck,
                fuel_log.attribution_date,
                fuel_log.driver,
                fuel_log.fuel_liters,
                fuel_log.diesel_price,
            )

        self.party_service.sync_fuel_log_borrow(fuel_log)

    def upsert_daily_odo(self, fuel_log: FuelLog) -> DailyOdoEntry:
        """Upsert the (truck, date) odometer row from a completed fill."""
        entry, _ = DailyOdoEntry.objects.update_or_create(
            truck=fuel_log.truck,
            date=fuel_log.date,
            defaults={
                'opening_odometer': fuel_log.previous_odometer,
                'closing_odometer': fuel_log.odometer,
            }
        )
        return entry

    def backfill_coal_logs(self, truck, attribution_date, driver, total_liters, rate=None) -> int:
        """
        Spread a fill over the coal trips of its attribution date.

        Args:
            truck: Truck that was fuelled
            attribution_date: Production date the fill is charged to
            driver: Driver to stamp on the trips
            total_liters: Litres filled
            rate: Diesel price; falls back to the default diesel rate

        Returns:
            Number of coal logs updated
        """
        coal_logs = CoalLog.objects.filter(truck=truck, date=attribution_date)
        trip_count = coal_logs.count()
        if trip_count == 0:
            return 0

        rate = to_decimal(rate)
        if rate <= 0:
            rate = get_default_diesel_rate()

        updated = coal_logs.update(
            driver=driver,
            diesel_liters=quantize_liters(to_decimal(total_liters) / trip_count),
            diesel_rate=rate,
        )
        self.logger.info(
            f"Back-filled {updated} coal logs for {truck.plate_number} on {attribution_date}"
        )
        return updated


class FuelLogError(Exception):
    """Exception raised when a fuel log cannot be recorded."""

    pass
