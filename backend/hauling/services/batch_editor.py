"""
Batch Editor Service.

Applies edits to every trip of a daily (date, truck) batch at once:
- trip, stock and air adjustments with mandatory remarks
- moving the batch to another date, sites and driver
- adding blank trips that inherit the batch's adjustments

After every edit the batch payout is written to its first trip and zeroed
on the others, so summing stored payouts over a batch counts it once.

Single Responsibility: Batch-wide trip edits only.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.db import transaction

from common.validators import to_decimal
from ..models import CoalLog, MiningLog
from .coal_batches import CoalBatchAggregatorService
from .mining_batches import MiningBatchAggregatorService

logger = logging.getLogger(__name__)


class BatchEditorService:
    """
    Service for batch-wide edits of coal or mining trips.

    Coal payouts follow CoalBatchAggregatorService.batch_financials and
    mining payouts MiningBatchAggregatorService.batch_financials.
    """

    KIND_COAL = 'coal'
    KIND_MINING = 'mining'

    FIELD_TRIP = 'trip'
    FIELD_STOCK = 'stock'
    FIELD_AIR = 'air'
    ADJUSTMENT_FIELDS = [FIELD_TRIP, FIELD_STOCK, FIELD_AIR]

    MAX_BULK_ROWS = 50

    def __init__(self, kind: str = KIND_COAL):
        if kind not in (self.KIND_COAL, self.KIND_MINING):
            raise BatchEditError(f"Unknown batch kind: {kind}")
        self.kind = kind
        self.model = CoalLog if kind == self.KIND_COAL else MiningLog
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def batch_logs(self, on_date: date, truck_id, log_type: Optional[str] = None) -> List:
        """Trips of a batch in entry order; mining batches are also split by trip type."""
        queryset = self.model.objects.filter(date=on_date, truck_id=truck_id)
        if self.kind == self.KIND_MINING and log_type:
            queryset = queryset.filter(log_type=log_type)
        return list(queryset.order_by('created_at'))

    def financials(self, entries: int, trip_adjustment: int, include_extra_in_roll: bool = False) -> Dict:
        if self.kind == self.KIND_COAL:
            return CoalBatchAggregatorService().batch_financials(
                entries, trip_adjustment, include_extra_in_roll
            )
        return MiningBatchAggregatorService().batch_financials(entries, trip_adjustment)

    def _batch_or_error(self, on_date: date, truck_id, log_type: Optional[str]) -> List:
        logs = self.batch_logs(on_date, truck_id, log_type)
        if not logs:
            raise BatchEditError(f"No {self.kind} trips for truck {truck_id} on {on_date}")
        return logs

    def _trip_adjustment(self, logs) -> int:
        adjustment = 0
        for log in logs:
            if log.trip_adjustment:
                adjustment = log.trip_adjustment
        return adjustment

    def _stamp_financials(self, logs, financials: Dict) -> None:
        for index, log in enumerate(logs):
            log.staff_welfare = financials['staff_welfare'] if index == 0 else Decimal('0')
            log.roll_amount = financials['roll_amount'] if index == 0 else Decimal('0')

    def _save_all(self, logs) -> None:
        for log in logs:
            log.save()

    def apply_adjustment(
        self,
        on_date: date,
        truck_id,
        field: str,
        value,
        remarks: str,
        include_extra_in_roll: bool = False,
        log_type: Optional[str] = None,
    ) -> Dict:
        """
        Set a trip, stock or air adjustment on every trip of a batch.

        Args:
            on_date, truck_id, log_type: Batch identity
            field: trip, stock or air
            value: Extra trips (trip) or litres (stock, air)
            remarks: Mandatory explanation stored with the adjustment
            include_extra_in_roll: Whether coal trip adjustments count toward the roll

        Returns:
            Dict with updated log ids and the batch payout
        """
        if field not in self.ADJUSTMENT_FIELDS:
            raise BatchEditError(f"Unknown adjustment: {field}")
        remarks = (remarks or '').strip()
        if not remarks:
            raise BatchEditError("Remarks are mandatory for an adjustment")

        try:
            with transaction.atomic():
                logs = self._batch_or_error(on_date, truck_id, log_type)
                trip_adjustment = int(value) if field == self.FIELD_TRIP else self._trip_adjustment(logs)
                financials = self.financials(len(logs), trip_adjustment, include_extra_in_roll)

                for log in logs:
                    if field == self.FIELD_TRIP:
                        log.trip_adjustment = trip_adjustment
                        log.trip_remarks = remarks
                    elif field == self.FIELD_STOCK:
                        log.diesel_adjustment = to_decimal(value)
                        log.diesel_adj_type = self.model.DieselAdjTypeChoices.STOCK
                        log.diesel_remarks = remarks
                    else:
                        log.air_adjustment = to_decimal(value)
                        log.air_remarks = remarks
                self._stamp_financials(logs, financials)
                self._save_all(logs)

            self.logger.info(f"Applied {field} adjustment to {len(logs)} {self.kind} trips on {on_date}")
            return self._result(logs, financials)

        except BatchEditError:
            raise
        except Exception as e:
            self.logger.error(f"Batch adjustment failed: {str(e)}")
            raise BatchEditError(f"Failed to apply adjustment: {str(e)}")

    def edit_batch(
        self,
        on_date: date,
        truck_id,
        changes: Dict,
        include_extra_in_roll: bool = False,
        log_type: Optional[str] = None,
    ) -> Dict:
        """
        Move a batch to another date and set its driver (and coal sites).

        Args:
            changes: new_date, driver (may be None), and for coal origin_site
                and destination_site; keys left out are not changed
        """
        try:
            with transaction.atomic():
                logs = self._batch_or_error(on_date, truck_id, log_type)
                financials = self.financials(len(logs), self._trip_adjustment(logs), include_extra_in_roll)

                for log in logs:
                    if changes.get('new_date'):
                        log.date = changes['new_date']
                    if 'driver' in changes:
                        log.driver = changes['driver']
                    if self.kind == self.KIND_COAL:
                        if 'origin_site' in changes:
                            log.origin_site = changes['origin_site']
                        if 'destination_site' in changes:
                            log.destination_site = changes['destination_site']
                self._stamp_financials(logs, financials)
                self._save_all(logs)

            self.logger.info(f"Edited {self.kind} batch of truck {truck_id} on {on_date}")
            return self._result(logs, financials)

        except BatchEditError:
            raise
        except Exception as e:
            self.logger.error(f"Batch edit failed: {str(e)}")
            raise BatchEditError(f"Failed to edit batch: {str(e)}")

    def bulk_add(
        self,
        on_date: date,
        truck_id,
        count: int,
        include_extra_in_roll: bool = False,
        log_type: Optional[str] = None,
    ) -> Dict:
        """
        Add blank trips to a batch.

        New trips copy the batch's driver, adjustments and remarks (and for
        mining the chalan, customer, agent, loader and material of the first
        trip); weights stay zero for later entry.
        """
        if count <= 0 or count > self.MAX_BULK_ROWS:
            raise BatchEditError(f"Row count must be between 1 and {self.MAX_BULK_ROWS}")

        try:
            with transaction.atomic():
                logs = self._batch_or_error(on_date, truck_id, log_type)
                trip_adjustment = self._trip_adjustment(logs)
                financials = self.financials(len(logs) + count, trip_adjustment, include_extra_in_roll)

                new_logs = [self._blank_trip(logs, trip_adjustment) for _ in range(count)]
                all_logs = logs + new_logs
                self._stamp_financials(all_logs, financials)
                self._save_all(all_logs)

            self.logger.info(f"Added {count} {self.kind} trips to truck {truck_id} on {on_date}")
            return self._result(all_logs, financials)

        except BatchEditError:
            raise
        except Exception as e:
            self.logger.error(f"Bulk add failed: {str(e)}")
            raise BatchEditError(f"Failed to add trips: {str(e)}")

    def _blank_trip(self, logs, trip_adjustment: int):
        first = logs[0]
        latest = logs[-1]
        shared = {
            'date': first.date,
            'truck_id': first.truck_id,
            'driver_id': first.driver_id,
            'trip_adjustment': trip_adjustment,
            'diesel_adjustment': latest.diesel_adjustment,
            'diesel_adj_type': latest.diesel_adj_type,
            'air_adjustment': latest.air_adjustment,
            'trip_remarks': latest.trip_remarks,
            'diesel_remarks': latest.diesel_remarks,
            'air_remarks': latest.air_remarks,
            'agent_id': first.agent_id,
        }
        if self.kind == self.KIND_COAL:
            return CoalLog(
                origin_site=first.origin_site,
                destination_site=first.destination_site,
                diesel_rate=first.diesel_rate,
                **shared,
            )
        return MiningLog(
            log_type=first.log_type,
            chalan_no=first.chalan_no,
            customer_name=first.customer_name,
            carting_agent=first.carting_agent,
            loader=first.loader,
            material=first.material,
            **shared,
        )

    def _result(self, logs, financials: Dict) -> Dict:
        return {
            'count': len(logs),
            'log_ids': [str(log.id) for log in logs],
            **financials,
        }


class BatchEditError(Exception):
    """Exception raised when a batch edit cannot be applied."""

    pass
