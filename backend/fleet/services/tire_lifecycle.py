"""
Tire Lifecycle Service.

Handles mounting, unmounting and scrapping tyres, and computes tyre mileage
from the Mounted/Unmounted history.

Single Responsibility: Tyre state transitions and mileage only.
"""

import logging
from datetime import date
from typing import Dict, Optional
from django.db import transaction
from django.utils import timezone

from ..models import Tire

logger = logging.getLogger(__name__)


class TireLifecycleService:
    """
    Service for tyre state transitions.

    Every transition appends a history entry. Run distance for a mount
    period is the unmount odometer minus the mount odometer; a tyre still
    mounted accrues an ongoing run up to its truck's current odometer.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def mount(self, tire: Tire, truck, position: str, odometer: Optional[int] = None,
              on_date: Optional[date] = None) -> Tire:
        """
        Mount a tyre on a truck.

        Args:
            tire: Tyre to mount
            truck: Target truck
            position: Wheel position
            odometer: Truck odometer at mounting, defaults to truck.current_odometer
            on_date: Event date, defaults to today

        Returns:
            Updated tyre
        """
        if tire.status == Tire.StatusChoices.SCRAPPED:
            raise TireLifecycleError(f"Tyre {tire.serial_number} is scrapped and cannot be mounted")
        if tire.is_mounted:
            raise TireLifecycleError(
                f"Tyre {tire.serial_number} is already mounted on {tire.truck.plate_number}"
            )

        odometer = truck.current_odometer if odometer is None else int(odometer)
        on_date = on_date or timezone.localdate()

        with transaction.atomic():
            tire.truck = truck
            tire.position = position or ''
            tire.status = Tire.StatusChoices.MOUNTED
            tire.mounted_at_odometer = odometer
            tire.add_history(
                on_date,
                Tire.EVENT_MOUNTED,
                f"Mounted on {truck.plate_number} at {tire.position or 'N/A'}. ODO: {odometer}",
                odometer=odometer,
            )
            tire.save()

        self.logger.info(f"Mounted tyre {tire.serial_number} on {truck.plate_number}")
        return tire

    def unmount(self, tire: Tire, odometer: Optional[int] = None, on_date: Optional[date] = None,
                new_status: str = Tire.StatusChoices.SPARE) -> Tire:
        """
        Remove a tyre from its truck.

        Args:
            tire: Mounted tyre
            odometer: Truck odometer at removal, defaults to truck.current_odometer
            on_date: Event date, defaults to today
            new_status: Status after removal (SPARE or REPAIR)

        Returns:
            Updated tyre
        """
        if not tire.is_mounted:
            raise TireLifecycleError(f"Tyre {tire.serial_number} is not mounted")
        if new_status not in (Tire.StatusChoices.SPARE, Tire.StatusChoices.REPAIR):
            raise TireLifecycleError(f"Invalid status after unmount: {new_status}")

        truck = tire.truck
        odometer = truck.current_odometer if odometer is None else int(odometer)
        if tire.mounted_at_odometer is not None and odometer < tire.mounted_at_odometer:
            raise TireLifecycleError("Unmount odometer cannot be lower than the mount odometer")

        on_date = on_date or timezone.localdate()

        with transaction.atomic():
            tire.add_history(
                on_date,
                Tire.EVENT_UNMOUNTED,
                f"Removed from {truck.plate_number} at {odometer} KM",
                odometer=odometer,
            )
            tire.truck = None
            tire.position = ''
            tire.mounted_at_odometer = None
            tire.status = new_status
            tire.save()

        self.logger.info(f"Unmounted tyre {tire.serial_number} from {truck.plate_number}")
        return tire

    def scrap(self, tire: Tire, reason: str, on_date: Optional[date] = None) -> Tire:
        """Scrap a tyre, unmounting it first when needed, and freeze its total mileage."""
        if tire.status == Tire.StatusChoices.SCRAPPED:
            raise TireLifecycleError(f"Tyre {tire.serial_number} is already scrapped")

        on_date = on_date or timezone.localdate()

        with transaction.atomic():
            if tire.is_mounted:
                self.unmount(tire, on_date=on_date)

            tire.mileage = self.mileage_details(tire)['total_mileage']
            tire.status = Tire.StatusChoices.SCRAPPED
            tire.scrapped_reason = reason or ''
            tire.add_history(on_date, Tire.EVENT_SCRAPPED, f"Scrapped: {reason or 'No reason given'}")
            tire.save()

        self.logger.info(f"Scrapped tyre {tire.serial_number}")
        return tire

    def mileage_details(self, tire: Tire) -> Dict:
        """
        Compute per-event run distance and total mileage from history.

        Returns:
            Dict with history (each entry gets run_distance) and total_mileage
        """
        total_mileage = 0
        active_mount_odo = None
        active_index = None
        processed = []

        for entry in tire.history or []:
            run_distance = 0
            odometer = entry.get('odometer')

            if entry.get('event') == Tire.EVENT_MOUNTED and odometer is not None:
                active_mount_odo = int(odometer)
                active_index = len(processed)
            elif entry.get('event') == Tire.EVENT_UNMOUNTED and odometer is not None:
                if active_mount_odo is not None:
                    run_distance = max(0, int(odometer) - active_mount_odo)
                    total_mileage += run_distance
                    active_mount_odo = None
                    active_index = None

            processed.append({**entry, 'run_distance': run_distance})

        if tire.is_mounted and active_mount_odo is not None:
            ongoing = max(0, tire.truck.current_odometer - active_mount_odo)
            total_mileage += ongoing
            processed[active_index]['run_distance'] = ongoing

        return {'history': processed, 'total_mileage': total_mileage}


class TireLifecycleError(Exception):
    """Exception raised when a tyre state transition is not allowed."""

    pass
