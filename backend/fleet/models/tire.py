"""
Tire model for fleet app.

Contains the Tire model tracking each tyre through procurement, mounting,
unmounting and scrapping, along with its lifecycle history.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator


class Tire(models.Model):
    """
    A tyre in the inventory.

    History entries are stored oldest first as {date, event, description,
    odometer}. Mounted/Unmounted entries carry the odometer reading used to
    compute run distance.
    """

    class StatusChoices(models.TextChoices):
        NEW = 'NEW', 'New'
        MOUNTED = 'MOUNTED', 'Mounted'
        SPARE = 'SPARE', 'Spare'
        SCRAPPED = 'SCRAPPED', 'Scrapped'
        REPAIR = 'REPAIR', 'Repair'

    EVENT_PROCURED = 'Procured'
    EVENT_MOUNTED = 'Mounted'
    EVENT_UNMOUNTED = 'Unmounted'
    EVENT_SCRAPPED = 'Scrapped'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the tyre"
    )
    serial_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Manufacturer serial number"
    )
    brand = models.CharField(max_length=50, blank=True, default='', help_text="Tyre brand")
    size = models.CharField(max_length=30, blank=True, default='12.00R20', help_text="Tyre size")
    mileage = models.PositiveIntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Kilometres run before registration or at scrapping"
    )
    expected_lifespan = models.PositiveIntegerField(
        default=100000,
        help_text="Expected lifespan in km"
    )
    status = models.CharField(
        max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.NEW,
        help_text="Inventory status"
    )
    truck = models.ForeignKey(
        'fleet.Truck',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tires',
        help_text="Truck the tyre is mounted on"
    )
    position = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Wheel position on the truck"
    )
    manufacturer = models.CharField(max_length=100, blank=True, default='')
    supplier = models.CharField(max_length=100, blank=True, default='')
    bill_number = models.CharField(max_length=50, blank=True, default='')
    mounted_at_odometer = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Truck odometer when the tyre was last mounted"
    )
    scrapped_reason = models.CharField(max_length=255, blank=True, default='')
    last_inspection_date = models.DateField(null=True, blank=True)
    history = models.JSONField(
        default=list,
        blank=True,
        help_text="Lifecycle events, oldest first"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fleet_tire'
        ordering = ['serial_number']
        verbose_name = 'Tire'
        verbose_name_plural = 'Tires'
        indexes = [
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.serial_number} ({self.status})"

    @property
    def is_mounted(self):
        return self.status == self.StatusChoices.MOUNTED and self.truck_id is not None

    def add_history(self, on_date, event, description, odometer=None):
        """Append a lifecycle event to the history (does not save)."""
        entry = {
            'date': on_date.isoformat(),
            'event': event,
            'description': description,
        }
        if odometer is not None:
            entry['odometer'] = int(odometer)
        self.history = list(self.history or []) + [entry]
        return entry
