"""
Fuel log model for fuel app.

Contains the FuelLog model recording a diesel fill for a fleet truck,
including odometer readings used for efficiency calculations.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator

from common.validators import validate_liters, quantize_money


class FuelLog(models.Model):
    """
    A diesel fill for a fleet truck.

    The fill is dated ``date`` but charged to the production day
    ``attribution_date`` (defaults to ``date``) for coal batch costing.
    When ``party`` is set the fill was drawn on a diesel party account and
    a linked BORROW transaction is kept in step with it.
    """

    class EntryTypeChoices(models.TextChoices):
        PER_TRIP = 'PER_TRIP', 'Per Trip'
        FULL_TANK = 'FULL_TANK', 'Full Tank'
        PARTIAL_FILL = 'PARTIAL_FILL', 'Partial Fill'

    class StatusChoices(models.TextChoices):
        IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
        COMPLETED = 'COMPLETED', 'Completed'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the fuel log"
    )
    truck = models.ForeignKey(
        'fleet.Truck',
        on_delete=models.CASCADE,
        related_name='fuel_logs',
        help_text="Truck that was fuelled"
    )
    driver = models.ForeignKey(
        'fleet.Driver',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fuel_logs',
        help_text="Driver at the time of fuelling"
    )
    station = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fuel_logs',
        help_text="Pump or tanker that issued the fuel"
    )
    party = models.ForeignKey(
        'diesel_ledger.DieselParty',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fuel_logs',
        help_text="Diesel party account the fuel was drawn on"
    )
    date = models.DateField(help_text="Date of fuelling")
    attribution_date = models.DateField(
        null=True,
        blank=True,
        help_text="Production date the fuel is charged to"
    )
    entry_type = models.CharField(
        max_length=15,
        choices=EntryTypeChoices.choices,
        default=EntryTypeChoices.PER_TRIP,
        help_text="Fill type"
    )
    odometer = models.PositiveIntegerField(help_text="Odometer at fuelling (km)")
    previous_odometer = models.PositiveIntegerField(
        default=0,
        help_text="Odometer at the previous fill (km)"
    )
    fuel_liters = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[validate_liters],
        help_text="Litres filled"
    )
    diesel_price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0)],
        help_text="Price per litre (Rs)"
    )
    agent_id = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Fuel agent who recorded the fill"
    )
    status = models.CharField(
        max_length=15,
        choices=StatusChoices.choices,
        default=StatusChoices.COMPLETED,
        help_text="Completed logs update odometers and coal logs"
    )
    verification_photos = models.JSONField(
        default=dict,
        blank=True,
        help_text="Photo references: plate, odo, pump start/end, tank"
    )
    performance_remarks = models.TextField(
        blank=True,
        default='',
        help_text="Reason recorded for poor performance"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fuel_log'
        ordering = ['-date', '-created_at']
        verbose_name = 'Fuel Log'
        verbose_name_plural = 'Fuel Logs'
        indexes = [
            models.Index(fields=['truck', 'date']),
            models.Index(fields=['truck', 'attribution_date']),
            models.Index(fields=['date']),
        ]

    def __str__(self):
        return f"Fuel {self.truck_id} {self.date} {self.fuel_liters}L"

    def save(self, *args, **kwargs):
        """Override save to default the attribution date to the fill date."""
        if not self.attribution_date:
            self.attribution_date = self.date
        super().save(*args, **kwargs)

    @property
    def amount(self):
        """Cost of the fill (litres x price)."""
        return quantize_money((self.fuel_liters or 0) * (self.diesel_price or 0))

    @property
    def distance_km(self):
        return max(0, (self.odometer or 0) - (self.previous_odometer or 0))

    @property
    def is_completed(self):
        return self.status == self.StatusChoices.COMPLETED
