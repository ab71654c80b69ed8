"""
Coal log model for hauling app.

Contains the CoalLog model representing one coal trip of a haulage truck,
with weighbridge weights and the diesel figures used for daily batches.
"""

import uuid
from decimal import Decimal
from django.db import models

from common.validators import validate_liters, validate_weight_mt, to_decimal


class CoalLog(models.Model):
    """
    One coal trip.

    Trips of the same truck on the same date form a daily batch. Diesel
    litres and rate are back-filled from the fuel logs attributed to the
    trip date; adjustments and remarks are entered per batch.
    """

    class DieselAdjTypeChoices(models.TextChoices):
        STOCK = 'STOCK', 'Stock'
        OTHER = 'OTHER', 'Other'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the coal trip"
    )
    date = models.DateField(help_text="Trip date")
    truck = models.ForeignKey(
        'fleet.Truck',
        on_delete=models.CASCADE,
        related_name='coal_logs',
        help_text="Truck that made the trip"
    )
    driver = models.ForeignKey(
        'fleet.Driver',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='coal_logs',
        help_text="Driver on the trip"
    )
    pass_no = models.CharField(max_length=50, blank=True, default='', help_text="Transit pass number")
    origin_site = models.CharField(max_length=100, blank=True, default='', help_text="Loading site")
    destination_site = models.CharField(max_length=100, blank=True, default='', help_text="Unloading site")

    gross_weight = models.DecimalField(
        max_digits=8, decimal_places=3, default=Decimal('0'),
        validators=[validate_weight_mt], help_text="Gross weight (MT)"
    )
    tare_weight = models.DecimalField(
        max_digits=8, decimal_places=3, default=Decimal('0'),
        validators=[validate_weight_mt], help_text="Tare weight (MT)"
    )
    net_weight = models.DecimalField(
        max_digits=8, decimal_places=3, default=Decimal('0'),
        validators=[validate_weight_mt], help_text="Net weight (MT)"
    )

    diesel_liters = models.DecimalField(
        max_digits=10, decimal_places=3, default=Decimal('0'),
        validators=[validate_liters], help_text="Diesel litres attributed to this trip"
    )
    diesel_rate = models.DecimalField(
        max_digits=8, decimal_places=2, default=Decimal('0'),
        help_text="Diesel rate (Rs/L)"
    )
    diesel_adjustment = models.DecimalField(
        max_digits=10, decimal_places=3, default=Decimal('0'),
        help_text="Diesel carried to the next day (stock) or otherwise adjusted"
    )
    air_adjustment = models.DecimalField(
        max_digits=10, decimal_places=3, default=Decimal('0'),
        help_text="Diesel adjusted for air in the tank"
    )
    diesel_adj_type = models.CharField(
        max_length=10,
        choices=DieselAdjTypeChoices.choices,
        default=DieselAdjTypeChoices.OTHER,
    )
    trip_adjustment = models.IntegerField(
        default=0,
        help_text="Extra trips credited to the batch"
    )
    trip_remarks = models.CharField(max_length=255, blank=True, default='')
    diesel_remarks = models.CharField(max_length=255, blank=True, default='')
    air_remarks = models.CharField(max_length=255, blank=True, default='')
    staff_welfare = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0'),
        help_text="Stored staff welfare payout"
    )
    roll_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0'),
        help_text="Stored roll bonus"
    )
    agent_id = models.CharField(
        max_length=100, blank=True, default='',
        help_text="Agent who recorded the trip"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hauling_coal_log'
        ordering = ['-date', 'created_at']
        verbose_name = 'Coal Log'
        verbose_name_plural = 'Coal Logs'
        indexes = [
            models.Index(fields=['truck', 'date']),
            models.Index(fields=['date']),
        ]

    def __str__(self):
        return f"Coal trip {self.truck_id} on {self.date} ({self.net_weight} MT)"

    def save(self, *args, **kwargs):
        """Override save to derive net weight from gross and tare when not given."""
        if not self.net_weight and self.gross_weight:
            self.net_weight = max(Decimal('0'), to_decimal(self.gross_weight) - to_decimal(self.tare_weight))
        super().save(*args, **kwargs)
