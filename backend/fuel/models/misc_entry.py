"""
Misc fuel entry model for fuel app.

Diesel drawn from a station for anything other than a fleet truck fill:
personal or office vehicles, bulk transfers into an internal tanker, and
the bridge entries mirrored from diesel party transactions.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator

from common.validators import validate_liters, quantize_money


class MiscFuelEntry(models.Model):
    """
    Non-fleet diesel movement out of a station.

    For BULK_TRANSFER entries ``destination_station`` is the internal tanker
    receiving the stock.
    """

    class UsageTypeChoices(models.TextChoices):
        PERSONAL = 'PERSONAL', 'Personal'
        OFFICE = 'OFFICE', 'Office'
        BULK_TRANSFER = 'BULK_TRANSFER', 'Bulk Transfer'
        OTHER = 'OTHER', 'Other'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the entry"
    )
    station = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.CASCADE,
        related_name='misc_entries',
        help_text="Station the diesel was drawn from"
    )
    date = models.DateField(help_text="Entry date")
    vehicle_description = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Vehicle or purpose description"
    )
    usage_type = models.CharField(
        max_length=15,
        choices=UsageTypeChoices.choices,
        default=UsageTypeChoices.OTHER,
        help_text="Usage category"
    )
    fuel_liters = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[validate_liters],
        help_text="Litres drawn"
    )
    diesel_price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0)],
        help_text="Price per litre (Rs)"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        help_text="Litres x price, computed on save"
    )
    invoice_no = models.CharField(max_length=50, blank=True, default='')
    receiver_name = models.CharField(max_length=100, blank=True, default='')
    remarks = models.TextField(blank=True, default='')
    destination_station = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inbound_entries',
        help_text="Internal tanker receiving a bulk transfer"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fuel_misc_entry'
        ordering = ['-date', '-created_at']
        verbose_name = 'Misc Fuel Entry'
        verbose_name_plural = 'Misc Fuel Entries'
        indexes = [
            models.Index(fields=['station', 'date']),
            models.Index(fields=['destination_station', 'date']),
        ]

    def __str__(self):
        return f"{self.usage_type} {self.fuel_liters}L on {self.date}"

    def save(self, *args, **kwargs):
        """Override save to keep amount equal to litres x price."""
        self.amount = quantize_money((self.fuel_liters or 0) * (self.diesel_price or 0))
        super().save(*args, **kwargs)

    @property
    def is_self_transfer(self):
        """Receipt bridge whose source and destination are the same tanker."""
        return self.destination_station_id is not None and self.destination_station_id == self.station_id
