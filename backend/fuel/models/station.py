"""
Fuel station model for fuel app.

A fuel station is either an external pump the company buys diesel from on
credit, or an internal tanker holding company-owned stock.
"""

import uuid
from django.db import models


class FuelStation(models.Model):
    """
    External pump or internal tanker.

    Attributes:
        name: Unique station name
        location: Free-form location
        is_internal: True for company tankers (stock assets, not creditors)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the station"
    )
    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Station or tanker name"
    )
    location = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Station location"
    )
    is_internal = models.BooleanField(
        default=False,
        help_text="Internal tanker holding company stock"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fuel_station'
        ordering = ['name']
        verbose_name = 'Fuel Station'
        verbose_name_plural = 'Fuel Stations'

    def __str__(self):
        kind = 'Tanker' if self.is_internal else 'Pump'
        return f"{self.name} ({kind})"
