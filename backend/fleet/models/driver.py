"""
Driver model for fleet app.
"""

import uuid
from django.db import models


class Driver(models.Model):
    """Driver assigned to fleet trucks for coal and mining trips."""

    class StatusChoices(models.TextChoices):
        ON_DUTY = 'ON Duty', 'On Duty'
        OFF_DUTY = 'OFF Duty', 'Off Duty'
        SUSPENDED = 'Suspended', 'Suspended'

    class DriverTypeChoices(models.TextChoices):
        PERMANENT = 'Permanent', 'Permanent'
        TEMPORARY = 'Temporary', 'Temporary'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the driver"
    )
    name = models.CharField(
        max_length=100,
        help_text="Driver's full name"
    )
    license_number = models.CharField(
        max_length=50,
        blank=True,
        default='',
        help_text="Driving licence number"
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Contact phone number"
    )
    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.ON_DUTY,
        help_text="Duty status"
    )
    driver_type = models.CharField(
        max_length=20,
        choices=DriverTypeChoices.choices,
        default=DriverTypeChoices.PERMANENT,
        help_text="Employment type"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fleet_driver'
        ordering = ['name']
        verbose_name = 'Driver'
        verbose_name_plural = 'Drivers'

    def __str__(self):
        return self.name
