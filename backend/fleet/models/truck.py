"""
Truck model for fleet app.

Contains the Truck model representing a vehicle in either the coal or the
mining fleet, with its statutory document expiry dates and status history.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone


class Truck(models.Model):
    """
    A vehicle registered with the carting company.

    Attributes:
        id: UUID primary key
        plate_number: Registration plate (unique)
        fleet_type: COAL haulage or MINING
        sub_type: DISPATCH or INTERNAL, mining trucks only
        current_odometer: Last known odometer reading, updated by fuel logs
        status: Operational status (ACTIVE, MAINTENANCE, IDLE, BREAKDOWN)
        *_expiry: Statutory document expiry dates used for compliance alerts
        status_history: List of {date, status, remarks}, newest first
    """

    class WheelConfigChoices(models.TextChoices):
        TEN = '10 WHEEL', '10 Wheel'
        TWELVE = '12 WHEEL', '12 Wheel'
        FOURTEEN = '14 WHEEL', '14 Wheel'
        SIXTEEN = '16 WHEEL', '16 Wheel'

    class StatusChoices(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        MAINTENANCE = 'MAINTENANCE', 'Maintenance'
        IDLE = 'IDLE', 'Idle'
        BREAKDOWN = 'BREAKDOWN', 'Breakdown'

    class FleetTypeChoices(models.TextChoices):
        MINING = 'MINING', 'Mining'
        COAL = 'COAL', 'Coal'

    class SubTypeChoices(models.TextChoices):
        DISPATCH = 'DISPATCH', 'Dispatch'
        INTERNAL = 'INTERNAL', 'Internal'

    # Document fields checked by the compliance service, in display order
    DOCUMENT_FIELDS = [
        ('rc_expiry', 'RC'),
        ('fitness_expiry', 'Fitness'),
        ('insurance_expiry', 'Insurance'),
        ('pucc_expiry', 'PUCC'),
        ('tax_expiry', 'Road Tax'),
        ('permit_expiry', 'Permit'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the truck"
    )

    plate_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Vehicle registration plate"
    )
    transporter_name = models.CharField(
        max_length=150,
        blank=True,
        default='',
        help_text="Owner or transporter operating the vehicle"
    )
    model = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Make and model"
    )
    wheel_config = models.CharField(
        max_length=10,
        choices=WheelConfigChoices.choices,
        default=WheelConfigChoices.TEN,
        help_text="Axle/wheel configuration"
    )
    current_odometer = models.PositiveIntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Last recorded odometer reading in km"
    )
    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
        help_text="Current operational status"
    )
    remarks = models.TextField(
        blank=True,
        default='',
        help_text="Free-form remarks"
    )
    fleet_type = models.CharField(
        max_length=10,
        choices=FleetTypeChoices.choices,
        default=FleetTypeChoices.COAL,
        help_text="Fleet the truck belongs to"
    )
    sub_type = models.CharField(
        max_length=10,
        choices=SubTypeChoices.choices,
        null=True,
        blank=True,
        help_text="Mining sub-fleet (dispatch or internal)"
    )

    rc_expiry = models.DateField(null=True, blank=True, help_text="Registration certificate expiry")
    fitness_expiry = models.DateField(null=True, blank=True, help_text="Fitness certificate expiry")
    insurance_expiry = models.DateField(null=True, blank=True, help_text="Insurance expiry")
    pucc_expiry = models.DateField(null=True, blank=True, help_text="Pollution certificate expiry")
    tax_expiry = models.DateField(null=True, blank=True, help_text="Road tax expiry")
    permit_expiry = models.DateField(null=True, blank=True, help_text="Permit expiry")

    status_history = models.JSONField(
        default=list,
        blank=True,
        help_text="Status changes as {date, status, remarks}, newest first"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fleet_truck'
        ordering = ['plate_number']
        verbose_name = 'Truck'
        verbose_name_plural = 'Trucks'
        indexes = [
            models.Index(fields=['fleet_type']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.plate_number} ({self.fleet_type})"

    def save(self, *args, **kwargs):
        """Override save to keep plate numbers normalised and sub-type consistent."""
        if self.plate_number:
            self.plate_number = self.plate_number.strip().upper()
        if self.fleet_type != self.FleetTypeChoices.MINING:
            self.sub_type = None
        super().save(*args, **kwargs)

    def change_status(self, new_status, remarks='', on_date=None):
        """
        Change the truck status and record the change in status history.

        Args:
            new_status: One of StatusChoices
            remarks: Reason for the change
            on_date: Date of the change, defaults to today

        Returns:
            The history entry that was recorded
        """
        if new_status not in self.StatusChoices.values:
            raise ValueError(f"Unknown truck status: {new_status}")

        on_date = on_date or timezone.localdate()
        entry = {
            'date': on_date.isoformat(),
            'status': new_status,
            'remarks': remarks or '',
        }
        self.status = new_status
        self.status_history = [entry] + list(self.status_history or [])
        self.save()
        return entry

    def get_document_expiries(self):
        """Get (label, expiry date) pairs for all statutory documents."""
        return [(label, getattr(self, field)) for field, label in self.DOCUMENT_FIELDS]
