"""
Mining log model for hauling app.

Contains the MiningLog model for dispatch and purchase trips of mined
material, including loading and unloading weighbridge readings.
"""

import uuid
from decimal import Decimal
from django.db import models

from common.validators import validate_weight_mt, to_decimal


class MiningLog(models.Model):
    """
    One dispatch or purchase trip of mined material.

    On save:
    - loading/unloading nets are derived from their gross and tare
    - shortage = unloading net - loading net when both are known
    - net = unloading net, else loading net, else gross - tare when a
      gross is recorded; an entered net is kept only without any of these
    """

    class LogTypeChoices(models.TextChoices):
        DISPATCH = 'DISPATCH', 'Dispatch'
        PURCHASE = 'PURCHASE', 'Purchase'

    class DieselAdjTypeChoices(models.TextChoices):
        STOCK = 'STOCK', 'Stock'
        OTHER = 'OTHER', 'Other'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the mining trip"
    )
    log_type = models.CharField(
        max_length=10,
        choices=LogTypeChoices.choices,
        default=LogTypeChoices.DISPATCH,
        help_text="Dispatch to a customer or purchase from a supplier"
    )
    date = models.DateField(help_text="Trip date")
    time = models.TimeField(null=True, blank=True, help_text="Trip time")
    chalan_no = models.CharField(max_length=50, blank=True, default='')
    customer_name = models.CharField(max_length=150, blank=True, default='')
    site = models.CharField(max_length=150, blank=True, default='')
    royalty_name = models.CharField(max_length=150, blank=True, default='')
    royalty_pass_no = models.CharField(max_length=50, blank=True, default='')
    royalty_no = models.CharField(max_length=50, blank=True, default='')
    supplier = models.CharField(max_length=150, blank=True, default='')
    customer_site = models.CharField(max_length=150, blank=True, default='')
    truck = models.ForeignKey(
        'fleet.Truck',
        on_delete=models.CASCADE,
        related_name='mining_logs',
        help_text="Truck that made the trip"
    )
    driver = models.ForeignKey(
        'fleet.Driver',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='mining_logs',
    )
    carting_agent = models.CharField(max_length=100, blank=True, default='')
    loader = models.CharField(max_length=100, blank=True, default='')
    material = models.CharField(max_length=100, blank=True, default='')

    gross = models.DecimalField(max_digits=8, decimal_places=3, default=Decimal('0'), validators=[validate_weight_mt])
    tare = models.DecimalField(max_digits=8, decimal_places=3, default=Decimal('0'), validators=[validate_weight_mt])
    net = models.DecimalField(max_digits=8, decimal_places=3, default=Decimal('0'), validators=[validate_weight_mt])

    loading_gross = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    loading_tare = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    loading_net = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    unloading_gross = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    unloading_tare = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    unloading_net = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    shortage = models.DecimalField(
        max_digits=8, decimal_places=3, null=True, blank=True,
        help_text="Unloading net minus loading net (MT)"
    )

    diesel_adjustment = models.DecimalField(
        max_digits=10, decimal_places=3, default=Decimal('0'),
        help_text="Diesel carried to the next working day (stock) or otherwise adjusted"
    )
    air_adjustment = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal('0'))
    diesel_adj_type = models.CharField(
        max_length=10,
        choices=DieselAdjTypeChoices.choices,
        default=DieselAdjTypeChoices.OTHER,
    )
    trip_adjustment = models.IntegerField(default=0, help_text="Extra trips credited to the batch")
    trip_remarks = models.CharField(max_length=255, blank=True, default='')
    diesel_remarks = models.CharField(max_length=255, blank=True, default='')
    air_remarks = models.CharField(max_length=255, blank=True, default='')
    staff_welfare = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    roll_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    agent_id = models.CharField(max_length=100, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hauling_mining_log'
        ordering = ['-date', '-created_at']
        verbose_name = 'Mining Log'
        verbose_name_plural = 'Mining Logs'
        indexes = [
            models.Index(fields=['truck', 'date']),
            models.Index(fields=['date']),
            models.Index(fields=['log_type']),
        ]

    def __str__(self):
        return f"{self.log_type} {self.chalan_no or self.id.hex[:8]} on {self.date}"

    def save(self, *args, **kwargs):
        """Override save to derive net weights and shortage."""
        if self.loading_gross is not None and self.loading_tare is not None:
            self.loading_net = to_decimal(self.loading_gross) - to_decimal(self.loading_tare)
        if self.unloading_gross is not None and self.unloading_tare is not None:
            self.unloading_net = to_decimal(self.unloading_gross) - to_decimal(self.unloading_tare)

        if self.loading_net is not None and self.unloading_net is not None:
            self.shortage = to_decimal(self.unloading_net) - to_decimal(self.loading_net)
        else:
            self.shortage = None

        if self.unloading_net is not None:
            self.net = self.unloading_net
        elif self.loading_net is not None:
            self.net = self.loading_net
        elif self.gross is not None and to_decimal(self.gross) > 0:
            self.net = max(Decimal('0'), to_decimal(self.gross) - to_decimal(self.tare))

        super().save(*args, **kwargs)

    @property
    def effective_net(self):
        """Net weight, falling back to gross - tare for rows saved without it."""
        return to_decimal(self.net) or (to_decimal(self.gross) - to_decimal(self.tare))
