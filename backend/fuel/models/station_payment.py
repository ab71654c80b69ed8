"""
Station payment model for fuel app.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator


class StationPayment(models.Model):
    """Payment made to an external fuel station against purchases on credit."""

    class PaymentMethodChoices(models.TextChoices):
        ONLINE = 'Online Transfer', 'Online Transfer'
        CHEQUE = 'Cheque', 'Cheque'
        CASH = 'Cash', 'Cash'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the payment"
    )
    station = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.CASCADE,
        related_name='payments',
        help_text="Station that was paid"
    )
    date = models.DateField(help_text="Payment date")
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Amount paid (Rs)"
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethodChoices.choices,
        default=PaymentMethodChoices.ONLINE,
    )
    reference_no = models.CharField(max_length=50, blank=True, default='')
    remarks = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'fuel_station_payment'
        ordering = ['-date', '-created_at']
        verbose_name = 'Station Payment'
        verbose_name_plural = 'Station Payments'

    def __str__(self):
        return f"Payment {self.amount} to {self.station_id} on {self.date}"
