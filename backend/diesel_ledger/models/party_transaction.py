"""
Party diesel transaction model for diesel_ledger app.

Contains the PartyDieselTransaction model recording diesel and cash
movements between the company and a diesel party.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator


class PartyDieselTransaction(models.Model):
    """
    One movement on a party account.

    Transaction types:
        BORROW: party gave us diesel (debit)
        SETTLE_LITERS: we repaid in litres from a tanker (credit)
        SETTLE_CASH: we paid in cash (credit)
        DIESEL_RECEIVED: customer gave us diesel as payment (debit)

    Litres, price and amount are optional; aggregations treat missing
    values as zero.
    """

    class TransactionTypeChoices(models.TextChoices):
        BORROW = 'BORROW', 'Borrow'
        SETTLE_LITERS = 'SETTLE_LITERS', 'Settle in Liters'
        SETTLE_CASH = 'SETTLE_CASH', 'Settle in Cash'
        DIESEL_RECEIVED = 'DIESEL_RECEIVED', 'Diesel Received'

    DEBIT_TYPES = (TransactionTypeChoices.BORROW, TransactionTypeChoices.DIESEL_RECEIVED)

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the transaction"
    )
    party = models.ForeignKey(
        'diesel_ledger.DieselParty',
        on_delete=models.CASCADE,
        related_name='transactions',
        help_text="Party account"
    )
    date = models.DateField(help_text="Transaction date")
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionTypeChoices.choices,
        help_text="Movement type"
    )
    fuel_liters = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Litres involved"
    )
    diesel_price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Price per litre at the time (Rs)"
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Value of the movement (Rs)"
    )
    fuel_log = models.OneToOneField(
        'fuel.FuelLog',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='party_transaction',
        help_text="Fleet fuel log that raised this BORROW"
    )
    source_station = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='party_settlements',
        help_text="Tanker the litres were repaid from (SETTLE_LITERS)"
    )
    dest_tanker = models.ForeignKey(
        'fuel.FuelStation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='party_receipts',
        help_text="Tanker that received the diesel (DIESEL_RECEIVED, customer BORROW)"
    )
    bridge_entry = models.OneToOneField(
        'fuel.MiscFuelEntry',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='party_transaction',
        help_text="Misc fuel entry mirroring this movement in tanker stock"
    )
    invoice_no = models.CharField(max_length=50, blank=True, default='')
    remarks = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'diesel_party_transaction'
        ordering = ['-date', '-created_at']
        verbose_name = 'Party Diesel Transaction'
        verbose_name_plural = 'Party Diesel Transactions'
        indexes = [
            models.Index(fields=['party', 'date']),
            models.Index(fields=['transaction_type']),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.party_id} on {self.date}"

    @property
    def is_debit(self):
        return self.transaction_type in self.DEBIT_TYPES

    @property
    def tanker(self):
        """Tanker involved in the movement, whichever side it is on."""
        return self.source_station or self.dest_tanker
