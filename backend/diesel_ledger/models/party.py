"""
Diesel party model for diesel_ledger app.
"""

import uuid
from django.db import models


class DieselParty(models.Model):
    """
    A counterparty the company exchanges diesel with.

    Suppliers lend diesel that is repaid in litres or cash; customers pay
    for services in diesel.
    """

    class PartyTypeChoices(models.TextChoices):
        SUPPLIER = 'SUPPLIER', 'Supplier'
        CUSTOMER = 'CUSTOMER', 'Customer'
        OTHER = 'OTHER', 'Other'

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the party"
    )
    name = models.CharField(
        max_length=150,
        unique=True,
        help_text="Party name"
    )
    party_type = models.CharField(
        max_length=10,
        choices=PartyTypeChoices.choices,
        default=PartyTypeChoices.SUPPLIER,
        help_text="Relationship with the party"
    )
    contact = models.CharField(max_length=100, blank=True, default='')
    phone = models.CharField(max_length=20, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'diesel_party'
        ordering = ['name']
        verbose_name = 'Diesel Party'
        verbose_name_plural = 'Diesel Parties'

    def __str__(self):
        return f"{self.name} ({self.party_type})"

    @property
    def is_supplier(self):
        return self.party_type == self.PartyTypeChoices.SUPPLIER
