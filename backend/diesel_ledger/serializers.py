"""
Diesel Ledger Serializers.

Provides serializers for diesel parties and their transactions, the
transaction write request and the party ledger query.
"""

from rest_framework import serializers

from fuel.models import FuelStation
from .models import DieselParty, PartyDieselTransaction
from .services import LedgerCalculatorService


class DieselPartySerializer(serializers.ModelSerializer):
    """Serializer for DieselParty CRUD."""

    class Meta:
        model = DieselParty
        fields = [
            'id', 'name', 'party_type', 'contact', 'phone', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Party name is required")
        return value


class PartyDieselTransactionSerializer(serializers.ModelSerializer):
    """Read serializer for party transactions."""

    party_name = serializers.CharField(source='party.name', read_only=True)
    tanker = serializers.SerializerMethodField()
    is_debit = serializers.BooleanField(read_only=True)

    class Meta:
        model = PartyDieselTransaction
        fields = [
            'id', 'party', 'party_name', 'date', 'transaction_type',
            'fuel_liters', 'diesel_price', 'amount', 'invoice_no', 'remarks',
            'fuel_log', 'source_station', 'dest_tanker', 'tanker',
            'bridge_entry', 'is_debit', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_tanker(self, obj):
        tanker = obj.tanker
        return str(tanker.id) if tanker else None


class PartyTransactionWriteSerializer(serializers.Serializer):
    """
    Request serializer for creating or editing a party transaction.

    ``tanker`` is the internal tanker the litres leave (SETTLE_LITERS) or
    enter (DIESEL_RECEIVED, customer BORROW).
    """

    party = serializers.PrimaryKeyRelatedField(queryset=DieselParty.objects.all())
    transaction_type = serializers.ChoiceField(choices=PartyDieselTransaction.TransactionTypeChoices.choices)
    date = serializers.DateField()
    fuel_liters = serializers.DecimalField(
        max_digits=12, decimal_places=3, min_value=0, required=False, allow_null=True
    )
    diesel_price = serializers.DecimalField(
        max_digits=8, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    tanker = serializers.PrimaryKeyRelatedField(
        queryset=FuelStation.objects.all(), required=False, allow_null=True
    )
    invoice_no = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    remarks = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_tanker(self, value):
        if value is not None and not value.is_internal:
            raise serializers.ValidationError("Tanker must be an internal station")
        return value

    def validate(self, data):
        tx_type = data['transaction_type']
        if tx_type == PartyDieselTransaction.TransactionTypeChoices.SETTLE_CASH:
            if not data.get('amount'):
                raise serializers.ValidationError({'amount': "Amount is required for a cash settlement"})
        elif not data.get('fuel_liters'):
            raise serializers.ValidationError({'fuel_liters': "Litres are required for this transaction type"})
        return data


class PartyLedgerQuerySerializer(serializers.Serializer):
    """Query parameters for a party ledger."""

    search = serializers.CharField(required=False, allow_blank=True)
    filter = serializers.ChoiceField(
        choices=LedgerCalculatorService.FILTER_CHOICES,
        required=False,
        default=LedgerCalculatorService.FILTER_ALL,
    )
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
