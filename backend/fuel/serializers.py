"""
Fuel Serializers.

Provides serializers for stations, fleet fuel logs, misc fuel entries,
station payments and the daily odometer registry, plus query serializers
for the station ledger and fuel analytics.
"""

from rest_framework import serializers

from fleet.models import Truck
from .models import FuelStation, FuelLog, MiscFuelEntry, StationPayment, DailyOdoEntry
from .services import StationLedgerService, FuelAnalyticsService


class FuelStationSerializer(serializers.ModelSerializer):
    """Serializer for pumps and internal tankers."""

    class Meta:
        model = FuelStation
        fields = ['id', 'name', 'location', 'is_internal', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class FuelLogSerializer(serializers.ModelSerializer):
    """
    Serializer for fleet fuel logs.

    Writes are handed to FuelLogRecorderService so the truck odometer,
    daily odometer row, coal back-fill and party BORROW follow the log.
    """

    plate_number = serializers.CharField(source='truck.plate_number', read_only=True)
    station_name = serializers.CharField(source='station.name', read_only=True, allow_null=True)
    party_name = serializers.CharField(source='party.name', read_only=True, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    distance_km = serializers.IntegerField(read_only=True)
    previous_odometer = serializers.IntegerField(required=False, min_value=0)
    attribution_date = serializers.DateField(required=False, allow_null=True)

    class Meta:
        model = FuelLog
        fields = [
            'id', 'truck', 'plate_number', 'driver', 'station', 'station_name',
            'party', 'party_name', 'date', 'attribution_date', 'entry_type',
            'odometer', 'previous_odometer', 'distance_km', 'fuel_liters',
            'diesel_price', 'amount', 'agent_id', 'status',
            'verification_photos', 'performance_remarks',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_fuel_liters(self, value):
        if value <= 0:
            raise serializers.ValidationError("Fuel litres must be greater than zero")
        return value


class MiscFuelEntrySerializer(serializers.ModelSerializer):
    """
    Serializer for non-fleet fuel draws.

    Bulk transfers must name an internal tanker as destination.
    """

    station_name = serializers.CharField(source='station.name', read_only=True)
    destination_station_name = serializers.CharField(
        source='destination_station.name', read_only=True, allow_null=True
    )

    class Meta:
        model = MiscFuelEntry
        fields = [
            'id', 'station', 'station_name', 'date', 'vehicle_description',
            'usage_type', 'fuel_liters', 'diesel_price', 'amount',
            'invoice_no', 'receiver_name', 'remarks',
            'destination_station', 'destination_station_name',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'amount', 'created_at', 'updated_at']

    def validate(self, data):
        usage_type = data.get('usage_type', getattr(self.instance, 'usage_type', None))
        destination = data.get('destination_station', getattr(self.instance, 'destination_station', None))

        if usage_type == MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER:
            if destination is None:
                raise serializers.ValidationError(
                    {'destination_station': "Bulk transfers need a destination tanker"}
                )
            if not destination.is_internal:
                raise serializers.ValidationError(
                    {'destination_station': "Destination must be an internal tanker"}
                )
        return data


class StationPaymentSerializer(serializers.ModelSerializer):
    """Serializer for payments made to a station."""

    class Meta:
        model = StationPayment
        fields = [
            'id', 'station', 'date', 'amount', 'payment_method',
            'reference_no', 'remarks', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Payment amount must be greater than zero")
        return value


class DailyOdoEntrySerializer(serializers.ModelSerializer):
    """Serializer for the daily odometer registry."""

    plate_number = serializers.CharField(source='truck.plate_number', read_only=True)
    distance_km = serializers.IntegerField(read_only=True)

    class Meta:
        model = DailyOdoEntry
        fields = [
            'id', 'truck', 'plate_number', 'date',
            'opening_odometer', 'closing_odometer', 'distance_km',
        ]
        read_only_fields = ['id']

    def validate(self, data):
        opening = data.get('opening_odometer', getattr(self.instance, 'opening_odometer', 0))
        closing = data.get('closing_odometer', getattr(self.instance, 'closing_odometer', 0))
        if closing < opening:
            raise serializers.ValidationError(
                {'closing_odometer': "Closing odometer cannot be lower than opening"}
            )
        return data


class StationLedgerQuerySerializer(serializers.Serializer):
    """Query parameters for a station ledger."""

    search = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=StationLedgerService.FILTER_CHOICES, required=False, default='ALL')
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class FuelAnalyticsQuerySerializer(serializers.Serializer):
    """Query parameters for fuel analytics."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    station_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    fleet_type = serializers.ChoiceField(choices=Truck.FleetTypeChoices.choices, required=False)
    metric = serializers.ChoiceField(
        choices=FuelAnalyticsService.METRICS,
        required=False,
        default=FuelAnalyticsService.METRIC_L_PER_TON,
    )

    def validate(self, data):
        if data.get('start_date') and data.get('end_date') and data['start_date'] > data['end_date']:
            raise serializers.ValidationError("start_date cannot be after end_date")
        return data
