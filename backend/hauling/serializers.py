"""
Hauling Serializers.

Serializers for coal and mining trip logs, plus query serializers for the
batch, MTD and mining report endpoints.
"""

from rest_framework import serializers

from fleet.models import Driver
from .models import CoalLog, MiningLog


class CoalLogSerializer(serializers.ModelSerializer):
    """Serializer for CoalLog CRUD."""

    plate_number = serializers.CharField(source='truck.plate_number', read_only=True)
    driver_name = serializers.CharField(source='driver.name', read_only=True, allow_null=True)

    class Meta:
        model = CoalLog
        fields = [
            'id', 'date', 'truck', 'plate_number', 'driver', 'driver_name',
            'pass_no', 'origin_site', 'destination_site',
            'gross_weight', 'tare_weight', 'net_weight',
            'diesel_liters', 'diesel_rate', 'diesel_adjustment', 'air_adjustment',
            'diesel_adj_type', 'trip_adjustment', 'trip_remarks',
            'diesel_remarks', 'air_remarks', 'staff_welfare', 'roll_amount',
            'agent_id', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, data):
        """Tare cannot exceed gross when both are given."""
        gross = data.get('gross_weight', getattr(self.instance, 'gross_weight', None))
        tare = data.get('tare_weight', getattr(self.instance, 'tare_weight', None))
        if gross and tare and tare > gross:
            raise serializers.ValidationError(
                {'tare_weight': "Tare weight cannot exceed gross weight"}
            )
        return data


class MiningLogSerializer(serializers.ModelSerializer):
    """
    Serializer for MiningLog CRUD.

    Loading/unloading nets and shortage are derived on save.
    """

    plate_number = serializers.CharField(source='truck.plate_number', read_only=True)
    driver_name = serializers.CharField(source='driver.name', read_only=True, allow_null=True)

    class Meta:
        model = MiningLog
        fields = [
            'id', 'log_type', 'date', 'time', 'chalan_no', 'customer_name',
            'site', 'royalty_name', 'royalty_pass_no', 'royalty_no',
            'supplier', 'customer_site', 'truck', 'plate_number', 'driver',
            'driver_name', 'carting_agent', 'loader', 'material',
            'gross', 'tare', 'net',
            'loading_gross', 'loading_tare', 'loading_net',
            'unloading_gross', 'unloading_tare', 'unloading_net', 'shortage',
            'diesel_adjustment', 'air_adjustment', 'diesel_adj_type',
            'trip_adjustment', 'trip_remarks', 'diesel_remarks', 'air_remarks',
            'staff_welfare', 'roll_amount', 'agent_id',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'loading_net', 'unloading_net', 'shortage',
            'created_at', 'updated_at',
        ]


class CoalBatchQuerySerializer(serializers.Serializer):
    """Query parameters for coal daily batches."""

    truck_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    agent_id = serializers.CharField(required=False, allow_blank=True)
    include_extra_in_roll = serializers.BooleanField(required=False, default=False)

    def validate(self, data):
        if data.get('start_date') and data.get('end_date') and data['start_date'] > data['end_date']:
            raise serializers.ValidationError("start_date cannot be after end_date")
        return data


class CoalMTDQuerySerializer(serializers.Serializer):
    """Query parameters for coal MTD."""

    anchor = serializers.DateField(required=False)
    truck_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)


class MiningReportQuerySerializer(serializers.Serializer):
    """Query parameters for the mining report."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    log_type = serializers.ChoiceField(choices=MiningLog.LogTypeChoices.choices, required=False)
    truck_id = serializers.UUIDField(required=False)
    driver_id = serializers.UUIDField(required=False)
    customer = serializers.CharField(required=False, allow_blank=True)
    material = serializers.CharField(required=False, allow_blank=True)
    supplier = serializers.CharField(required=False, allow_blank=True)
    agent = serializers.CharField(required=False, allow_blank=True)
    agent_id = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if data.get('start_date') and data.get('end_date') and data['start_date'] > data['end_date']:
            raise serializers.ValidationError("start_date cannot be after end_date")
        return data


class MiningMTDQuerySerializer(MiningReportQuerySerializer):
    """Query parameters for mining MTD; ``start_date`` overrides the month start."""

    anchor = serializers.DateField(required=False)


class BatchSelectorSerializer(serializers.Serializer):
    """Identifies a daily batch: date and truck, plus trip type for mining."""

    date = serializers.DateField()
    truck_id = serializers.UUIDField()
    log_type = serializers.ChoiceField(choices=MiningLog.LogTypeChoices.choices, required=False)
    include_extra_in_roll = serializers.BooleanField(required=False, default=False)


class BatchAdjustmentSerializer(BatchSelectorSerializer):
    """Trip, stock or air adjustment applied to a whole batch."""

    field = serializers.ChoiceField(choices=['trip', 'stock', 'air'])
    value = serializers.DecimalField(max_digits=10, decimal_places=3)
    remarks = serializers.CharField(max_length=255)

    def validate_remarks(self, value):
        if not value.strip():
            raise serializers.ValidationError("Remarks are mandatory for an adjustment")
        return value.strip()

    def validate(self, data):
        if data['field'] == 'trip' and data['value'] != int(data['value']):
            raise serializers.ValidationError({'value': "Trip adjustment must be a whole number"})
        return data


class BatchEditSerializer(BatchSelectorSerializer):
    """New date, driver and sites for a whole batch."""

    new_date = serializers.DateField(required=False)
    driver = serializers.PrimaryKeyRelatedField(
        queryset=Driver.objects.all(), required=False, allow_null=True
    )
    origin_site = serializers.CharField(max_length=100, required=False, allow_blank=True)
    destination_site = serializers.CharField(max_length=100, required=False, allow_blank=True)


class BatchBulkAddSerializer(BatchSelectorSerializer):
    """Number of blank trips to add to a batch."""

    count = serializers.IntegerField(min_value=1, max_value=50)


class MiningBatchQuerySerializer(serializers.Serializer):
    """Query parameters for mining daily batches."""

    search = serializers.CharField(required=False, allow_blank=True)
    material = serializers.CharField(required=False, allow_blank=True)
    supplier = serializers.CharField(required=False, allow_blank=True)
    truck_id = serializers.UUIDField(required=False)
    date = serializers.DateField(required=False)
    log_type = serializers.ChoiceField(choices=MiningLog.LogTypeChoices.choices, required=False)
    agent_id = serializers.CharField(required=False, allow_blank=True)
