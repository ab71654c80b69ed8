"""
Fleet Serializers.

Provides serializers for trucks, drivers, tyres and fuel benchmarks, plus
request serializers for status changes and tyre transitions.
"""

from rest_framework import serializers

from .models import Truck, Driver, Tire
from .services import BenchmarkService, TireLifecycleService


class TruckSerializer(serializers.ModelSerializer):
    """Serializer for Truck CRUD."""

    class Meta:
        model = Truck
        fields = [
            'id', 'plate_number', 'transporter_name', 'model', 'wheel_config',
            'current_odometer', 'status', 'remarks', 'fleet_type', 'sub_type',
            'rc_expiry', 'fitness_expiry', 'insurance_expiry', 'pucc_expiry',
            'tax_expiry', 'permit_expiry', 'status_history',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'status_history', 'created_at', 'updated_at']

    def validate_plate_number(self, value):
        """Normalise plate numbers to upper case without surrounding spaces."""
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Plate number is required")
        return value

    def validate(self, data):
        """Sub-type only applies to mining trucks."""
        fleet_type = data.get('fleet_type', getattr(self.instance, 'fleet_type', None))
        if data.get('sub_type') and fleet_type != Truck.FleetTypeChoices.MINING:
            raise serializers.ValidationError(
                {'sub_type': "Sub-type can only be set for mining trucks"}
            )
        return data


class TruckStatusChangeSerializer(serializers.Serializer):
    """Request serializer for changing a truck's status."""

    status = serializers.ChoiceField(choices=Truck.StatusChoices.choices)
    remarks = serializers.CharField(required=False, allow_blank=True, default='')
    date = serializers.DateField(required=False)


class DriverSerializer(serializers.ModelSerializer):
    """Serializer for Driver CRUD."""

    class Meta:
        model = Driver
        fields = [
            'id', 'name', 'license_number', 'phone', 'status', 'driver_type',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class TireSerializer(serializers.ModelSerializer):
    """
    Serializer for Tire CRUD.

    Mount state (truck, position, mounted_at_odometer) and history are
    changed only through the mount/unmount/scrap actions.
    """

    plate_number = serializers.CharField(source='truck.plate_number', read_only=True, allow_null=True)
    total_mileage = serializers.SerializerMethodField()

    class Meta:
        model = Tire
        fields = [
            'id', 'serial_number', 'brand', 'size', 'mileage', 'total_mileage',
            'expected_lifespan', 'status', 'truck', 'plate_number', 'position',
            'manufacturer', 'supplier', 'bill_number', 'mounted_at_odometer',
            'scrapped_reason', 'last_inspection_date', 'history',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'truck', 'position', 'mounted_at_odometer', 'history',
            'created_at', 'updated_at',
        ]

    def get_total_mileage(self, obj):
        return TireLifecycleService().mileage_details(obj)['total_mileage']

    def validate_status(self, value):
        if self.instance is not None and value == self.instance.status:
            return value
        if value in (Tire.StatusChoices.MOUNTED, Tire.StatusChoices.SCRAPPED):
            raise serializers.ValidationError(
                "Use the mount or scrap actions to change to this status"
            )
        return value


class TireMountSerializer(serializers.Serializer):
    """Request serializer for mounting a tyre."""

    truck = serializers.PrimaryKeyRelatedField(queryset=Truck.objects.all())
    position = serializers.CharField(max_length=20)
    odometer = serializers.IntegerField(required=False, min_value=0)
    date = serializers.DateField(required=False)


class TireUnmountSerializer(serializers.Serializer):
    """Request serializer for unmounting a tyre."""

    odometer = serializers.IntegerField(required=False, min_value=0)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(
        choices=[Tire.StatusChoices.SPARE, Tire.StatusChoices.REPAIR],
        default=Tire.StatusChoices.SPARE,
    )


class TireScrapSerializer(serializers.Serializer):
    """Request serializer for scrapping a tyre."""

    reason = serializers.CharField(max_length=255)
    date = serializers.DateField(required=False)


class BenchmarkRangeField(serializers.ListField):
    """A [low, high] pair of non-negative numbers."""

    child = serializers.FloatField(min_value=0)

    def __init__(self, **kwargs):
        kwargs.setdefault('min_length', 2)
        kwargs.setdefault('max_length', 2)
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value[0] > value[1]:
            raise serializers.ValidationError("Low value cannot exceed high value")
        return value


class BenchmarkSerializer(serializers.Serializer):
    """Fuel benchmark ranges."""

    coal_liters_per_trip = BenchmarkRangeField()
    mining_km_per_liter = BenchmarkRangeField()
    mining_liters_per_trip = BenchmarkRangeField()
    global_liters_per_ton = BenchmarkRangeField()

    def validate(self, data):
        unknown = set(self.initial_data.keys()) - set(BenchmarkService.DEFAULT_BENCHMARKS.keys())
        if unknown:
            raise serializers.ValidationError(f"Unknown benchmarks: {', '.join(sorted(unknown))}")
        return data
