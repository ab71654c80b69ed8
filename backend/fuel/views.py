"""
Fuel API Views.

Provides REST API endpoints for stations and their ledgers, fleet fuel
logs and efficiency, misc fuel entries, station payments, the daily
odometer registry and fuel analytics.
"""

import logging
from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .models import FuelStation, FuelLog, MiscFuelEntry, StationPayment, DailyOdoEntry
from .serializers import (
    FuelStationSerializer,
    FuelLogSerializer,
    MiscFuelEntrySerializer,
    StationPaymentSerializer,
    DailyOdoEntrySerializer,
    StationLedgerQuerySerializer,
    FuelAnalyticsQuerySerializer,
)
from .services import (
    FuelLogRecorderService,
    FuelLogError,
    EfficiencyCalculatorService,
    StationLedgerService,
    FuelAnalyticsService,
    FuelAnalyticsError,
)

logger = logging.getLogger(__name__)


class FuelStationViewSet(viewsets.ModelViewSet):
    """
    ViewSet for pumps and internal tankers.

    Provides CRUD plus the per-station ledger.
    """

    queryset = FuelStation.objects.all()
    serializer_class = FuelStationSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        is_internal = self.request.query_params.get('is_internal')
        if is_internal is not None:
            queryset = queryset.filter(is_internal=is_internal.lower() in ('1', 'true', 'yes'))

        return queryset

    @action(detail=True, methods=['get'])
    def ledger(self, request, pk=None):
        """
        Get the ledger and summary of a station.

        Query Parameters:
            search (str): Description search
            type (str): ALL, PURCHASE, STOCK_IN or PAYMENT
            start_date (date), end_date (date): Inclusive range
        """
        station = self.get_object()
        serializer = StationLedgerQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            ledger = StationLedgerService().station_ledger(station, serializer.validated_data)
            return Response(ledger)

        except Exception as e:
            logger.error(f"Error building ledger for station {station.id}: {str(e)}")
            return Response(
                {'error': 'Failed to build station ledger', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class FuelLogViewSet(viewsets.ModelViewSet):
    """
    ViewSet for fleet fuel logs.

    Create, update and delete go through FuelLogRecorderService so their
    side effects stay consistent.
    """

    queryset = FuelLog.objects.select_related('truck', 'station', 'party').all()
    serializer_class = FuelLogSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        """Filter queryset based on query parameters."""
        queryset = super().get_queryset()

        truck_id = self.request.query_params.get('truck_id')
        if truck_id:
            queryset = queryset.filter(truck_id=truck_id)

        station_id = self.request.query_params.get('station_id')
        if station_id:
            queryset = queryset.filter(station_id=station_id)

        log_status = self.request.query_params.get('status')
        if log_status:
            queryset = queryset.filter(status=log_status.upper())

        start_date = self.request.query_params.get('start_date')
        if start_date:
            queryset = queryset.filter(date__gte=start_date)

        end_date = self.request.query_params.get('end_date')
        if end_date:
            queryset = queryset.filter(date__lte=end_date)

        agent_id = self.request.query_params.get('agent_id')
        if agent_id:
            queryset = queryset.filter(agent_id=agent_id)

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            fuel_log = FuelLogRecorderService().record_fuel_log(serializer.validated_data)
            return Response(self.get_serializer(fuel_log).data, status=status.HTTP_201_CREATED)

        except FuelLogError as e:
            return Response(
                {'error': 'Failed to record fuel log', 'details': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        fuel_log = self.get_object()
        serializer = self.get_serializer(fuel_log, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            fuel_log = FuelLogRecorderService().update_fuel_log(fuel_log, serializer.validated_data)
            return Response(self.get_serializer(fuel_log).data)

        except FuelLogError as e:
            return Response(
                {'error': 'Failed to update fuel log', 'details': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    def destroy(self, request, *args, **kwargs):
        fuel_log = self.get_object()
        try:
            FuelLogRecorderService().delete_fuel_log(fuel_log)
            return Response(status=status.HTTP_204_NO_CONTENT)

        except FuelLogError as e:
            return Response(
                {'error': 'Failed to delete fuel log', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=True, methods=['get'])
    def efficiency(self, request, pk=None):
        """True km/L of a FULL_TANK fill across preceding partial fills."""
        fuel_log = self.get_object()
        return Response(EfficiencyCalculatorService().efficiency_report(fuel_log))


class MiscFuelEntryViewSet(viewsets.ModelViewSet):
    """ViewSet for misc fuel entries (personal, office, bulk transfers)."""

    queryset = MiscFuelEntry.objects.select_related('station', 'destination_station').all()
    serializer_class = MiscFuelEntrySerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        station_id = self.request.query_params.get('station_id')
        if station_id:
            queryset = queryset.filter(
                Q(station_id=station_id) | Q(destination_station_id=station_id)
            )

        usage_type = self.request.query_params.get('usage_type')
        if usage_type:
            queryset = queryset.filter(usage_type=usage_type.upper())

        return queryset


class StationPaymentViewSet(viewsets.ModelViewSet):
    """ViewSet for payments to stations."""

    queryset = StationPayment.objects.select_related('station').all()
    serializer_class = StationPaymentSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        station_id = self.request.query_params.get('station_id')
        if station_id:
            queryset = queryset.filter(station_id=station_id)

        return queryset


class DailyOdoEntryViewSet(viewsets.ModelViewSet):
    """ViewSet for the daily odometer registry."""

    queryset = DailyOdoEntry.objects.select_related('truck').all()
    serializer_class = DailyOdoEntrySerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        truck_id = self.request.query_params.get('truck_id')
        if truck_id:
            queryset = queryset.filter(truck_id=truck_id)

        entry_date = self.request.query_params.get('date')
        if entry_date:
            queryset = queryset.filter(date=entry_date)

        return queryset


class FuelAnalyticsViewSet(viewsets.ViewSet):
    """
    ViewSet for fleet fuel analytics.

    Per-truck performance against benchmarks, fleet aggregate, station
    liability and best/worst leaderboards.
    """

    permission_classes = [AllowAny]

    def list(self, request):
        """
        Query Parameters:
            start_date, end_date, station_id, search (plate), fleet_type,
            metric (L/TON, L/TRIP or KM/L)
        """
        serializer = FuelAnalyticsQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            analytics = FuelAnalyticsService().fuel_analytics(serializer.validated_data)
            return Response(analytics)

        except FuelAnalyticsError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        except Exception as e:
            logger.error(f"Error building fuel analytics: {str(e)}")
            return Response(
                {'error': 'Failed to build fuel analytics', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
