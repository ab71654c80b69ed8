"""
Fleet API Views.

Provides REST API endpoints for the truck registry, drivers, tyre inventory
and fuel benchmarks. Business rules live in the fleet service layer.
"""

import logging
from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .models import Truck, Driver, Tire
from .serializers import (
    TruckSerializer,
    TruckStatusChangeSerializer,
    DriverSerializer,
    TireSerializer,
    TireMountSerializer,
    TireUnmountSerializer,
    TireScrapSerializer,
    BenchmarkSerializer,
)
from .services import (
    ComplianceCheckerService,
    TireLifecycleService,
    TireLifecycleError,
    BenchmarkService,
    BenchmarkError,
)

logger = logging.getLogger(__name__)


class TruckViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the truck registry.

    Provides CRUD plus document compliance, fleet expiry alerts and
    status changes with history.
    """

    queryset = Truck.objects.all()
    serializer_class = TruckSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        """Filter queryset based on query parameters."""
        queryset = super().get_queryset()

        fleet_type = self.request.query_params.get('fleet_type')
        if fleet_type:
            queryset = queryset.filter(fleet_type=fleet_type.upper())

        sub_type = self.request.query_params.get('sub_type')
        if sub_type:
            queryset = queryset.filter(sub_type=sub_type.upper())

        truck_status = self.request.query_params.get('status')
        if truck_status:
            queryset = queryset.filter(status=truck_status.upper())

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(plate_number__icontains=search) | Q(transporter_name__icontains=search)
            )

        return queryset

    @action(detail=True, methods=['get'])
    def compliance(self, request, pk=None):
        """Get the document compliance report for a truck."""
        truck = self.get_object()
        report = ComplianceCheckerService().check_truck(truck)
        return Response(report)

    @action(detail=False, methods=['get'], url_path='expiry-alerts')
    def expiry_alerts(self, request):
        """
        List CRITICAL and WARNING document expiries across the fleet.

        Query Parameters:
            fleet_type (str): Optional COAL or MINING filter
        """
        try:
            alerts = ComplianceCheckerService().expiry_alerts(self.get_queryset())
            return Response({'count': len(alerts), 'alerts': alerts})

        except Exception as e:
            logger.error(f"Error building expiry alerts: {str(e)}")
            return Response(
                {'error': 'Failed to build expiry alerts', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=True, methods=['post'], url_path='change-status')
    def change_status(self, request, pk=None):
        """
        Change truck status and append to status history.

        Request Body:
            status (str): New status
            remarks (str): Optional reason
            date (date): Optional change date
        """
        truck = self.get_object()
        serializer = TruckStatusChangeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            truck.change_status(data['status'], data.get('remarks', ''), data.get('date'))
            logger.info(f"Truck {truck.plate_number} status changed to {truck.status}")
            return Response(TruckSerializer(truck).data)

        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)


class DriverViewSet(viewsets.ModelViewSet):
    """ViewSet for driver CRUD."""

    queryset = Driver.objects.all()
    serializer_class = DriverSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        driver_status = self.request.query_params.get('status')
        if driver_status:
            queryset = queryset.filter(status=driver_status)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)

        return queryset


class TireViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the tyre inventory.

    Mounting, unmounting and scrapping go through dedicated actions so the
    lifecycle history stays consistent.
    """

    queryset = Tire.objects.select_related('truck').all()
    serializer_class = TireSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        tire_status = self.request.query_params.get('status')
        if tire_status:
            queryset = queryset.filter(status=tire_status.upper())

        truck_id = self.request.query_params.get('truck_id')
        if truck_id:
            queryset = queryset.filter(truck_id=truck_id)

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(serial_number__icontains=search) | Q(brand__icontains=search)
            )

        return queryset

    def _transition(self, request, serializer_class, handler, label):
        tire = self.get_object()
        serializer = serializer_class(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            tire = handler(tire, serializer.validated_data)
            return Response(self.get_serializer(tire).data)

        except TireLifecycleError as e:
            logger.warning(f"Tyre {label} rejected: {str(e)}")
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=True, methods=['post'])
    def mount(self, request, pk=None):
        """Mount a tyre on a truck at a position."""
        service = TireLifecycleService()
        return self._transition(
            request,
            TireMountSerializer,
            lambda tire, data: service.mount(
                tire, data['truck'], data['position'], data.get('odometer'), data.get('date')
            ),
            'mount',
        )

    @action(detail=True, methods=['post'])
    def unmount(self, request, pk=None):
        """Remove a tyre from its truck."""
        service = TireLifecycleService()
        return self._transition(
            request,
            TireUnmountSerializer,
            lambda tire, data: service.unmount(
                tire, data.get('odometer'), data.get('date'), data['status']
            ),
            'unmount',
        )

    @action(detail=True, methods=['post'])
    def scrap(self, request, pk=None):
        """Scrap a tyre with a reason."""
        service = TireLifecycleService()
        return self._transition(
            request,
            TireScrapSerializer,
            lambda tire, data: service.scrap(tire, data['reason'], data.get('date')),
            'scrap',
        )


class BenchmarkViewSet(viewsets.ViewSet):
    """
    ViewSet for fuel benchmarks.

    GET returns the current ranges (defaults where unset); PUT/PATCH update
    the given ranges.
    """

    permission_classes = [AllowAny]

    def retrieve_benchmarks(self, request):
        return Response(BenchmarkService().get_benchmarks())

    def update_benchmarks(self, request):
        serializer = BenchmarkSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            benchmarks = BenchmarkService().update_benchmarks(serializer.validated_data)
            return Response(benchmarks)

        except BenchmarkError as e:
            logger.error(f"Benchmark update failed: {str(e)}")
            return Response(
                {'error': 'Failed to update benchmarks', 'details': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
