"""
Hauling API Views.

Provides REST API endpoints for coal and mining trip logs, their daily
batches and batch-wide edits, month-to-date analytics and the mining report.
"""

import logging
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .models import CoalLog, MiningLog
from .serializers import (
    CoalLogSerializer,
    MiningLogSerializer,
    CoalBatchQuerySerializer,
    CoalMTDQuerySerializer,
    MiningReportQuerySerializer,
    MiningMTDQuerySerializer,
    BatchAdjustmentSerializer,
    BatchEditSerializer,
    BatchBulkAddSerializer,
    MiningBatchQuerySerializer,
)
from .services import (
    BatchEditorService,
    BatchEditError,
    CoalBatchAggregatorService,
    MiningBatchAggregatorService,
    MTDAnalyticsService,
    MiningReportService,
)

logger = logging.getLogger(__name__)


class BatchEditActionsMixin:
    """
    Batch-wide edit actions shared by the coal and mining trip viewsets.

    Subclasses set ``batch_kind`` to coal or mining.
    """

    batch_kind = BatchEditorService.KIND_COAL

    def _run_batch_edit(self, serializer_class, request, operation):
        serializer = serializer_class(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = dict(serializer.validated_data)
        try:
            result = operation(BatchEditorService(self.batch_kind), data)
            return Response(result)

        except BatchEditError as e:
            return Response(
                {'error': 'Batch edit rejected', 'details': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
        except Exception as e:
            logger.error(f"Error editing {self.batch_kind} batch: {str(e)}")
            return Response(
                {'error': 'Failed to edit batch', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=False, methods=['post'], url_path='batch-adjust')
    def batch_adjust(self, request):
        """
        Set a trip, stock or air adjustment on every trip of a batch.

        Body:
            date, truck_id, log_type (mining), field (trip/stock/air),
            value, remarks, include_extra_in_roll
        """
        return self._run_batch_edit(
            BatchAdjustmentSerializer,
            request,
            lambda editor, data: editor.apply_adjustment(
                on_date=data['date'],
                truck_id=data['truck_id'],
                field=data['field'],
                value=data['value'],
                remarks=data['remarks'],
                include_extra_in_roll=data['include_extra_in_roll'],
                log_type=data.get('log_type'),
            ),
        )

    @action(detail=False, methods=['post'], url_path='batch-edit')
    def batch_edit(self, request):
        """
        Move a batch to another date and set its driver and sites.

        Body:
            date, truck_id, log_type (mining), new_date, driver,
            origin_site, destination_site
        """
        def edit(editor, data):
            changes = {
                key: data[key]
                for key in ('new_date', 'driver', 'origin_site', 'destination_site')
                if key in data
            }
            return editor.edit_batch(
                on_date=data['date'],
                truck_id=data['truck_id'],
                changes=changes,
                include_extra_in_roll=data['include_extra_in_roll'],
                log_type=data.get('log_type'),
            )

        return self._run_batch_edit(BatchEditSerializer, request, edit)

    @action(detail=False, methods=['post'], url_path='batch-add')
    def batch_add(self, request):
        """
        Add blank trips to a batch.

        Body:
            date, truck_id, log_type (mining), count, include_extra_in_roll
        """
        return self._run_batch_edit(
            BatchBulkAddSerializer,
            request,
            lambda editor, data: editor.bulk_add(
                on_date=data['date'],
                truck_id=data['truck_id'],
                count=data['count'],
                include_extra_in_roll=data['include_extra_in_roll'],
                log_type=data.get('log_type'),
            ),
        )


class CoalLogViewSet(BatchEditActionsMixin, viewsets.ModelViewSet):
    """
    ViewSet for coal trips.

    Provides CRUD plus daily batch aggregation, batch edits and coal MTD.
    """

    queryset = CoalLog.objects.select_related('truck', 'driver').all()
    serializer_class = CoalLogSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        """Filter queryset based on query parameters."""
        queryset = super().get_queryset()

        truck_id = self.request.query_params.get('truck_id')
        if truck_id:
            queryset = queryset.filter(truck_id=truck_id)

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

    @action(detail=False, methods=['get'])
    def batches(self, request):
        """
        Coal daily batches with totals.

        Query Parameters:
            truck_id, search, start_date, end_date, agent_id,
            include_extra_in_roll
        """
        serializer = CoalBatchQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            report = CoalBatchAggregatorService().batch_report(serializer.validated_data)
            return Response(report)

        except Exception as e:
            logger.error(f"Error aggregating coal batches: {str(e)}")
            return Response(
                {'error': 'Failed to aggregate coal batches', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=False, methods=['get'])
    def mtd(self, request):
        """
        Coal month-to-date comparison.

        Query Parameters:
            anchor (date): Anchor day, defaults to today
            truck_id (uuid): Optional truck
            search (str): Optional plate search
        """
        serializer = CoalMTDQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            result = MTDAnalyticsService().coal_mtd(
                anchor=data.get('anchor'),
                truck_id=data.get('truck_id'),
                search=data.get('search'),
            )
            return Response(result)

        except Exception as e:
            logger.error(f"Error calculating coal MTD: {str(e)}")
            return Response(
                {'error': 'Failed to calculate coal MTD', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class MiningLogViewSet(BatchEditActionsMixin, viewsets.ModelViewSet):
    """
    ViewSet for mining trips.

    Provides CRUD plus daily batches, batch edits, the mining report and
    mining MTD.
    """

    queryset = MiningLog.objects.select_related('truck', 'driver').all()
    serializer_class = MiningLogSerializer
    permission_classes = [AllowAny]
    batch_kind = BatchEditorService.KIND_MINING

    def get_queryset(self):
        """Filter queryset based on query parameters."""
        queryset = super().get_queryset()

        log_type = self.request.query_params.get('log_type')
        if log_type:
            queryset = queryset.filter(log_type=log_type.upper())

        truck_id = self.request.query_params.get('truck_id')
        if truck_id:
            queryset = queryset.filter(truck_id=truck_id)

        agent_id = self.request.query_params.get('agent_id')
        if agent_id:
            queryset = queryset.filter(agent_id=agent_id)

        return queryset

    @action(detail=False, methods=['get'])
    def batches(self, request):
        """
        Mining daily batches with totals.

        Query Parameters:
            search, material, supplier, truck_id, date, log_type, agent_id
        """
        serializer = MiningBatchQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            report = MiningBatchAggregatorService().batch_report(serializer.validated_data)
            return Response(report)

        except Exception as e:
            logger.error(f"Error aggregating mining batches: {str(e)}")
            return Response(
                {'error': 'Failed to aggregate mining batches', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=False, methods=['get'])
    def report(self, request):
        """
        Filtered mining trips with stats and breakdowns.

        Query Parameters:
            start_date, end_date, log_type, truck_id, driver_id, customer,
            material, supplier, agent (carting agent), agent_id
        """
        serializer = MiningReportQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            report = MiningReportService().mining_report(serializer.validated_data)
            report['logs'] = MiningLogSerializer(report['logs'], many=True).data
            return Response(report)

        except Exception as e:
            logger.error(f"Error building mining report: {str(e)}")
            return Response(
                {'error': 'Failed to build mining report', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=False, methods=['get'])
    def mtd(self, request):
        """
        Mining month-to-date comparison.

        Query Parameters:
            anchor (date): Anchor day, defaults to today
            start_date (date): Overrides the first of the month
            plus the mining report filters
        """
        serializer = MiningMTDQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        filters = dict(serializer.validated_data)
        anchor = filters.pop('anchor', None)
        start_override = filters.pop('start_date', None)
        try:
            result = MTDAnalyticsService().mining_mtd(
                anchor=anchor,
                start_override=start_override,
                filters=filters,
            )
            return Response(result)

        except Exception as e:
            logger.error(f"Error calculating mining MTD: {str(e)}")
            return Response(
                {'error': 'Failed to calculate mining MTD', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
