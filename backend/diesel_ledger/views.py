"""
Diesel Ledger API Views.

Provides REST API endpoints for diesel parties, their ledgers and
balances, and party transactions with tanker bridge entries.
"""

import logging
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .models import DieselParty, PartyDieselTransaction
from .serializers import (
    DieselPartySerializer,
    PartyDieselTransactionSerializer,
    PartyTransactionWriteSerializer,
    PartyLedgerQuerySerializer,
)
from .services import LedgerCalculatorService, PartyTransactionService, PartyTransactionError

logger = logging.getLogger(__name__)


class DieselPartyViewSet(viewsets.ModelViewSet):
    """
    ViewSet for diesel parties.

    Provides CRUD plus the party ledger and the balances summary. Deleting
    a party removes its transactions and their bridge entries.
    """

    queryset = DieselParty.objects.all()
    serializer_class = DieselPartySerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        party_type = self.request.query_params.get('party_type')
        if party_type:
            queryset = queryset.filter(party_type=party_type.upper())

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)

        return queryset

    def destroy(self, request, *args, **kwargs):
        party = self.get_object()
        try:
            PartyTransactionService().delete_party(party)
            return Response(status=status.HTTP_204_NO_CONTENT)

        except PartyTransactionError as e:
            return Response(
                {'error': 'Failed to delete party', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=True, methods=['get'])
    def ledger(self, request, pk=None):
        """
        Get the described ledger of a party with its reconciliation.

        Query Parameters:
            search (str): Matches description and remarks
            filter (str): ALL, BORROW, SETTLE or RECV
            start_date (date), end_date (date): Inclusive range

        Statistics are computed over the whole ledger; only the listed
        entries are filtered.
        """
        party = self.get_object()
        serializer = PartyLedgerQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        params = serializer.validated_data
        try:
            calculator = LedgerCalculatorService()
            entries = calculator.build_ledger_entries(party)
            filtered = calculator.filter_entries(
                entries,
                search=params.get('search'),
                entry_filter=params.get('filter'),
                start=params.get('start_date'),
                end=params.get('end_date'),
            )
            return Response({
                'party': DieselPartySerializer(party).data,
                'entries': filtered,
                'stats': calculator.calculate_stats(entries),
            })

        except Exception as e:
            logger.error(f"Error building ledger for party {party.id}: {str(e)}")
            return Response(
                {'error': 'Failed to build party ledger', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @action(detail=False, methods=['get'])
    def summaries(self, request):
        """Net litres and amount owed for every party."""
        try:
            summaries = PartyTransactionService().party_summaries()
            return Response({'count': len(summaries), 'parties': summaries})

        except Exception as e:
            logger.error(f"Error building party summaries: {str(e)}")
            return Response(
                {'error': 'Failed to build party summaries', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class PartyTransactionViewSet(viewsets.ModelViewSet):
    """
    ViewSet for party transactions.

    Writes go through PartyTransactionService so bridge entries stay in
    step with the transaction.
    """

    queryset = PartyDieselTransaction.objects.select_related(
        'party', 'source_station', 'dest_tanker'
    ).all()
    serializer_class = PartyDieselTransactionSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        queryset = super().get_queryset()

        party_id = self.request.query_params.get('party_id')
        if party_id:
            queryset = queryset.filter(party_id=party_id)

        transaction_type = self.request.query_params.get('transaction_type')
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type.upper())

        return queryset

    def _save(self, request, data, existing=None):
        serializer = PartyTransactionWriteSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        validated = serializer.validated_data
        try:
            tx = PartyTransactionService().save_transaction(validated['party'], validated, existing)
            return Response(
                PartyDieselTransactionSerializer(tx).data,
                status=status.HTTP_200_OK if existing else status.HTTP_201_CREATED
            )

        except PartyTransactionError as e:
            return Response(
                {'error': 'Failed to save transaction', 'details': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    def create(self, request, *args, **kwargs):
        return self._save(request, request.data)

    def update(self, request, *args, **kwargs):
        tx = self.get_object()
        data = request.data
        if kwargs.get('partial'):
            payload = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
            data = {**self._current_values(tx), **payload}
        return self._save(request, data, existing=tx)

    def _current_values(self, tx):
        tanker = tx.tanker
        return {
            'party': tx.party_id,
            'transaction_type': tx.transaction_type,
            'date': tx.date,
            'fuel_liters': tx.fuel_liters,
            'diesel_price': tx.diesel_price,
            'amount': tx.amount,
            'tanker': tanker.id if tanker else None,
            'invoice_no': tx.invoice_no,
            'remarks': tx.remarks,
        }

    def destroy(self, request, *args, **kwargs):
        tx = self.get_object()
        try:
            PartyTransactionService().delete_transaction(tx)
            return Response(status=status.HTTP_204_NO_CONTENT)

        except PartyTransactionError as e:
            return Response(
                {'error': 'Failed to delete transaction', 'details': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
