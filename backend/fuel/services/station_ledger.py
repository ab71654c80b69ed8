"""
Station Ledger Service.

Combines fleet fuel logs, misc fuel entries and payments into one ledger
for a station, and summarises it:
- external pumps: purchased amount, paid amount, litres, balance owed
- internal tankers: stock in, dispensed, stock balance

Single Responsibility: Station ledger assembly and summary only.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from common.validators import to_decimal, quantize_liters, quantize_money, date_in_range
from ..models import FuelStation, FuelLog, MiscFuelEntry, StationPayment

logger = logging.getLogger(__name__)


class StationLedgerService:
    """Service for per-station ledgers."""

    TYPE_PURCHASE = 'PURCHASE'
    TYPE_STOCK_IN = 'STOCK_IN'
    TYPE_PAYMENT = 'PAYMENT'
    FILTER_CHOICES = ['ALL', TYPE_PURCHASE, TYPE_STOCK_IN, TYPE_PAYMENT]

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def build_ledger(self, station: FuelStation) -> List[Dict]:
        """
        Build the unfiltered ledger of a station, newest first.

        A misc entry drawn from a tanker into the same tanker (a receipt
        bridge) only appears as STOCK_IN.
        """
        rows = []

        fuel_logs = FuelLog.objects.filter(station=station).select_related('truck')
        for log in fuel_logs:
            rows.append(self._row(
                log.id, log.date, self.TYPE_PURCHASE,
                log.truck.plate_number if log.truck_id else 'Unknown Truck',
                log.fuel_liters, log.diesel_price, log.amount,
                source='FUEL_LOG', created_at=log.created_at,
            ))

        outbound = MiscFuelEntry.objects.filter(station=station).select_related('destination_station')
        for entry in outbound:
            if entry.is_self_transfer:
                continue
            if entry.usage_type == MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER:
                target = entry.destination_station.name if entry.destination_station_id else 'Tanker'
                description = f"Bulk Transfer to {target}"
            else:
                description = entry.vehicle_description
            rows.append(self._row(
                entry.id, entry.date, self.TYPE_PURCHASE, description,
                entry.fuel_liters, entry.diesel_price, entry.amount,
                source='MISC', created_at=entry.created_at,
            ))

        if station.is_internal:
            inbound = MiscFuelEntry.objects.filter(destination_station=station).select_related('station')
            for entry in inbound:
                source_name = entry.station.name if entry.station_id else 'Unknown'
                description = f"Source: {source_name} | Inv: {entry.invoice_no or 'N/A'}"
                if entry.is_self_transfer and entry.remarks:
                    description = entry.remarks
                rows.append(self._row(
                    f"{entry.id}_recv", entry.date, self.TYPE_STOCK_IN, description,
                    entry.fuel_liters, entry.diesel_price, entry.amount,
                    source='MISC', created_at=entry.created_at,
                ))

        for payment in StationPayment.objects.filter(station=station):
            reference = f" ({payment.reference_no})" if payment.reference_no else ''
            rows.append(self._row(
                payment.id, payment.date, self.TYPE_PAYMENT,
                f"{payment.payment_method}{reference}",
                Decimal('0'), Decimal('0'), payment.amount,
                source='PAYMENT', created_at=payment.created_at,
            ))

        rows.sort(key=lambda row: (row['date'], row['created_at']), reverse=True)
        return rows

    def _row(self, row_id, row_date, row_type, description, quantity, rate, amount, source, created_at):
        return {
            'id': str(row_id),
            'date': row_date,
            'type': row_type,
            'description': description or '',
            'quantity': to_decimal(quantity),
            'rate': to_decimal(rate),
            'amount': to_decimal(amount),
            'source': source,
            'created_at': created_at,
        }

    def filter_ledger(
        self,
        rows: List[Dict],
        search: Optional[str] = None,
        row_type: str = 'ALL',
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Dict]:
        """Filter ledger rows by description text, row type and inclusive dates."""
        needle = (search or '').strip().lower()
        row_type = (row_type or 'ALL').upper()

        return [
            row for row in rows
            if (not needle or needle in row['description'].lower())
            and (row_type == 'ALL' or row['type'] == row_type)
            and date_in_range(row['date'], start, end)
        ]

    def summarize(self, station: FuelStation, rows: List[Dict]) -> Dict:
        """
        Summarise (usually filtered) ledger rows.

        Returns:
            Internal tankers: total_stock_in, total_dispensed, balance (litres).
            External pumps: total_purchased, total_paid, total_liters, balance (Rs).
        """
        def total(row_type, key):
            return sum((row[key] for row in rows if row['type'] == row_type), Decimal('0'))

        if station.is_internal:
            stock_in = total(self.TYPE_STOCK_IN, 'quantity')
            dispensed = total(self.TYPE_PURCHASE, 'quantity')
            return {
                'is_internal': True,
                'total_stock_in': quantize_liters(stock_in),
                'total_dispensed': quantize_liters(dispensed),
                'balance': quantize_liters(stock_in - dispensed),
            }

        purchased = total(self.TYPE_PURCHASE, 'amount')
        paid = total(self.TYPE_PAYMENT, 'amount')
        return {
            'is_internal': False,
            'total_purchased': quantize_money(purchased),
            'total_paid': quantize_money(paid),
            'total_liters': quantize_liters(total(self.TYPE_PURCHASE, 'quantity')),
            'balance': quantize_money(purchased - paid),
        }

    def station_ledger(self, station: FuelStation, filters: Optional[Dict] = None) -> Dict:
        """
        Build, filter and summarise a station ledger.

        Args:
            station: Station or tanker
            filters: Optional search, type, start_date, end_date

        Returns:
            Dict with station info, ledger rows and summary
        """
        filters = filters or {}
        rows = self.filter_ledger(
            self.build_ledger(station),
            search=filters.get('search'),
            row_type=filters.get('type', 'ALL'),
            start=filters.get('start_date'),
            end=filters.get('end_date'),
        )
        summary = self.summarize(station, rows)

        self.logger.info(f"Built ledger for {station.name}: {len(rows)} rows")
        return {
            'station_id': str(station.id),
            'station_name': station.name,
            'is_internal': station.is_internal,
            'entries': rows,
            'summary': summary,
        }
