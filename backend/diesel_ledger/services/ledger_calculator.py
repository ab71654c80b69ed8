"""
Party Ledger Calculator Service.

Builds the described ledger for a diesel party and reconciles it into
debit/credit totals, supplier and customer metrics and net balances.

Debit = diesel coming in (BORROW, DIESEL_RECEIVED).
Credit = settlements going out (SETTLE_LITERS, SETTLE_CASH).

Single Responsibility: Ledger presentation and reconciliation math only.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from common.validators import to_decimal, quantize_liters, quantize_money, date_in_range
from ..models import DieselParty, PartyDieselTransaction

logger = logging.getLogger(__name__)

TxType = PartyDieselTransaction.TransactionTypeChoices


class LedgerCalculatorService:
    """
    Service for party ledger entries and statistics.

    Entries are plain dicts so the same calculations serve the ledger
    endpoint, the parties summary and tests.
    """

    FILTER_ALL = 'ALL'
    FILTER_BORROW = 'BORROW'
    FILTER_SETTLE = 'SETTLE'
    FILTER_RECEIVED = 'RECV'
    FILTER_CHOICES = [FILTER_ALL, FILTER_BORROW, FILTER_SETTLE, FILTER_RECEIVED]

    BALANCE_PENDING = 'PENDING'
    BALANCE_ADVANCE = 'ADVANCE'
    BALANCE_BALANCED = 'BALANCED'

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def build_ledger_entries(self, party: DieselParty, transactions=None) -> List[Dict]:
        """
        Describe every transaction of a party, newest first.

        Args:
            party: Diesel party
            transactions: Optional pre-fetched transactions of the party

        Returns:
            List of ledger entry dicts
        """
        if transactions is None:
            transactions = party.transactions.select_related(
                'fuel_log__truck', 'source_station', 'dest_tanker'
            )

        entries = [self._describe(party, tx) for tx in transactions]
        entries.sort(key=lambda entry: (entry['date'], entry['created_at']), reverse=True)
        return entries

    def _describe(self, party: DieselParty, tx: PartyDieselTransaction) -> Dict:
        fuel_liters = tx.fuel_liters
        diesel_price = tx.diesel_price
        amount = tx.amount
        tanker_name = None

        if tx.transaction_type == TxType.BORROW:
            if tx.fuel_log_id and tx.fuel_log is not None:
                log = tx.fuel_log
                plate = log.truck.plate_number if log.truck_id else 'Unknown'
                description = f"Fleet Fueling: {plate}"
                # Missing (or zero) values fall back to the fuel log
                diesel_price = diesel_price or log.diesel_price
                fuel_liters = fuel_liters or log.fuel_liters
                amount = amount or quantize_money(
                    to_decimal(log.fuel_liters) * to_decimal(log.diesel_price)
                )
            elif party.is_supplier:
                description = 'Manual Borrow (Personal/Office)'
            else:
                description = 'Stock Received from Customer'

        elif tx.transaction_type == TxType.SETTLE_LITERS:
            tanker_name = tx.source_station.name if tx.source_station_id else 'Tanker'
            if party.is_supplier:
                description = f"Repaid in Liters (from {tanker_name})"
            else:
                description = f"Settled Liters (from {tanker_name})"

        elif tx.transaction_type == TxType.SETTLE_CASH:
            description = 'Cash Payment Made' if party.is_supplier else 'Cash Settlement (Received)'

        else:
            tanker_name = tx.dest_tanker.name if tx.dest_tanker_id else 'Tanker'
            description = f"Diesel Received (into {tanker_name})"

        return {
            'id': str(tx.id),
            'date': tx.date,
            'created_at': tx.created_at,
            'transaction_type': tx.transaction_type,
            'description': description,
            'fuel_liters': fuel_liters,
            'diesel_price': diesel_price,
            'amount': amount,
            'invoice_no': tx.invoice_no,
            'remarks': tx.remarks,
            'is_debit': tx.is_debit,
            'fuel_log_id': str(tx.fuel_log_id) if tx.fuel_log_id else None,
            'source_station_id': str(tx.source_station_id) if tx.source_station_id else None,
            'dest_tanker_id': str(tx.dest_tanker_id) if tx.dest_tanker_id else None,
            'bridge_entry_id': str(tx.bridge_entry_id) if tx.bridge_entry_id else None,
            'tanker_name': tanker_name,
        }

    def filter_entries(
        self,
        entries: List[Dict],
        search: Optional[str] = None,
        entry_filter: str = FILTER_ALL,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Dict]:
        """
        Filter ledger entries.

        Args:
            entries: Entries from build_ledger_entries
            search: Case-insensitive text matched against description and remarks
            entry_filter: ALL, BORROW, SETTLE (both settle types) or RECV
            start: Inclusive lower date bound
            end: Inclusive upper date bound

        Returns:
            Matching entries in their original order
        """
        needle = (search or '').strip().lower()
        entry_filter = (entry_filter or self.FILTER_ALL).upper()

        allowed_types = {
            self.FILTER_BORROW: {TxType.BORROW},
            self.FILTER_SETTLE: {TxType.SETTLE_LITERS, TxType.SETTLE_CASH},
            self.FILTER_RECEIVED: {TxType.DIESEL_RECEIVED},
        }.get(entry_filter)

        filtered = []
        for entry in entries:
            if needle:
                haystack = f"{entry['description']}\n{entry.get('remarks') or ''}".lower()
                if needle not in haystack:
                    continue
            if allowed_types is not None and entry['transaction_type'] not in allowed_types:
                continue
            if not date_in_range(entry['date'], start, end):
                continue
            filtered.append(entry)

        return filtered

    def calculate_stats(self, entries: List[Dict]) -> Dict:
        """
        Reconcile ledger entries into totals and balances.

        SETTLE_CASH entries count toward credit litres by their litres when
        set, otherwise amount / price when a price is known.

        Args:
            entries: Ledger entries (usually unfiltered)

        Returns:
            Dict of totals, supplier/customer metrics, nets and balance labels
        """
        sums = {tx_type: {'liters': Decimal('0'), 'amount': Decimal('0')} for tx_type in TxType.values}
        cash_equivalent_liters = Decimal('0')

        for entry in entries:
            tx_type = entry['transaction_type']
            liters = to_decimal(entry.get('fuel_liters'))
            amount = to_decimal(entry.get('amount'))
            sums[tx_type]['liters'] += liters
            sums[tx_type]['amount'] += amount

            if tx_type == TxType.SETTLE_CASH:
                if liters:
                    cash_equivalent_liters += liters
                else:
                    price = to_decimal(entry.get('diesel_price'))
                    if price > 0:
                        cash_equivalent_liters += amount / price

        borrow = sums[TxType.BORROW]
        received = sums[TxType.DIESEL_RECEIVED]
        settle_liters = sums[TxType.SETTLE_LITERS]
        settle_cash = sums[TxType.SETTLE_CASH]

        total_debit_liters = borrow['liters'] + received['liters']
        total_debit_amount = borrow['amount'] + received['amount']
        total_credit_liters = settle_liters['liters'] + cash_equivalent_liters
        total_credit_amount = settle_liters['amount'] + settle_cash['amount']

        net_liters_owed = quantize_liters(total_debit_liters - total_credit_liters)
        net_amount_owed = quantize_money(total_debit_amount - total_credit_amount)

        return {
            'total_debit_liters': quantize_liters(total_debit_liters),
            'total_debit_amount': quantize_money(total_debit_amount),
            'total_credit_liters': quantize_liters(total_credit_liters),
            'total_credit_amount': quantize_money(total_credit_amount),

            'total_borrowed_liters': quantize_liters(borrow['liters']),
            'total_borrowed_amount': quantize_money(borrow['amount']),
            'total_returned_liters': quantize_liters(settle_liters['liters']),
            'total_returned_amount': quantize_money(settle_liters['amount']),
            'total_cash_paid': quantize_money(settle_cash['amount']),
            'net_liters_owed': net_liters_owed,
            'net_amount_owed': net_amount_owed,

            'total_received_liters': quantize_liters(received['liters'] + borrow['liters']),
            'total_received_amount': quantize_money(received['amount'] + borrow['amount']),

            'liters_balance_status': self.balance_label(net_liters_owed),
            'amount_balance_status': self.balance_label(net_amount_owed),
            'transaction_count': len(entries),
        }

    def balance_label(self, net) -> str:
        """PENDING when the company still owes, ADVANCE when overpaid, else BALANCED."""
        net = to_decimal(net)
        if net > 0:
            return self.BALANCE_PENDING
        if net < 0:
            return self.BALANCE_ADVANCE
        return self.BALANCE_BALANCED
