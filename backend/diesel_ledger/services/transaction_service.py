"""
Party Transaction Service.

Records, updates and deletes diesel party transactions and keeps the
mirrored "bridge" misc fuel entries in step with them, so internal tanker
stock reflects party diesel movements.

Bridge types:
- SETTLE_LITERS: litres leave a tanker to repay a supplier
- DIESEL_RECEIVED: customer diesel enters a tanker
- BORROW for non-supplier parties: customer stock enters a tanker

Single Responsibility: Party transaction persistence and bridge sync only.
"""

import logging
from typing import Dict, List, Optional
from django.db import transaction

from common.validators import to_decimal, quantize_liters, quantize_money
from fuel.models import MiscFuelEntry
from ..models import DieselParty, PartyDieselTransaction
from .ledger_calculator import LedgerCalculatorService

logger = logging.getLogger(__name__)

TxType = PartyDieselTransaction.TransactionTypeChoices


class PartyTransactionService:
    """
    Service for party transaction writes.

    All multi-row writes (transaction + bridge entry) run atomically.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def is_bridge_type(self, party: DieselParty, transaction_type: str) -> bool:
        """Check whether a transaction type moves stock in or out of a tanker."""
        if transaction_type in (TxType.SETTLE_LITERS, TxType.DIESEL_RECEIVED):
            return True
        return transaction_type == TxType.BORROW and not party.is_supplier

    def save_transaction(
        self,
        party: DieselParty,
        data: Dict,
        existing: Optional[PartyDieselTransaction] = None,
    ) -> PartyDieselTransaction:
        """
        Create or update a party transaction and sync its bridge entry.

        Args:
            party: Party the transaction belongs to
            data: Validated fields: transaction_type, date, fuel_liters,
                diesel_price, amount, tanker, invoice_no, remarks
            existing: Transaction being edited, if any

        Returns:
            Saved transaction
        """
        tx_type = data['transaction_type']
        liters = data.get('fuel_liters')
        price = data.get('diesel_price')
        amount = data.get('amount')
        tanker = data.get('tanker')
        remarks = data.get('remarks') or ''

        if tx_type != TxType.SETTLE_CASH and not liters:
            raise PartyTransactionError("Litres are required for this transaction type")
        if tx_type == TxType.SETTLE_CASH and not amount:
            raise PartyTransactionError("Amount is required for a cash settlement")

        if tx_type == TxType.SETTLE_CASH:
            final_amount = amount
            if price is not None and to_decimal(price) > 0:
                liters = quantize_liters(to_decimal(amount) / to_decimal(price))
        elif liters is not None and price is not None:
            final_amount = quantize_money(to_decimal(liters) * to_decimal(price))
        else:
            final_amount = amount

        is_receipt = tx_type == TxType.DIESEL_RECEIVED or (
            tx_type == TxType.BORROW and not party.is_supplier
        )

        try:
            with transaction.atomic():
                tx = existing or PartyDieselTransaction(party=party)
                tx.party = party
                tx.date = data['date']
                tx.transaction_type = tx_type
                tx.fuel_liters = liters
                tx.diesel_price = price
                tx.amount = final_amount
                tx.invoice_no = data.get('invoice_no') or ''
                tx.remarks = remarks
                tx.source_station = tanker if tx_type == TxType.SETTLE_LITERS else None
                tx.dest_tanker = tanker if is_receipt else None

                stale_bridge = None
                if self.is_bridge_type(party, tx_type) and tanker is not None:
                    tx.bridge_entry = self._sync_bridge_entry(
                        tx.bridge_entry, party, tx_type, tanker, data['date'], liters, price, remarks
                    )
                elif tx.bridge_entry_id:
                    stale_bridge = tx.bridge_entry
                    tx.bridge_entry = None

                tx.save()

                if stale_bridge is not None:
                    stale_bridge.delete()
                    self.logger.info(f"Removed bridge entry for transaction {tx.id}")

            self.logger.info(
                f"Saved {tx_type} transaction {tx.id} for party {party.name}"
            )
            return tx

        except Exception as e:
            self.logger.error(f"Saving party transaction failed: {str(e)}")
            raise PartyTransactionError(f"Failed to save transaction: {str(e)}")

    def _sync_bridge_entry(self, bridge, party, tx_type, tanker, on_date, liters, price, remarks):
        """Create or update the misc fuel entry mirroring a bridge transaction."""
        is_receipt = tx_type != TxType.SETTLE_LITERS
        bridge = bridge or MiscFuelEntry()

        bridge.station = tanker
        bridge.destination_station = tanker if is_receipt else None
        bridge.date = on_date
        bridge.fuel_liters = to_decimal(liters)
        bridge.diesel_price = to_decimal(price)

        if is_receipt:
            bridge.usage_type = MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER
            bridge.vehicle_description = 'Customer Inward'
            bridge.remarks = f"Stock Received from Customer: {party.name}. {remarks}".strip()
        else:
            bridge.usage_type = MiscFuelEntry.UsageTypeChoices.OTHER
            bridge.vehicle_description = 'Supplier Repayment'
            bridge.remarks = f"Repayment to Supplier: {party.name}. {remarks}".strip()

        bridge.save()
        return bridge

    def delete_transaction(self, tx: PartyDieselTransaction) -> None:
        """Delete a transaction together with its bridge entry."""
        try:
            with transaction.atomic():
                bridge = tx.bridge_entry
                tx_id = tx.id
                tx.delete()
                if bridge is not None:
                    bridge.delete()

            self.logger.info(f"Deleted party transaction {tx_id}")

        except Exception as e:
            self.logger.error(f"Deleting party transaction failed: {str(e)}")
            raise PartyTransactionError(f"Failed to delete transaction: {str(e)}")

    def delete_party(self, party: DieselParty) -> None:
        """Delete a party, all its transactions and all their bridge entries."""
        try:
            with transaction.atomic():
                bridge_ids = list(
                    party.transactions.exclude(bridge_entry__isnull=True)
                    .values_list('bridge_entry_id', flat=True)
                )
                party_name = party.name
                party.delete()
                MiscFuelEntry.objects.filter(id__in=bridge_ids).delete()

            self.logger.info(f"Deleted party {party_name} and {len(bridge_ids)} bridge entries")

        except Exception as e:
            self.logger.error(f"Deleting party failed: {str(e)}")
            raise PartyTransactionError(f"Failed to delete party: {str(e)}")

    def sync_fuel_log_borrow(self, fuel_log) -> Optional[PartyDieselTransaction]:
        """
        Keep the BORROW transaction raised by a fleet fuel log in step with it.

        A fuel log drawn on a party account owns exactly one BORROW; clearing
        the party removes it.

        Returns:
            The linked transaction, or None when the log has no party
        """
        existing = PartyDieselTransaction.objects.filter(fuel_log=fuel_log).first()

        if fuel_log.party_id is None:
            if existing is not None:
                self.delete_transaction(existing)
            return None

        price = to_decimal(fuel_log.diesel_price)
        tx = existing or PartyDieselTransaction(fuel_log=fuel_log)
        tx.party_id = fuel_log.party_id
        tx.date = fuel_log.date
        tx.transaction_type = TxType.BORROW
        tx.fuel_liters = fuel_log.fuel_liters
        tx.diesel_price = price if price > 0 else None
        tx.amount = quantize_money(to_decimal(fuel_log.fuel_liters) * price) if price > 0 else None
        if not tx.remarks:
            tx.remarks = f"Auto-recorded from fuel log on {fuel_log.date.isoformat()}"
        tx.save()

        self.logger.info(f"Synced BORROW {tx.id} for fuel log {fuel_log.id}")
        return tx

    def remove_fuel_log_borrow(self, fuel_log) -> None:
        """Delete the BORROW transaction raised by a fuel log, if any."""
        for tx in PartyDieselTransaction.objects.filter(fuel_log=fuel_log):
            self.delete_transaction(tx)

    def party_summaries(self, parties=None) -> List[Dict]:
        """
        Net litres and amount per party for the parties list.

        Returns:
            One summary dict per party, ordered by name
        """
        calculator = LedgerCalculatorService()
        if parties is None:
            parties = DieselParty.objects.prefetch_related(
                'transactions__fuel_log__truck',
                'transactions__source_station',
                'transactions__dest_tanker',
            )

        summaries = []
        for party in parties:
            entries = calculator.build_ledger_entries(party, party.transactions.all())
            stats = calculator.calculate_stats(entries)
            summaries.append({
                'party_id': str(party.id),
                'name': party.name,
                'party_type': party.party_type,
                'net_liters_owed': stats['net_liters_owed'],
                'net_amount_owed': stats['net_amount_owed'],
                'liters_balance_status': stats['liters_balance_status'],
                'amount_balance_status': stats['amount_balance_status'],
                'transaction_count': stats['transaction_count'],
                'last_transaction_date': entries[0]['date'] if entries else None,
            })

        return summaries


class PartyTransactionError(Exception):
    """Exception raised when a party transaction cannot be recorded."""

    pass
