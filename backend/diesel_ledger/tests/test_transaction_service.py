"""
Tests for party transaction writes and tanker bridge entries.
"""

from datetime import date
from decimal import Decimal

import pytest

from diesel_ledger.models import DieselParty, PartyDieselTransaction
from diesel_ledger.services import PartyTransactionService, PartyTransactionError
from fuel.models import FuelLog, MiscFuelEntry

TxType = PartyDieselTransaction.TransactionTypeChoices


@pytest.fixture
def service():
    return PartyTransactionService()


def payload(tx_type, **overrides):
    data = {
        'transaction_type': tx_type,
        'date': date(2024, 6, 10),
        'fuel_liters': Decimal('50'),
        'diesel_price': Decimal('90'),
        'amount': None,
        'tanker': None,
        'invoice_no': '',
        'remarks': '',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestSaveTransaction:

    def test_amount_derived_from_liters_and_price(self, service, supplier_party):
        tx = service.save_transaction(supplier_party, payload(TxType.BORROW))

        assert tx.amount == Decimal('4500.00')
        assert tx.bridge_entry is None
        assert MiscFuelEntry.objects.count() == 0

    def test_cash_settlement_derives_liters(self, service, supplier_party):
        tx = service.save_transaction(
            supplier_party,
            payload(TxType.SETTLE_CASH, fuel_liters=None, amount=Decimal('1800')),
        )

        assert tx.amount == Decimal('1800')
        assert tx.fuel_liters == Decimal('20.000')

    def test_cash_settlement_requires_amount(self, service, supplier_party):
        with pytest.raises(PartyTransactionError):
            service.save_transaction(supplier_party, payload(TxType.SETTLE_CASH, fuel_liters=None))

    def test_liters_required_for_borrow(self, service, supplier_party):
        with pytest.raises(PartyTransactionError):
            service.save_transaction(supplier_party, payload(TxType.BORROW, fuel_liters=None))

    def test_supplier_repayment_creates_outbound_bridge(self, service, supplier_party, tanker):
        tx = service.save_transaction(supplier_party, payload(TxType.SETTLE_LITERS, tanker=tanker))

        bridge = tx.bridge_entry
        assert tx.source_station == tanker
        assert tx.dest_tanker is None
        assert bridge.station == tanker
        assert bridge.destination_station is None
        assert bridge.usage_type == MiscFuelEntry.UsageTypeChoices.OTHER
        assert bridge.vehicle_description == 'Supplier Repayment'
        assert bridge.remarks.startswith('Repayment to Supplier: Shree Petroleum')
        assert bridge.amount == Decimal('4500.00')

    def test_customer_receipt_creates_self_transfer_bridge(self, service, customer_party, tanker):
        tx = service.save_transaction(customer_party, payload(TxType.DIESEL_RECEIVED, tanker=tanker))

        bridge = tx.bridge_entry
        assert tx.dest_tanker == tanker
        assert bridge.usage_type == MiscFuelEntry.UsageTypeChoices.BULK_TRANSFER
        assert bridge.is_self_transfer
        assert bridge.vehicle_description == 'Customer Inward'

    def test_customer_borrow_is_bridged(self, service, customer_party, tanker):
        tx = service.save_transaction(customer_party, payload(TxType.BORROW, tanker=tanker))

        assert tx.bridge_entry is not None
        assert tx.tanker == tanker

    def test_update_keeps_single_bridge(self, service, supplier_party, tanker):
        tx = service.save_transaction(supplier_party, payload(TxType.SETTLE_LITERS, tanker=tanker))
        bridge_id = tx.bridge_entry_id

        tx = service.save_transaction(
            supplier_party,
            payload(TxType.SETTLE_LITERS, tanker=tanker, fuel_liters=Decimal('80')),
            existing=tx,
        )

        assert tx.bridge_entry_id == bridge_id
        assert MiscFuelEntry.objects.count() == 1
        assert MiscFuelEntry.objects.get().fuel_liters == Decimal('80.000')

    def test_changing_to_non_bridge_type_removes_bridge(self, service, supplier_party, tanker):
        tx = service.save_transaction(supplier_party, payload(TxType.SETTLE_LITERS, tanker=tanker))

        tx = service.save_transaction(
            supplier_party,
            payload(TxType.SETTLE_CASH, fuel_liters=None, amount=Decimal('900')),
            existing=tx,
        )

        assert tx.bridge_entry is None
        assert tx.source_station is None
        assert MiscFuelEntry.objects.count() == 0


@pytest.mark.django_db
class TestDeletes:

    def test_delete_transaction_removes_bridge(self, service, supplier_party, tanker):
        tx = service.save_transaction(supplier_party, payload(TxType.SETTLE_LITERS, tanker=tanker))

        service.delete_transaction(tx)

        assert PartyDieselTransaction.objects.count() == 0
        assert MiscFuelEntry.objects.count() == 0

    def test_delete_party_cascades(self, service, customer_party, tanker):
        service.save_transaction(customer_party, payload(TxType.DIESEL_RECEIVED, tanker=tanker))
        service.save_transaction(customer_party, payload(TxType.BORROW, tanker=tanker))
        service.save_transaction(customer_party, payload(TxType.SETTLE_CASH, fuel_liters=None, amount=Decimal('100')))

        service.delete_party(customer_party)

        assert not DieselParty.objects.exists()
        assert PartyDieselTransaction.objects.count() == 0
        assert MiscFuelEntry.objects.count() == 0


@pytest.mark.django_db
class TestFuelLogBorrow:

    @pytest.fixture
    def fuel_log(self, coal_truck, supplier_party):
        return FuelLog.objects.create(
            truck=coal_truck, party=supplier_party, date=date(2024, 6, 3),
            odometer=10200, previous_odometer=10000,
            fuel_liters=Decimal('100'), diesel_price=Decimal('90'),
        )

    def test_sync_creates_and_updates_borrow(self, service, fuel_log):
        tx = service.sync_fuel_log_borrow(fuel_log)
        assert tx.transaction_type == TxType.BORROW
        assert tx.amount == Decimal('9000.00')

        fuel_log.fuel_liters = Decimal('120')
        fuel_log.save()
        service.sync_fuel_log_borrow(fuel_log)

        assert PartyDieselTransaction.objects.count() == 1
        assert PartyDieselTransaction.objects.get().fuel_liters == Decimal('120.000')

    def test_clearing_party_removes_borrow(self, service, fuel_log):
        service.sync_fuel_log_borrow(fuel_log)

        fuel_log.party = None
        fuel_log.save()

        assert service.sync_fuel_log_borrow(fuel_log) is None
        assert PartyDieselTransaction.objects.count() == 0


@pytest.mark.django_db
def test_party_summaries(service, supplier_party, customer_party):
    service.save_transaction(supplier_party, payload(TxType.BORROW))
    service.save_transaction(
        supplier_party, payload(TxType.SETTLE_CASH, fuel_liters=None, amount=Decimal('900'))
    )

    summaries = {row['name']: row for row in service.party_summaries()}

    supplier = summaries['Shree Petroleum']
    assert supplier['net_liters_owed'] == Decimal('40.000')
    assert supplier['net_amount_owed'] == Decimal('3600.00')
    assert supplier['liters_balance_status'] == 'PENDING'
    assert supplier['transaction_count'] == 2
    assert supplier['last_transaction_date'] == date(2024, 6, 10)

    customer = summaries['Kalinga Minerals']
    assert customer['transaction_count'] == 0
    assert customer['last_transaction_date'] is None
    assert customer['amount_balance_status'] == 'BALANCED'
