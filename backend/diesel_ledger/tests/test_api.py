"""
API tests for the diesel ledger endpoints.
"""

from datetime import date
from decimal import Decimal

import pytest

from diesel_ledger.models import DieselParty, PartyDieselTransaction
from fuel.models import MiscFuelEntry

TxType = PartyDieselTransaction.TransactionTypeChoices


@pytest.mark.django_db
class TestPartyAPI:

    def test_filter_by_party_type(self, api_client, supplier_party, customer_party):
        response = api_client.get('/api/diesel/parties/', {'party_type': 'customer'})

        assert response.status_code == 200
        assert [party['name'] for party in response.data] == ['Kalinga Minerals']

    def test_blank_name_rejected(self, api_client):
        response = api_client.post('/api/diesel/parties/', {'name': '   ', 'party_type': 'SUPPLIER'}, format='json')

        assert response.status_code == 400
        assert 'name' in response.data

    def test_ledger_filters_entries_but_not_stats(self, api_client, supplier_party):
        PartyDieselTransaction.objects.create(
            party=supplier_party, date=date(2024, 6, 1), transaction_type=TxType.BORROW,
            fuel_liters=Decimal('100'), diesel_price=Decimal('90'), amount=Decimal('9000'),
        )
        PartyDieselTransaction.objects.create(
            party=supplier_party, date=date(2024, 6, 2), transaction_type=TxType.SETTLE_CASH,
            diesel_price=Decimal('90'), amount=Decimal('4500'),
        )

        response = api_client.get(f'/api/diesel/parties/{supplier_party.id}/ledger/', {'filter': 'BORROW'})

        assert response.status_code == 200
        assert response.data['party']['name'] == 'Shree Petroleum'
        assert len(response.data['entries']) == 1
        assert response.data['stats']['transaction_count'] == 2
        assert response.data['stats']['net_liters_owed'] == Decimal('50.000')

    def test_ledger_rejects_unknown_filter(self, api_client, supplier_party):
        response = api_client.get(f'/api/diesel/parties/{supplier_party.id}/ledger/', {'filter': 'REFUND'})

        assert response.status_code == 400
        assert 'filter' in response.data

    def test_summaries(self, api_client, supplier_party, customer_party):
        response = api_client.get('/api/diesel/parties/summaries/')

        assert response.status_code == 200
        assert response.data['count'] == 2

    def test_delete_party_removes_bridges(self, api_client, customer_party, tanker):
        api_client.post('/api/diesel/transactions/', {
            'party': str(customer_party.id),
            'transaction_type': 'DIESEL_RECEIVED',
            'date': '2024-06-05',
            'fuel_liters': '200',
            'diesel_price': '89.50',
            'tanker': str(tanker.id),
        }, format='json')

        response = api_client.delete(f'/api/diesel/parties/{customer_party.id}/')

        assert response.status_code == 204
        assert not DieselParty.objects.exists()
        assert MiscFuelEntry.objects.count() == 0


@pytest.mark.django_db
class TestTransactionAPI:

    def test_create_settlement_with_tanker(self, api_client, supplier_party, tanker):
        response = api_client.post('/api/diesel/transactions/', {
            'party': str(supplier_party.id),
            'transaction_type': 'SETTLE_LITERS',
            'date': '2024-06-05',
            'fuel_liters': '40',
            'diesel_price': '90',
            'tanker': str(tanker.id),
        }, format='json')

        assert response.status_code == 201
        assert response.data['tanker'] == str(tanker.id)
        assert response.data['bridge_entry'] is not None
        assert response.data['is_debit'] is False

    def test_external_tanker_rejected(self, api_client, supplier_party, station):
        response = api_client.post('/api/diesel/transactions/', {
            'party': str(supplier_party.id),
            'transaction_type': 'SETTLE_LITERS',
            'date': '2024-06-05',
            'fuel_liters': '40',
            'tanker': str(station.id),
        }, format='json')

        assert response.status_code == 400
        assert 'tanker' in response.data

    def test_cash_settlement_without_amount_rejected(self, api_client, supplier_party):
        response = api_client.post('/api/diesel/transactions/', {
            'party': str(supplier_party.id),
            'transaction_type': 'SETTLE_CASH',
            'date': '2024-06-05',
        }, format='json')

        assert response.status_code == 400
        assert 'amount' in response.data

    def test_partial_update_keeps_other_fields(self, api_client, supplier_party):
        created = api_client.post('/api/diesel/transactions/', {
            'party': str(supplier_party.id),
            'transaction_type': 'BORROW',
            'date': '2024-06-05',
            'fuel_liters': '40',
            'diesel_price': '90',
            'remarks': 'Office genset',
        }, format='json')

        response = api_client.patch(
            f"/api/diesel/transactions/{created.data['id']}/", {'fuel_liters': '50'}, format='json'
        )

        assert response.status_code == 200
        tx = PartyDieselTransaction.objects.get()
        assert tx.fuel_liters == Decimal('50.000')
        assert tx.amount == Decimal('4500.00')
        assert tx.remarks == 'Office genset'

    def test_delete_transaction(self, api_client, supplier_party, tanker):
        created = api_client.post('/api/diesel/transactions/', {
            'party': str(supplier_party.id),
            'transaction_type': 'SETTLE_LITERS',
            'date': '2024-06-05',
            'fuel_liters': '40',
            'tanker': str(tanker.id),
        }, format='json')

        response = api_client.delete(f"/api/diesel/transactions/{created.data['id']}/")

        assert response.status_code == 204
        assert PartyDieselTransaction.objects.count() == 0
        assert MiscFuelEntry.objects.count() == 0
