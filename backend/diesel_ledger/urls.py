"""
URL configuration for diesel ledger API endpoints.

Provides URL routing for diesel parties and party transactions.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import DieselPartyViewSet, PartyTransactionViewSet

router = DefaultRouter()
router.register(r'parties', DieselPartyViewSet, basename='diesel-party')
router.register(r'transactions', PartyTransactionViewSet, basename='party-transaction')

urlpatterns = [
    path('', include(router.urls)),
]

# API Documentation - Available Endpoints:
"""
GET Endpoints:
- /api/diesel/parties/?party_type=&search= - List parties
- /api/diesel/parties/summaries/ - Net litres/amount owed per party
- /api/diesel/parties/<uuid>/ledger/?search=&filter=&start_date=&end_date= - Party ledger and stats
- /api/diesel/transactions/?party_id=&transaction_type= - List transactions

POST/PUT/PATCH Endpoints:
- /api/diesel/transactions/ - Record transaction (syncs tanker bridge entry)
- /api/diesel/transactions/<uuid>/ - Edit transaction (re-syncs bridge entry)

DELETE Endpoints:
- /api/diesel/parties/<uuid>/ - Delete party, its transactions and bridge entries
- /api/diesel/transactions/<uuid>/ - Delete transaction and its bridge entry
"""
