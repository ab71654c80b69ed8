"""
Diesel Ledger Services Package.

Services:
- LedgerCalculatorService: Party ledger entries, filters and reconciliation
- PartyTransactionService: Transaction writes with bridge entry sync
"""

from .ledger_calculator import LedgerCalculatorService
from .transaction_service import PartyTransactionService, PartyTransactionError

__all__ = [
    'LedgerCalculatorService',
    'PartyTransactionService',
    'PartyTransactionError',
]
