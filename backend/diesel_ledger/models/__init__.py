"""
Diesel ledger models package.
"""

from .party import DieselParty
from .party_transaction import PartyDieselTransaction

__all__ = ['DieselParty', 'PartyDieselTransaction']
