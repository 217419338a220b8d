"""
Stock services — modular organization of ledger and opname operations.

Re-exports all public classes:
    from opname.services import StockLedger, OpnameSessions, OpnameReports, Catalog, StockAdvisory
"""

from opname.services.advisory import StockAdvisory
from opname.services.catalog import Catalog
from opname.services.ledger import LedgerMismatch, StockLedger
from opname.services.reports import OpnameReports, Progress
from opname.services.sessions import FinalizeResult, OpnameSessions

__all__ = [
    'StockLedger',
    'LedgerMismatch',
    'OpnameSessions',
    'FinalizeResult',
    'OpnameReports',
    'Progress',
    'Catalog',
    'StockAdvisory',
]
