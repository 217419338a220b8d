"""
Stock Service — The single public interface for ledger and opname operations.

Usage:
    from opname import stock, StockError

    stock.issue(kertas, 10)                  # OUT, stock 50 → 40
    session = stock.create_session()
    stock.record_count(session, kertas, 38)
    result = stock.finalize(session)        # stock force-set to 38
    stock.accuracy_rate(session)            # 0
"""

from opname.services.advisory import StockAdvisory
from opname.services.catalog import Catalog
from opname.services.ledger import StockLedger
from opname.services.reports import OpnameReports
from opname.services.sessions import OpnameSessions


class Stock(StockLedger, OpnameSessions, OpnameReports, Catalog, StockAdvisory):
    """
    Single interface for all operations.

    Every method is a classmethod of one of the service classes:
    - StockLedger: record_transaction, receive, issue, list_transactions, verify_ledger
    - OpnameSessions: create_session, record_count, finalize, get_session, list_sessions
    - OpnameReports: accuracy_rate, discrepancies, progress, session_summary, dashboard_metrics
    - Catalog: register_item, update_item, delete_item, create_category, rename_category, delete_category
    - StockAdvisory: analyze_inventory

    IMPORTANT: All state-changing methods use atomic transactions
    with row locking. See each method's docstring.
    """
