"""
Finance Tracker - Source Package

A personal finance tracker: accounts, categories and transactions kept in a
relational ledger, served over HTTP and summarized month by month for the
dashboard.

DESIGN PRINCIPLES:
1. Money is Decimal end to end
2. Validate before writing, fail visibly
3. Storage layer is swappable
4. Every read is a fresh query
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
