"""
Retail Ledger

A single-process retail ledger that records deposits and withdrawals against
named accounts and produces month-end statements with daily interest accrual.
All monetary values use Decimal.
"""

__version__ = "1.0.0"
