"""
Shared API dependencies
"""

from typing import Optional

from ..system import LedgerSystem


_ledger_system: Optional[LedgerSystem] = None


def get_ledger_system() -> LedgerSystem:
    """Ledger system built from configuration on first use"""
    global _ledger_system
    if _ledger_system is None:
        _ledger_system = LedgerSystem()
    return _ledger_system
