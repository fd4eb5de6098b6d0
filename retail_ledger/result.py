"""
Operation Results

Every engine operation returns a Result instead of raising for expected
business outcomes. Infrastructure faults are translated with
Result.from_exception.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .models import AccountInterest, Transaction, TransactionBalance


UNKNOWN_ERROR = "Unknown error occurred"


@dataclass(frozen=True)
class Result:
    """Success flag plus an optional human-readable message"""
    is_success: bool
    error_message: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return not self.is_success

    @classmethod
    def success(cls) -> 'Result':
        return cls(is_success=True)

    @classmethod
    def failure(cls, message: str) -> 'Result':
        return cls(is_success=False, error_message=message)

    @classmethod
    def from_exception(cls, error: BaseException) -> 'Result':
        """Failure carrying the exception message, or a fixed one if it has none"""
        message = str(error)
        return cls(is_success=False, error_message=message or UNKNOWN_ERROR)


@dataclass(frozen=True)
class TransactionOutcome:
    """Result of recording a transaction; transaction is set only on success"""
    result: Result
    transaction: Optional[Transaction] = None


@dataclass(frozen=True)
class StatementResult:
    """Month statement: running balances plus the month's interest"""
    result: Result
    transactions: List[TransactionBalance] = field(default_factory=list)
    interest: Optional[AccountInterest] = None

    @classmethod
    def failed(cls, message: str) -> 'StatementResult':
        return cls(result=Result.failure(message))
