"""
Domain Models

Accounts, transactions and interest rules as stored, plus the derived
statement entries. Stored records round-trip through plain JSON-compatible
dictionaries with Decimals as strings and dates as ISO strings.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from .currency import ZERO, to_amount


class TransactionType(Enum):
    """Types of ledger transactions"""
    DEPOSIT = "D"
    WITHDRAWAL = "W"


INTEREST_KIND = "I"


@dataclass(frozen=True)
class Account:
    """Named account holding a non-negative balance"""
    account_id: str
    balance: Decimal = ZERO

    def __post_init__(self):
        if not self.account_id:
            raise ValueError("Account ID is required")
        object.__setattr__(self, 'balance', to_amount(self.balance))
        if self.balance < ZERO:
            raise ValueError("Account balance cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return {"account_id": self.account_id, "balance": str(self.balance)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(account_id=data['account_id'], balance=Decimal(data['balance']))


@dataclass(frozen=True)
class Transaction:
    """
    A single deposit or withdrawal. Immutable once created.
    """
    transaction_id: str
    date: date
    account_id: str
    transaction_type: TransactionType
    amount: Decimal

    def __post_init__(self):
        if not self.transaction_id:
            raise ValueError("Transaction ID is required")
        if not self.account_id:
            raise ValueError("Account ID is required")
        if not isinstance(self.transaction_type, TransactionType):
            object.__setattr__(self, 'transaction_type', TransactionType(self.transaction_type))
        object.__setattr__(self, 'amount', to_amount(self.amount))
        if self.amount <= ZERO:
            raise ValueError("Transaction amount must be positive")

    @property
    def signed_amount(self) -> Decimal:
        """Amount as it affects the balance: negative for withdrawals"""
        if self.transaction_type == TransactionType.WITHDRAWAL:
            return -self.amount
        return self.amount

    @property
    def is_deposit(self) -> bool:
        return self.transaction_type == TransactionType.DEPOSIT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "date": self.date.isoformat(),
            "account_id": self.account_id,
            "type": self.transaction_type.value,
            "amount": str(self.amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            transaction_id=data['transaction_id'],
            date=date.fromisoformat(data['date']),
            account_id=data['account_id'],
            transaction_type=TransactionType(data['type']),
            amount=Decimal(data['amount']),
        )


@dataclass(frozen=True)
class InterestRule:
    """Interest rate (percent) effective from a given day"""
    rule_id: str
    date: date
    rate: Decimal

    def __post_init__(self):
        if not self.rule_id:
            raise ValueError("Interest rule ID is required")
        object.__setattr__(self, 'rate', to_amount(self.rate))
        if self.rate < Decimal('0') or self.rate > Decimal('100'):
            raise ValueError("Interest rate must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "date": self.date.isoformat(),
            "rate": str(self.rate),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InterestRule':
        return cls(
            rule_id=data['rule_id'],
            date=date.fromisoformat(data['date']),
            rate=Decimal(data['rate']),
        )


@dataclass(frozen=True)
class TransactionBalance:
    """Statement line: a transaction and the running balance after it"""
    transaction: Transaction
    balance: Decimal


@dataclass(frozen=True)
class AccountInterest:
    """Interest credited for a month, dated on the month's last day"""
    account_id: str
    date: date
    amount: Decimal
    kind: str = INTEREST_KIND
