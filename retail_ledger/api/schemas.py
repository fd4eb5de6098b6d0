"""
Pydantic schemas for API requests and responses
"""

from typing import List
from pydantic import BaseModel, Field

from ..currency import format_amount
from ..models import InterestRule, Transaction


class TransactionRequest(BaseModel):
    date: str = Field(..., description="Transaction date as YYYYMMdd")
    account_id: str
    type: str = Field(..., description='"D" for deposit, "W" for withdrawal')
    amount: str = Field(..., description="Decimal amount as string, up to 2 decimals")


class TransactionModel(BaseModel):
    transaction_id: str
    date: str
    account_id: str
    type: str
    amount: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> 'TransactionModel':
        return cls(
            transaction_id=transaction.transaction_id,
            date=transaction.date.strftime("%Y%m%d"),
            account_id=transaction.account_id,
            type=transaction.transaction_type.value,
            amount=format_amount(transaction.amount)
        )


class InterestRuleRequest(BaseModel):
    date: str = Field(..., description="Effective date as YYYYMMdd")
    rule_id: str
    rate: str = Field(..., description="Rate in percent, 0 to 100")


class InterestRuleModel(BaseModel):
    date: str
    rule_id: str
    rate: str

    @classmethod
    def from_rule(cls, rule: InterestRule) -> 'InterestRuleModel':
        return cls(date=rule.date.strftime("%Y%m%d"), rule_id=rule.rule_id, rate=str(rule.rate))


class StatementRow(BaseModel):
    date: str
    transaction_id: str
    type: str
    amount: str
    balance: str


class StatementResponse(BaseModel):
    account_id: str
    month: str
    rows: List[StatementRow]
