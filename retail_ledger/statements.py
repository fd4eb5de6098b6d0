"""
Statement Engine Module

Builds calendar-month account statements: each transaction of the month with
its running balance, plus interest accrued day by day against the end-of-day
balance at the rate in force on that day.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List
import calendar

from .currency import ZERO, format_amount, round_currency
from .models import AccountInterest, InterestRule, Transaction, TransactionBalance
from .repositories import InterestRuleStore, TransactionStore
from .result import Result, StatementResult
from .logging_config import get_logger, log_action


NO_TRANSACTIONS = "No transaction found"
NO_TRANSACTIONS_FOR_MONTH = "No transaction found for the month"
STATEMENT_FAILED = "Failed to generate account statement"

HUNDRED = Decimal('100')


def first_day_of_month(day: date) -> date:
    return day.replace(day=1)


def last_day_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def previous_month(day: date) -> date:
    """First day of the calendar month before the one containing day"""
    return (first_day_of_month(day) - timedelta(days=1)).replace(day=1)


def days_of_month(day: date) -> List[date]:
    start = first_day_of_month(day)
    return [start + timedelta(days=offset) for offset in range(last_day_of_month(day).day)]


def same_month(first: date, second: date) -> bool:
    return (first.year, first.month) == (second.year, second.month)


class StatementEngine:
    """
    Produces month statements and interest from stored transactions and
    interest rules
    """

    def __init__(self, transaction_store: TransactionStore, interest_rule_store: InterestRuleStore):
        self.transaction_store = transaction_store
        self.interest_rule_store = interest_rule_store
        self.logger = get_logger("retail_ledger.statements")

    def run_report(self, account_id: str, month: date) -> StatementResult:
        """
        Generate the statement for the calendar month containing month

        Args:
            account_id: Account to report on
            month: Any day inside the requested month

        Returns:
            StatementResult with running balances and the month's interest;
            any fault collapses into a single generic failure
        """
        try:
            transactions = self.transaction_store.get_by_account_id(account_id) or []
            if not transactions:
                return StatementResult.failed(NO_TRANSACTIONS)

            month_transactions = [t for t in transactions if same_month(t.date, month)]
            opening_balance = self.historical_balance(transactions, month)

            statement = self.running_balances(opening_balance, month_transactions)
            if not statement:
                return StatementResult.failed(NO_TRANSACTIONS_FOR_MONTH)

            interest = self.monthly_interest(account_id, month_transactions, month, opening_balance)

            log_action(
                self.logger, "info", "Statement generated",
                action="run_report", resource=f"account:{account_id}",
                extra={"month": month.strftime("%Y%m"),
                       "transactions": len(statement),
                       "interest": format_amount(interest.amount)}
            )
            return StatementResult(result=Result.success(), transactions=statement, interest=interest)

        except Exception as e:
            self.logger.error(f"Statement for account {account_id} failed: {e}", exc_info=True)
            return StatementResult.failed(STATEMENT_FAILED)

    @staticmethod
    def historical_balance(transactions: List[Transaction], month: date) -> Decimal:
        """
        Opening balance for the month: the signed total of the previous
        calendar month only. Activity two or more months back is not carried.
        """
        prior = previous_month(month)
        return sum((t.signed_amount for t in transactions if same_month(t.date, prior)), ZERO)

    @staticmethod
    def running_balances(opening_balance: Decimal,
                         month_transactions: List[Transaction]) -> List[TransactionBalance]:
        """Fold the month's transactions in date order onto the opening balance"""
        statement = []
        balance = opening_balance
        # sorted() is stable: same-day transactions keep their stored order
        for transaction in sorted(month_transactions, key=lambda t: t.date):
            balance += transaction.signed_amount
            statement.append(TransactionBalance(transaction=transaction, balance=balance))
        return statement

    def monthly_interest(self, account_id: str, month_transactions: List[Transaction],
                         month: date, opening_balance: Decimal) -> AccountInterest:
        """Interest for the month, dated its last day"""
        month_end = last_day_of_month(month)
        rules = self.interest_rule_store.get_all() or []
        if not rules:
            return AccountInterest(account_id=account_id, date=month_end, amount=ZERO)

        days = days_of_month(month)
        rates = self.daily_rates(days, rules)
        balances = self.daily_balances(days, month_transactions, opening_balance)

        total = sum((balances[day] * rates[day] / HUNDRED for day in days), ZERO)
        return AccountInterest(account_id=account_id, date=month_end, amount=round_currency(total))

    @staticmethod
    def daily_rates(days: List[date], rules: List[InterestRule]) -> Dict[date, Decimal]:
        """
        Rate in force on each day: the latest rule effective on or before it.
        Days before the first rule of the month use the carry-in rate from
        the latest earlier rule, or zero.
        """
        ordered = sorted(rules, key=lambda r: r.date)
        rates = {}
        rate = ZERO
        index = 0
        for day in days:
            while index < len(ordered) and ordered[index].date <= day:
                rate = ordered[index].rate
                index += 1
            rates[day] = rate
        return rates

    @staticmethod
    def daily_balances(days: List[date], month_transactions: List[Transaction],
                       opening_balance: Decimal) -> Dict[date, Decimal]:
        """End-of-day balance for each day of the month"""
        by_day: Dict[date, List[Transaction]] = {}
        for transaction in month_transactions:
            by_day.setdefault(transaction.date, []).append(transaction)

        balances = {}
        balance = opening_balance
        for day in days:
            for transaction in by_day.get(day, []):
                balance += transaction.signed_amount
            balances[day] = balance
        return balances


def statement_rows(statement: StatementResult) -> List[Dict[str, Any]]:
    """
    Display rows for a successful statement: one per transaction, then the
    interest line whose balance includes the interest
    """
    rows = [
        {
            "date": entry.transaction.date.strftime("%Y%m%d"),
            "transaction_id": entry.transaction.transaction_id,
            "type": entry.transaction.transaction_type.value,
            "amount": format_amount(entry.transaction.amount),
            "balance": format_amount(entry.balance),
        }
        for entry in statement.transactions
    ]

    if statement.interest is not None and statement.transactions:
        closing = statement.transactions[-1].balance + statement.interest.amount
        rows.append({
            "date": statement.interest.date.strftime("%Y%m%d"),
            "transaction_id": "",
            "type": statement.interest.kind,
            "amount": format_amount(statement.interest.amount),
            "balance": format_amount(closing),
        })

    return rows
