"""
Ledger Engine Module

Records deposits and withdrawals against accounts. Enforces the two ledger
invariants: an account balance never goes negative, and no transaction may be
dated earlier than the latest one already recorded for the account.
Accounts are opened implicitly by their first transaction.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Set

from .currency import ZERO, format_amount
from .models import Account, Transaction, TransactionType
from .repositories import AccountStore, TransactionStore
from .result import Result, TransactionOutcome
from .logging_config import get_logger, log_action


INSUFFICIENT_BALANCE = "Insufficient balance"
BACKDATED_TRANSACTION = "Cannot process transaction in the past"


class LedgerEngine:
    """
    Validates and persists transactions, keeping account balances equal to
    the sum of their signed transaction amounts
    """

    def __init__(self, account_store: AccountStore, transaction_store: TransactionStore):
        self.account_store = account_store
        self.transaction_store = transaction_store
        self.logger = get_logger("retail_ledger.ledger")

    def process(self, transaction: Transaction) -> Result:
        """
        Apply a fully formed transaction to its account

        The account is persisted before the transaction is appended. If the
        append fails after the account was saved, the balance and the ledger
        disagree; that is reported as a failure and logged, not repaired.

        Args:
            transaction: Transaction with its ID already generated

        Returns:
            Success, or a failure carrying the reason
        """
        resource = f"account:{transaction.account_id}"
        try:
            account = self.account_store.get_by_id(transaction.account_id)
            is_new_account = account is None
            if is_new_account:
                account = Account(account_id=transaction.account_id, balance=ZERO)

            existing = self._load_transactions(transaction.account_id)
            if any(t.date > transaction.date for t in existing):
                log_action(
                    self.logger, "warning", "Backdated transaction rejected",
                    action="process_transaction", resource=resource,
                    extra={"transaction_id": transaction.transaction_id,
                           "date": transaction.date.isoformat()}
                )
                return Result.failure(BACKDATED_TRANSACTION)

            new_balance = account.balance + transaction.signed_amount
            if new_balance < ZERO:
                log_action(
                    self.logger, "warning", "Withdrawal rejected for insufficient balance",
                    action="process_transaction", resource=resource,
                    extra={"transaction_id": transaction.transaction_id,
                           "balance": format_amount(account.balance),
                           "amount": format_amount(transaction.amount)}
                )
                return Result.failure(INSUFFICIENT_BALANCE)

            updated_account = replace(account, balance=new_balance)
            if is_new_account:
                result = self.account_store.create(updated_account)
            else:
                result = self.account_store.update(updated_account)
            if result.has_error:
                return result

            result = self.transaction_store.append(transaction)
            if result.has_error:
                log_action(
                    self.logger, "error",
                    "Account balance saved but transaction append failed",
                    action="process_transaction", resource=resource,
                    extra={"transaction_id": transaction.transaction_id,
                           "balance": format_amount(new_balance),
                           "error": result.error_message}
                )
                return result

            log_action(
                self.logger, "info", f"Transaction processed: {transaction.transaction_type.name.lower()}",
                action="process_transaction", resource=resource,
                extra={"transaction_id": transaction.transaction_id,
                       "amount": format_amount(transaction.amount),
                       "balance": format_amount(new_balance),
                       "new_account": is_new_account}
            )
            return result

        except Exception as e:
            self.logger.error(f"Transaction {transaction.transaction_id} failed: {e}", exc_info=True)
            return Result.from_exception(e)

    def generate_id(self, transaction_date: date, account_id: str) -> str:
        """
        Next free transaction ID for the account, formatted YYYYMMDD-NN

        The suffix starts at 01 and is checked against every ID the account
        has ever used, not only the IDs of the same day.

        Raises:
            Exception: Storage faults from the transaction store propagate
        """
        used_ids = self._used_ids(account_id)
        prefix = transaction_date.strftime("%Y%m%d")
        sequence = 1
        candidate = f"{prefix}-{sequence:02d}"
        while candidate in used_ids:
            sequence += 1
            candidate = f"{prefix}-{sequence:02d}"
        return candidate

    def record(self, transaction_date: date, account_id: str,
               transaction_type: TransactionType, amount: Decimal) -> TransactionOutcome:
        """
        Generate an ID, build the transaction and process it

        Returns:
            TransactionOutcome; the transaction is set only on success
        """
        try:
            transaction = Transaction(
                transaction_id=self.generate_id(transaction_date, account_id),
                date=transaction_date,
                account_id=account_id,
                transaction_type=transaction_type,
                amount=amount
            )
        except Exception as e:
            self.logger.error(f"Could not build transaction for account {account_id}: {e}")
            return TransactionOutcome(result=Result.from_exception(e))

        result = self.process(transaction)
        if result.has_error:
            return TransactionOutcome(result=result)
        return TransactionOutcome(result=result, transaction=transaction)

    def deposit(self, transaction_date: date, account_id: str, amount: Decimal) -> TransactionOutcome:
        """Convenience method for deposits"""
        return self.record(transaction_date, account_id, TransactionType.DEPOSIT, amount)

    def withdraw(self, transaction_date: date, account_id: str, amount: Decimal) -> TransactionOutcome:
        """Convenience method for withdrawals"""
        return self.record(transaction_date, account_id, TransactionType.WITHDRAWAL, amount)

    def _load_transactions(self, account_id: str) -> List[Transaction]:
        return self.transaction_store.get_by_account_id(account_id) or []

    def _used_ids(self, account_id: str) -> Set[str]:
        return {t.transaction_id for t in self._load_transactions(account_id)}
