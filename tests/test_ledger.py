"""
Test suite for the ledger engine

Covers balance and ordering invariants, implicit account creation,
transaction ID generation and translation of storage faults.
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

from retail_ledger.storage import InMemoryStorage
from retail_ledger.models import Account, Transaction, TransactionType
from retail_ledger.repositories import StorageAccountStore, StorageTransactionStore
from retail_ledger.result import Result
from retail_ledger.ledger import LedgerEngine, INSUFFICIENT_BALANCE, BACKDATED_TRANSACTION


def make_transaction(transaction_id, day, account_id, kind, amount):
    return Transaction(
        transaction_id=transaction_id,
        date=day,
        account_id=account_id,
        transaction_type=TransactionType(kind),
        amount=Decimal(amount)
    )


class TestProcess:
    """Test LedgerEngine.process"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.accounts = StorageAccountStore(self.storage)
        self.transactions = StorageTransactionStore(self.storage)
        self.ledger = LedgerEngine(self.accounts, self.transactions)

    def test_first_deposit_creates_account(self):
        """First transaction for an unknown account opens it"""
        result = self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "100.00"))

        assert result.is_success
        assert self.accounts.get_by_id("AC001") == Account("AC001", Decimal('100.00'))
        assert len(self.transactions.get_by_account_id("AC001")) == 1

    def test_withdrawal_on_unknown_account_is_rejected(self):
        """Withdrawing before any deposit fails without opening the account"""
        result = self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC003", "W", "100"))

        assert result == Result.failure(INSUFFICIENT_BALANCE)
        assert self.accounts.get_by_id("AC003") is None
        assert self.transactions.get_by_account_id("AC003") == []

    def test_withdrawal_within_balance(self):
        """Withdrawal reduces the balance"""
        self.ledger.process(make_transaction("20240319-01", date(2024, 3, 19), "AC001", "D", "200"))
        result = self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "W", "150"))

        assert result.is_success
        assert self.accounts.get_by_id("AC001").balance == Decimal('50')

    def test_withdrawal_exceeding_balance_has_no_effect(self):
        """Rejected withdrawal leaves stored state untouched"""
        self.ledger.process(make_transaction("20240319-01", date(2024, 3, 19), "AC001", "D", "100"))
        result = self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "W", "100.01"))

        assert result.error_message == INSUFFICIENT_BALANCE
        assert self.accounts.get_by_id("AC001").balance == Decimal('100')
        assert len(self.transactions.get_by_account_id("AC001")) == 1

    def test_withdrawal_to_exactly_zero(self):
        """Balance may reach zero"""
        self.ledger.process(make_transaction("20240319-01", date(2024, 3, 19), "AC001", "D", "100"))
        result = self.ledger.process(make_transaction("20240319-02", date(2024, 3, 19), "AC001", "W", "100"))

        assert result.is_success
        assert self.accounts.get_by_id("AC001").balance == Decimal('0')

    def test_backdated_withdrawal_rejected_even_when_affordable(self):
        """A transaction dated before the latest recorded one is always rejected"""
        self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "100"))
        result = self.ledger.process(make_transaction("20240319-01", date(2024, 3, 19), "AC001", "W", "50"))

        assert result == Result.failure(BACKDATED_TRANSACTION)
        assert self.accounts.get_by_id("AC001").balance == Decimal('100')

    def test_backdated_deposit_rejected(self):
        """Backdating applies to deposits as well"""
        self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "100"))
        result = self.ledger.process(make_transaction("20240301-01", date(2024, 3, 1), "AC001", "D", "10"))

        assert result.error_message == BACKDATED_TRANSACTION

    def test_backdating_checked_before_balance(self):
        """Backdated and unaffordable reports the ordering violation"""
        self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "10"))
        result = self.ledger.process(make_transaction("20240319-01", date(2024, 3, 19), "AC001", "W", "500"))

        assert result.error_message == BACKDATED_TRANSACTION

    def test_same_day_transaction_allowed(self):
        """Only strictly earlier dates count as backdating"""
        self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "10"))
        result = self.ledger.process(make_transaction("20240320-02", date(2024, 3, 20), "AC001", "D", "5"))

        assert result.is_success
        assert self.accounts.get_by_id("AC001").balance == Decimal('15')

    def test_backdating_is_per_account(self):
        """Another account's later activity does not block this one"""
        self.ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "10"))
        result = self.ledger.process(make_transaction("20240301-01", date(2024, 3, 1), "AC002", "D", "10"))

        assert result.is_success

    def test_balance_equals_sum_of_signed_amounts(self):
        """Balance invariant over an accepted/rejected sequence"""
        sequence = [
            ("D", "100.00"), ("W", "30.50"), ("W", "80.00"),
            ("D", "5.25"), ("W", "74.75"), ("W", "0.01"), ("D", "1000"),
        ]
        running = Decimal('0')
        for index, (kind, amount) in enumerate(sequence, start=1):
            transaction = make_transaction(f"20240401-{index:02d}", date(2024, 4, 1), "AC009", kind, amount)
            result = self.ledger.process(transaction)
            candidate = running + transaction.signed_amount
            if candidate < 0:
                assert result.error_message == INSUFFICIENT_BALANCE
            else:
                assert result.is_success
                running = candidate
            assert running >= 0

        stored = self.transactions.get_by_account_id("AC009")
        assert sum(t.signed_amount for t in stored) == running
        assert self.accounts.get_by_id("AC009").balance == running
        assert running == Decimal('1000.00')

    def test_none_transaction_list_treated_as_empty(self):
        """A store returning None for transactions is treated as no history"""
        transactions = Mock()
        transactions.get_by_account_id.return_value = None
        transactions.append.return_value = Result.success()
        ledger = LedgerEngine(self.accounts, transactions)

        result = ledger.process(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "10"))

        assert result.is_success


class TestProcessFailures:
    """Test storage failure handling in LedgerEngine.process"""

    def setup_method(self):
        self.accounts = Mock()
        self.transactions = Mock()
        self.accounts.get_by_id.return_value = Account("AC001", Decimal('100'))
        self.accounts.update.return_value = Result.success()
        self.accounts.create.return_value = Result.success()
        self.transactions.get_by_account_id.return_value = []
        self.transactions.append.return_value = Result.success()
        self.ledger = LedgerEngine(self.accounts, self.transactions)
        self.deposit = make_transaction("20240320-01", date(2024, 3, 20), "AC001", "D", "10")

    def test_existing_account_is_updated(self):
        """Known accounts go through update, not create"""
        assert self.ledger.process(self.deposit).is_success
        self.accounts.update.assert_called_once_with(Account("AC001", Decimal('110')))
        self.accounts.create.assert_not_called()

    def test_account_read_fault_becomes_failure(self):
        """Exceptions from the store never escape"""
        self.accounts.get_by_id.side_effect = RuntimeError("disk unavailable")

        result = self.ledger.process(self.deposit)

        assert result == Result.failure("disk unavailable")

    def test_fault_without_message_uses_unknown_error(self):
        """Exceptions without text map to the fixed message"""
        self.transactions.get_by_account_id.side_effect = RuntimeError()

        result = self.ledger.process(self.deposit)

        assert result.error_message == "Unknown error occurred"

    def test_account_persist_failure_skips_append(self):
        """If the account write fails the transaction is not appended"""
        self.accounts.update.return_value = Result.failure("An error occurred while updating the account")

        result = self.ledger.process(self.deposit)

        assert result.error_message == "An error occurred while updating the account"
        self.transactions.append.assert_not_called()

    def test_append_failure_after_account_update_is_reported(self):
        """The balance is saved but the append failure is returned"""
        self.transactions.append.return_value = Result.failure("write failed")

        result = self.ledger.process(self.deposit)

        assert result.error_message == "write failed"
        self.accounts.update.assert_called_once()


class TestGenerateId:
    """Test transaction ID generation"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.transactions = StorageTransactionStore(self.storage)
        self.ledger = LedgerEngine(StorageAccountStore(self.storage), self.transactions)

    def test_first_id_of_the_day(self):
        assert self.ledger.generate_id(date(2024, 3, 20), "AC001") == "20240320-01"

    def test_next_id_after_existing(self):
        """Suffix increments past IDs already used"""
        self.transactions.append(make_transaction("20240320-01", date(2024, 3, 20), "AC001", "W", "50"))
        self.transactions.append(make_transaction("20240320-02", date(2024, 3, 20), "AC001", "W", "50"))

        assert self.ledger.generate_id(date(2024, 3, 20), "AC001") == "20240320-03"

    def test_suffix_grows_beyond_two_digits(self):
        """Suffix width is unbounded"""
        for n in range(1, 100):
            self.transactions.append(make_transaction(f"20240320-{n:02d}", date(2024, 3, 20), "AC001", "D", "1"))

        assert self.ledger.generate_id(date(2024, 3, 20), "AC001") == "20240320-100"

    def test_ids_are_per_account(self):
        """Another account's IDs do not affect this account"""
        self.transactions.append(make_transaction("20240320-01", date(2024, 3, 20), "AC002", "D", "1"))

        assert self.ledger.generate_id(date(2024, 3, 20), "AC001") == "20240320-01"

    def test_sequential_ids_are_dense_and_distinct(self):
        """N generate-then-persist rounds yield N consecutive suffixes"""
        generated = []
        for _ in range(12):
            transaction_id = self.ledger.generate_id(date(2024, 5, 2), "AC001")
            outcome = self.ledger.process(make_transaction(transaction_id, date(2024, 5, 2), "AC001", "D", "1"))
            assert outcome.is_success
            generated.append(transaction_id)

        assert generated == [f"20240502-{n:02d}" for n in range(1, 13)]

    def test_none_from_store_handled(self):
        transactions = Mock()
        transactions.get_by_account_id.return_value = None
        ledger = LedgerEngine(Mock(), transactions)

        assert ledger.generate_id(date(2024, 3, 20), "AC001") == "20240320-01"
        transactions.get_by_account_id.assert_called_once_with("AC001")


class TestRecord:
    """Test the record/deposit/withdraw convenience methods"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.ledger = LedgerEngine(StorageAccountStore(self.storage), StorageTransactionStore(self.storage))

    def test_deposit_returns_transaction(self):
        outcome = self.ledger.deposit(date(2024, 6, 1), "AC001", Decimal('250.00'))

        assert outcome.result.is_success
        assert outcome.transaction.transaction_id == "20240601-01"
        assert outcome.transaction.transaction_type == TransactionType.DEPOSIT

    def test_failed_withdrawal_returns_no_transaction(self):
        outcome = self.ledger.withdraw(date(2024, 6, 1), "AC001", Decimal('1'))

        assert outcome.result.error_message == INSUFFICIENT_BALANCE
        assert outcome.transaction is None

    def test_invalid_amount_becomes_failure(self):
        """Model validation errors are returned, not raised"""
        outcome = self.ledger.deposit(date(2024, 6, 1), "AC001", Decimal('0'))

        assert outcome.result.error_message == "Transaction amount must be positive"

    def test_store_fault_while_generating_id(self):
        transactions = Mock()
        transactions.get_by_account_id.side_effect = OSError("read failed")
        ledger = LedgerEngine(Mock(), transactions)

        outcome = ledger.deposit(date(2024, 6, 1), "AC001", Decimal('5'))

        assert outcome.result == Result.failure("read failed")
        assert outcome.transaction is None

    def test_generate_id_propagates_store_fault(self):
        transactions = Mock()
        transactions.get_by_account_id.side_effect = OSError("read failed")
        ledger = LedgerEngine(Mock(), transactions)

        with pytest.raises(OSError, match="read failed"):
            ledger.generate_id(date(2024, 6, 1), "AC001")
