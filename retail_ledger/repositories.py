"""
Entity Repositories

One repository per entity over a StorageInterface backend. Write operations
return a Result and never raise; read operations let storage faults propagate
so the calling engine can translate them.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import json

from .models import Account, InterestRule, Transaction
from .result import Result
from .storage import StorageInterface
from .logging_config import get_logger


class AccountStore(ABC):
    """Account persistence"""

    @abstractmethod
    def get_by_id(self, account_id: str) -> Optional[Account]:
        pass

    @abstractmethod
    def create(self, account: Account) -> Result:
        pass

    @abstractmethod
    def update(self, account: Account) -> Result:
        pass


class TransactionStore(ABC):
    """Append-only transaction persistence"""

    @abstractmethod
    def get_by_account_id(self, account_id: str) -> List[Transaction]:
        pass

    @abstractmethod
    def append(self, transaction: Transaction) -> Result:
        pass


class InterestRuleStore(ABC):
    """Interest rule persistence"""

    @abstractmethod
    def get_all(self) -> List[InterestRule]:
        pass

    @abstractmethod
    def insert(self, rule: InterestRule) -> Result:
        pass

    @abstractmethod
    def replace(self, old_rule: InterestRule, new_rule: InterestRule,
                all_rules: List[InterestRule]) -> Result:
        pass


def find_duplicate_dates(rules: List[InterestRule]) -> List[str]:
    """Effective dates (ISO) carried by more than one rule"""
    seen = set()
    duplicates = []
    for rule in rules:
        key = rule.date.isoformat()
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


class StorageAccountStore(AccountStore):
    """Accounts keyed by account ID"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "accounts"
        self.logger = get_logger("retail_ledger.repositories")

    def get_by_id(self, account_id: str) -> Optional[Account]:
        if not account_id:
            return None
        data = self.storage.load(self.table_name, account_id)
        return Account.from_dict(data) if data else None

    def create(self, account: Account) -> Result:
        try:
            if self.storage.exists(self.table_name, account.account_id):
                return Result.failure("Account already exists")
            self.storage.save(self.table_name, account.account_id, account.to_dict())
            return Result.success()
        except Exception as e:
            self.logger.error(f"Failed to create account {account.account_id}: {e}")
            return Result.from_exception(e)

    def update(self, account: Account) -> Result:
        try:
            if not self.storage.exists(self.table_name, account.account_id):
                return Result.failure("Account not found")
            self.storage.save(self.table_name, account.account_id, account.to_dict())
            return Result.success()
        except Exception as e:
            self.logger.error(f"Failed to update account {account.account_id}: {e}")
            return Result.from_exception(e)


class StorageTransactionStore(TransactionStore):
    """Transactions keyed by (account ID, transaction ID)"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "transactions"
        self.logger = get_logger("retail_ledger.repositories")

    @staticmethod
    def _record_id(transaction: Transaction) -> str:
        # Transaction IDs are only unique within one account
        return json.dumps([transaction.account_id, transaction.transaction_id])

    def get_by_account_id(self, account_id: str) -> List[Transaction]:
        if not account_id:
            return []
        records = self.storage.find(self.table_name, {"account_id": account_id})
        return [Transaction.from_dict(data) for data in records]

    def append(self, transaction: Transaction) -> Result:
        try:
            record_id = self._record_id(transaction)
            if self.storage.exists(self.table_name, record_id):
                return Result.failure("Transaction already exists")
            self.storage.save(self.table_name, record_id, transaction.to_dict())
            return Result.success()
        except Exception as e:
            self.logger.error(f"Failed to append transaction {transaction.transaction_id}: {e}")
            return Result.from_exception(e)


class StorageInterestRuleStore(InterestRuleStore):
    """
    Interest rules keyed by effective date, so at most one rule can be
    stored per day.
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "interest_rules"
        self.logger = get_logger("retail_ledger.repositories")

    def get_all(self) -> List[InterestRule]:
        return [InterestRule.from_dict(data) for data in self.storage.load_all(self.table_name)]

    def insert(self, rule: InterestRule) -> Result:
        try:
            existing = self.get_all()
            if any(r.rule_id == rule.rule_id or r.date == rule.date for r in existing):
                return Result.failure("Interest rule already exists")
            self.storage.save(self.table_name, rule.date.isoformat(), rule.to_dict())
            return Result.success()
        except Exception as e:
            self.logger.error(f"Failed to insert interest rule {rule.rule_id}: {e}")
            return Result.from_exception(e)

    def replace(self, old_rule: InterestRule, new_rule: InterestRule,
                all_rules: List[InterestRule]) -> Result:
        try:
            if not all_rules:
                return Result.failure("No interest rules found")
            if old_rule not in all_rules:
                return Result.failure("Old interest rule not found")
            if old_rule.date != new_rule.date:
                return Result.failure("Replacement must keep the effective date")

            updated = [new_rule if r == old_rule else r for r in all_rules]
            duplicates = find_duplicate_dates(updated)
            if duplicates:
                return Result.failure(
                    f"Duplicate interest rule effective dates: {', '.join(duplicates)}"
                )

            self.storage.save(self.table_name, new_rule.date.isoformat(), new_rule.to_dict())
            return Result.success()
        except Exception as e:
            self.logger.error(f"Failed to replace interest rule {old_rule.rule_id}: {e}")
            return Result.from_exception(e)
