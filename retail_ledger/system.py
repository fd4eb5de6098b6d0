"""
Ledger System Assembly

Builds storage, repositories and engines from configuration.
"""

from typing import Optional

from .config import LedgerConfig, get_config
from .storage import StorageInterface, create_storage
from .repositories import (
    StorageAccountStore, StorageTransactionStore, StorageInterestRuleStore
)
from .ledger import LedgerEngine
from .statements import StatementEngine
from .interest_rules import RuleAdmissionEngine


class LedgerSystem:
    """Retail ledger with all components initialized"""

    def __init__(self, storage: Optional[StorageInterface] = None,
                 config: Optional[LedgerConfig] = None):
        self.config = config or get_config()
        self.storage = storage if storage is not None else create_storage(self.config)

        self.account_store = StorageAccountStore(self.storage)
        self.transaction_store = StorageTransactionStore(self.storage)
        self.interest_rule_store = StorageInterestRuleStore(self.storage)

        self.ledger = LedgerEngine(self.account_store, self.transaction_store)
        self.statement_engine = StatementEngine(self.transaction_store, self.interest_rule_store)
        self.rule_engine = RuleAdmissionEngine(self.interest_rule_store)

    def close(self) -> None:
        self.storage.close()
