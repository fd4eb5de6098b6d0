"""
Interest Rule Admission

A new rule either starts a new effective date or replaces the rule already
effective on that date. Identical resubmissions are rejected.
"""

from .models import InterestRule
from .repositories import InterestRuleStore
from .result import Result
from .logging_config import get_logger, log_action


RULE_ALREADY_EXISTS = "Interest rule already exists"


class RuleAdmissionEngine:
    """Decides between inserting and replacing interest rules"""

    def __init__(self, interest_rule_store: InterestRuleStore):
        self.interest_rule_store = interest_rule_store
        self.logger = get_logger("retail_ledger.interest_rules")

    def admit(self, rule: InterestRule) -> Result:
        resource = f"interest_rule:{rule.date.isoformat()}"
        try:
            rules = self.interest_rule_store.get_all() or []
            existing = next((r for r in rules if r.date == rule.date), None)

            if existing is None:
                result = self.interest_rule_store.insert(rule)
                action = "insert_rule"
            elif existing.rule_id == rule.rule_id and existing.rate == rule.rate:
                return Result.failure(RULE_ALREADY_EXISTS)
            else:
                result = self.interest_rule_store.replace(existing, rule, rules)
                action = "replace_rule"

            if result.is_success:
                log_action(
                    self.logger, "info", f"Interest rule admitted: {rule.rule_id}",
                    action=action, resource=resource,
                    extra={"rule_id": rule.rule_id, "rate": str(rule.rate),
                           "replaced": existing.rule_id if existing else None}
                )
            return result

        except Exception as e:
            self.logger.error(f"Interest rule {rule.rule_id} could not be admitted: {e}", exc_info=True)
            return Result.from_exception(e)
