"""
Interest rule endpoints
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends

from .dependencies import get_ledger_system
from .schemas import InterestRuleRequest, InterestRuleModel
from ..models import InterestRule
from ..system import LedgerSystem
from ..validation import (
    IdentifierKind, ValidationError, validate_date, validate_identifier, validate_rate
)


router = APIRouter()


@router.post("", response_model=InterestRuleModel, status_code=201)
async def define_interest_rule(
    request: InterestRuleRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Add an interest rule, or replace the one effective on the same date"""
    try:
        rule = InterestRule(
            rule_id=validate_identifier(request.rule_id, IdentifierKind.INTEREST_RULE, system.config),
            date=validate_date(request.date),
            rate=validate_rate(request.rate)
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = system.rule_engine.admit(rule)
    if result.has_error:
        raise HTTPException(status_code=400, detail=result.error_message)

    return InterestRuleModel.from_rule(rule)


@router.get("", response_model=List[InterestRuleModel])
async def list_interest_rules(system: LedgerSystem = Depends(get_ledger_system)):
    """All interest rules ordered by effective date"""
    try:
        rules = system.interest_rule_store.get_all()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return [InterestRuleModel.from_rule(r) for r in sorted(rules, key=lambda r: r.date)]
