"""
Transaction endpoints
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends

from .dependencies import get_ledger_system
from .schemas import TransactionRequest, TransactionModel
from ..system import LedgerSystem
from ..validation import (
    IdentifierKind, ValidationError, validate_amount, validate_date,
    validate_identifier, validate_transaction_type
)


router = APIRouter()


@router.post("", response_model=TransactionModel, status_code=201)
async def record_transaction(
    request: TransactionRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Record a deposit or withdrawal"""
    try:
        transaction_date = validate_date(request.date)
        account_id = validate_identifier(request.account_id, IdentifierKind.ACCOUNT, system.config)
        transaction_type = validate_transaction_type(request.type)
        amount = validate_amount(request.amount, system.config)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    outcome = system.ledger.record(transaction_date, account_id, transaction_type, amount)
    if outcome.result.has_error:
        raise HTTPException(status_code=400, detail=outcome.result.error_message)

    return TransactionModel.from_transaction(outcome.transaction)


@router.get("/{account_id}", response_model=List[TransactionModel])
async def list_account_transactions(
    account_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """All transactions recorded for an account, in date order"""
    try:
        transactions = system.transaction_store.get_by_account_id(account_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not transactions:
        raise HTTPException(status_code=404, detail="No transaction found")

    return [TransactionModel.from_transaction(t)
            for t in sorted(transactions, key=lambda t: t.date)]
