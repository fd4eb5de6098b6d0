"""
Statement endpoints
"""

from fastapi import APIRouter, HTTPException, Depends, Query

from .dependencies import get_ledger_system
from .schemas import StatementResponse, StatementRow
from ..statements import statement_rows
from ..system import LedgerSystem
from ..validation import ValidationError, validate_statement_month


router = APIRouter()


@router.get("/{account_id}", response_model=StatementResponse)
async def get_statement(
    account_id: str,
    month: str = Query(..., description="Statement month as YYYYMM"),
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Month statement with running balances and accrued interest"""
    try:
        first_day = validate_statement_month(month)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    statement = system.statement_engine.run_report(account_id, first_day)
    if statement.result.has_error:
        raise HTTPException(status_code=400, detail=statement.result.error_message)

    return StatementResponse(
        account_id=account_id,
        month=month,
        rows=[StatementRow(**row) for row in statement_rows(statement)]
    )
