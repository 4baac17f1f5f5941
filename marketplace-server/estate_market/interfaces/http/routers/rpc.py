"""Procedure invocation by name with ``{"data", "error"}`` envelopes."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.security import get_current_account
from estate_market.interfaces.http.deps import get_db_session
from estate_market.interfaces.http.errors import error_body, status_for
from estate_market.modules.accounts import Account as AccountDomain
from estate_market.modules.common import MarketplaceError
from estate_market.modules.procedures import call_procedure
from estate_market.schemas import ProcedureCallRequest, ProcedureCallResponse

router = APIRouter()


@router.post("/{name}", response_model=ProcedureCallResponse, summary="Invoke an atomic procedure")
async def invoke_procedure(
    name: str,
    payload: ProcedureCallRequest,
    account: AccountDomain = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        data = await call_procedure(db, name, payload.params, account)
    except MarketplaceError as exc:
        body = ProcedureCallResponse(data=None, error=error_body(exc))
        return JSONResponse(status_code=status_for(exc), content=body.model_dump(mode="json"))
    return ProcedureCallResponse(data=data)
