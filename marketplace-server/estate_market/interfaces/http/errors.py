"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from estate_market.modules.common.exceptions import MarketplaceError

STATUS_BY_CODE = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "account_exists": status.HTTP_409_CONFLICT,
    "membership_required": status.HTTP_402_PAYMENT_REQUIRED,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "insufficient_funds": status.HTTP_409_CONFLICT,
    "listing_unavailable": status.HTTP_409_CONFLICT,
    "invalid_state": status.HTTP_409_CONFLICT,
}


def status_for(exc: MarketplaceError) -> int:
    return STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)


def error_body(exc: MarketplaceError) -> dict[str, str]:
    return {"code": exc.code, "message": exc.message}


def to_http_error(exc: MarketplaceError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=error_body(exc))
