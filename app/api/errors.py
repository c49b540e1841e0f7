# app/api/errors.py
from fastapi import HTTPException

from app.domain.errors import (
    OrderError,
    ValidationError,
    ProductNotFoundError,
    CustomerNotFoundError,
    OrderNotFoundError,
    InsufficientStockError,
    ConcurrencyConflictError,
    InvalidStatusTransitionError,
    PersistenceError,
)


def to_http_exception(e: Exception) -> HTTPException:
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))

    if isinstance(e, (ProductNotFoundError, CustomerNotFoundError, OrderNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))

    if isinstance(e, (InsufficientStockError, ConcurrencyConflictError)):
        detail = {"message": str(e), "product_id": e.product_id, "retryable": True}
        if isinstance(e, InsufficientStockError):
            detail["available"] = e.available
        return HTTPException(status_code=409, detail=detail)

    if isinstance(e, InvalidStatusTransitionError):
        return HTTPException(status_code=409, detail=str(e))

    if isinstance(e, PersistenceError):
        return HTTPException(status_code=503, detail=str(e))

    if isinstance(e, (ValidationError, OrderError)):
        return HTTPException(status_code=400, detail=str(e))

    return HTTPException(status_code=500, detail=str(e))
