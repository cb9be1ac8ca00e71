from fastapi import HTTPException, Request

from stockroom.errors import (
    AlreadyExists,
    InsufficientStock,
    NotFound,
    StockroomError,
    StorageUnavailable,
    ValidationFailed,
)
from stockroom.repositories.base import Repository


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


def http_error(e: StockroomError) -> HTTPException:
    if isinstance(e, ValidationFailed):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (InsufficientStock, AlreadyExists)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, StorageUnavailable):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=500, detail="Internal error")
