from fastapi import APIRouter, Depends

from stockroom.api.deps import get_repository
from stockroom.errors import StockroomError
from stockroom.repositories.base import Repository

router = APIRouter()


@router.get("/health", tags=["health"])
def health(repo: Repository = Depends(get_repository)):
    db_ok = repo.ping()
    products = None
    if db_ok:
        try:
            products = repo.count()
        except StockroomError:
            db_ok = False

    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
        "backend": type(repo).__name__,
        "products": products,
    }
