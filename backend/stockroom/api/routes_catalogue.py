from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from stockroom.api.deps import get_repository, http_error
from stockroom.errors import StockroomError
from stockroom.repositories.base import Repository
from stockroom.schemas.product_schema import ProductCreated, ProductIn, ProductOut

router = APIRouter(tags=["catalogue"])


def _items(products):
    items = [ProductOut.model_validate(p).model_dump() for p in products]
    return {"items": items, "total": len(items)}


@router.get("", summary="List active products")
def list_products(
    q: Optional[str] = Query(None, description="search term (name or brand)"),
    repo: Repository = Depends(get_repository),
):
    try:
        products = repo.search_products(q) if q else repo.list_products()
    except StockroomError as e:
        raise http_error(e)
    return _items(products)


@router.post("", status_code=201, response_model=ProductCreated, summary="Create product")
def create_product(payload: ProductIn, repo: Repository = Depends(get_repository)):
    try:
        pid = repo.add_product(payload.to_product())
    except StockroomError as e:
        raise http_error(e)
    return {"id": pid}


@router.get("/low-stock", summary="Active products below their minimum stock")
def low_stock(repo: Repository = Depends(get_repository)):
    try:
        return _items(repo.list_low_stock())
    except StockroomError as e:
        raise http_error(e)


@router.get("/{product_id}", response_model=ProductOut, summary="Get product by id")
def get_product(product_id: str, repo: Repository = Depends(get_repository)):
    try:
        return ProductOut.model_validate(repo.get_product(product_id))
    except StockroomError as e:
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductOut, summary="Replace product")
def update_product(
    product_id: str, payload: ProductIn, repo: Repository = Depends(get_repository)
):
    try:
        current = repo.get_product(product_id)
        product = payload.to_product(product_id, current_active=current.active)
        repo.update_product(product)
    except StockroomError as e:
        raise http_error(e)
    return ProductOut.model_validate(product)


@router.delete("/{product_id}", status_code=204, summary="Soft delete product")
def delete_product(product_id: str, repo: Repository = Depends(get_repository)):
    try:
        repo.delete_product(product_id)
    except StockroomError as e:
        raise http_error(e)
    return Response(status_code=204)
