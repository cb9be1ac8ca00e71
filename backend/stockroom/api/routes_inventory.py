from fastapi import APIRouter, Depends

from stockroom.api.deps import get_repository, http_error
from stockroom.domain import new_stock_movement
from stockroom.errors import StockroomError
from stockroom.repositories.base import Repository
from stockroom.schemas.stock_schema import AdjustIn, MinStockIn, MovementIn, MovementOut, StockOut
from stockroom.services.inventory_service import InventoryService, StockStatus

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def _stock_out(svc: InventoryService, product_id: str) -> StockOut:
    return _to_stock_out(svc.status(product_id))


def _to_stock_out(s: StockStatus) -> StockOut:
    return StockOut(
        product_id=s.stock.product_id,
        quantity_boxes=s.stock.quantity_boxes,
        quantity_units=s.stock.quantity_units,
        min_stock=s.stock.min_stock,
        last_updated=s.stock.last_updated,
        total_units=s.total_units,
        is_low=s.is_low,
    )


@router.get("/{product_id}", response_model=StockOut)
def get_stock(product_id: str, repo: Repository = Depends(get_repository)):
    svc = InventoryService(repo)
    try:
        return _stock_out(svc, product_id)
    except StockroomError as e:
        raise http_error(e)


@router.post("/{product_id}/adjust", response_model=StockOut)
def adjust(product_id: str, payload: AdjustIn, repo: Repository = Depends(get_repository)):
    """
    payload: { "boxes": -1, "units": 6 }
    Signed deltas; rejected with 409 if either quantity would go negative.
    """
    try:
        # report the stock this adjust produced, not whatever a later write left
        stock = repo.adjust_stock(product_id, payload.boxes, payload.units)
        product = repo.get_product(product_id)
        return _to_stock_out(StockStatus(product=product, stock=stock))
    except StockroomError as e:
        raise http_error(e)


@router.post("/{product_id}/movements", response_model=MovementOut)
def record_movement(
    product_id: str, payload: MovementIn, repo: Repository = Depends(get_repository)
):
    """
    payload: { "movement_type": "OUT", "units": 5, "performed_by": "Dad", "reason": "sold" }
    reported_by defaults to performed_by.
    """
    svc = InventoryService(repo)
    try:
        m = new_stock_movement(
            product_id,
            payload.movement_type,
            payload.boxes,
            payload.units,
            payload.performed_by,
            payload.reported_by,
            payload.reason,
        )
        stock = svc.record_movement(m)
        product = repo.get_product(product_id)
        return MovementOut(
            product_id=m.product_id,
            movement_type=m.movement_type,
            boxes=m.boxes,
            units=m.units,
            performed_by=m.performed_by,
            reported_by=m.reported_by,
            reason=m.reason,
            created_at=m.created_at,
            stock=_to_stock_out(StockStatus(product=product, stock=stock)),
        )
    except StockroomError as e:
        raise http_error(e)


@router.put("/{product_id}/min-stock", response_model=StockOut)
def set_min_stock(
    product_id: str, payload: MinStockIn, repo: Repository = Depends(get_repository)
):
    svc = InventoryService(repo)
    try:
        repo.set_min_stock(product_id, payload.min_stock)
        return _stock_out(svc, product_id)
    except StockroomError as e:
        raise http_error(e)
