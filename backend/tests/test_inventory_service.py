import logging

import pytest

from stockroom.domain import StockMovement, new_stock_movement
from stockroom.errors import InsufficientStock, InvalidMovementType
from stockroom.services.inventory_service import InventoryService

from conftest import make_product


@pytest.fixture
def svc(store):
    return InventoryService(store)


def test_movements_move_stock_in_the_right_direction(svc):
    pid = svc.repo.add_product(make_product())
    svc.record_movement(new_stock_movement(pid, "IN", 3, 10, "Dad", "Menny", "delivery"))
    svc.record_movement(new_stock_movement(pid, "OUT", 0, 5, "Dad", "", "sold"))
    st = svc.repo.get_stock(pid)
    assert (st.quantity_boxes, st.quantity_units) == (3, 5)
    with pytest.raises(InsufficientStock):
        svc.record_movement(new_stock_movement(pid, "OUT", 0, 6, "Dad"))
    svc.record_movement(new_stock_movement(pid, "WASTE", 1, 0, "Dad", reason="expired"))
    svc.record_movement(new_stock_movement(pid, "ADJUSTMENT", -1, 4, "Dad", reason="count"))
    st = svc.repo.get_stock(pid)
    assert (st.quantity_boxes, st.quantity_units) == (1, 9)


def test_invalid_movement_never_reaches_stock(svc):
    pid = svc.repo.add_product(make_product())
    with pytest.raises(InvalidMovementType):
        svc.record_movement(StockMovement(pid, "STOLEN", 1, 0, performed_by="Dad"))
    assert svc.repo.get_stock(pid).quantity_boxes == 0


def test_status_reports_totals(svc):
    pid = svc.repo.add_product(make_product())
    svc.repo.adjust_stock(pid, 2, 3)
    svc.repo.set_min_stock(pid, 100)
    s = svc.status(pid)
    assert s.total_units == 51
    assert s.is_low is True


def test_check_low_stock_logs_and_returns_ids(svc, caplog):
    low = svc.repo.add_product(make_product())
    fine = svc.repo.add_product(make_product(name="Fanta", brand="Fanta"))
    svc.repo.set_min_stock(low, 10)
    svc.repo.adjust_stock(fine, 1, 0)
    svc.repo.set_min_stock(fine, 10)

    with caplog.at_level(logging.WARNING, logger="stockroom"):
        ids = svc.check_low_stock()

    assert ids == [low]
    assert low in caplog.text
