import pytest
from sqlalchemy import func

from stockroom.db import make_engine, make_session_factory
from stockroom.errors import AlreadyExists, StorageUnavailable
from stockroom.models.product import ProductRow
from stockroom.models.stock import StockRow
from stockroom.repositories import SqlStore
from stockroom.repositories.sql_store import gen_id

from conftest import make_product


def _row_counts(store):
    with store.session_factory() as s:
        return (
            s.query(func.count(ProductRow.id)).scalar(),
            s.query(func.count(StockRow.product_id)).scalar(),
        )


def test_derived_id_from_natural_key():
    assert gen_id(make_product()) == "COCACOLA-330-CAN"
    assert gen_id(make_product(brand="Tnuva Dairy", size=1000, container_type="Bottle")) == "TNUVADAIRY-1000-BOTTLE"


def test_add_uses_derived_id(sql_store):
    assert sql_store.add_product(make_product()) == "COCACOLA-330-CAN"


def test_add_honours_caller_supplied_id(sql_store):
    p = make_product()
    p.id = "COLA-CAN"
    assert sql_store.add_product(p) == "COLA-CAN"
    assert sql_store.get_stock("COLA-CAN").quantity_boxes == 0


def test_repeated_add_is_idempotent(sql_store):
    first = sql_store.add_product(make_product())
    sql_store.adjust_stock(first, 2, 0)
    # same brand/size/container under a different name
    again = sql_store.add_product(make_product(name="Coke can"))
    assert again == first
    assert _row_counts(sql_store) == (1, 1)
    assert sql_store.get_product(first).name == "Coca Cola 330ml Can"
    assert sql_store.get_stock(first).quantity_boxes == 2


def test_add_conflict_returns_real_id_of_existing_row(sql_store):
    p = make_product()
    p.id = "LEGACY-7"
    sql_store.add_product(p)
    assert sql_store.add_product(make_product()) == "LEGACY-7"


def test_add_conflict_does_not_reactivate(sql_store):
    pid = sql_store.add_product(make_product())
    sql_store.delete_product(pid)
    assert sql_store.add_product(make_product()) == pid
    assert sql_store.get_product(pid).active is False


def test_id_taken_by_other_product(sql_store):
    sql_store.add_product(make_product())
    # different natural key, same normalized id
    clash = make_product(brand="CocaCola")
    with pytest.raises(AlreadyExists):
        sql_store.add_product(clash)
    assert _row_counts(sql_store) == (1, 1)


def test_update_into_existing_natural_key(sql_store):
    sql_store.add_product(make_product())
    fanta = sql_store.add_product(make_product(name="Fanta", brand="Fanta"))
    p = sql_store.get_product(fanta)
    p.brand = "Coca Cola"
    with pytest.raises(AlreadyExists):
        sql_store.update_product(p)
    assert sql_store.get_product(fanta).brand == "Fanta"


def test_search_treats_wildcards_literally(sql_store):
    sql_store.add_product(make_product())
    sql_store.add_product(make_product(name="Juice 100% orange", brand="Prigat", size=1000, container_type="bottle"))
    assert [p.brand for p in sql_store.search_products("100%")] == ["Prigat"]
    assert sql_store.search_products("_") == []


def test_list_is_sorted_by_name(sql_store):
    sql_store.add_product(make_product(name="b", brand="B"))
    sql_store.add_product(make_product(name="a", brand="A"))
    assert [p.name for p in sql_store.list_products()] == ["a", "b"]


def test_storage_failures_are_wrapped(tmp_path):
    # tables never created
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    store = SqlStore(make_session_factory(engine), lock_dir=str(tmp_path / "locks"))
    with pytest.raises(StorageUnavailable) as exc:
        store.get_product("COCACOLA-330-CAN")
    assert exc.value.operation == "get_product"
    assert exc.value.identifier == "COCACOLA-330-CAN"
    assert exc.value.__cause__ is not None
    with pytest.raises(StorageUnavailable):
        store.adjust_stock("COCACOLA-330-CAN", 1, 0)
    engine.dispose()


def test_adjust_lock_timeout_reported_as_storage_failure(sql_store):
    pid = sql_store.add_product(make_product())
    sql_store.lock_timeout = 0.1
    held = sql_store._stock_lock(pid)
    with held.acquire():
        with pytest.raises(StorageUnavailable):
            sql_store.adjust_stock(pid, 1, 0)
    assert sql_store.get_stock(pid).quantity_boxes == 0
