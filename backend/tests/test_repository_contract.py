"""Behavior every backend must share. Each test runs against both stores."""
from dataclasses import replace

import pytest

from stockroom.errors import (
    InsufficientStock,
    InvalidThreshold,
    NameRequired,
    ProductNotFound,
    StockNotFound,
)
from stockroom.repositories import Repository

from conftest import make_product


def test_store_implements_contract(store):
    assert isinstance(store, Repository)


def test_add_then_get_round_trip(store):
    p = make_product()
    pid = store.add_product(p)
    assert pid
    assert store.get_product(pid) == replace(p, id=pid, active=True)


def test_add_rejects_invalid_product_without_storing(store):
    with pytest.raises(NameRequired):
        store.add_product(make_product(name=""))
    assert store.list_products() == []
    assert store.count() == 0


def test_distinct_products_get_distinct_ids(store):
    a = store.add_product(make_product())
    b = store.add_product(make_product(name="Fanta 330ml Can", brand="Fanta"))
    assert a != b
    assert {p.id for p in store.list_products()} == {a, b}


def test_get_unknown_product(store):
    with pytest.raises(ProductNotFound):
        store.get_product("NO-SUCH-ID")


def test_search_is_case_insensitive_substring(store):
    cola = store.add_product(make_product())
    store.add_product(make_product(name="Hummus 400g", brand="Achla", size=400, box_size=12,
                                   price=8.0, category="canned"))
    assert [p.id for p in store.search_products("cola")] == [cola]
    assert [p.id for p in store.search_products("COCA")] == [cola]
    # brand matches too
    assert [p.name for p in store.search_products("achla")] == ["Hummus 400g"]


def test_search_without_match_is_empty(store):
    store.add_product(make_product())
    assert store.search_products("no-such-product-xyz") == []


def test_update_replaces_record(store):
    pid = store.add_product(make_product())
    got = store.get_product(pid)
    got.name = "Coca Cola Updated"
    got.price = 3.14
    store.update_product(got)
    after = store.get_product(pid)
    assert after.name == "Coca Cola Updated"
    assert after.price == 3.14


def test_update_unknown_product(store):
    p = make_product()
    p.id = "NO-SUCH-ID"
    with pytest.raises(ProductNotFound):
        store.update_product(p)


def test_update_validates_before_writing(store):
    pid = store.add_product(make_product())
    bad = replace(store.get_product(pid), name="")
    with pytest.raises(NameRequired):
        store.update_product(bad)
    assert store.get_product(pid).name == "Coca Cola 330ml Can"


def test_soft_delete_is_idempotent_and_keeps_record(store):
    pid = store.add_product(make_product())
    store.adjust_stock(pid, 2, 0)

    store.delete_product(pid)
    store.delete_product(pid)

    p = store.get_product(pid)
    assert p.active is False
    assert store.list_products() == []
    assert store.search_products("cola") == []
    # stock stays reachable by id
    assert store.get_stock(pid).quantity_boxes == 2


def test_delete_unknown_product(store):
    with pytest.raises(ProductNotFound):
        store.delete_product("NO-SUCH-ID")


def test_new_product_starts_with_zero_stock(store):
    pid = store.add_product(make_product())
    st = store.get_stock(pid)
    assert st.product_id == pid
    assert (st.quantity_boxes, st.quantity_units, st.min_stock) == (0, 0, 0)


def test_get_stock_unknown_product(store):
    with pytest.raises(StockNotFound):
        store.get_stock("NO-SUCH-ID")


def test_cola_scenario(store):
    pid = store.add_product(make_product(size=330, box_size=24, price=5.50))
    assert store.get_stock(pid).total_units(24) == 0

    store.adjust_stock(pid, 5, 0)
    assert store.get_stock(pid).total_units(24) == 120

    with pytest.raises(InsufficientStock) as exc:
        store.adjust_stock(pid, -10, 0)
    assert (exc.value.boxes, exc.value.units) == (-5, 0)
    assert store.get_stock(pid).total_units(24) == 120

    store.set_min_stock(pid, 200)
    assert pid in [p.id for p in store.list_low_stock()]


def test_adjust_sums_only_successful_deltas(store):
    pid = store.add_product(make_product())
    deltas = [(3, 10), (-1, -4), (-5, 0), (0, -7), (2, 1), (0, -20), (-4, -7)]
    boxes, units = 0, 0
    for db, du in deltas:
        if boxes + db < 0 or units + du < 0:
            with pytest.raises(InsufficientStock):
                store.adjust_stock(pid, db, du)
        else:
            st = store.adjust_stock(pid, db, du)
            boxes, units = boxes + db, units + du
            assert (st.quantity_boxes, st.quantity_units) == (boxes, units)
    st = store.get_stock(pid)
    assert (st.quantity_boxes, st.quantity_units) == (boxes, units) == (0, 0)


def test_failed_adjust_leaves_no_partial_change(store):
    pid = store.add_product(make_product())
    store.adjust_stock(pid, 4, 3)
    # boxes alone would be fine, units would go negative
    with pytest.raises(InsufficientStock):
        store.adjust_stock(pid, -1, -4)
    st = store.get_stock(pid)
    assert (st.quantity_boxes, st.quantity_units) == (4, 3)


def test_adjust_unknown_product(store):
    with pytest.raises(StockNotFound):
        store.adjust_stock("NO-SUCH-ID", 1, 0)


def test_set_min_stock(store):
    pid = store.add_product(make_product())
    store.set_min_stock(pid, 48)
    store.set_min_stock(pid, 48)
    assert store.get_stock(pid).min_stock == 48
    with pytest.raises(StockNotFound):
        store.set_min_stock("NO-SUCH-ID", 1)
    with pytest.raises(InvalidThreshold):
        store.set_min_stock(pid, -1)
    assert store.get_stock(pid).min_stock == 48


def test_low_stock_uses_total_units_and_skips_inactive(store):
    cola = store.add_product(make_product())
    pepper = store.add_product(make_product(name="Red Pepper", brand="Fresh Veg", size=1000,
                                            container_type="kg", box_size=0, price=15.0,
                                            category="vegetables"))
    store.adjust_stock(cola, 1, 0)  # 24 units
    store.adjust_stock(pepper, 3, 4)  # boxes ignored, 4 units
    store.set_min_stock(cola, 24)
    store.set_min_stock(pepper, 5)
    assert [p.id for p in store.list_low_stock()] == [pepper]

    store.set_min_stock(cola, 25)
    assert {p.id for p in store.list_low_stock()} == {cola, pepper}

    store.delete_product(pepper)
    assert [p.id for p in store.list_low_stock()] == [cola]


def test_count_and_ping(store):
    store.add_product(make_product())
    pid = store.add_product(make_product(name="Fanta", brand="Fanta"))
    store.delete_product(pid)
    assert store.count() == 1
    assert store.ping() is True
