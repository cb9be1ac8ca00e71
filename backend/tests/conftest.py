import pytest

from stockroom.db import init_db, make_engine, make_session_factory
from stockroom.domain import Product
from stockroom.repositories import MemoryStore, SqlStore


def make_product(name="Coca Cola 330ml Can", brand="Coca Cola", size=330,
                 container_type="can", box_size=24, price=5.50, category="drinks"):
    return Product(
        name=name,
        brand=brand,
        size=size,
        container_type=container_type,
        box_size=box_size,
        price=price,
        category=category,
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_engine(tmp_path):
    # a file, not :memory:, so every pooled connection sees the same database
    engine = make_engine(f"sqlite:///{tmp_path / 'stockroom.db'}")
    init_db(bind=engine, reset=True)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine, tmp_path):
    return SqlStore(make_session_factory(sql_engine), lock_dir=str(tmp_path / "locks"))


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the test once against each backend."""
    return request.getfixturevalue(f"{request.param}_store")
