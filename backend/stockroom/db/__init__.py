import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from stockroom.config import settings

log = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # request threads share the pool; wait on the sqlite write lock
        # instead of failing fast with "database is locked"
        connect_args = {"check_same_thread": False, "timeout": 30}
    return create_engine(url, future=True, echo=False, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


DATABASE_URL = settings.DATABASE_URL
engine = make_engine(DATABASE_URL)
SessionLocal = make_session_factory(engine)


def init_db(bind: Engine = None, reset: bool = None):
    """
    Create the ``products`` and ``stocks`` tables if missing.

    This is the schema bootstrap the SQL store relies on; the store itself
    never creates tables. Set RESET_DB=1 (or pass reset=True) to drop and
    recreate them.
    """
    # populate Base.metadata
    from stockroom.models import product, stock  # noqa: F401

    bind = bind or engine
    if reset is None:
        reset = os.environ.get("RESET_DB", "false").lower() in ("1", "true", "yes")
    if reset:
        log.info("Resetting database schema")
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    log.info("Database initialized (%s)", bind.url.render_as_string(hide_password=True))
