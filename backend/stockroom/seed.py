import logging

from stockroom.domain import new_product
from stockroom.errors import StockroomError
from stockroom.repositories.base import Repository

log = logging.getLogger(__name__)

# name, brand, size, container, box size, price, category
DEMO_PRODUCTS = [
    ("קוקה קולה 330 מ״ל פחית", "Coca Cola", 330, "can", 24, 5.50, "drinks"),
    ("פנטה 330 מ״ל פחית", "Fanta", 330, "can", 24, 5.50, "drinks"),
    ("פלפל אדום", "ירקות טריים", 1000, "kg", 0, 15.00, "vegetables"),
    ("פלפל ירוק", "ירקות השדה", 1000, "kg", 0, 12.00, "vegetables"),
    ("חומוס 400 גרם", "עשי", 400, "can", 12, 8.00, "canned"),
]


def seed_demo_products(repo: Repository, entries=DEMO_PRODUCTS):
    """
    Add the demo catalog. Safe to call on every startup against the SQL
    store, which collapses repeats onto the rows already there.
    """
    ids = []
    for entry in entries:
        try:
            ids.append(repo.add_product(new_product(*entry)))
        except StockroomError as e:
            log.warning("could not seed %s: %s", entry[0], e)
    log.info("Seeded %d demo products", len(ids))
    return ids
