import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "stockroom.db"
PRODUCT_ID = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Products ===")
if PRODUCT_ID:
    cur.execute(
        "SELECT id, name, brand, size, container_type, box_size, price, category, is_active FROM products WHERE id=?",
        (PRODUCT_ID,),
    )
else:
    cur.execute(
        "SELECT id, name, brand, size, container_type, box_size, price, category, is_active FROM products ORDER BY name LIMIT 50"
    )
for r in cur.fetchall():
    print(r)

print("\n=== Stock ===")
cur.execute(
    "SELECT s.product_id, s.quantity_boxes, s.quantity_units, "
    "s.quantity_boxes * COALESCE(p.box_size, 0) + s.quantity_units AS total_units, "
    "s.min_stock, s.last_updated "
    "FROM stocks s JOIN products p ON p.id = s.product_id "
    + ("WHERE s.product_id=? " if PRODUCT_ID else "")
    + "ORDER BY s.product_id LIMIT 50",
    (PRODUCT_ID,) if PRODUCT_ID else (),
)
for r in cur.fetchall():
    low = " LOW" if r[3] < r[4] else ""
    print(r, low)

conn.close()
