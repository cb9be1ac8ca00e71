"""
Fire N concurrent stock deductions at a running server and report how many
were accepted. With the stock set to N-1 boxes exactly one request should
come back 409.

    python tools/concurrency_adjust.py --product COCACOLA-330-CAN --workers 8
"""
import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("STOCKROOM_BASE", "http://127.0.0.1:8000")


def adjust_task(i, product_id, boxes, units):
    payload = {"boxes": boxes, "units": units}
    try:
        r = requests.post(f"{BASE}/api/inventory/{product_id}/adjust", json=payload, timeout=10)
        return (i, r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def prime_stock(product_id, boxes):
    """Reset the product to exactly ``boxes`` boxes and 0 loose units."""
    r = requests.get(f"{BASE}/api/inventory/{product_id}", timeout=10)
    r.raise_for_status()
    cur = r.json()
    delta = {"boxes": boxes - cur["quantity_boxes"], "units": -cur["quantity_units"]}
    requests.post(f"{BASE}/api/inventory/{product_id}/adjust", json=delta, timeout=10).raise_for_status()


def run(workers, product_id):
    print(f"Running adjust test: workers={workers}, product={product_id}")
    prime_stock(product_id, workers - 1)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(adjust_task, i, product_id, -1, 0) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    ok = sum(1 for r in results if r[1] == 200)
    rejected = sum(1 for r in results if r[1] == 409)
    print(f"accepted={ok} rejected={rejected}")
    final = requests.get(f"{BASE}/api/inventory/{product_id}", timeout=10).json()
    print("final stock:", final)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrent stock deduction test.")
    parser.add_argument("--product", default="COCACOLA-330-CAN")
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()
    run(args.workers, args.product)
