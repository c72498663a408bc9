import os
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import List, Optional

import pandas as pd

from dispatch.dispatcher import Dispatcher
from dispatch.store import InMemoryAssignmentStore
from orders.models import DeliveryAddress, Order
from partners.models import PartnerAvailability, PartnerProfile
from partners.policy import AssignmentPolicy

from generate_mock_partners import generate_mock_orders, generate_mock_partners

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _optional_float(value) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def load_partners(store: InMemoryAssignmentStore, filepath: str) -> int:
    if not os.path.exists(filepath):
        generate_mock_partners(output_file=filepath, seed=7)

    df = pd.read_csv(filepath)
    for _, row in df.iterrows():
        partner_id = str(row["partner_id"])
        store.add_partner(
            PartnerAvailability.new(partner_id, str(row["status"])),
            PartnerProfile(
                partner_id=partner_id,
                city=row["city"],
                state=row["state"],
                latitude=_optional_float(row["latitude"]),
                longitude=_optional_float(row["longitude"]),
            ),
        )
    return len(df)


def load_orders(store: InMemoryAssignmentStore, filepath: str, limit: int = 60) -> List[Order]:
    if not os.path.exists(filepath):
        generate_mock_orders(output_file=filepath, seed=11)

    orders = []
    df = pd.read_csv(filepath).head(limit)
    for _, row in df.iterrows():
        order = Order(
            id=str(row["order_id"]),
            status=str(row["status"]),
            total_price=Decimal(str(row["total_price"])),
            address=DeliveryAddress(
                city=row["city"],
                state=row["state"],
                latitude=_optional_float(row["latitude"]),
                longitude=_optional_float(row["longitude"]),
            ),
        )
        store.add_order(order)
        orders.append(order)
    return orders


def run_simulation(contenders_per_order: int = 4):
    print("=== STARTING CONCURRENT ASSIGNMENT SIMULATION ===")

    # 1. Load Data
    store = InMemoryAssignmentStore()
    partner_count = load_partners(store, os.path.join(BASE_DIR, "mock_partners.csv"))
    orders = load_orders(store, os.path.join(BASE_DIR, "mock_orders.csv"))
    print(f"Loaded {len(orders)} Orders and {partner_count} Partners.\n")

    dispatcher = Dispatcher(store, AssignmentPolicy(sweep_workers=4))

    # 2. Fire several simultaneous assign requests at every order
    print(f"Firing {contenders_per_order} concurrent assign calls per order...")
    start_time = time.time()
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(
            lambda order_id: dispatcher.assign(order_id),
            [order.id for order in orders for _ in range(contenders_per_order)],
        ))
    print(f"Completed {len(results)} calls in {time.time() - start_time:.2f}s.\n")

    status_counts = Counter(result.status.value for result in results)
    for status, count in sorted(status_counts.items()):
        print(f"  {status}: {count}")

    # 3. Check the at-most-one guarantee
    winners = Counter()
    for result in results:
        if result.status.value == "assigned":
            winners[result.assigned_partner_id] += 1
    double_assigned = [
        order.id for order in orders
        if sum(1 for op, key in store.writes if op == "claim_order" and key == order.id) > 1
    ]
    print(f"\nOrders claimed more than once: {len(double_assigned)}")

    # 4. Sweep whatever is still waiting
    sweep = dispatcher.sweep_pending()
    print(f"Pending sweep processed {sweep.processed} orders.")

    output_path = os.path.join(BASE_DIR, "assignment_results.csv")
    pd.DataFrame([
        {
            "order_id": order.id,
            "city": order.address.city,
            "delivery_partner_id": store.get_order(order.id).delivery_partner_id or "UNASSIGNED",
            "delivery_status": store.get_order(order.id).delivery_status,
        }
        for order in orders
    ]).to_csv(output_path, index=False)

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Partners used: {len(winners)} / {partner_count}")
    print(f"Results written to '{output_path}'.")


if __name__ == "__main__":
    run_simulation()
