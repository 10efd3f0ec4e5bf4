#!/usr/bin/env python3
"""
Update the status of an order (for fulfillment staff).

Usage:
    python scripts/set_order_status.py ORD-123456 Shipped
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.orders import OrderStatus, normalize_order_id
from src.db.sqlite import db
from src.db.store import SqlStore


async def main(order_id: str, status: OrderStatus) -> int:
    store = SqlStore(db)
    try:
        found = await store.update_order_status(normalize_order_id(order_id), status)
    finally:
        await db.close()

    if not found:
        print(f"❌ Order {order_id} not found")
        return 1

    print(f"✅ Order {normalize_order_id(order_id)} is now {status.value}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Set order status")
    parser.add_argument("order_id")
    parser.add_argument("status", choices=[status.value for status in OrderStatus])
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.order_id, OrderStatus(args.status))))
