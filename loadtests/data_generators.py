"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's request schemas
and use their exact field names.
"""

import os
import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()


# ---------- Members ----------


def member_id() -> str:
    """Generate load-test member ids like 'lt-a1b2c3d4'."""
    return f"lt-{uuid.uuid4().hex[:8]}"


def valid_email() -> str:
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def valid_phone() -> str:
    return f"09{random.randint(10000000, 99999999)}"


# ---------- Catalogue ----------


def product_pool() -> list[str]:
    """Product ids to shop from, read from LOADTEST_PRODUCT_IDS (comma separated).

    Register them beforehand with ``python src/manage.py add-product``.
    """
    raw = os.getenv("LOADTEST_PRODUCT_IDS", "")
    return [pid.strip() for pid in raw.split(",") if pid.strip()]


# ---------- Cart ----------


def cart_item_data(product_ids: list[str], max_quantity: int = 3) -> dict:
    return {"product_id": random.choice(product_ids), "quantity": random.randint(1, max_quantity)}


def guest_cart_data(product_ids: list[str], num_items: int = 2) -> dict:
    picks = random.sample(product_ids, k=min(num_items, len(product_ids)))
    return {"items": [{"product_id": pid, "quantity": random.randint(1, 2)} for pid in picks]}


def cart_total(cart: dict) -> int:
    """Sum what the server will charge for the lines in a GET /cart body."""
    total = 0
    for line in cart.get("items", []):
        unit = line["discount_price"] if line.get("discount_price") is not None else line["price"]
        total += unit * line["quantity"]
    return total


# ---------- Orders ----------


def checkout_data(total_amount: int) -> dict:
    return {
        "recipient_name": fake.name()[:100],
        "recipient_phone": valid_phone(),
        "recipient_address": fake.address().replace("\n", ", ")[:500],
        "notes": random.choice([None, "Leave at the door", fake.sentence()[:200]]),
        "total_amount": total_amount,
    }


# ---------- Promotions ----------


def promotion_data(product_ids: list[str]) -> dict:
    """A short-lived promotion, so the expiry sweep has work to do."""
    start = datetime.now(UTC) - timedelta(minutes=5)
    return {
        "name": f"{fake.word().capitalize()} Flash Sale",
        "description": fake.sentence(),
        "discount_value": random.choice([50, 70, 80, 90]),
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(minutes=random.randint(6, 15))).isoformat(),
        "product_ids": random.sample(product_ids, k=1),
    }
