"""Storefront load testing: Locust entry point.

Discovers the user classes from the scenarios package. The server must run
with STOREFRONT_DEV_TOKENS=1 so simulated members can authenticate, and the
products to shop from are passed in LOADTEST_PRODUCT_IDS.

Usage:
    # Shoppers and administrators (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Checkout contention only, headless (CI mode):
    locust -f loadtests/locustfile.py ShopperUser --headless \
           -u 100 -r 10 -t 120s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.admin import AdminUser  # noqa: F401
from loadtests.scenarios.checkout import ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so the log reads "Coffee Mug exceeds
    available inventory" instead of just "409".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Fail fast when the target server is not up."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        resp = requests.get(f"{environment.host}/health", timeout=5)
        print(f"[LOADTEST] Health: {resp.status_code} {resp.text}")
    except requests.RequestException as e:
        print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the final order count seen by an administrator."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        resp = requests.get(
            f"{environment.host}/admin/orders",
            headers={"Authorization": "Bearer dev:admin:lt-admin"},
            timeout=10,
        )
        orders = resp.json().get("orders", [])
        by_status: dict[str, int] = {}
        for order in orders:
            by_status[order["status"]] = by_status.get(order["status"], 0) + 1
        print(f"[LOADTEST] Orders: {len(orders)} {by_status}")
    except (requests.RequestException, ValueError) as e:
        print(f"[LOADTEST] Could not fetch orders: {e}")
    print()
