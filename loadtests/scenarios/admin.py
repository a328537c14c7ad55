"""Administrator load test scenarios.

A handful of administrators run promotions against the shoppers' product
pool, move orders forward and trigger the expiry sweep while checkout
traffic is running.
"""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import product_pool, promotion_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState

DEV_ADMIN_TOKEN = "dev:admin:lt-admin"


class AdminUser(HttpUser):
    wait_time = between(3, 8)
    weight = 1

    def on_start(self):
        self.products = product_pool()
        self.state = AdminState(token=DEV_ADMIN_TOKEN)

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.state.token}"}

    @task(2)
    def create_promotion(self):
        if not self.products:
            return
        with self.client.post(
            "/admin/promotions",
            json=promotion_data(self.products),
            headers=self.headers,
            catch_response=True,
            name="POST /admin/promotions",
        ) as resp:
            if resp.status_code == 201:
                self.state.promotion_ids.append(resp.json()["promotion_id"])
            elif resp.status_code == 400:
                # The product already belongs to another promotion
                resp.success()
            else:
                resp.failure(f"Create promotion failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(3)
    def advance_an_order(self):
        with self.client.get("/admin/orders", headers=self.headers, name="GET /admin/orders") as listing:
            if listing.status_code != 200:
                return
            orders = [o for o in listing.json()["orders"] if o["status"] in ("created", "confirmed", "shipped")]
        if not orders:
            return

        order = random.choice(orders)
        next_status = {"created": "confirmed", "confirmed": "shipped", "shipped": "delivered"}[order["status"]]
        with self.client.patch(
            f"/admin/orders/{order['order_id']}",
            json={"status": next_status},
            headers=self.headers,
            catch_response=True,
            name="PATCH /admin/orders/{id}",
        ) as resp:
            if resp.status_code in (400, 409):
                # Canceled or moved by someone else meanwhile
                resp.success()
            elif resp.status_code != 204:
                resp.failure(f"Status change failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(1)
    def sweep(self):
        with self.client.post(
            "/maintenance/expiry-sweep",
            json={},
            headers=self.headers,
            catch_response=True,
            name="POST /maintenance/expiry-sweep",
        ) as resp:
            if resp.status_code == 200:
                self.state.sweeps += 1
                if resp.json().get("failures"):
                    resp.failure(f"Sweep reported failures: {resp.json()['failures']}")
            else:
                resp.failure(f"Sweep failed: {resp.status_code}: {extract_error_detail(resp)}")
