"""Checkout load test scenarios.

Many shoppers fill carts from the same small product pool and check out at
once, so inventory contention is the point. A 409 for insufficient inventory
is a correct answer under contention, not a failure; an oversold product
would show up as negative stock in the database afterwards.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_item_data,
    cart_total,
    checkout_data,
    guest_cart_data,
    member_id,
    product_pool,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState

DEV_TOKEN_PREFIX = "dev:member:"


class CheckoutJourney(SequentialTaskSet):
    """Open Cart -> Add Items -> Merge Guest Cart -> Check -> Place Order -> Maybe Cancel."""

    def on_start(self):
        self.products = product_pool()
        if not self.products:
            raise RuntimeError("LOADTEST_PRODUCT_IDS is empty; register products first")
        self.state = ShopperState(member_id=member_id())
        self.state.token = f"{DEV_TOKEN_PREFIX}{self.state.member_id}"

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.state.token}"}

    @task
    def open_cart(self):
        with self.client.get("/cart", headers=self.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"Open cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_items(self):
        for _ in range(random.randint(1, 3)):
            with self.client.post(
                "/cart/items",
                json=cart_item_data(self.products),
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.line_count += 1
                elif resp.status_code == 409:
                    resp.success()
                    self.state.sold_out += 1
                else:
                    resp.failure(f"Add item failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def merge_guest_cart(self):
        with self.client.post(
            "/cart/merge",
            json=guest_cart_data(self.products),
            headers=self.headers,
            catch_response=True,
            name="POST /cart/merge",
        ) as resp:
            if resp.status_code != 204:
                resp.failure(f"Merge failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def check_cart(self):
        with self.client.get("/cart/check", headers=self.headers, catch_response=True, name="GET /cart/check") as resp:
            if resp.status_code == 400:
                # Merged lines may exceed what is left in stock
                resp.success()
                self._drop_cart()
                self.interrupt()
            elif resp.status_code != 200:
                resp.failure(f"Cart check failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def price_cart(self):
        with self.client.get("/cart", headers=self.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code == 200:
                self.state.total_amount = cart_total(resp.json())
            else:
                resp.failure(f"Read cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=checkout_data(self.state.total_amount),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
            elif resp.status_code in (400, 409):
                # Stock or price moved between reading the cart and ordering
                resp.success()
                self.state.sold_out += 1
                self._drop_cart()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def maybe_cancel(self):
        if random.random() > 0.3:
            return
        order_id = self.state.order_ids[-1]
        with self.client.patch(
            f"/orders/{order_id}",
            json={"status": "canceled"},
            headers=self.headers,
            catch_response=True,
            name="PATCH /orders/{id}",
        ) as resp:
            if resp.status_code != 204:
                resp.failure(f"Cancel failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def review_orders(self):
        with self.client.get("/orders", headers=self.headers, catch_response=True, name="GET /orders") as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

    def _drop_cart(self):
        for product_id in self.products:
            self.client.delete(f"/cart/items/{product_id}", headers=self.headers, name="DELETE /cart/items/{id}")


class ShopperUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(0.5, 2)
