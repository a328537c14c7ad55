"""Shared fixtures for storefront tests.

Builders go through the real commands so every test starts from state the
application itself could have produced.
"""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from storefront.cart.items import AddToCart
from storefront.catalogue.product import ProductStatus
from storefront.catalogue.registration import RegisterProduct
from storefront.order.checkout import PlaceOrder
from storefront.promotion.management import CreatePromotion


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


def register_product(name="Desk Lamp", price=1000, inventory=10, listed=True, img_url=None):
    return current_domain.process(
        RegisterProduct(
            name=name,
            price=price,
            inventory=inventory,
            listed=(ProductStatus.LISTED if listed else ProductStatus.UNLISTED).value,
            img_url=img_url,
        ),
        asynchronous=False,
    )


def create_promotion(product_ids, discount_value=80, start=None, end=None, is_active=True, name="Spring Sale"):
    now = datetime.now(UTC)
    return current_domain.process(
        CreatePromotion(
            name=name,
            discount_value=discount_value,
            start_date=start or now - timedelta(days=1),
            end_date=end or now + timedelta(days=1),
            is_active=is_active,
            product_ids=json.dumps(list(product_ids)),
        ),
        asynchronous=False,
    )


def add_to_cart(member_id, product_id, quantity=1):
    current_domain.process(
        AddToCart(member_id=member_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def place_order(member_id, total_amount, **overrides):
    fields = {
        "member_id": member_id,
        "recipient_name": "Lin Mei",
        "recipient_phone": "0912345678",
        "recipient_address": "No. 1, Xinyi Rd, Taipei",
        "total_amount": total_amount,
    }
    fields.update(overrides)
    return current_domain.process(PlaceOrder(**fields), asynchronous=False)


@pytest.fixture()
def member_id():
    return "member-001"


@pytest.fixture()
def lamp_id():
    return register_product(name="Desk Lamp", price=1000, inventory=10)


@pytest.fixture()
def mug_id():
    return register_product(name="Coffee Mug", price=250, inventory=3)


# ---------------------------------------------------------------------------
# Builder fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    return register_product


@pytest.fixture()
def make_promotion():
    return create_promotion


@pytest.fixture()
def fill_cart():
    return add_to_cart


@pytest.fixture()
def checkout():
    return place_order
