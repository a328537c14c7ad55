"""Shared BDD fixtures and step definitions for the storefront."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ProteanException
from pytest_bdd import given, parsers, then, when

from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart
from storefront.catalogue.product import Product
from storefront.catalogue.registration import RegisterProduct
from storefront.order.checkout import PlaceOrder
from storefront.order.lifecycle import ChangeOrderStatus
from storefront.order.order import Order
from storefront.pricing.resolver import quote_for
from storefront.promotion.management import CreatePromotion
from storefront.shared.errors import AmountMismatch, InsufficientInventory


@pytest.fixture()
def context():
    """Scenario state: product ids by name, the last order and the last error."""
    return {"products": {}, "order_id": None, "error": None, "report": None}


def _product(context, name):
    return current_domain.repository_for(Product).get(context["products"][name])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a listed product "{name}" priced {price:d} with {inventory:d} in stock'))
def _(context, name, price, inventory):
    context["products"][name] = current_domain.process(
        RegisterProduct(name=name, price=price, inventory=inventory),
        asynchronous=False,
    )


@given(parsers.cfparse('member "{member_id}" has {quantity:d} "{name}" in the cart'))
def _(context, member_id, quantity, name):
    current_domain.process(
        AddToCart(member_id=member_id, product_id=context["products"][name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" is on a {discount_value:d} percent promotion'))
def _(context, name, discount_value):
    now = datetime.now(UTC)
    current_domain.process(
        CreatePromotion(
            name=f"{name} promotion",
            discount_value=discount_value,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
            product_ids=json.dumps([context["products"][name]]),
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" was on a promotion that ended yesterday'))
def _(context, name):
    now = datetime.now(UTC)
    current_domain.process(
        CreatePromotion(
            name=f"{name} clearance",
            discount_value=50,
            start_date=now - timedelta(days=10),
            end_date=now - timedelta(days=1),
            product_ids=json.dumps([context["products"][name]]),
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the administrator marks the order "{status}"'))
def _(context, status):
    current_domain.process(ChangeOrderStatus(order_id=context["order_id"], status=status), asynchronous=False)


@given(parsers.cfparse('member "{member_id}" checks out declaring {total:d}'))
@when(parsers.cfparse('member "{member_id}" checks out declaring {total:d}'))
def _(context, member_id, total):
    try:
        context["order_id"] = current_domain.process(
            PlaceOrder(
                member_id=member_id,
                recipient_name="Lin Mei",
                recipient_phone="0912345678",
                recipient_address="No. 1, Xinyi Rd, Taipei",
                total_amount=total,
            ),
            asynchronous=False,
        )
    except ProteanException as exc:
        context["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {inventory:d} in stock'))
def _(context, name, inventory):
    assert _product(context, name).inventory == inventory


@then(parsers.cfparse("an order for {total:d} is created"))
def _(context, total):
    assert context["error"] is None
    assert current_domain.repository_for(Order).get(context["order_id"]).total_amount == total


@then(parsers.cfparse('the cart of member "{member_id}" is empty'))
def _(member_id):
    assert len(current_domain.repository_for(Cart).for_member(member_id).items) == 0


@then(parsers.cfparse('member "{member_id}" still has {count:d} line in the cart'))
def _(member_id, count):
    assert len(current_domain.repository_for(Cart).for_member(member_id).items) == count


@then(parsers.cfparse("the checkout is rejected with correct amount {amount:d}"))
def _(context, amount):
    assert isinstance(context["error"], AmountMismatch)
    assert context["error"].correct_amount == amount


@then("the checkout is rejected for insufficient inventory")
def _(context):
    assert isinstance(context["error"], InsufficientInventory)


@then(parsers.cfparse('the order is "{status}"'))
def _(context, status):
    assert current_domain.repository_for(Order).get(context["order_id"]).status == status


@then(parsers.cfparse('"{name}" is no longer discounted'))
def _(context, name):
    assert quote_for(_product(context, name)).discount_price is None


@then(parsers.cfparse('"{name}" is still discounted'))
def _(context, name):
    assert quote_for(_product(context, name)).discount_price is not None
