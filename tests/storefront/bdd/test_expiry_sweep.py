"""BDD tests for the nightly expiry sweep."""

from pytest_bdd import parsers, scenarios, then, when

from storefront.maintenance.sweep import sweep_expired

scenarios("features/expiry_sweep.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the expiry sweep runs")
def _(context):
    context["report"] = sweep_expired()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{count:d} promotion is expired"))
@then(parsers.cfparse("{count:d} promotions are expired"))
def _(context, count):
    assert context["report"].promotions_expired == count
    assert context["report"].failures == []
