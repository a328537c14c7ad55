"""Session-wide wiring for the storefront test suite.

The storefront domain is initialised once, with the config overlay chosen by
``--env`` (``test`` by default: memory providers, synchronous processing),
and its context stays pushed for the whole session. Every test starts from
empty providers and default adapters.
"""

import os
from pathlib import Path

import pytest

# Directory under tests/storefront -> marker
_LAYER_MARKERS = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "integration": pytest.mark.integration,
    "bdd": pytest.mark.bdd,
}


def pytest_addoption(parser):
    parser.addoption("--env", action="store", default="test", help="domain.toml overlay to run the suite against")


def pytest_sessionstart(session):
    os.environ["PROTEAN_ENV"] = session.config.option.env

    # Import the API package through the normal import system before
    # ``init()`` traverses the tree, so ``storefront.api`` is bound on its
    # parent package (dotted ``monkeypatch.setattr`` targets rely on it).
    import storefront.api  # noqa: F401
    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    for item in items:
        layer = next((part for part in Path(item.fspath).parts if part in _LAYER_MARKERS), None)
        if layer is None:
            continue
        item.add_marker(_LAYER_MARKERS[layer])
        if layer == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def database_schema():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)
    yield
    drop_db(storefront)


@pytest.fixture(autouse=True)
def clean_slate():
    yield

    from protean import current_domain

    from storefront.auth import reset_token_issuer
    from storefront.channel import reset_notifier

    for provider in current_domain.providers.values():
        provider._data_reset()
    current_domain.event_store.store._data_reset()

    reset_notifier()
    reset_token_issuer()
