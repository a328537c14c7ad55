"""Schema management for SQL-backed providers.

Protean builds SQLAlchemy tables lazily, the first time a repository's DAO
is touched, so every aggregate and entity DAO is materialised before
``create_all`` runs. Memory providers are skipped.
"""

from collections.abc import Iterator

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = frozenset({"sqlite", "postgresql"})


def _sql_providers(domain: Domain) -> Iterator:
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider


def _materialise_tables(domain: Domain, provider) -> None:
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018

    outbox_repos = getattr(domain, "_outbox_repos", {})
    if provider.name in outbox_repos:
        outbox_repos[provider.name]._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _materialise_tables(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
