"""Document stores for account records."""

from accountdir.accounts.store import DocumentStore
from accountdir.accounts.stores.inmemory import InMemoryDocumentStore
from accountdir.accounts.stores.postgres import PostgresDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PostgresDocumentStore",
]
