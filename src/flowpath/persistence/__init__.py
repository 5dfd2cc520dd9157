"""Persistence layer: session, A/B decision and flow stores."""

from flowpath.persistence.decisions import InMemoryAbDecisionStore, SqliteAbDecisionStore
from flowpath.persistence.factory import StoreFactory, Stores
from flowpath.persistence.flows import DirectoryFlowStore, InMemoryFlowStore
from flowpath.persistence.memory import InMemorySessionStore
from flowpath.persistence.models import PathEntry, ResponseEntry, Session
from flowpath.persistence.sqlite import SqliteSessionStore

__all__ = [
    "DirectoryFlowStore",
    "InMemoryAbDecisionStore",
    "InMemoryFlowStore",
    "InMemorySessionStore",
    "PathEntry",
    "ResponseEntry",
    "Session",
    "SqliteAbDecisionStore",
    "SqliteSessionStore",
    "StoreFactory",
    "Stores",
]
