"""Persistence layer - the storage facade and its implementations."""

from contentkit.persistence.adapter import StorageFacade
from contentkit.persistence.config import StoreConfig, create_store
from contentkit.persistence.memory import MemoryStore
from contentkit.persistence.query import Query

__all__ = ["MemoryStore", "Query", "StorageFacade", "StoreConfig", "create_store"]
