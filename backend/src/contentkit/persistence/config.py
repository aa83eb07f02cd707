"""Store configuration and factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentkit.persistence.adapter import StorageFacade

MEMORY_URL = "memory://"


@dataclass
class StoreConfig:
    """Store connection configuration.

    Supports memory://, sqlite:/// and postgresql:// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Create config from environment variables.

        Resolution order:
        1. CONTENTKIT_DATABASE_URL env var
        2. CONTENTKIT_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: memory://
        """
        url = os.environ.get("CONTENTKIT_DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("CONTENTKIT_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        return cls(url=MEMORY_URL)

    @property
    def is_memory(self) -> bool:
        return self.url.startswith("memory:")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        postgresql:// URLs are pointed at the psycopg (v3) driver.
        """
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        if self.url in ("sqlite:///", "sqlite://"):
            return "sqlite://"
        return self.url


def create_store(
    config: StoreConfig, table_names: dict[str, str] | None = None
) -> StorageFacade:
    """Create a store based on the URL scheme.

    table_names overrides SQL table names per object type; the memory
    store ignores it.

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_memory:
        from contentkit.persistence.memory import MemoryStore

        return MemoryStore()

    if config.is_sqlite or config.is_postgresql:
        from contentkit.persistence.sql import SQLStore

        return SQLStore(config.sqlalchemy_url, table_names=table_names)

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
