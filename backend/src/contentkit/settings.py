"""Runtime settings for contentkit, read from CONTENTKIT_* environment variables.

    CONTENTKIT_DATABASE_URL / CONTENTKIT_DB_PATH  store (see StoreConfig.from_env)
    CONTENTKIT_LOG_LEVEL                          default WARNING
    CONTENTKIT_OBJECT_CACHE                       process | request | lru
    CONTENTKIT_OBJECT_CACHE_SIZE                  LRU capacity, default 1024
    CONTENTKIT_MODEL_SETTINGS                     path to a model settings YAML file
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from contentkit.core.clock import Clock, system_clock
from contentkit.errors import ConfigurationError
from contentkit.hierarchy.cache import (
    LRUObjectCache,
    ObjectCache,
    ProcessObjectCache,
    process_object_cache,
)
from contentkit.metadata.loader import ModelSettingsLoader
from contentkit.models.base import ModelDependencies
from contentkit.models.factory import ModelFactory
from contentkit.persistence.config import StoreConfig, create_store

OBJECT_CACHE_POLICIES = ("process", "request", "lru")


@dataclass
class Settings:
    database_url: str
    log_level: str = "WARNING"
    object_cache: str = "process"
    object_cache_size: int = 1024
    model_settings_path: Path | None = None

    def __post_init__(self):
        if self.object_cache not in OBJECT_CACHE_POLICIES:
            raise ConfigurationError(
                f"Unknown object cache policy '{self.object_cache}'. "
                f"Expected one of: {', '.join(OBJECT_CACHE_POLICIES)}"
            )

    @classmethod
    def from_env(cls) -> Settings:
        path = os.environ.get("CONTENTKIT_MODEL_SETTINGS")
        size = os.environ.get("CONTENTKIT_OBJECT_CACHE_SIZE", "1024")
        try:
            cache_size = int(size)
        except ValueError as exc:
            raise ConfigurationError(
                f"CONTENTKIT_OBJECT_CACHE_SIZE must be an integer, got '{size}'"
            ) from exc
        return cls(
            database_url=StoreConfig.from_env().url,
            log_level=os.environ.get("CONTENTKIT_LOG_LEVEL", "WARNING").upper(),
            object_cache=os.environ.get("CONTENTKIT_OBJECT_CACHE", "process").lower(),
            object_cache_size=cache_size,
            model_settings_path=Path(path) if path else None,
        )

    def build_object_cache(self) -> ObjectCache:
        """The process-wide cache, or a new one for request and lru policies."""
        if self.object_cache == "lru":
            return LRUObjectCache(self.object_cache_size)
        if self.object_cache == "request":
            return ProcessObjectCache()
        return process_object_cache

    def build_dependencies(
        self,
        clock: Clock = system_clock,
        logger: logging.Logger | None = None,
    ) -> ModelDependencies:
        """Wire a store, a factory and an object cache from these settings."""
        deps = ModelDependencies(
            object_cache=self.build_object_cache(),
            clock=clock,
            logger=logger,
        )
        factory = ModelFactory(deps)
        if self.model_settings_path is not None:
            loader = ModelSettingsLoader(self.model_settings_path)
            loader.load()
            loader.apply(factory)
        deps.store = create_store(
            StoreConfig(self.database_url), table_names=factory.table_names()
        )
        return deps


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging. Defaults to CONTENTKIT_LOG_LEVEL, then WARNING."""
    if level is None:
        level = os.environ.get("CONTENTKIT_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
