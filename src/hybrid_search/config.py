"""Runtime settings for hybrid search.

Defaults can be overridden with ``HYBRID_SEARCH_*`` environment variables
or, for the CLI, with command-line flags.
"""

import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hybrid_search.storage import ChunkStore

ENV_PREFIX = "HYBRID_SEARCH_"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the loader, the search router and the CLI."""

    database_path: str = "hybrid_search.db"
    dimension: int = 384
    chunk_size: int = 800
    glob: str = "*.md"
    default_limit: int = 10
    embedding_model: str = "thenlper/gte-small"

    def __post_init__(self) -> None:
        if self.dimension <= 0:
            raise ValueError(f"dimension must be positive, got {self.dimension}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.default_limit <= 0:
            raise ValueError(f"default_limit must be positive, got {self.default_limit}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings with every ``HYBRID_SEARCH_<FIELD>`` variable applied
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            overrides[f.name] = int(raw) if f.type in (int, "int") else raw
        return cls(**overrides)

    def with_overrides(self, **changes: object) -> "Settings":
        """Return a copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings read once from the process environment."""
    return Settings.from_env()


@lru_cache(maxsize=1)
def get_default_store() -> "ChunkStore":
    """Store used by callers that do not pass one explicitly."""
    from hybrid_search.storage import ChunkStore

    settings = get_settings()
    store = ChunkStore(settings.database_path, dimension=settings.dimension)
    store.initialize()
    return store
