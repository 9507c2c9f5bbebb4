# src/kaspa_brawl/services/stores.py
"""Selection of the configured nonce store backend."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.orm import Session

from kaspa_brawl.core.settings import settings
from kaspa_brawl.db.session import SessionLocal
from kaspa_brawl.repositories.nonces import (
    InMemoryNonceStore,
    NonceStore,
    RedisNonceStore,
    SqlNonceStore,
)

_MEMORY_STORE = InMemoryNonceStore()


@lru_cache(maxsize=1)
def get_redis_nonce_store() -> RedisNonceStore:
    """Return the process-wide Redis nonce store."""
    return RedisNonceStore.from_url(settings.redis_url)


def build_nonce_store(db: Session, backend: str | None = None) -> NonceStore:
    """Return the nonce store for ``backend`` (defaults to ``NONCE_BACKEND``)."""
    backend = backend or settings.nonce_backend
    if backend == "database":
        return SqlNonceStore(db)
    if backend == "redis":
        return get_redis_nonce_store()
    if backend == "memory":
        return _MEMORY_STORE
    raise ValueError(f"Unknown nonce backend: {backend}")


@contextmanager
def nonce_store_scope(backend: str | None = None) -> Iterator[NonceStore]:
    """Yield a nonce store bound to a fresh database session."""
    db = SessionLocal()
    try:
        yield build_nonce_store(db, backend)
    finally:
        db.close()
