"""Storage backends for login nonces.

Every backend implements ``consume`` as one atomic step so two concurrent
verifications of the same nonce can never both succeed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from threading import Lock
from typing import Any, Protocol

from redis.exceptions import RedisError
from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kaspa_brawl.core.errors import StorageError
from kaspa_brawl.db.time import as_utc
from kaspa_brawl.models.nonce import Nonce

__all__ = [
    "NonceRecord",
    "NonceStore",
    "SqlNonceStore",
    "RedisNonceStore",
    "InMemoryNonceStore",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NonceRecord:
    """Backend-independent view of a stored nonce."""

    value: str
    address: str | None
    expires_at: datetime
    used: bool = False

    def is_usable(self, now: datetime) -> bool:
        return not self.used and now < self.expires_at


class NonceStore(Protocol):
    """Storage capability required by the challenge issuer and the verifier."""

    def create(self, record: NonceRecord) -> None: ...

    def get(self, value: str) -> NonceRecord | None: ...

    def consume(self, value: str, now: datetime) -> bool:
        """Mark an unused, unexpired nonce as used; return False if it was not."""
        ...

    def delete_expired(self, now: datetime) -> int:
        """Delete records that are expired or used; return how many were removed."""
        ...


class SqlNonceStore:
    """Nonce store backed by the relational database."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fail(self, action: str, err: SQLAlchemyError) -> StorageError:
        self.session.rollback()
        logger.exception("Nonce store failed to %s", action)
        return StorageError(f"Nonce storage unavailable ({action})")

    def create(self, record: NonceRecord) -> None:
        self.session.add(
            Nonce(
                value=record.value,
                address=record.address,
                expires_at=record.expires_at,
                used=record.used,
            )
        )
        try:
            self.session.commit()
        except SQLAlchemyError as err:
            raise self._fail("create nonce", err) from err

    def get(self, value: str) -> NonceRecord | None:
        try:
            row = self.session.execute(
                select(Nonce)
                .where(Nonce.value == value)
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except SQLAlchemyError as err:
            raise self._fail("read nonce", err) from err
        if row is None:
            return None
        return NonceRecord(
            value=row.value,
            address=row.address,
            expires_at=as_utc(row.expires_at),
            used=row.used,
        )

    def consume(self, value: str, now: datetime) -> bool:
        stmt = (
            update(Nonce)
            .where(
                Nonce.value == value,
                Nonce.used.is_(False),
                Nonce.expires_at > now,
            )
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError as err:
            raise self._fail("consume nonce", err) from err
        return result.rowcount == 1

    def delete_expired(self, now: datetime) -> int:
        stmt = (
            delete(Nonce)
            .where(or_(Nonce.expires_at < now, Nonce.used.is_(True)))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError as err:
            raise self._fail("sweep nonces", err) from err
        return int(result.rowcount or 0)


# KEYS[1] = nonce key, ARGV[1] = now (epoch seconds)
_CONSUME_SCRIPT = """
local used = redis.call('HGET', KEYS[1], 'used')
if not used or used == '1' then
    return 0
end
local expires_at = tonumber(redis.call('HGET', KEYS[1], 'expires_at'))
if expires_at <= tonumber(ARGV[1]) then
    return 0
end
redis.call('HSET', KEYS[1], 'used', '1')
return 1
"""

# KEYS[1] = nonce key, ARGV[1] = now (epoch seconds)
_SWEEP_SCRIPT = """
local fields = redis.call('HMGET', KEYS[1], 'used', 'expires_at')
if not fields[1] then
    return 0
end
if fields[1] == '1' or tonumber(fields[2]) < tonumber(ARGV[1]) then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class RedisNonceStore:
    """Nonce store backed by Redis hashes.

    Keys expire on their own shortly after ``expires_at``; the sweep removes
    used nonces and anything Redis has not evicted yet.
    """

    key_prefix = "nonce:"

    def __init__(self, client: Any) -> None:
        self._redis = client
        self._consume = client.register_script(_CONSUME_SCRIPT)
        self._sweep = client.register_script(_SWEEP_SCRIPT)

    @classmethod
    def from_url(cls, url: str) -> RedisNonceStore:
        import redis

        return cls(redis.from_url(url, decode_responses=True))  # type: ignore[no-untyped-call]

    def _key(self, value: str) -> str:
        return f"{self.key_prefix}{value}"

    def create(self, record: NonceRecord) -> None:
        key = self._key(record.value)
        mapping = {
            "address": record.address or "",
            "expires_at": repr(record.expires_at.timestamp()),
            "used": "1" if record.used else "0",
        }
        try:
            pipe = self._redis.pipeline()
            pipe.hset(key, mapping=mapping)
            pipe.expireat(key, int(record.expires_at.timestamp()) + 1)
            pipe.execute()
        except RedisError as err:
            logger.exception("Redis nonce store failed to create nonce")
            raise StorageError("Nonce storage unavailable (create nonce)") from err

    def get(self, value: str) -> NonceRecord | None:
        try:
            fields = self._redis.hgetall(self._key(value))
        except RedisError as err:
            logger.exception("Redis nonce store failed to read nonce")
            raise StorageError("Nonce storage unavailable (read nonce)") from err
        if not fields:
            return None
        return NonceRecord(
            value=value,
            address=fields.get("address") or None,
            expires_at=datetime.fromtimestamp(float(fields["expires_at"]), UTC),
            used=fields.get("used") == "1",
        )

    def consume(self, value: str, now: datetime) -> bool:
        try:
            result = self._consume(keys=[self._key(value)], args=[now.timestamp()])
        except RedisError as err:
            logger.exception("Redis nonce store failed to consume nonce")
            raise StorageError("Nonce storage unavailable (consume nonce)") from err
        return int(result) == 1

    def delete_expired(self, now: datetime) -> int:
        removed = 0
        try:
            for key in self._redis.scan_iter(match=f"{self.key_prefix}*", count=500):
                removed += int(self._sweep(keys=[key], args=[now.timestamp()]))
        except RedisError as err:
            logger.exception("Redis nonce store failed to sweep nonces")
            raise StorageError("Nonce storage unavailable (sweep nonces)") from err
        return removed


class InMemoryNonceStore:
    """Process-local nonce store for tests and single-process development."""

    def __init__(self) -> None:
        self._records: dict[str, NonceRecord] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def create(self, record: NonceRecord) -> None:
        with self._lock:
            self._records[record.value] = record

    def get(self, value: str) -> NonceRecord | None:
        with self._lock:
            return self._records.get(value)

    def consume(self, value: str, now: datetime) -> bool:
        with self._lock:
            record = self._records.get(value)
            if record is None or not record.is_usable(now):
                return False
            self._records[value] = replace(record, used=True)
            return True

    def delete_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [
                value
                for value, record in self._records.items()
                if record.used or record.expires_at < now
            ]
            for value in stale:
                del self._records[value]
            return len(stale)
