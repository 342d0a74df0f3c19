"""
Client-side key/value storage backends.

The commerce engine persists guest carts and wishlists the way a browser
persists them in localStorage: one JSON string per fixed key. Two backends
implement that contract:

- SqlLocalStorage: a single SQLAlchemy table, SQLite file by default
- RedisLocalStorage: plain string keys in Redis

Both wrap backend errors in StorageUnavailableException; LocalStore decides
what to do with them.
"""
import logging
from typing import Protocol

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy import create_engine, select, delete, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

import config
from exceptions.storage import StorageUnavailableException
from models.base import Base
from models.local_storage import LocalStorageEntry

logger = logging.getLogger(__name__)


class LocalStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class SqlLocalStorage:
    """
    localStorage backed by the ``local_storage`` table.

    Each call runs in its own short transaction.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_maker = sessionmaker(engine, class_=Session, expire_on_commit=False)
        Base.metadata.create_all(engine, tables=[LocalStorageEntry.__table__])

    @staticmethod
    def from_url(url: str) -> "SqlLocalStorage":
        return SqlLocalStorage(create_engine(url, echo=False))

    def get_item(self, key: str) -> str | None:
        try:
            with self.session_maker() as session:
                stmt = select(LocalStorageEntry.value).where(LocalStorageEntry.key == key)
                return session.execute(stmt).scalar()
        except SQLAlchemyError as e:
            raise StorageUnavailableException(key, "read", str(e)) from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with self.session_maker() as session:
                entry = session.get(LocalStorageEntry, key)
                if entry is None:
                    session.add(LocalStorageEntry(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableException(key, "write", str(e)) from e

    def remove_item(self, key: str) -> None:
        try:
            with self.session_maker() as session:
                session.execute(delete(LocalStorageEntry).where(LocalStorageEntry.key == key))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableException(key, "delete", str(e)) from e


class RedisLocalStorage:
    """localStorage backed by plain Redis string keys."""

    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def from_url(url: str) -> "RedisLocalStorage":
        return RedisLocalStorage(Redis.from_url(url, decode_responses=True))

    def get_item(self, key: str) -> str | None:
        try:
            value = self.redis.get(key)
        except RedisError as e:
            raise StorageUnavailableException(key, "read", str(e)) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        try:
            self.redis.set(key, value)
        except RedisError as e:
            raise StorageUnavailableException(key, "write", str(e)) from e

    def remove_item(self, key: str) -> None:
        try:
            self.redis.delete(key)
        except RedisError as e:
            raise StorageUnavailableException(key, "delete", str(e)) from e


def create_local_storage() -> LocalStorage:
    """
    Build the backend selected by ``config.LOCAL_STORAGE_BACKEND``.

    Raises:
        ValueError: If the configured backend name is unknown
    """
    backend = config.LOCAL_STORAGE_BACKEND
    if backend == "sqlite":
        logger.info(f"[LocalStorage] Using SQL backend: {config.LOCAL_STORAGE_DB_URL}")
        return SqlLocalStorage.from_url(config.LOCAL_STORAGE_DB_URL)
    if backend == "redis":
        logger.info("[LocalStorage] Using Redis backend")
        return RedisLocalStorage.from_url(config.REDIS_URL)
    raise ValueError(f"Unknown LOCAL_STORAGE_BACKEND: {backend!r} (expected 'sqlite' or 'redis')")
