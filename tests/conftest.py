"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from unittest.mock import MagicMock
import pytest
from fakeredis import FakeRedis
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Mock config module completely before any imports
config_mock = MagicMock()
config_mock.API_BASE_URL = "http://shop.test/api"
config_mock.API_TIMEOUT_SECONDS = 5.0
config_mock.LOCAL_STORAGE_BACKEND = "sqlite"
config_mock.LOCAL_STORAGE_DB_URL = "sqlite://"  # In-memory test database
config_mock.REDIS_URL = "redis://localhost:6379/0"
config_mock.CART_STORAGE_KEY = "greeting_card_cart"
config_mock.WISHLIST_STORAGE_KEY = "greeting_card_wishlist"
config_mock.SHIPPING_FEE = 30000.0
config_mock.FREE_SHIPPING_THRESHOLD = 500000.0
config_mock.LOG_LEVEL = "DEBUG"
config_mock.LOG_MASK_SECRETS = True
config_mock.LOG_RETENTION_DAYS = 5

sys.modules['config'] = config_mock

from models.product import ProductSnapshotDTO
from repositories.local_storage import SqlLocalStorage, RedisLocalStorage
from services.local_store import LocalCartStore, LocalWishlistStore
from services.notification import ChangeNotifier


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def sql_storage():
    """SQL local storage on an in-memory SQLite database shared by all sessions."""
    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    yield SqlLocalStorage(engine)
    engine.dispose()


@pytest.fixture
def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeRedis(decode_responses=True)
    yield client
    client.close()


@pytest.fixture
def redis_storage(redis_client):
    return RedisLocalStorage(redis_client)


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def cart_store(sql_storage, notifier):
    return LocalCartStore(sql_storage, notifier)


@pytest.fixture
def wishlist_store(sql_storage, notifier):
    return LocalWishlistStore(sql_storage, notifier)


@pytest.fixture
def make_product():
    """Factory for product snapshots."""
    def _make(product_id: int = 1, price: float = 100000.0, stock: int = 10, **overrides) -> ProductSnapshotDTO:
        return ProductSnapshotDTO(
            product_id=product_id,
            product_name=overrides.get("product_name", f"Card {product_id}"),
            product_slug=overrides.get("product_slug", f"card-{product_id}"),
            product_image=overrides.get("product_image", f"https://cdn.test/card-{product_id}.jpg"),
            price=price,
            stock=stock,
        )
    return _make
