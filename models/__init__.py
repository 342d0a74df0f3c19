"""
Models Package

This file ensures the SQLAlchemy models are imported and registered on
``Base.metadata`` before tables are created.
"""

from models.base import Base
from models.local_storage import LocalStorageEntry

__all__ = [
    'Base',
    'LocalStorageEntry',
]
