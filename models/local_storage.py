from sqlalchemy import Column, String, Text, DateTime, func

from models.base import Base


class LocalStorageEntry(Base):
    """
    One key/value record of the client-side storage.

    Values are opaque JSON strings written by LocalStore; the table knows
    nothing about carts or wishlists.
    """
    __tablename__ = 'local_storage'

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
