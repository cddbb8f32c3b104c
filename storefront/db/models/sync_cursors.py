# storefront/db/models/sync_cursors.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from storefront.db.base import Base, JSONType


class SyncCursor(Base):
    __tablename__ = "sync_cursors"

    """Tracks the last completed run of a named synchronization stream.

    The sheet sync records when it last finished and the counters of that
    pass, so administrators can see how fresh the durable catalog is.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    stream_name = Column(String, nullable=False, unique=True)

    last_synced_at = Column(DateTime(timezone=True), nullable=True)

    details = Column("metadata", JSONType, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
