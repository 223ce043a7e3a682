from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from ibd_nexus.database import Base


class StorageRecord(Base):
    """Key-value row; the journal is one JSON document under a fixed key."""

    __tablename__ = "app_storage"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
