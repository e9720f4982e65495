"""Folder model: user-created grouping containers for one hierarchy level."""

from sqlalchemy import Column, Index, String, BigInteger, Boolean, DateTime
from sqlalchemy.sql import func
from ..database import Base


class Folder(Base):
    """A folder in a (folder type, owner) scope.

    Folders form a forest per scope through ``parent_id``; nesting is
    stored flat and assembled into a tree on read.
    """

    __tablename__ = "folders"
    __table_args__ = (
        Index("idx_folders_parent", "parent_id"),
        Index("idx_folders_owner", "owner_id"),
        Index("idx_folders_type", "type"),
    )

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)

    # Binds the folder to one level (e.g. "company_folder")
    folder_type = Column("type", String(32), nullable=False)

    parent_id = Column(String(50), nullable=True)

    # Parent-level record this folder belongs to; NULL for root-level types
    owner_id = Column(String(50), nullable=True)

    expanded = Column(Boolean, default=True, nullable=False)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
