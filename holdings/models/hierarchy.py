"""Hierarchy models: shareholder -> company -> project -> table -> view.

Parent references are plain indexed columns, not enforced foreign keys:
deleting a parent leaves its descendants in place (addressable by id,
unreachable through parent navigation).
"""

from sqlalchemy import Column, Index, String, BigInteger, DateTime
from sqlalchemy.sql import func
from ..database import Base

DEFAULT_TABLE_COLOR = "#3b82f6"
DEFAULT_VIEW_TYPE = "grid"


class Shareholder(Base):
    """Root level of the hierarchy."""

    __tablename__ = "shareholders"

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Company(Base):
    __tablename__ = "companies"
    __table_args__ = (
        Index("idx_companies_shareholder", "shareholder_id"),
    )

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    shareholder_id = Column(String(50), nullable=True)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_company", "company_id"),
    )

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    company_id = Column(String(50), nullable=True)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DataTable(Base):
    """A table record in the hierarchy (named to avoid clashing with sqlalchemy.Table)."""

    __tablename__ = "tables"
    __table_args__ = (
        Index("idx_tables_project", "project_id"),
    )

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    color = Column(String(20), default=DEFAULT_TABLE_COLOR)
    project_id = Column(String(50), nullable=True)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class View(Base):
    """Leaf level of the hierarchy."""

    __tablename__ = "views"
    __table_args__ = (
        Index("idx_views_table", "table_id"),
    )

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    view_type = Column(String(50), default=DEFAULT_VIEW_TYPE)
    table_id = Column(String(50), nullable=True)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
