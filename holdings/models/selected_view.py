"""Selected view model: junction rows marking views as part of the working set."""

from sqlalchemy import Column, String, BigInteger, DateTime
from sqlalchemy.sql import func
from ..database import Base


class SelectedView(Base):
    """A reference to one view (not a copy). At most one row per view."""

    __tablename__ = "selected_views"

    id = Column(String(50), primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    view_id = Column(String(50), nullable=False, unique=True)
    folder_id = Column(String(50), nullable=True)
    sort_order = Column(BigInteger, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
