"""Singleton code counter and key/value settings storage."""

from sqlalchemy import Column, Integer, String, Text
from ..database import Base

CODE_COUNTER_ID = 1
CODE_COUNTER_START = 1000


class CodeCounter(Base):
    """Single row holding the last allocated human-readable code."""

    __tablename__ = "code_counter"

    id = Column(Integer, primary_key=True)
    current_value = Column(Integer, nullable=False, default=CODE_COUNTER_START)


class Setting(Base):
    """Opaque UI/layout setting; value is JSON-encoded."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
