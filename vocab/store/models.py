"""
SQLAlchemy ORM Models for the SQL snapshot backend.

The snapshot stays a flat id -> record map: one row per record with the
serialized record as its JSON payload.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class VocabRecordRow(Base):
    """
    Persisted snapshot entry for a single vocabulary record.
    """
    __tablename__ = 'vocab_records'

    id = Column(String(1024), primary_key=True, nullable=False)

    # Denormalized for readability when browsing the table
    word = Column(String(255), nullable=False)
    state = Column(String(20), nullable=False)
    next_review_date = Column(DateTime(timezone=True), nullable=False)

    version = Column(Integer, nullable=False, default=0)
    payload = Column(Text, nullable=False)  # JSON-serialized VocabRecord

    def __repr__(self):
        return f"<VocabRecordRow({self.id!r}, state={self.state}, v{self.version})>"
