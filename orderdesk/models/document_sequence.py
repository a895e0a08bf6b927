"""Document Sequence model."""
from sqlalchemy import Column, BigInteger, String, DateTime
from sqlalchemy.sql import func
from orderdesk.database import Base


class DocumentSequence(Base):
    """Counter row per document prefix, incremented under a row lock."""

    __tablename__ = 'document_sequence'

    prefix = Column(String(10), primary_key=True)
    current_number = Column(BigInteger, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def format(self, number, padding):
        """Format a sequence value, e.g. TK-000123."""
        return f"{self.prefix}-{str(number).zfill(padding)}"

    def __repr__(self):
        return f"<DocumentSequence(prefix='{self.prefix}', current_number={self.current_number})>"
