"""Brand model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK


class Brand(Base):
    """Brand (product maker)."""

    __tablename__ = 'brand'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    products = relationship('Product', back_populates='brand')

    def __repr__(self):
        return f"<Brand(id={self.id}, name='{self.name}')>"
