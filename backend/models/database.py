"""
Database models for the post settings service.
"""

import uuid

from sqlalchemy import Column, String, DateTime, Boolean, Index, BigInteger, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Post(Base):
    """Model for storing posts and static pages."""
    __tablename__ = "posts"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(150), nullable=False)
    slug = Column(String(150), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default="draft")  # draft, published
    page = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index('idx_post_status', 'status'),
        Index('idx_post_published', 'published_at'),
        Index('idx_post_page', 'page'),
    )
