"""
Pydantic schemas for API request/response models.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class PostBase(BaseModel):
    title: str = Field(..., max_length=150)
    slug: Optional[str] = Field(None, max_length=150)
    status: PostStatus = PostStatus.DRAFT
    page: bool = False
    published_at: Optional[datetime] = None


class PostCreate(PostBase):
    pass


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=150)
    slug: Optional[str] = Field(None, max_length=150)
    status: Optional[PostStatus] = None
    page: Optional[bool] = None
    published_at: Optional[datetime] = None


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: str
    title: str
    slug: str
    status: PostStatus
    page: bool
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostList(BaseModel):
    posts: List[PostResponse]
    total: int


class SlugEntry(BaseModel):
    slug: str


class SlugResponse(BaseModel):
    slugs: List[SlugEntry]


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: datetime
    database_connected: bool
    posts_count: int
