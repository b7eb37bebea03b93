"""
Post service for persisting posts and canonicalizing their slugs.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from lib.date_formatting import to_local_naive
from lib.utils import generate_unique_slug, slugify
from models.database import Post
from schemas.posts import PostCreate, PostStatus, PostUpdate
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PostValidationError(Exception):
    """Raised when a post payload fails server side validation."""

    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages))
        self.messages = messages


class PostService:
    """Service for handling post operations."""
    def __init__(self, db: Session):
        self.db = db

    # ============================================================================
    # PUBLIC METHODS
    # ============================================================================

    def generate_slug(self, text: str) -> str:
        """
        Return a canonical slug for text that no existing post uses.

        The caller's own post is not excluded, so asking for a post's current
        slug yields the next numbered variant.
        """
        slug = generate_unique_slug(text, self._existing_slugs())
        logger.debug(f"Generated slug '{slug}' for '{text}'")
        return slug

    def get_post(self, post_id: int) -> Optional[Post]:
        return self.db.query(Post).filter(Post.id == post_id).first()

    def list_posts(self, limit: int = 50, offset: int = 0) -> List[Post]:
        return self.db.query(Post).order_by(Post.id.desc()).offset(offset).limit(limit).all()

    def count_posts(self) -> int:
        return self.db.query(Post).count()

    def create_post(self, payload: PostCreate) -> Post:
        """
        Create a post. The slug is derived from the title when none is given.
        """
        data = payload.model_dump()
        self._validate(data)

        data["slug"] = generate_unique_slug(data.get("slug") or data["title"], self._existing_slugs())
        data["status"] = PostStatus(data["status"]).value
        self._stamp_published_at(data, None)

        post = Post(**data)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"---- Created post {post.id} with slug '{post.slug}' ----")
        return post

    def update_post(self, post: Post, payload: PostUpdate) -> Post:
        """
        Apply a partial update. A changed slug is canonicalized again,
        ignoring the post's own current slug.
        """
        data: Dict[str, Any] = payload.model_dump(exclude_unset=True)
        self._validate(data)

        if "slug" in data:
            requested = data["slug"]
            if not requested or slugify(requested) == post.slug:
                data.pop("slug")
            else:
                data["slug"] = generate_unique_slug(requested, self._existing_slugs(exclude_id=post.id))

        if data.get("status") is not None:
            data["status"] = PostStatus(data["status"]).value
        elif "status" in data:
            data.pop("status")

        if data.get("page") is None:
            data.pop("page", None)

        self._stamp_published_at(data, post)

        for key, value in data.items():
            setattr(post, key, value)

        self.db.commit()
        self.db.refresh(post)
        logger.info(f"---- Updated post {post.id}: {sorted(data.keys())} ----")
        return post

    # ============================================================================
    # PRIVATE METHODS
    # ============================================================================

    def _existing_slugs(self, exclude_id: Optional[int] = None) -> set:
        query = self.db.query(Post.slug)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        return {row.slug for row in query.all()}

    def _validate(self, data: Dict[str, Any]) -> None:
        errors = []
        if "title" in data and not (data["title"] or "").strip():
            errors.append("Title cannot be blank.")
        if errors:
            raise PostValidationError(errors)

    def _stamp_published_at(self, data: Dict[str, Any], post: Optional[Post]) -> None:
        """Publishing without a date stamps the current time."""
        if data.get("published_at") is not None:
            data["published_at"] = to_local_naive(data["published_at"])

        status = data.get("status") or (post.status if post is not None else PostStatus.DRAFT.value)
        if status != PostStatus.PUBLISHED.value:
            return

        if "published_at" in data:
            if data["published_at"] is None:
                data["published_at"] = datetime.now()
        elif post is None or post.published_at is None:
            data["published_at"] = datetime.now()
