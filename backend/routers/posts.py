"""
Post API routes for post settings and slug generation.
"""
from datetime import datetime
import logging

from database import get_db
from fastapi import APIRouter, Depends, HTTPException, Query
from schemas.posts import (
    HealthCheckResponse,
    PostCreate,
    PostList,
    PostResponse,
    PostUpdate,
    SlugEntry,
    SlugResponse,
)
from services.post_service import PostService, PostValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


# ============================================================================
# SLUG ENDPOINTS
# ============================================================================
@router.get("/slugs/post/{text:path}", response_model=SlugResponse, tags=["Slug"])
async def generate_post_slug(text: str, db: Session = Depends(get_db)):
    """Return a canonical, unused slug for the given text."""
    service = PostService(db)
    return SlugResponse(slugs=[SlugEntry(slug=service.generate_slug(text))])


# ============================================================================
# POST ENDPOINTS
# ============================================================================

@router.get("/posts", response_model=PostList, tags=["Post"])
async def get_posts(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Get posts, newest first."""
    service = PostService(db)
    posts = service.list_posts(limit=limit, offset=offset)
    return PostList(
        posts=[PostResponse.model_validate(post) for post in posts],
        total=service.count_posts()
    )


@router.get("/posts/{post_id}", response_model=PostResponse, tags=["Post"])
async def get_post(post_id: int, db: Session = Depends(get_db)):
    """Get a specific post by ID."""
    post = PostService(db).get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostResponse.model_validate(post)


@router.post("/posts", response_model=PostResponse, status_code=201, tags=["Post"])
async def create_post(payload: PostCreate, db: Session = Depends(get_db)):
    """Create a post."""
    service = PostService(db)
    try:
        post = service.create_post(payload)
    except PostValidationError as e:
        raise HTTPException(status_code=422, detail=e.messages)
    return PostResponse.model_validate(post)


@router.put("/posts/{post_id}", response_model=PostResponse, tags=["Post"])
async def update_post(post_id: int, payload: PostUpdate, db: Session = Depends(get_db)):
    """Update a post's settings."""
    service = PostService(db)
    post = service.get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    try:
        post = service.update_post(post, payload)
    except PostValidationError as e:
        raise HTTPException(status_code=422, detail=e.messages)
    return PostResponse.model_validate(post)


# ============================================================================
# HEALTH ENDPOINT
# ============================================================================

@router.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check(db: Session = Depends(get_db)):
    """Report database connectivity and post count."""
    try:
        db.execute(sql_text("SELECT 1"))
        posts_count = PostService(db).count_posts()
        connected = True
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        posts_count = 0
        connected = False

    return HealthCheckResponse(
        status="healthy" if connected else "unhealthy",
        timestamp=datetime.now(),
        database_connected=connected,
        posts_count=posts_count
    )
