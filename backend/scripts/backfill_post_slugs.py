#!/usr/bin/env python3
"""
Script to give every post a canonical, unique slug.
Posts with an empty slug get one derived from their title.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import get_db
from models.database import Post
from lib.utils import generate_unique_slug
from logging_config import setup_logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
import logging

logger = logging.getLogger(__name__)


def backfill_post_slugs(db: Session) -> int:
    """Assign slugs to posts that don't have one. Returns the number updated."""
    posts_without_slugs = db.query(Post).filter(or_(Post.slug.is_(None), Post.slug == "")).all()
    logger.info(f"Found {len(posts_without_slugs)} posts without slugs")

    if not posts_without_slugs:
        logger.info("No posts need slug updates")
        return 0

    existing_slugs = {row.slug for row in db.query(Post.slug).filter(Post.slug.isnot(None), Post.slug != "").all()}

    updated_count = 0
    try:
        for post in posts_without_slugs:
            slug = generate_unique_slug(post.title, existing_slugs)
            post.slug = slug
            existing_slugs.add(slug)
            updated_count += 1

            if updated_count % 100 == 0:
                logger.info(f"Updated {updated_count} posts so far...")

        db.commit()
    except Exception as e:
        logger.error(f"Error in backfill_post_slugs: {e}")
        db.rollback()
        raise

    logger.info(f"Successfully updated {updated_count} posts with slugs")
    return updated_count


if __name__ == "__main__":
    setup_logging()
    logger.info("Starting slug backfill...")
    session = next(get_db())
    try:
        backfill_post_slugs(session)
    finally:
        session.close()
    logger.info("Slug backfill completed!")
