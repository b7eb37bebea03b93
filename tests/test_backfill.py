"""Tests for the slug backfill script"""

from models.database import Post
from scripts.backfill_post_slugs import backfill_post_slugs


def test_posts_without_slugs_get_unique_ones(db_session):
    db_session.add_all([
        Post(title="Hello World", slug="hello-world"),
        Post(title="Hello World", slug=""),
    ])
    db_session.commit()

    assert backfill_post_slugs(db_session) == 1

    slugs = sorted(post.slug for post in db_session.query(Post).all())
    assert slugs == ["hello-world", "hello-world-2"]


def test_nothing_to_do(db_session):
    db_session.add(Post(title="Done", slug="done"))
    db_session.commit()

    assert backfill_post_slugs(db_session) == 0
