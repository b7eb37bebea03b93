#!/usr/bin/env python3
"""
Database initialization script for SQLite.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from database import init_db, get_db, get_db_url
from models.database import Post


def main():
    """Create tables and report what is already stored."""
    print(f"Initializing post settings database at {get_db_url()}...")

    init_db()
    print("✓ Database tables created")

    db = next(get_db())
    try:
        total_posts = db.query(Post).count()
        total_pages = db.query(Post).filter(Post.page.is_(True)).count()
        total_published = db.query(Post).filter(Post.status == "published").count()

        print(f"\nDatabase Status:")
        print(f"  Posts: {total_posts}")
        print(f"  Static pages: {total_pages}")
        print(f"  Published: {total_published}")

    except Exception as e:
        print(f"Error initializing database: {e}")
        sys.exit(1)
    finally:
        db.close()

    print("\n✓ SQLite database initialization completed successfully!")


if __name__ == "__main__":
    main()
