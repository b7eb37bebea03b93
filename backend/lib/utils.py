import re
import unicodedata
from typing import Container, Optional

MAX_SLUG_LENGTH = 150
DEFAULT_SLUG = "post"

# Slugs that would shadow an admin or archive route
RESERVED_SLUGS = frozenset({
    "ghost", "admin", "wp-admin", "wp-login", "dashboard", "logout", "login",
    "signin", "signup", "signout", "register", "archive", "archives",
    "category", "categories", "tag", "tags", "page", "pages", "post", "posts",
    "user", "users", "rss", "feed",
})


def slugify(text: Optional[str]) -> str:
    """
    Generate a URL-friendly slug from free text.

    Args:
        text: Any text, usually a post title or a user typed slug

    Returns:
        Lowercase ASCII slug, words joined with hyphens. Empty if nothing usable remains.
    """
    if not text:
        return ""

    # Unicode -> ASCII
    clean = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")

    # Replace anything that is not a letter or digit with a hyphen
    clean = re.sub(r"[^a-z0-9]+", "-", clean.lower())
    clean = clean.strip("-")

    if len(clean) > MAX_SLUG_LENGTH:
        clean = clean[:MAX_SLUG_LENGTH].rstrip("-")

    return clean


def generate_unique_slug(text: Optional[str], existing_slugs: Container[str]) -> str:
    """
    Generate a unique slug, ensuring it doesn't conflict with existing slugs.

    Args:
        text: The title or candidate slug
        existing_slugs: Slugs already in use

    Returns:
        The canonical slug, with -2, -3, ... appended until it is free
    """
    base_slug = slugify(text)

    if not base_slug:
        base_slug = DEFAULT_SLUG
    elif base_slug in RESERVED_SLUGS:
        base_slug = f"{base_slug}-{DEFAULT_SLUG}"

    if base_slug not in existing_slugs:
        return base_slug

    counter = 2
    while f"{base_slug}-{counter}" in existing_slugs:
        counter += 1

    return f"{base_slug}-{counter}"
