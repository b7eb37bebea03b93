"""
Reconciliation of user edited slugs against the server's canonical slug.
"""

import logging
import re
from typing import Callable, Optional

from lib.errors import PostSaveError, SlugGenerationError
from logging_config import log_slug_change
from services.notifications import Notifier
from services.post_model import PostModel
from services.slug_generator import SlugGenerator
from services.title_watcher import TitleWatcher

logger = logging.getLogger(__name__)

_COUNTER_RE = re.compile(r"[0-9]+")


def strip_uniqueness_suffix(slug: str) -> Optional[str]:
    """
    Return slug without its trailing "-<n>" counter, or None when the last
    token isn't a positive integer.

    >>> strip_uniqueness_suffix("my-post-2")
    'my-post'
    >>> strip_uniqueness_suffix("my-post-0") is None
    True
    """
    tokens = slug.split("-")
    last = tokens.pop()
    if not _COUNTER_RE.fullmatch(last) or int(last) <= 0:
        return None
    return "-".join(tokens)


class SlugReconciler:
    """
    Turns a slug the user typed into a committed slug.

    The candidate is round-tripped through the slug endpoint and the result is
    compared with the committed slug. The outcome is one of: nothing happens,
    the slug is committed but left for the next explicit save (new posts), or
    the slug is committed and saved right away (existing posts).

    Concurrent reconciliations for the same post are not serialized. Whichever
    response lands last wins.
    """

    def __init__(
        self,
        post: PostModel,
        slug_generator: SlugGenerator,
        notifications: Notifier,
        title_watcher: TitleWatcher,
        is_torn_down: Callable[[], bool] = lambda: False
    ):
        self.post = post
        self.slug_generator = slug_generator
        self.notifications = notifications
        self.title_watcher = title_watcher
        self.is_torn_down = is_torn_down

    async def reconcile(self, candidate: Optional[str]) -> bool:
        """
        Reconcile a user supplied slug.

        Args:
            candidate: Text from the slug input

        Returns:
            True when a new slug was committed

        Raises:
            PostSaveError: Saving an existing post failed. The new slug stays in memory.
        """
        slug = self.post.slug
        new_slug = (candidate or slug or "").strip()

        # Ignore unchanged slugs or candidate slugs that are empty
        if not new_slug or new_slug == slug:
            log_slug_change(self.post.ref, "skipped", candidate=new_slug, current_slug=slug)
            return False

        try:
            server_slug = await self.slug_generator.generate_slug(new_slug)
        except SlugGenerationError as e:
            log_slug_change(self.post.ref, "failed", candidate=new_slug, current_slug=slug, error=e)
            if not self.is_torn_down():
                self.notifications.show_error(str(e))
            return False

        if self.is_torn_down():
            logger.debug(f"Discarding slug '{server_slug}' for {self.post.ref}, settings menu closed")
            return False

        if server_slug == slug:
            log_slug_change(self.post.ref, "aborted", new_slug, server_slug, slug)
            return False

        # The endpoint appends -2, -3, ... to keep slugs unique, and the post's
        # own slug counts as taken. Re-submitting the current slug therefore
        # comes back as "<slug>-2", which must not replace "<slug>".
        base = strip_uniqueness_suffix(server_slug)
        if base is not None and base == slug and server_slug != new_slug:
            log_slug_change(self.post.ref, "aborted", new_slug, server_slug, slug)
            return False

        self.post.slug = server_slug
        self.title_watcher.deactivate()

        # New posts are saved by the editor's own save button
        if self.post.is_new:
            log_slug_change(self.post.ref, "committed", new_slug, server_slug, slug)
            return True

        try:
            await self.post.save()
        except PostSaveError as e:
            log_slug_change(self.post.ref, "failed", new_slug, server_slug, slug, error=e)
            if not self.is_torn_down():
                self.notifications.show_errors(e.messages)
            raise

        log_slug_change(self.post.ref, "persisted", new_slug, server_slug, slug)
        if not self.is_torn_down():
            self.notifications.show_success(
                f"Permalink successfully changed to <strong>{self.post.slug}</strong>."
            )
        return True
