"""
Title watcher that keeps the slug placeholder of a new post in step with its title.
"""

import logging
from typing import Callable, Optional

from lib.errors import SlugGenerationError
from services.debounce import DebounceScheduler
from services.post_model import PostModel, Subscription
from services.slug_generator import SlugGenerator

logger = logging.getLogger(__name__)

SLUG_PLACEHOLDER_DELAY_MS = 700


class TitleWatcher:
    """
    Observes title edits on a post that has never been saved and asks the slug
    endpoint for a candidate slug once the user stops typing.

    Two states, active and inactive. deactivate() is the only transition, and
    it also happens on the first title edit after the post has been saved.
    Once inactive, title edits are ignored for good.
    """

    def __init__(
        self,
        post: PostModel,
        slug_generator: SlugGenerator,
        debouncer: DebounceScheduler,
        on_placeholder: Callable[[str], None],
        delay_ms: int = SLUG_PLACEHOLDER_DELAY_MS
    ):
        self.post = post
        self.slug_generator = slug_generator
        self.debouncer = debouncer
        self.on_placeholder = on_placeholder
        self.delay_ms = delay_ms
        self.active = post.is_new
        self._subscription: Optional[Subscription] = None

        if self.active:
            self._subscription = post.observe("title", self.on_title_changed)

    @property
    def debounce_key(self) -> str:
        return f"slug-placeholder:{self.post.client_id}"

    def on_title_changed(self, title: Optional[str] = None) -> None:
        """Schedule placeholder generation for a genuine user edit of the title."""
        if not self.active:
            return
        if not self.post.is_new:
            self.deactivate()
            return
        # Programmatic resets (e.g. load() after a save) leave the title clean
        if "title" not in self.post.changed_attributes():
            return
        self.debouncer.schedule(self.debounce_key, self.delay_ms, self.generate_placeholder)

    async def generate_placeholder(self) -> None:
        """Request a slug for the current title and hand it to on_placeholder."""
        title = self.post.title
        try:
            slug = await self.slug_generator.generate_slug(title)
        except SlugGenerationError as e:
            logger.warning(f"Could not generate slug placeholder for {self.post.ref}: {e}")
            return

        if not self.active or not self.post.is_new:
            logger.debug(f"Discarding slug placeholder '{slug}' for {self.post.ref}, watcher inactive")
            return
        self.on_placeholder(slug)

    def deactivate(self) -> None:
        """Stop watching the title. Idempotent and permanent."""
        if not self.active and self._subscription is None:
            return
        self.active = False
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self.debouncer.cancel(self.debounce_key)
        logger.debug(f"Title watcher for {self.post.ref} deactivated")
