"""
Controller behind the post settings menu.

Owns the slug input, the published date input and the static page toggle for
one post, and keeps them in step with the server.
"""

from datetime import datetime
import logging
from typing import Optional

import httpx

from config.settings import AppSettings, get_settings
from lib.date_formatting import format_date
from lib.errors import DateValidationError, PostSaveError
from services.debounce import DebounceScheduler
from services.notifications import NotificationCenter, Notifier
from services.post_model import PostModel
from services.publish_date import PublishDateValidator
from services.slug_generator import SlugGenerator
from services.slug_reconciler import SlugReconciler
from services.title_watcher import SLUG_PLACEHOLDER_DELAY_MS, TitleWatcher

logger = logging.getLogger(__name__)


class PostSettingsMenu:
    """Settings panel controller for a single post."""

    def __init__(
        self,
        post: PostModel,
        slug_generator: SlugGenerator,
        notifications: Notifier,
        slug_debounce_ms: int = SLUG_PLACEHOLDER_DELAY_MS,
        date_validator: Optional[PublishDateValidator] = None
    ):
        self.post = post
        self.notifications = notifications
        self.debouncer = DebounceScheduler()
        self.date_validator = date_validator or PublishDateValidator()
        self.destroyed = False

        self._generated_slug: Optional[str] = None
        self._slug_value: Optional[str] = None
        self._published_at_value: Optional[str] = None

        self.title_watcher = TitleWatcher(
            post,
            slug_generator,
            self.debouncer,
            self._set_generated_slug,
            delay_ms=slug_debounce_ms
        )
        self.slug_reconciler = SlugReconciler(
            post,
            slug_generator,
            notifications,
            self.title_watcher,
            is_torn_down=lambda: self.destroyed
        )
        self._subscriptions = [
            post.observe("slug", self._reset_slug_value),
            post.observe("published_at", self._reset_published_at_value),
        ]

    @staticmethod
    def create_client(settings: Optional[AppSettings] = None) -> httpx.AsyncClient:
        """HTTP client for the posts API using the configured timeout. The caller closes it."""
        settings = settings or get_settings()
        return httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout))

    @classmethod
    def for_post(
        cls,
        post: PostModel,
        client: httpx.AsyncClient,
        notifications: Optional[Notifier] = None,
        settings: Optional[AppSettings] = None
    ) -> "PostSettingsMenu":
        """Build a menu wired to the configured posts API."""
        settings = settings or get_settings()
        return cls(
            post,
            SlugGenerator(client, settings.posts_api_url),
            notifications if notifications is not None else NotificationCenter(),
            slug_debounce_ms=settings.slug_debounce_ms
        )

    # ============================================================================
    # SLUG
    # ============================================================================

    @property
    def slug_value(self) -> str:
        """Text of the slug input. Follows the committed slug until the user types."""
        if self._slug_value is not None:
            return self._slug_value
        return self.post.slug or ""

    @slug_value.setter
    def slug_value(self, value: str) -> None:
        self._slug_value = value

    @property
    def slug_placeholder(self) -> str:
        """The committed slug, else the generated candidate, else the title."""
        if self.post.slug:
            return self.post.slug
        if self._generated_slug is not None:
            return self._generated_slug
        return self.post.title or ""

    async def update_slug(self, new_slug: Optional[str]) -> bool:
        """Triggered by the user manually changing the slug."""
        return await self.slug_reconciler.reconcile(new_slug)

    # ============================================================================
    # PUBLISHED DATE
    # ============================================================================

    @property
    def published_at_value(self) -> str:
        if self._published_at_value is not None:
            return self._published_at_value
        return format_date(self.post.published_at)

    @published_at_value.setter
    def published_at_value(self, value: str) -> None:
        self._published_at_value = value

    @property
    def published_at_placeholder(self) -> str:
        """The published date of the post, or now if it hasn't been set."""
        return format_date(self.post.published_at or datetime.now())

    async def set_published_at(self, user_input: Optional[str]) -> bool:
        """
        Parse the user's published date and save it.

        Returns:
            True when a new date was committed and saved

        Raises:
            PostSaveError: The server rejected the save
        """
        if not user_input or not user_input.strip():
            # Clear out the published date of a draft
            if self.post.is_draft:
                self.post.published_at = None
            return False

        try:
            published_at = self.date_validator.validate(user_input, self.post.published_at)
        except DateValidationError as e:
            self.notifications.show_error(e.message)
            return False

        if published_at is None:
            return False

        self.post.published_at = published_at
        await self._save()
        self._notify_success(
            f"Publish date successfully changed to <strong>{format_date(self.post.published_at)}</strong>."
        )
        return True

    # ============================================================================
    # STATIC PAGE
    # ============================================================================

    @property
    def is_static_page(self) -> bool:
        return bool(self.post.page)

    async def set_static_page(self, value: bool) -> bool:
        """Convert the post to a static page or back, and save."""
        self.post.page = bool(value)
        await self._save()
        self._notify_success(f"Successfully converted to {'static page' if value else 'post'}")
        return self.post.page

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def destroy(self) -> None:
        """Tear the menu down. Remote results that arrive later are ignored."""
        if self.destroyed:
            return
        self.destroyed = True
        self.title_watcher.deactivate()
        for subscription in self._subscriptions:
            subscription.cancel()
        self.debouncer.shutdown()
        logger.debug(f"Post settings menu for {self.post.ref} destroyed")

    # ============================================================================
    # PRIVATE METHODS
    # ============================================================================

    async def _save(self) -> None:
        try:
            await self.post.save()
        except PostSaveError as e:
            if not self.destroyed:
                self.notifications.show_errors(e.messages)
            raise

    def _notify_success(self, message: str) -> None:
        if not self.destroyed:
            self.notifications.show_success(message)

    def _set_generated_slug(self, slug: str) -> None:
        if self.destroyed:
            return
        self._generated_slug = slug

    def _reset_slug_value(self, slug: str) -> None:
        self._slug_value = None

    def _reset_published_at_value(self, published_at: Optional[datetime]) -> None:
        self._published_at_value = None
