"""
Client side post model with change tracking and field observation.

The settings menu edits a PostModel in memory. Every tracked field keeps a
persisted snapshot so callers can tell a user edit apart from a value that
came back from the server.
"""

from collections import defaultdict
from datetime import datetime
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
import uuid

from dateutil import parser as dateutil_parser
import httpx

from lib.date_formatting import to_local_naive
from lib.errors import PostSaveError
from logging_config import log_post_save

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("title", "slug", "status", "page", "published_at")

FieldCallback = Callable[[Any], None]


class TrackedField:
    """
    Descriptor that notifies the owning model's observers when its value changes.

    Setting the same value again is a no-op and notifies nobody.
    """

    def __init__(self, default: Any = None):
        self.default = default
        self.name = ""
        self.attr_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.attr_name = f"_tracked_{name}"

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return obj.__dict__.get(self.attr_name, self.default)

    def __set__(self, obj, value: Any) -> None:
        old_value = self.__get__(obj)
        if old_value == value:
            return
        obj.__dict__[self.attr_name] = value
        obj._notify(self.name, value)


class Subscription:
    """A live binding from one model field to a callback. Cancelling is permanent."""

    def __init__(self, observers: List["Subscription"], field: str, callback: FieldCallback):
        self._observers = observers
        self.field = field
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        if self in self._observers:
            self._observers.remove(self)


class PostModel:
    """A post as seen by the settings menu."""

    title = TrackedField("")
    slug = TrackedField("")
    status = TrackedField("draft")
    page = TrackedField(False)
    published_at = TrackedField(None)

    def __init__(self, client: httpx.AsyncClient, api_url: str, data: Optional[Dict[str, Any]] = None):
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.client_id = uuid.uuid4().hex
        self.id: Optional[int] = None
        self.uuid: Optional[str] = None
        self._observers: Dict[str, List[Subscription]] = defaultdict(list)
        self._persisted: Dict[str, Any] = self._snapshot()

        if data:
            self.load(data)

    # ============================================================================
    # STATE
    # ============================================================================

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def is_draft(self) -> bool:
        return self.status == "draft"

    @property
    def ref(self) -> str:
        """Short identifier for log lines."""
        return f"post:{self.id}" if self.id is not None else f"new:{self.client_id[:8]}"

    def changed_attributes(self) -> Dict[str, Tuple[Any, Any]]:
        """Fields modified since the last persisted snapshot, as {field: (persisted, current)}."""
        changes = {}
        for field in TRACKED_FIELDS:
            current = getattr(self, field)
            if self._persisted.get(field) != current:
                changes[field] = (self._persisted.get(field), current)
        return changes

    def observe(self, field: str, callback: FieldCallback) -> Subscription:
        """Call callback(new_value) whenever field changes."""
        if field not in TRACKED_FIELDS:
            raise ValueError(f"Unknown post field: {field}")
        subscription = Subscription(self._observers[field], field, callback)
        self._observers[field].append(subscription)
        return subscription

    def load(self, data: Dict[str, Any]) -> None:
        """
        Apply server data as the new persisted state.

        Observers still fire for fields whose value changes, but those fields
        are not reported by changed_attributes().
        """
        if data.get("id") is not None:
            self.id = int(data["id"])
        if data.get("uuid"):
            self.uuid = data["uuid"]

        values = {field: getattr(self, field) for field in TRACKED_FIELDS}
        for field in TRACKED_FIELDS:
            if field in data:
                values[field] = self._coerce(field, data[field])

        self._persisted = dict(values)
        for field, value in values.items():
            setattr(self, field, value)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug or None,
            "status": self.status,
            "page": self.page,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }

    # ============================================================================
    # PERSISTENCE
    # ============================================================================

    async def save(self) -> None:
        """
        Persist the post. New posts are created, existing ones updated.

        Raises:
            PostSaveError: The server rejected the save or could not be reached
        """
        changed_fields = list(self.changed_attributes().keys())
        was_new = self.is_new

        try:
            if was_new:
                response = await self.client.post(f"{self.api_url}/posts", json=self.to_payload())
            else:
                response = await self.client.put(f"{self.api_url}/posts/{self.id}", json=self.to_payload())
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            error = PostSaveError(self._error_messages(e.response))
            log_post_save(self.ref, False, changed_fields, error=error)
            raise error from e
        except httpx.HTTPError as e:
            error = PostSaveError([f"Unable to reach the server: {e}"])
            log_post_save(self.ref, False, changed_fields, error=error)
            raise error from e

        self.load(data)
        log_post_save(self.ref, True, changed_fields)
        if was_new:
            logger.info(f"---- Created {self.ref} with slug '{self.slug}' ----")

    # ============================================================================
    # PRIVATE METHODS
    # ============================================================================

    def _notify(self, field: str, value: Any) -> None:
        for subscription in list(self._observers.get(field, [])):
            if subscription.active:
                subscription.callback(value)

    def _snapshot(self) -> Dict[str, Any]:
        return {field: getattr(self, field) for field in TRACKED_FIELDS}

    def _coerce(self, field: str, value: Any) -> Any:
        if field == "published_at":
            if not value:
                return None
            if isinstance(value, datetime):
                return to_local_naive(value)
            return to_local_naive(dateutil_parser.isoparse(value))
        if field == "page":
            return bool(value)
        if field in ("title", "slug"):
            return value or ""
        return value

    @staticmethod
    def _error_messages(response: httpx.Response) -> List[str]:
        """Pull field level messages out of an error response."""
        try:
            body = response.json()
        except ValueError:
            return [f"Server error ({response.status_code})"]

        detail = body.get("detail") if isinstance(body, dict) else None

        if isinstance(detail, str):
            return [detail]
        if isinstance(detail, list):
            messages = []
            for item in detail:
                if isinstance(item, dict):
                    messages.append(item.get("msg") or item.get("message") or str(item))
                else:
                    messages.append(str(item))
            return messages
        return [f"Server error ({response.status_code})"]
