"""
Validation of the published date typed into the post settings menu.
"""

from datetime import datetime
from typing import Callable, Optional

from lib.date_formatting import DISPLAY_DATE_HINT, hours_until, is_same_minute, parse_date_string
from lib.errors import DateValidationError

INVALID_DATE_MESSAGE = f"Published Date must be a valid date with format: {DISPLAY_DATE_HINT}"
FUTURE_DATE_MESSAGE = "Published Date cannot currently be in the future."


class PublishDateValidator:
    """Parses user input and decides whether it may replace the current published date."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def validate(self, user_input: str, current: Optional[datetime]) -> Optional[datetime]:
        """
        Args:
            user_input: Non-empty text from the date input
            current: The committed published date

        Returns:
            The parsed date, or None when it matches current and nothing needs to change

        Raises:
            DateValidationError: Unparseable date, or a date in the future
        """
        now = self.clock()
        parsed = parse_date_string(user_input, now=now)

        if parsed is not None and is_same_minute(current, parsed):
            return None

        if parsed is None:
            raise DateValidationError(INVALID_DATE_MESSAGE)

        if hours_until(parsed, now=now) > 0:
            raise DateValidationError(FUTURE_DATE_MESSAGE)

        return parsed
