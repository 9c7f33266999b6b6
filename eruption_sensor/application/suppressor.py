"""Drops events that repeat the last delivered one."""
from typing import Optional

from eruption_sensor.domain.focus_event import FocusEvent


class DuplicateSuppressor:
    """Compares a candidate event against the last delivered event."""

    def is_new(
        self, candidate: FocusEvent, last_delivered: Optional[FocusEvent]
    ) -> bool:
        """
        Check whether the candidate should be delivered.

        Args:
            candidate: Freshly normalized event
            last_delivered: Last event confirmed written, or None

        Returns:
            True if nothing was delivered yet or the candidate differs
        """
        return last_delivered is None or candidate != last_delivered
