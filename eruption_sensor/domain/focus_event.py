"""Focus event domain model."""
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class FocusEvent:
    """Value object describing the currently focused window."""

    window_title: str = ""
    window_class: str = ""

    def is_empty(self) -> bool:
        """Check if neither field is known."""
        return not self.window_title and not self.window_class

    def to_json_line(self) -> str:
        """
        Serialize to the single-line record read by the sensor consumer.

        Returns:
            String like '{ "window_title": "Firefox", "window_class": "firefox" }\\n'
        """
        title = json.dumps(self.window_title, ensure_ascii=False)
        window_class = json.dumps(self.window_class, ensure_ascii=False)
        return f'{{ "window_title": {title}, "window_class": {window_class} }}\n'

    def to_bytes(self) -> bytes:
        """Encode the JSON line for writing to the pipe."""
        return self.to_json_line().encode("utf-8")

    def to_dict(self) -> dict:
        return {"window_title": self.window_title, "window_class": self.window_class}
