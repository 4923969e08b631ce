"""Rich console handler for tagbridge log records.

Where: src/tagbridge/platform/logging/handlers.py
What: Render structured tag, artwork, remote, and reconciliation events.
Why: Keep console output scannable while the file log stays plain text.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class TagBridgeRichHandler(RichHandler):
    """Rich handler that styles records carrying a ``tag_event`` attribute."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "tags.read": ("📖", "blue"),
        "tags.write": ("✏️", "green"),
        "tags.write.partial": ("⚠️", "yellow"),
        "artwork.write": ("🖼️", "magenta"),
        "remote.request": ("🌐", "cyan"),
        "remote.retry": ("🔁", "yellow"),
        "remote.timeout": ("⏱️", "red"),
        "reconcile.applied": ("✅", "green"),
        "reconcile.manual": ("🧩", "yellow"),
        "reconcile.cancelled": ("⏹️", "yellow"),
    }
    _EVENT_PREFIXES: ClassVar[dict[str, str]] = {
        "tags.read": "Read tags ",
        "tags.write": "Wrote tags ",
        "tags.write.partial": "Partially wrote tags ",
        "artwork.write": "Updated cover ",
        "remote.request": "Request ",
        "remote.retry": "Retrying ",
        "remote.timeout": "Timed out ",
        "reconcile.applied": "Applied release ",
        "reconcile.manual": "Manual match needed ",
        "reconcile.cancelled": "Cancelled ",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 3

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    @staticmethod
    def _to_pure_path(raw_path: str) -> PurePath:
        if "\\" in raw_path:
            return PureWindowsPath(raw_path)
        return PurePosixPath(raw_path)

    def _format_path(self, raw_path: str) -> Text:
        """Render the trailing path segments with dimmed separators."""

        path = self._to_pure_path(raw_path)
        separator = "\\" if isinstance(path, PureWindowsPath) else "/"
        parts = [part for part in path.parts if part and part != path.anchor]
        truncated = len(parts) > self._PATH_SEGMENT_LIMIT
        if truncated:
            parts = parts[-self._PATH_SEGMENT_LIMIT :]

        text = Text()
        if truncated:
            _ = text.append("…" + separator, style=Style(color="magenta"))
        elif path.anchor:
            _ = text.append(path.anchor, style=Style(color="magenta"))
        for index, part in enumerate(parts):
            if index:
                _ = text.append(separator, style=Style(color="magenta"))
            _ = text.append(part, style=Style(color="white"))
        return text

    def _render_tag_event(self, record: logging.LogRecord) -> Text | None:
        event = getattr(record, "tag_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        _ = body.append(self._EVENT_PREFIXES.get(event, f"{event} "))

        path = getattr(record, "path", None)
        if path:
            _ = body.append_text(self._format_path(str(path)))

        details: list[str] = []
        for key in (
            "release_id",
            "url",
            "attempt",
            "written",
            "failed",
            "cover_failed",
            "fields",
        ):
            value = getattr(record, key, None)
            if value is None or value == "":
                continue
            if isinstance(value, (list, tuple)):
                value = ",".join(str(item) for item in value)
            details.append(f"{key}={value}")
        if details:
            _ = body.append(" [" + ", ".join(details) + "]")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render structured events with dedicated styling, others as usual."""

        event_text = self._render_tag_event(record)
        if event_text is not None:
            return event_text
        return super().render_message(record, message)


__all__ = ["TagBridgeRichHandler"]
