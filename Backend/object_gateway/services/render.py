import html
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from urllib.parse import quote

from object_gateway.core.errors import RenderError, StorageError
from object_gateway.models.entry import Entry

# Unit prefixes for decimal (SI) byte sizes: kB, MB, GB...
SIZE_UNITS = "kMGTPE"

# Spaces inserted between two aligned columns
COLUMN_PADDING = 1


def humanize_bytes(size: int) -> str:
    """
    Format a byte count with decimal units.

    Examples:
        999 -> "999 B", 1500 -> "1.50 kB", 1_000_000_000_000 -> "1.00 TB"
    """
    unit = 1000
    if size < unit:
        return f"{size} B"

    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.2f} {SIZE_UNITS[exp]}B"


def format_timestamp(value: Optional[datetime]) -> str:
    """
    RFC 3339 with second precision; UTC is written as "Z".
    """
    if value is None:
        return ""
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


def parent_path(path: str) -> str:
    """
    Drop the final segment of a directory path: "/a/b/" -> "/a/", "/a/" -> "/".
    """
    trimmed = path[:-1] if path.endswith("/") else path
    return trimmed[:trimmed.rfind("/") + 1] or "/"


def anchor(href: str, text: str) -> str:
    return f'<a href="{html.escape(href)}">{html.escape(text)}</a>'


class ListingRenderer:
    """
    Turns a list of entries into the HTML page served for a directory path.

    `link_for(key)` must return a temporary URL for an object key; it is called
    once per object on every render.
    """

    def __init__(self, link_for: Callable[[str], str]):
        self.link_for = link_for

    def render(self, request_path: str, entries: List[Entry]) -> str:
        """
        Render a directory listing.

        Args:
            request_path (str): The path being browsed, e.g. "/photos/".
            entries (List[Entry]): Everything found under that prefix.

        Returns:
            str: The HTML body.

        Raises:
            RenderError: If a link cannot be generated for one of the objects.
        """
        # 1. Plain lexicographic order, directories and files mixed
        entries = sorted(entries, key=lambda e: e.name)

        # 2. Build the text columns of every row first so widths can be computed
        rows = []
        for entry in entries:
            if entry.is_dir:
                rows.append((entry, []))
            else:
                rows.append((entry, [format_timestamp(entry.last_modified), humanize_bytes(entry.size or 0)]))

        name_width = max((len(e.name) for e, _ in rows), default=0) + COLUMN_PADDING
        date_width = max((len(cells[0]) for _, cells in rows if cells), default=0) + COLUMN_PADDING

        # 3. Header and "up one level" link
        lines = ["<pre>", html.escape(request_path), ""]
        if request_path != "/":
            lines.append(anchor(parent_path(request_path), ".."))

        # 4. One line per entry, the link is bound to the row's own name cell
        for entry, cells in rows:
            link = self._link(entry)
            if not cells:
                # Directory rows end at the name, trailing column padding is left out
                lines.append(anchor(link, entry.name))
                continue
            modified, size = cells
            padding = " " * (name_width - len(entry.name))
            lines.append(anchor(link, entry.name) + padding + modified.ljust(date_width) + size)

        return "\n".join(lines) + "\n\n</pre>\n"

    def _link(self, entry: Entry) -> str:
        if entry.is_dir:
            return "/" + quote(entry.name)
        try:
            return self.link_for(entry.name)
        except StorageError as e:
            raise RenderError(f"error getting presigned link for {entry.name}: {e}") from e
