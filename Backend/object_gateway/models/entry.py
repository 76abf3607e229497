from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Entry(BaseModel):
    """
    Represents a single object or virtual directory under a listed prefix.
    """
    name: str  # Full key or common prefix as returned by storage (e.g. "photos/2020/")
    is_dir: bool  # True for common prefixes, False for real objects
    size: Optional[int] = None  # Object size in bytes (None for directories)
    last_modified: Optional[datetime] = None  # Object modification time (None for directories)
