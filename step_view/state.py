"""State management for the browsing session."""
from dataclasses import dataclass, field
from typing import Optional, List
from pathlib import Path


def normalize_index(length: int, index: int) -> int:
    """
    Wrap an out-of-range index around the ends of a list.

    Args:
        length: Length of the list
        index: Candidate index, possibly one step outside [0, length)

    Returns:
        0 if index runs past the end, length - 1 if it runs before the start,
        otherwise index unchanged
    """
    if index >= length:
        return 0
    if index < 0:
        return length - 1
    return index


@dataclass
class GalleryState:
    """Ordered list of image files and the cursor over it."""
    files: List[Path] = field(default_factory=list)
    cursor: int = 0
    edits_written: int = 0
    files_deleted: int = 0

    def __len__(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files

    def current_path(self) -> Optional[Path]:
        """Get the path under the cursor."""
        if 0 <= self.cursor < len(self.files):
            return self.files[self.cursor]
        return None

    def advance(self, delta: int) -> bool:
        """
        Step the cursor with wrap-around at both ends.

        Args:
            delta: 1 = next, -1 = previous

        Returns:
            True if the cursor moved
        """
        if self.is_empty or delta not in (1, -1):
            return False
        self.cursor = normalize_index(len(self.files), self.cursor + delta)
        return True

    def remove_current(self) -> Path:
        """
        Drop the entry under the cursor from the list.

        The following entry slides into the cursor slot; removing the last
        entry moves the cursor back to the new last one.

        Returns:
            The removed path

        Raises:
            IndexError: If the list is empty
        """
        if self.is_empty:
            raise IndexError("remove_current on an empty gallery")
        removed = self.files.pop(self.cursor)
        if self.cursor >= len(self.files):
            self.cursor = max(0, len(self.files) - 1)
        return removed

    def mark_edited(self) -> None:
        self.edits_written += 1

    def mark_deleted(self) -> None:
        self.files_deleted += 1
