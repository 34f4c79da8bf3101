"""
JSON-backed identifier sets.

Each set is stored as::

    {"lastUpdated": "<iso timestamp>", "count": 3, "<field>": ["id", ...]}

and rewritten in full on every change. Read and write failures are
logged; the in-memory set keeps working either way.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from loguru import logger


GROUP_SUFFIX = "@g.us"
PRIVATE_SUFFIXES = ("@s.whatsapp.net", "@lid")


class PersistentIdSet:
    """An append-mostly set of identifiers persisted to a JSON file."""

    def __init__(self, path: Path, field: str):
        """
        Args:
            path: JSON file location.
            field: Name of the list field inside the file ("chats", "users").
        """
        self.path = path
        self.field = field
        self._ids: set[str] = self._load()

    def _load(self) -> set[str]:
        """Load identifiers from storage."""
        if not self.path.exists():
            return set()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            items = data.get(self.field)
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Error loading {self.path.name}: {e}")
            return set()

        if not isinstance(items, list):
            if items is not None:
                logger.warning(f"Ignoring non-list {self.field!r} in {self.path.name}")
            return set()
        return {str(item) for item in items}

    def save(self) -> bool:
        """Write the full set to storage. Returns False on failure."""
        data = {
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "count": len(self._ids),
            self.field: sorted(self._ids),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            return True
        except OSError as e:
            logger.error(f"Error saving {self.path.name}: {e}")
            return False

    def add(self, item: str) -> bool:
        """Add an identifier. Returns True if it was new."""
        if item in self._ids:
            return False
        self._ids.add(item)
        self.save()
        return True

    def remove(self, item: str) -> bool:
        """Remove an identifier. Returns True if it was present."""
        if item not in self._ids:
            return False
        self._ids.discard(item)
        self.save()
        return True

    def __contains__(self, item: object) -> bool:
        return item in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))


class TrackedChats(PersistentIdSet):
    """Chats the bot has received messages from, used for broadcasts."""

    def __init__(self, data_dir: Path):
        super().__init__(data_dir / "chats.json", "chats")

    def stats(self) -> dict[str, Any]:
        """Count chats by kind."""
        chats = list(self._ids)
        return {
            "total": len(chats),
            "groups": sum(1 for c in chats if c.endswith(GROUP_SUFFIX)),
            "private": sum(1 for c in chats if c.endswith(PRIVATE_SUFFIXES)),
        }


class SeenUsers(PersistentIdSet):
    """Users that already received the first-contact welcome."""

    def __init__(self, data_dir: Path):
        super().__init__(data_dir / "seenUsers.json", "users")

    def mark_seen(self, user_id: str) -> bool:
        """Mark a user as seen. Returns True on first contact."""
        return self.add(user_id)
