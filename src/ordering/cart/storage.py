"""Cart snapshot storage (port and adapters).

The cart writes a full snapshot after every successful mutation and reads it
back once when it is loaded. Snapshots are plain JSON-compatible dicts::

    {"owner_id": ..., "items": [...], "max_total_weight": 10, "max_distinct_items": 2}
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path


class CartStore(ABC):
    """Where a device keeps its cart between sessions."""

    @abstractmethod
    def load(self) -> dict | None:
        """Return the stored snapshot, or ``None`` when nothing is stored.

        May raise ``ValueError`` when the stored data cannot be decoded.
        """
        ...

    @abstractmethod
    def save(self, snapshot: dict) -> None: ...

    @abstractmethod
    def delete(self) -> None: ...


class MemoryCartStore(CartStore):
    """Keeps the snapshot in process memory (tests, server-side sessions)."""

    def __init__(self, snapshot: dict | None = None) -> None:
        self.snapshot = snapshot
        self.saves = 0

    def load(self) -> dict | None:
        return self.snapshot

    def save(self, snapshot: dict) -> None:
        self.snapshot = json.loads(json.dumps(snapshot))
        self.saves += 1

    def delete(self) -> None:
        self.snapshot = None


class JsonFileCartStore(CartStore):
    """One JSON file per device under ``directory``."""

    def __init__(self, directory: str | Path, device_id: str) -> None:
        self.path = Path(directory) / f"{device_id}.json"

    def load(self) -> dict | None:
        if not self.path.exists():
            return None
        snapshot = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(snapshot, dict):
            raise ValueError(f"Cart snapshot in {self.path} is not an object")
        return snapshot

    def save(self, snapshot: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
