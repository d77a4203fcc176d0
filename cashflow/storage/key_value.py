"""Mini README: Key-value persistence backends for the ledger snapshot.

Structure:
    * KeyValueStore - protocol the ledger depends on (``get``/``set`` of text blobs).
    * InMemoryStore - dictionary-backed store for tests and ephemeral sessions.
    * JsonFileStore - one ``<key>.json`` document per key inside a directory.

The ledger writes its entire snapshot under a single key after every
mutation, mirroring how the browser build used local storage. Stores hold
opaque text, so encoding the snapshot stays with the ledger.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Minimal text store keyed by name."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStore:
    """Keep blobs in a dictionary; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Persist each key as a JSON document inside ``root_dir``."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Unsupported storage key: {key!r}")
        return self.root_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            LOGGER.debug("No stored document for key '%s' at %s", key, path)
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Write via a temporary file so readers never see a half-written blob."""

        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)
        LOGGER.debug("Stored %s bytes under key '%s'", len(value), key)
