"""
Level library over a key-value backend.

Each level is kept as canonical JSON under "<namespace>:<id>". The backend
only has to provide get/set/remove/keys; which storage sits behind it is
up to the caller.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Protocol, Union

from levelcode.config import Config
from levelcode.document import InternalRecord, LevelDocument, LevelSource
from levelcode.errors import LevelCodecError
from levelcode.transcoder import parse, serialize

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...


class MemoryStore:
    """Dict-backed KeyValueStore for a single process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


def new_level_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class LevelSummary:
    id: str
    name: str
    width: int
    height: int
    updated_at: Optional[int]


class LevelLibrary:
    """
    Saves and loads levels as canonical JSON in a namespaced key space.
    """

    def __init__(self, backend: KeyValueStore, *, namespace: str = Config.STORAGE_NAMESPACE) -> None:
        self._backend = backend
        self._prefix = f"{namespace}:"

    def _key(self, level_id: str) -> str:
        return self._prefix + level_id

    def save(self, source: Union[LevelSource, InternalRecord, LevelDocument]) -> LevelDocument:
        """
        Store a level; returns the canonical document actually stored.

        The name is trimmed, falling back to Config.UNTITLED_NAME. A level
        with an empty id is new and gets a fresh one.
        """
        level = LevelSource.of(source).value
        changes = {"name": level.name.strip() or Config.UNTITLED_NAME}
        if not level.id:
            changes["id"] = new_level_id()
        text = serialize(replace(level, **changes))
        document = parse(text)
        self._backend.set(self._key(document.id), text)
        logger.debug("Saved level %s", document.id)
        return document

    def load(self, level_id: str) -> Optional[LevelDocument]:
        """
        Load a level by id.

        Returns:
            The document, or None if no level is stored under level_id

        Raises:
            LevelImportError: if the stored text is not a readable level
        """
        text = self._backend.get(self._key(level_id))
        if text is None:
            return None
        return parse(text)

    def ids(self) -> List[str]:
        return sorted(k[len(self._prefix):] for k in self._backend.keys() if k.startswith(self._prefix))

    def list_levels(self) -> List[LevelSummary]:
        """Summaries of every readable level, most recently updated first."""
        summaries = []
        for level_id in self.ids():
            try:
                doc = self.load(level_id)
            except LevelCodecError as e:
                logger.warning("Skipping unreadable level %s: %s", level_id, e.message)
                continue
            if doc is None:
                continue
            summaries.append(LevelSummary(
                id=doc.id,
                name=doc.name,
                width=doc.grid.width,
                height=doc.grid.height,
                updated_at=doc.updated_at,
            ))
        return sorted(summaries, key=lambda s: s.updated_at or 0, reverse=True)

    def delete(self, level_id: str) -> None:
        self._backend.remove(self._key(level_id))

    def clear(self) -> None:
        """Remove every level in this namespace, leaving other keys alone."""
        for level_id in self.ids():
            self.delete(level_id)
