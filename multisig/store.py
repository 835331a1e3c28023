"""
Key-value stores backing the multisig state

Every engine operation runs inside a single ``atomic()`` block: writes are
buffered and only become visible once the block exits cleanly.
"""

import copy
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)

_MISSING = object()


class AuthorityStore:
    """Abstract key-value store with all-or-nothing write batches"""

    def get(self, key: str, default: Any = None) -> Any:
        """Value stored under key, or default when absent"""
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key"""
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    @contextmanager
    def atomic(self) -> Iterator["AuthorityStore"]:
        """Group writes so they are committed together or not at all"""
        yield self


class MemoryStore(AuthorityStore):
    """Dict backed store; values are deep-copied on the way in and out"""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(data) if data else {}
        self._pending: Optional[Dict[str, Any]] = None
        self._depth = 0

    def get(self, key: str, default: Any = None) -> Any:
        if self._pending is not None and key in self._pending:
            return copy.deepcopy(self._pending[key])
        if key in self._data:
            return copy.deepcopy(self._data[key])
        return default

    def set(self, key: str, value: Any) -> None:
        if self._pending is not None:
            self._pending[key] = copy.deepcopy(value)
        else:
            self._commit({key: copy.deepcopy(value)})

    @contextmanager
    def atomic(self) -> Iterator["MemoryStore"]:
        # Nested blocks join the outermost batch
        if self._depth == 0:
            self._pending = {}
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                self._pending = None
            raise
        self._depth -= 1
        if self._depth == 0:
            pending, self._pending = self._pending, None
            if pending:
                self._commit(pending)

    def _commit(self, changes: Dict[str, Any]) -> None:
        merged = dict(self._data)
        merged.update(changes)
        self._persist(merged)
        self._data = merged
        logger.debug("Committed %d key(s): %s", len(changes), sorted(changes))

    def _persist(self, data: Dict[str, Any]) -> None:
        pass

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the committed state"""
        return copy.deepcopy(self._data)


class JsonFileStore(MemoryStore):
    """Memory store that persists every committed batch to a JSON file"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(self._load(path))

    @staticmethod
    def _load(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read store file {path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store file {path} does not hold a JSON object")
        return data

    def _persist(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".multisig-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, sort_keys=True)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreError(f"Could not write store file {self.path}: {e}") from e
