"""Durable storage port for the cart, with file and in-memory adapters.

The file adapter keeps the same envelope the browser storefront persisted:

    {"cart-storage": {"state": {"items": [...]}, "version": 0}}
"""

import contextlib
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from shared.config import CART_STORAGE_KEY

logger = structlog.get_logger(__name__)

STORAGE_VERSION = 0


class CartStorageError(Exception):
    """Raised when the stored cart cannot be read or written."""


class CartStorage(ABC):
    @abstractmethod
    def load(self) -> list[dict]:
        """Return the persisted lines, or an empty list when nothing is stored."""

    @abstractmethod
    def save(self, items: list[dict]) -> None:
        """Persist the full set of lines, replacing whatever was stored."""


class JsonFileCartStorage(CartStorage):
    def __init__(self, path: Path | str, key: str = CART_STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise CartStorageError(f"Unreadable cart file {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise CartStorageError(f"Unexpected cart file layout in {self.path}")
        return document

    def load(self) -> list[dict]:
        entry = self._read_document().get(self.key)
        if not entry:
            return []
        if not isinstance(entry, dict) or not isinstance(entry.get("state") or {}, dict):
            raise CartStorageError(f"Stored cart under '{self.key}' is not an object")
        items = (entry.get("state") or {}).get("items") or []
        if not isinstance(items, list):
            raise CartStorageError(f"Stored cart under '{self.key}' is not a list")
        return items

    def save(self, items: list[dict]) -> None:
        try:
            document = self._read_document()
        except CartStorageError:
            logger.warning("Overwriting unreadable cart file", path=str(self.path))
            document = {}
        document[self.key] = {"state": {"items": items}, "version": STORAGE_VERSION}

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise CartStorageError(f"Could not write cart file {self.path}: {exc}") from exc


class InMemoryCartStorage(CartStorage):
    """Test double. Records every save and can be told to fail."""

    def __init__(self, items: list[dict] | None = None) -> None:
        self.items: list[dict] = [dict(i) for i in items or []]
        self.saves: list[list[dict]] = []
        self.should_fail = False
        self.fail_on_load = False

    def configure(self, should_fail: bool = False, fail_on_load: bool = False) -> None:
        self.should_fail = should_fail
        self.fail_on_load = fail_on_load

    def load(self) -> list[dict]:
        if self.fail_on_load:
            raise CartStorageError("Simulated load failure")
        return [dict(i) for i in self.items]

    def save(self, items: list[dict]) -> None:
        if self.should_fail:
            raise CartStorageError("Simulated save failure")
        self.items = [dict(i) for i in items]
        self.saves.append(self.items)
