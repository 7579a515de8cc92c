"""Backing stores for flow definition documents.

Two modes mirror how the simulator is deployed:

- DirectoryFlowStore: one ``{id}.json`` file per flow in a definitions
  directory (local server mode).
- MemoryFlowStore: documents kept in process memory, optionally seeded from a
  directory (demo deployments without a writable filesystem).

Stores deal in raw JSON text. Parsing, validation and caching belong to the
registry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .errors import FlowNotFoundError, StorageError

logger = logging.getLogger(__name__)

DEFINITION_SUFFIX = ".json"


def is_valid_flow_id(flow_id: str) -> bool:
    """A flow id must be a bare file stem: no separators, no leading dot."""
    if not flow_id or not isinstance(flow_id, str):
        return False
    if flow_id.startswith(".") or "/" in flow_id or "\\" in flow_id:
        return False
    return Path(flow_id).name == flow_id


class FlowStore(ABC):
    """Abstract store of flow definition documents keyed by flow id."""

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Return the ids of all stored definitions, sorted."""
        ...

    @abstractmethod
    def read(self, flow_id: str) -> str:
        """
        Return the stored JSON text for a flow.

        Raises:
            FlowNotFoundError: No document exists for this id
            StorageError: The document exists but could not be read
        """
        ...

    @abstractmethod
    def write(self, flow_id: str, text: str) -> None:
        """
        Replace the stored JSON text for a flow.

        Raises:
            StorageError: The document could not be written
        """
        ...

    def describe(self) -> str:
        return type(self).__name__


class DirectoryFlowStore(FlowStore):
    """Flat directory of ``{id}.json`` files."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _file_for(self, flow_id: str) -> Path:
        return self.path / f"{flow_id}{DEFINITION_SUFFIX}"

    def list_ids(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            return sorted(f.stem for f in self.path.glob(f"*{DEFINITION_SUFFIX}") if f.is_file())
        except OSError as e:
            raise StorageError(f"Cannot list definitions in {self.path}: {e}", cause=e) from e

    def read(self, flow_id: str) -> str:
        if not is_valid_flow_id(flow_id):
            raise FlowNotFoundError(flow_id)
        try:
            return self._file_for(flow_id).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FlowNotFoundError(flow_id) from None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read flow {flow_id}: {e}", flow_id=flow_id, cause=e) from e

    def write(self, flow_id: str, text: str) -> None:
        if not is_valid_flow_id(flow_id):
            raise StorageError(f"Invalid flow id: {flow_id!r}", flow_id=flow_id)
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            self._file_for(flow_id).write_text(text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write flow {flow_id}: {e}", flow_id=flow_id, cause=e) from e

    def describe(self) -> str:
        return f"directory {self.path}"


class MemoryFlowStore(FlowStore):
    """In-process store; contents are lost when the process exits."""

    def __init__(self, documents: dict[str, str] | None = None):
        self._documents: dict[str, str] = dict(documents or {})

    @classmethod
    def seeded_from(cls, path: Path | str) -> "MemoryFlowStore":
        """Create a store pre-loaded with every ``*.json`` file in a directory."""
        path = Path(path)
        documents = {}
        if path.exists():
            for f in sorted(path.glob(f"*{DEFINITION_SUFFIX}")):
                try:
                    documents[f.stem] = f.read_text(encoding="utf-8")
                except OSError as e:
                    logger.warning("Skipping seed definition %s: %s", f, e)
        return cls(documents)

    def list_ids(self) -> list[str]:
        return sorted(self._documents)

    def read(self, flow_id: str) -> str:
        try:
            return self._documents[flow_id]
        except KeyError:
            raise FlowNotFoundError(flow_id) from None

    def write(self, flow_id: str, text: str) -> None:
        if not is_valid_flow_id(flow_id):
            raise StorageError(f"Invalid flow id: {flow_id!r}", flow_id=flow_id)
        self._documents[flow_id] = text

    def describe(self) -> str:
        return f"memory ({len(self._documents)} definitions)"
