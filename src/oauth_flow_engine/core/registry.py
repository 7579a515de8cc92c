"""Flow registry: loads, caches and persists flow definitions."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .definition import FlowSummary, is_present
from .errors import FlowNotFoundError, StorageError
from .storage import DirectoryFlowStore, FlowStore, is_valid_flow_id
from .validation import validate_flow

logger = logging.getLogger(__name__)

# Minimum shape a stored document needs before it is served at all
MINIMAL_FIELDS = ("id", "name", "steps")


class LoadStatus(Enum):
    """Outcome of a single load."""
    OK = "ok"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    IO_ERROR = "io_error"


@dataclass
class LoadResult:
    """Result of loading one flow definition."""
    status: LoadStatus
    flow: dict[str, Any] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK

    @classmethod
    def found(cls, flow: dict[str, Any]) -> "LoadResult":
        return cls(status=LoadStatus.OK, flow=flow)


@dataclass
class SaveResult:
    """Result of saving one flow definition."""
    success: bool
    error: str | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.error:
            result["error"] = self.error
        return result


class FlowCache:
    """Flow id -> last loaded document. No expiry; cleared wholesale."""

    def __init__(self):
        self._flows: dict[str, dict[str, Any]] = {}

    def get(self, flow_id: str) -> dict[str, Any] | None:
        return self._flows.get(flow_id)

    def put(self, flow_id: str, flow: dict[str, Any]) -> None:
        self._flows[flow_id] = flow

    def clear(self) -> None:
        self._flows.clear()

    def __contains__(self, flow_id: str) -> bool:
        return flow_id in self._flows

    def __len__(self) -> int:
        return len(self._flows)


class FlowRegistry:
    """
    Registry of flow definitions backed by a FlowStore.

    Expected failures (missing file, invalid JSON, failed validation) never
    raise; they come back as a LoadResult / SaveResult so the HTTP layer can
    pick a status code. Each registry owns its cache.

    Usage:
        registry = FlowRegistry(Path("definitions"))
        result = registry.load("device-grant-flow")
        if result.ok:
            flow = result.flow

    Documents returned by load() are the cached objects themselves; treat
    them as read-only and go through save() to change a definition.
    """

    def __init__(
        self,
        definitions_dir: Path | str | None = None,
        *,
        store: FlowStore | None = None,
    ):
        if store is None:
            if definitions_dir is None:
                raise ValueError("FlowRegistry needs a definitions directory or a store")
            store = DirectoryFlowStore(definitions_dir)
        self.store = store
        self.cache = FlowCache()

    def load(self, flow_id: str, reload: bool = False) -> LoadResult:
        """
        Load a single flow definition by id.

        Args:
            flow_id: Flow identifier (file stem, e.g. "device-grant-flow")
            reload: Bypass the cache and read from the store
        """
        if not reload:
            cached = self.cache.get(flow_id)
            if cached is not None:
                return LoadResult.found(cached)

        if not is_valid_flow_id(flow_id):
            logger.warning("Flow definition not found: %r", flow_id)
            return LoadResult(status=LoadStatus.NOT_FOUND, error="Flow not found")

        try:
            content = self.store.read(flow_id)
        except FlowNotFoundError:
            logger.warning("Flow definition not found: %s", flow_id)
            return LoadResult(status=LoadStatus.NOT_FOUND, error="Flow not found")
        except (StorageError, OSError) as e:
            logger.error("Error loading flow %s: %s", flow_id, e, exc_info=True)
            return LoadResult(status=LoadStatus.IO_ERROR, error="Failed to load flow")

        try:
            flow = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in flow definition %s: %s", flow_id, e)
            return LoadResult(status=LoadStatus.MALFORMED, error=f"Invalid flow JSON: {e}")

        if not isinstance(flow, dict) or not all(is_present(flow.get(key)) for key in MINIMAL_FIELDS):
            logger.warning("Invalid flow definition: %s - missing required fields", flow_id)
            return LoadResult(
                status=LoadStatus.MALFORMED,
                error="Flow definition is missing required fields (id, name, steps)",
            )

        self.cache.put(flow_id, flow)
        return LoadResult.found(flow)

    def load_all(self) -> list[dict[str, Any]]:
        """Load every stored definition, skipping the ones that fail to load."""
        try:
            flow_ids = self.store.list_ids()
        except (StorageError, OSError) as e:
            logger.error("Error loading flows from %s: %s", self.store.describe(), e)
            return []

        flows = []
        for flow_id in flow_ids:
            result = self.load(flow_id)
            if result.ok:
                flows.append(result.flow)
        return flows

    def summaries(self) -> list[FlowSummary]:
        """Display metadata for every loadable flow (no steps, no fields)."""
        return [FlowSummary.from_flow(flow) for flow in self.load_all()]

    def save(self, flow_id: str, flow_data: Any) -> SaveResult:
        """
        Validate and persist a full flow definition, replacing any previous one.

        The whole document is written; there are no partial updates.
        """
        report = validate_flow(flow_data)
        if not report.valid:
            return SaveResult(
                success=False,
                error=f"Invalid flow: {', '.join(report.errors)}",
                errors=report.errors,
            )

        if flow_data.get("id") != flow_id:
            return SaveResult(success=False, error="Flow ID in data does not match the requested ID")

        document = copy.deepcopy(flow_data)
        try:
            self.store.write(flow_id, json.dumps(document, indent=2, ensure_ascii=False) + "\n")
        except (StorageError, OSError) as e:
            logger.error("Error saving flow %s: %s", flow_id, e)
            return SaveResult(success=False, error=str(e))

        self.cache.put(flow_id, document)
        logger.info("Saved flow %s to %s", flow_id, self.store.describe())
        return SaveResult(success=True)

    def clear_cache(self) -> None:
        """Drop all cached definitions; the next load of any id reads the store."""
        self.cache.clear()
        logger.info("Flow cache cleared")

    def get_cached(self, flow_id: str) -> dict[str, Any] | None:
        """Return the cached definition without touching the store."""
        return self.cache.get(flow_id)
