"""Snapshot loading for the progress insights engine.

A snapshot is one user's complete record set, exported from the tracker as
JSON (the REST API's camelCase payloads) or written by hand as YAML. Loading
turns it into a :class:`UserSnapshot` of typed domain records.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

import yaml

from .domain import Activity, Goal, Note, ProgressEntry, TimeSession, Todo, UserSnapshot
from .utils.validation import RecordValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

YAML_SUFFIXES = (".yaml", ".yml")

# (snapshot attribute, accepted keys, record factory)
COLLECTIONS: Tuple[Tuple[str, Tuple[str, ...], Callable[..., Any]], ...] = (
    ("goals", ("goals",), Goal.from_dict),
    ("activities", ("activities",), Activity.from_dict),
    ("todos", ("todos",), Todo.from_dict),
    ("notes", ("notes",), Note.from_dict),
    ("progress_entries", ("progress_entries", "progressEntries"), ProgressEntry.from_dict),
    ("time_sessions", ("time_sessions", "timeSessions"), TimeSession.from_dict),
)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or has the wrong shape."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


def read_snapshot_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Parse a snapshot file into a mapping, choosing YAML or JSON by suffix."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}", path) from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"Snapshot {path} is not valid {_format_name(path)}: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {path} must contain a mapping, got {type(data).__name__}", path)
    return data


def _format_name(path: Path) -> str:
    return "YAML" if path.suffix.lower() in YAML_SUFFIXES else "JSON"


def _collection(data: Dict[str, Any], keys: Tuple[str, ...]) -> List[Any]:
    for key in keys:
        if key in data and data[key] is not None:
            items = data[key]
            if not isinstance(items, list):
                raise SnapshotError(f"Snapshot key '{key}' must be a list, got {type(items).__name__}")
            return items
    return []


def _build_records(items: List[Any], factory: Callable[..., T], strict: bool) -> List[T]:
    records = []
    for index, item in enumerate(items):
        try:
            records.append(factory(item, strict=strict))
        except RecordValidationError as e:
            raise RecordValidationError(
                f"{e} (record #{index})", e.record_type, e.field_name, e.value, e.suggestions,
            ) from e
    return records


def snapshot_from_dict(data: Dict[str, Any], strict: bool = False) -> UserSnapshot:
    """Build a snapshot from an already-parsed mapping."""
    collections = {
        attribute: _build_records(_collection(data, keys), factory, strict)
        for attribute, keys, factory in COLLECTIONS
    }
    return UserSnapshot(**collections)


def load_snapshot(path: Union[str, Path], strict: bool = False) -> UserSnapshot:
    """Load a snapshot file.

    Args:
        path: JSON or YAML snapshot file
        strict: Raise on malformed optional fields instead of dropping them

    Raises:
        SnapshotError: If the file is unreadable or not a mapping of lists
        RecordValidationError: If a record lacks a required field
    """
    path = Path(path)
    data = read_snapshot_file(path)
    try:
        snapshot = snapshot_from_dict(data, strict)
    except SnapshotError as e:
        raise SnapshotError(f"{e} in {path}", path) from e

    logger.info("Loaded snapshot %s: %s", path,
                ", ".join(f"{count} {name}" for name, count in snapshot.counts().items()))
    return snapshot
