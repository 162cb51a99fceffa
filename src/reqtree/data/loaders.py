"""
JSON document loaders for reqtree.

Reads and writes condition documents and reference data with orjson.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import orjson

from ..conditions.data_sources import DataSourceSnapshot
from ..conditions.models import CanonicalFragment
from ..conditions.node import ConditionNode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DocumentError(Exception):
    """A document could not be read, parsed or written."""

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def load_json(path: PathLike) -> Any:
    """Parse a JSON file."""
    path = Path(path)
    try:
        with path.open("rb") as f:  # orjson works with bytes
            data = orjson.loads(f.read())
    except OSError as e:
        raise DocumentError(path, f"cannot read file ({e.strerror or e})") from e
    except orjson.JSONDecodeError as e:
        raise DocumentError(path, f"invalid JSON ({e})") from e
    logger.debug(f"Loaded JSON from {path}")
    return data


def save_json(path: PathLike, data: Any) -> Path:
    """Write data as indented JSON, creating parent directories."""
    path = Path(path)
    try:
        payload = orjson.dumps(data, option=orjson.OPT_INDENT_2)
    except TypeError as e:
        raise DocumentError(path, f"cannot encode document ({e})") from e
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.write(payload)
            f.write(b"\n")
    except OSError as e:
        raise DocumentError(path, f"cannot write file ({e.strerror or e})") from e
    logger.debug(f"Saved JSON to {path}")
    return path


def load_reference_data(path: PathLike) -> DataSourceSnapshot:
    """Load a reference data file into a snapshot."""
    data = load_json(path)
    if not isinstance(data, Mapping):
        raise DocumentError(path, "reference data must be a JSON object")
    try:
        snapshot = DataSourceSnapshot.from_dict(data)
    except (KeyError, ValueError, TypeError) as e:
        raise DocumentError(path, f"malformed reference data ({e!r})") from e
    logger.info(
        f"Reference data loaded from {path}: {len(snapshot.items)} items, "
        f"{len(snapshot.events)} events, {len(snapshot.tech_names())} techniques, "
        f"{len(snapshot.room_nodes)} room nodes"
    )
    return snapshot


def unwrap_requires(document: Any) -> CanonicalFragment:
    """Condition fragment of a document that is a bare fragment or {"requires": ...}.

    A one element requires list is unwrapped; longer lists are an implicit and.
    """
    if isinstance(document, Mapping) and "requires" in document:
        requires = document["requires"]
        if isinstance(requires, list):
            if not requires:
                return None
            if len(requires) == 1:
                return requires[0]
            return {"and": requires}
        return requires
    return document


def load_condition(path: PathLike) -> CanonicalFragment:
    """Read the condition fragment of a document."""
    return unwrap_requires(load_json(path))


def save_condition(
    path: PathLike, node: Optional[ConditionNode], wrap_requires: bool = False
) -> Path:
    """Write the canonical value of node (null when vacuous)."""
    value = node.to_canonical() if node is not None else None
    if wrap_requires:
        return save_json(path, {"requires": [] if value is None else [value]})
    return save_json(path, value)
