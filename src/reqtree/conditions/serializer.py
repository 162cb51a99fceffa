"""
Canonical serialization and validation of condition trees.

to_canonical() and is_valid() share one recursion so a node is valid exactly
when it would contribute a value to the saved document. Incomplete or failing
nodes contribute nothing; errors never propagate to the parent.
"""

import logging
from typing import TYPE_CHECKING, Any, FrozenSet, Iterable, List, Optional, Union

from .models import EMPTY_KIND, CanonicalFragment, kind_info

if TYPE_CHECKING:
    from .node import ConditionNode, DepthExceededNode

    AnyNode = Union[ConditionNode, DepthExceededNode]

logger = logging.getLogger(__name__)

# Kinds whose canonical payload is an empty object
EMPTY_PAYLOAD_KINDS: FrozenSet[str] = frozenset(
    ("free", "never", "gainFlashSuit", "useFlashSuit", "noFlashSuit", "autoReserveTrigger")
)


def to_canonical(node: "AnyNode") -> CanonicalFragment:
    """Canonical fragment for node, or None when it is vacuous or incomplete."""
    if node.is_placeholder or node.removed:
        return None

    kind = node.kind
    if kind == EMPTY_KIND:
        return None

    if kind in ("and", "or"):
        values = [value for value in map(to_canonical, node.children) if value is not None]
        return {kind: values} if values else None

    if kind == "not":
        # extra children under not are an editing allowance and never saved
        if not node.children:
            return None
        value = to_canonical(node.children[0])
        return None if value is None else {"not": value}

    try:
        return node.handler.extract_value(node, kind)
    except Exception:
        logger.exception(f"Failed to serialize '{kind}' condition")
        return None


def is_valid(node: "AnyNode") -> bool:
    """Whether node is vacuous by choice or serializes to a value."""
    if node.is_placeholder or node.kind == EMPTY_KIND:
        return True
    return to_canonical(node) is not None


def describe(node: "AnyNode") -> str:
    """Human readable one-line summary of a subtree."""
    if node.is_placeholder or node.kind == EMPTY_KIND:
        return "No condition"

    kind = node.kind
    if kind in ("and", "or"):
        parts = [describe(child) for child in node.children if to_canonical(child) is not None]
        if not parts:
            return "No condition"
        if len(parts) == 1:
            return parts[0]
        return "(" + f" {kind.upper()} ".join(parts) + ")"

    if kind == "not":
        if not node.children or to_canonical(node.children[0]) is None:
            return "No condition"
        return f"NOT ({describe(node.children[0])})"

    try:
        return node.handler.describe(node, kind)
    except Exception:
        logger.exception(f"Failed to describe '{kind}' condition")
        return kind_info(kind).label


def prune(value: Any, keep_empty: Iterable[str] = EMPTY_PAYLOAD_KINDS) -> Any:
    """Recursively drop None, empty lists and empty objects.

    An empty object stays when it is the payload of a kind in keep_empty,
    e.g. {"free": {}}.
    """
    keep = frozenset(keep_empty)
    if isinstance(value, dict):
        result = {}
        for key, inner in value.items():
            pruned = prune(inner, keep)
            if pruned is None or pruned == []:
                continue
            if pruned == {} and key not in keep:
                continue
            result[key] = pruned
        return result
    if isinstance(value, (list, tuple)):
        items: List[Any] = []
        for inner in value:
            pruned = prune(inner, keep)
            if pruned is None or pruned == [] or pruned == {}:
                continue
            items.append(pruned)
        return items
    return value


def canonical_equal(left: Any, right: Any) -> bool:
    """Compare canonical values ignoring object key order (list order matters)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            canonical_equal(left[key], right[key]) for key in left
        )
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            canonical_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (dict, list, tuple)) or isinstance(right, (dict, list, tuple)):
        return False
    return bool(left == right)


def first_error(node: "ConditionNode") -> Optional[str]:
    """First validation message found in a subtree (pre-order), if any."""
    for current in node.walk():
        errors = current.errors()
        if errors and current.is_leaf:
            return f"{kind_info(current.kind).label}: {errors[0]}"
    return None
