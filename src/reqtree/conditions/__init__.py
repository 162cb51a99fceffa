"""
Condition engine for reqtree.

Builds editable condition trees from canonical document fragments, keeps them
in sync with shared reference data and serializes them back. Nothing in this
package depends on Qt.
"""

from .models import (
    KIND_INFO,
    MAX_DEPTH,
    CanonicalFragment,
    ConditionError,
    KindInfo,
    kind_info,
    selectable_kinds,
)
from .fields import FieldSpec, build_record, validate_record
from .data_sources import DataSourceBus, DataSourceSnapshot, EnemyGroup, NamedRef, RoomNode
from .handlers import DefaultHandler, HandlerRegistry, LeafHandler
from .leaves import default_registry, shared_registry
from .node import ConditionNode, DepthExceededNode, build_tree, normalize_fragment
from .serializer import canonical_equal, describe, is_valid, prune, to_canonical
from .transitions import (
    EntranceCondition,
    ExitCondition,
    TransitionCondition,
    UnknownTransitionKind,
)

__all__ = [
    # Metadata
    "KIND_INFO",
    "MAX_DEPTH",
    "CanonicalFragment",
    "KindInfo",
    "kind_info",
    "selectable_kinds",
    # Errors
    "ConditionError",
    "UnknownTransitionKind",
    # Fields
    "FieldSpec",
    "build_record",
    "validate_record",
    # Data sources
    "DataSourceBus",
    "DataSourceSnapshot",
    "NamedRef",
    "RoomNode",
    "EnemyGroup",
    # Handlers
    "LeafHandler",
    "DefaultHandler",
    "HandlerRegistry",
    "default_registry",
    "shared_registry",
    # Tree
    "ConditionNode",
    "DepthExceededNode",
    "build_tree",
    "normalize_fragment",
    # Serialization
    "to_canonical",
    "is_valid",
    "describe",
    "prune",
    "canonical_equal",
    # Transitions
    "TransitionCondition",
    "EntranceCondition",
    "ExitCondition",
]
