"""
Condition tree nodes for reqtree.

A ConditionNode holds a kind tag plus either child nodes (and/or/not) or a
leaf state dict owned by the kind's LeafHandler. Every node subscribes to the
DataSourceBus when it is built and releases the subscription when it (or an
ancestor) is removed.
"""

import logging
import weakref
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from . import serializer
from .data_sources import DataSourceBus, DataSourceSnapshot
from .fields import FieldSpec
from .handlers import HandlerRegistry, LeafHandler
from .leaves import shared_registry
from .models import (
    EMPTY_KIND,
    MAX_DEPTH,
    CanonicalFragment,
    ConditionError,
    KindInfo,
    is_logical,
    is_sentinel,
    kind_info,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[["ConditionNode"], None]


def normalize_fragment(
    fragment: CanonicalFragment, snapshot: Optional[DataSourceSnapshot] = None
) -> Tuple[str, Any]:
    """Split a canonical fragment into (kind, payload).

    Shorthand strings are resolved the way the logic documents use them:
    "f_*" names are events, "h_*" names are helpers, known item names are
    items and everything else is taken as a technique.
    """
    if fragment is None or fragment == "" or fragment == {} or fragment == []:
        return EMPTY_KIND, None

    if isinstance(fragment, str):
        if is_sentinel(fragment):
            return fragment, {}
        if fragment.startswith("f_"):
            return "event", fragment
        if fragment.startswith("h_"):
            return "helper", fragment
        if snapshot is not None and fragment in snapshot.item_names():
            return "item", fragment
        return "tech", fragment

    if isinstance(fragment, (list, tuple)):
        return "and", list(fragment)

    if isinstance(fragment, dict):
        kind = next(iter(fragment))
        return str(kind), fragment[kind]

    logger.warning(f"Ignoring condition fragment of type {type(fragment).__name__}")
    return EMPTY_KIND, None


def _child_fragments(kind: str, payload: Any) -> List[CanonicalFragment]:
    if payload is None:
        return []
    if isinstance(payload, (list, tuple)):
        return list(payload)
    # {"not": {...}} and tolerated {"and": {...}}
    return [payload]


class ConditionNode:
    """One node of an editable condition tree."""

    is_placeholder = False

    def __init__(
        self,
        bus: DataSourceBus,
        fragment: CanonicalFragment = None,
        *,
        depth: int = 0,
        is_root: bool = False,
        parent: Optional["ConditionNode"] = None,
        registry: Optional[HandlerRegistry] = None,
        max_depth: int = MAX_DEPTH,
        on_remove: Optional[Callable[[], None]] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.bus = bus
        self.registry = registry if registry is not None else shared_registry()
        self.depth = depth
        self.is_root = is_root
        self.max_depth = max_depth
        self.collapsed = False
        self.removed = False

        self.kind: str = EMPTY_KIND
        self.info: KindInfo = kind_info(EMPTY_KIND)
        self.children: List[ConditionNode] = []
        self.leaf_state: Dict[str, Any] = {}
        self.leaf_error: Optional[str] = None

        self._parent = weakref.ref(parent) if parent is not None else None
        self._on_remove = on_remove
        self._listeners: List[ChangeListener] = []

        # Parents subscribe before their children, so bus delivery is top-down
        self._unsubscribe = bus.subscribe(self._on_data_sources_changed)

        kind, payload = normalize_fragment(fragment, bus.snapshot)
        self._build(kind, payload)

    def __repr__(self) -> str:
        return f"ConditionNode(kind={self.kind!r}, depth={self.depth}, children={len(self.children)})"

    # === PROPERTIES ===

    @property
    def parent(self) -> Optional["ConditionNode"]:
        return self._parent() if self._parent is not None else None

    @property
    def snapshot(self) -> DataSourceSnapshot:
        return self.bus.snapshot

    @property
    def handler(self) -> LeafHandler:
        return self.registry.resolve(self.kind)

    @property
    def is_leaf(self) -> bool:
        return bool(self.kind) and not is_logical(self.kind)

    @property
    def can_add_child(self) -> bool:
        return is_logical(self.kind) and self.depth < self.max_depth

    # === CONSTRUCTION ===

    def _build(self, kind: str, payload: Any) -> None:
        self.kind = kind
        self.info = kind_info(kind)
        self.leaf_state = {}
        self.leaf_error = None

        if is_logical(kind):
            for child_fragment in _child_fragments(kind, payload):
                self._append_child(child_fragment)
        elif kind:
            self._construct_leaf(payload)

    def _construct_leaf(self, payload: Any) -> None:
        try:
            self.handler.construct(self, self.kind, payload)
        except Exception:
            self.logger.exception(f"Failed to build '{self.kind}' condition")
            self.leaf_state = {}
            self.leaf_error = f"Failed to build '{self.kind}' condition"

    def _append_child(
        self,
        fragment: CanonicalFragment = None,
        on_remove: Optional[Callable[[], None]] = None,
    ) -> "ConditionNode":
        if self.depth >= self.max_depth:
            self.logger.warning(
                f"Maximum nesting depth {self.max_depth} reached, condition not added"
            )
            return DepthExceededNode(self.depth + 1)
        child = ConditionNode(
            self.bus,
            fragment,
            depth=self.depth + 1,
            parent=self,
            registry=self.registry,
            max_depth=self.max_depth,
            on_remove=on_remove,
        )
        self.children.append(child)
        return child

    # === MUTATION ===

    def set_kind(self, new_kind: str) -> None:
        """Switch kind; children and leaf state are discarded and rebuilt empty."""
        if self.removed:
            raise ConditionError("Cannot change a removed condition")
        self.logger.debug(f"Changing condition kind '{self.kind}' -> '{new_kind}'")
        for child in self.children:
            child._teardown()
        self.children = []
        self._build(new_kind, None)
        self._notify_changed()

    def add_child(
        self,
        fragment: CanonicalFragment = None,
        on_remove: Optional[Callable[[], None]] = None,
    ) -> "ConditionNode":
        """Append a child built from fragment.

        At max_depth nothing is appended and a DepthExceededNode is returned.
        """
        if not is_logical(self.kind):
            raise ConditionError(f"Condition '{self.kind or 'empty'}' cannot have sub-conditions")
        child = self._append_child(fragment, on_remove)
        if not child.is_placeholder:
            self._notify_changed()
        return child

    def remove_child(self, child: "ConditionNode") -> bool:
        """Detach child and tear down its subtree."""
        if not any(existing is child for existing in self.children):
            self.logger.warning(f"{child!r} is not a child of {self!r}")
            return False
        self.children = [existing for existing in self.children if existing is not child]
        child._teardown()
        self._notify_changed()
        return True

    def remove(self, force: bool = False) -> bool:
        """Remove this node from its parent; roots need force=True."""
        if self.removed:
            return False
        if self.is_root and not force:
            self.logger.warning("Refusing to remove the root condition")
            return False
        parent = self.parent
        if parent is not None and not parent.removed:
            return parent.remove_child(self)
        self._teardown()
        return True

    def _teardown(self) -> None:
        if self.removed:
            return
        for child in self.children:
            child._teardown()
        self.children = []
        self._unsubscribe()
        self._listeners = []
        self.removed = True
        if self._on_remove is not None:
            try:
                self._on_remove()
            except Exception:
                self.logger.exception("on_remove callback failed")

    def toggle_collapse(self) -> bool:
        self.collapsed = not self.collapsed
        return self.collapsed

    def set_leaf_field(self, name: str, value: Any) -> None:
        """Edit one field of the leaf state."""
        if not self.is_leaf:
            raise ConditionError(f"Condition '{self.kind or 'empty'}' has no fields")
        self.leaf_state[name] = value
        self._notify_changed()

    # === DATA SOURCES ===

    def _on_data_sources_changed(self, snapshot: DataSourceSnapshot) -> None:
        self.refresh_data_sources(snapshot, recursive=False)

    def refresh_data_sources(
        self, snapshot: Optional[DataSourceSnapshot] = None, recursive: bool = True
    ) -> None:
        """Rebuild data dependent leaves and re-apply what is still selectable.

        snapshot is accepted for the bus callback signature; nodes always read
        the bus' current snapshot.
        """
        if self.removed:
            return
        handler = self.handler
        if self.is_leaf and handler.uses_data_sources:
            prior = self.to_canonical()
            previous_state = self.leaf_state
            self._construct_leaf(None)
            try:
                if prior is not None:
                    handler.restore_value(self, self.kind, prior)
                handler.retain_state(self, self.kind, previous_state)
            except Exception:
                self.logger.exception(f"Failed to restore '{self.kind}' condition")
            self._notify_changed()
        if recursive:
            for child in list(self.children):
                child.refresh_data_sources(snapshot, recursive=True)

    # === SERIALIZATION ===

    def to_canonical(self) -> CanonicalFragment:
        return serializer.to_canonical(self)

    get_value = to_canonical

    def is_valid(self) -> bool:
        return serializer.is_valid(self)

    def describe(self) -> str:
        return serializer.describe(self)

    def errors(self) -> List[str]:
        """Reasons this node does not serialize (empty when it does or is vacuous)."""
        if self.removed or not self.kind:
            return []
        if is_logical(self.kind):
            return [] if self.is_valid() else ["No complete sub-condition"]
        if self.leaf_error:
            return [self.leaf_error]
        try:
            return self.handler.errors(self, self.kind)
        except Exception:
            self.logger.exception(f"Failed to validate '{self.kind}' condition")
            return [f"Failed to validate '{self.kind}' condition"]

    def field_specs(self) -> Tuple[FieldSpec, ...]:
        if not self.is_leaf:
            return ()
        return self.handler.node_specs(self, self.kind)

    def choices(self, field: str) -> List[Any]:
        return self.handler.choices(self, self.kind, field)

    # === TRAVERSAL ===

    def walk(self) -> Iterator["ConditionNode"]:
        """Pre-order iteration over this subtree."""
        yield self
        for child in self.children:
            yield from child.walk()

    def path(self) -> Tuple[int, ...]:
        """Child indices from the root down to this node."""
        indices: List[int] = []
        node = self
        parent = node.parent
        while parent is not None:
            indices.append(next(i for i, child in enumerate(parent.children) if child is node))
            node, parent = parent, parent.parent
        return tuple(reversed(indices))

    def find(self, path: Sequence[int]) -> Optional["ConditionNode"]:
        node = self
        for index in path:
            if not 0 <= index < len(node.children):
                return None
            node = node.children[index]
        return node

    def root(self) -> "ConditionNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    # === CHANGE NOTIFICATION ===

    def add_change_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Call listener(node) whenever this node or a descendant changes."""
        self._listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove_listener

    def _notify_changed(self, origin: Optional["ConditionNode"] = None) -> None:
        origin = origin or self
        for listener in list(self._listeners):
            try:
                listener(origin)
            except Exception:
                self.logger.exception("Condition change listener failed")
        parent = self.parent
        if parent is not None:
            parent._notify_changed(origin)


class DepthExceededNode:
    """
    Inert stand-in returned when a child cannot be added at max depth.

    It is never attached to the tree, serializes to None and is always valid.
    """

    is_placeholder = True
    kind = EMPTY_KIND
    is_root = False
    is_leaf = False

    def __init__(self, depth: int):
        self.depth = depth
        self.children: List[ConditionNode] = []
        self.removed = False

    def __repr__(self) -> str:
        return f"DepthExceededNode(depth={self.depth})"

    def to_canonical(self) -> CanonicalFragment:
        return None

    get_value = to_canonical

    def is_valid(self) -> bool:
        return True

    def describe(self) -> str:
        return "No condition"

    def errors(self) -> List[str]:
        return []

    def remove(self, force: bool = False) -> bool:
        self.removed = True
        return True


def build_tree(
    fragment: CanonicalFragment, bus: DataSourceBus, **kwargs: Any
) -> ConditionNode:
    """Build an editable root node from a canonical fragment (or None)."""
    return ConditionNode(bus, fragment, is_root=True, **kwargs)
