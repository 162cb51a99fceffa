"""
Leaf handler registry for reqtree.

A LeafHandler knows how to build the editable state of one family of leaf
kinds, read back its canonical value and re-apply a prior value after the
reference data changed. HandlerRegistry is a flat kind -> handler table with
a default fallback, so adding a leaf kind never touches the tree code.
"""

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from .fields import FieldSpec
from .models import CanonicalFragment, kind_info

if TYPE_CHECKING:
    from .node import ConditionNode


class LeafHandler:
    """
    Base class for leaf kind handlers.

    Subclasses override initial_state() and value(); the remaining hooks have
    working defaults. Handlers are stateless: everything a node edits lives in
    node.leaf_state.
    """

    # Whether a data source refresh must rebuild nodes of this handler
    uses_data_sources: bool = False

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # === CONSTRUCTION ===

    def construct(self, node: "ConditionNode", kind: str, initial: Any = None) -> None:
        """Populate node.leaf_state from an optional prior leaf value."""
        node.leaf_error = None
        node.leaf_state = self.initial_state(kind, initial)

    def initial_state(self, kind: str, initial: Any) -> Dict[str, Any]:
        return {}

    # === EXTRACTION ===

    def extract_value(self, node: "ConditionNode", kind: str) -> Optional[CanonicalFragment]:
        """Canonical fragment for the node, or None if incomplete."""
        value = self.value(node, kind)
        return None if value is None else {kind: value}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        """Inner canonical value (what follows the kind key)."""
        raise NotImplementedError

    # === RESTORATION ===

    def restore_value(
        self, node: "ConditionNode", kind: str, prior: Optional[CanonicalFragment]
    ) -> None:
        """Best-effort re-selection of a prior canonical value after a rebuild."""
        if prior is None:
            return
        self.construct(node, kind, self.unwrap(kind, prior))

    def unwrap(self, kind: str, fragment: Any) -> Any:
        """Inner value of a canonical fragment produced by extract_value."""
        if isinstance(fragment, Mapping) and kind in fragment:
            return fragment[kind]
        return fragment

    def retain_state(
        self, node: "ConditionNode", kind: str, previous: Mapping[str, Any]
    ) -> None:
        """Carry over an incomplete edit across a rebuild (nothing by default)."""

    # === PRESENTATION ===

    def field_specs(self, kind: str) -> Tuple[FieldSpec, ...]:
        """Fields shown by editors for this kind."""
        return ()

    def node_specs(self, node: "ConditionNode", kind: str) -> Tuple[FieldSpec, ...]:
        """Fields for one node; may depend on the node's current snapshot."""
        return self.field_specs(kind)

    def choices(self, node: "ConditionNode", kind: str, field: str) -> List[Any]:
        """Current selectable values of one field."""
        for spec in self.node_specs(node, kind):
            if spec.name == field:
                return spec.choice_values(node.snapshot)
        return []

    def errors(self, node: "ConditionNode", kind: str) -> List[str]:
        """Why the node does not serialize (empty when it does)."""
        if self.extract_value(node, kind) is None:
            return ["Incomplete condition"]
        return []

    def describe(self, node: "ConditionNode", kind: str) -> str:
        return kind_info(kind).label


class DefaultHandler(LeafHandler):
    """Fallback for unregistered kinds: marks the node and serializes to None."""

    def construct(self, node: "ConditionNode", kind: str, initial: Any = None) -> None:
        self.logger.warning(f"No handler registered for condition type '{kind}'")
        node.leaf_state = {"raw": initial}
        node.leaf_error = f"Condition type '{kind}' is not yet implemented"

    def extract_value(self, node: "ConditionNode", kind: str) -> Optional[CanonicalFragment]:
        return None

    def errors(self, node: "ConditionNode", kind: str) -> List[str]:
        return [node.leaf_error or f"Condition type '{kind}' is not yet implemented"]

    def describe(self, node: "ConditionNode", kind: str) -> str:
        return f"{kind} (not implemented)"


class HandlerRegistry:
    """Flat mapping from condition kind to LeafHandler."""

    def __init__(self, default: Optional[LeafHandler] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._handlers: Dict[str, LeafHandler] = {}
        self._default = default if default is not None else DefaultHandler()

    @property
    def default(self) -> LeafHandler:
        return self._default

    def register(self, kinds: Union[str, Iterable[str]], handler: LeafHandler) -> None:
        """Associate one kind or several kinds with handler."""
        if isinstance(kinds, str):
            kinds = [kinds]
        for kind in kinds:
            if kind in self._handlers:
                self.logger.debug(f"Replacing handler for '{kind}'")
            self._handlers[kind] = handler

    def resolve(self, kind: str) -> LeafHandler:
        """Registered handler for kind, or the default fallback."""
        return self._handlers.get(kind, self._default)

    def kinds(self) -> List[str]:
        return list(self._handlers)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
