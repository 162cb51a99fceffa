"""
Strat condition bundle for reqtree.

A strat record carries three condition documents: how the room is entered,
what is required and how it is left.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from ..conditions.data_sources import DataSourceBus
from ..conditions.handlers import HandlerRegistry
from ..conditions.node import ConditionNode, build_tree
from ..conditions.transitions import EntranceCondition, ExitCondition, UnknownTransitionKind
from .loaders import unwrap_requires

STRAT_KEYS = ("requires", "entranceCondition", "exitCondition")


def is_strat_document(document: Any) -> bool:
    """Whether document is a strat record rather than a bare condition."""
    return isinstance(document, Mapping) and any(key in document for key in STRAT_KEYS)


class StratConditions:
    """Editable entrance, requires and exit conditions of one strat."""

    def __init__(
        self,
        bus: DataSourceBus,
        strat: Optional[Mapping[str, Any]] = None,
        registry: Optional[HandlerRegistry] = None,
        max_depth: Optional[int] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.bus = bus
        strat = strat or {}

        self.entrance = self._load_transition(EntranceCondition, strat.get("entranceCondition"))
        self.exit = self._load_transition(ExitCondition, strat.get("exitCondition"))

        tree_options: Dict[str, Any] = {"registry": registry}
        if max_depth is not None:
            tree_options["max_depth"] = max_depth
        requires = strat.get("requires", [])
        # a one element list keeps an explicit root "and" as written
        self.implicit_and = not (isinstance(requires, list) and len(requires) == 1)
        self.requires: ConditionNode = build_tree(
            unwrap_requires({"requires": requires}), bus, **tree_options
        )
        self.logger.debug(
            f"Strat '{strat.get('name', '')}' loaded: entrance={self.entrance.kind or '-'}, "
            f"exit={self.exit.kind or '-'}"
        )

    def _load_transition(self, cls: type, fragment: Any) -> Any:
        try:
            return cls(fragment if isinstance(fragment, Mapping) else None)
        except UnknownTransitionKind as e:
            self.logger.warning(f"{e}; condition dropped")
            return cls()

    def to_dict(self) -> Dict[str, Any]:
        """The three condition fields in document form."""
        requires = self.requires.to_canonical()
        if requires is None:
            requires_list = []
        elif self.implicit_and and isinstance(requires, dict) and list(requires) == ["and"]:
            requires_list = requires["and"]
        else:
            requires_list = [requires]
        result: Dict[str, Any] = {"requires": requires_list}
        entrance = self.entrance.to_canonical()
        if entrance is not None:
            result["entranceCondition"] = entrance
        exit_condition = self.exit.to_canonical()
        if exit_condition is not None:
            result["exitCondition"] = exit_condition
        return result

    def apply_to(self, strat: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy of strat with its condition fields replaced, key order kept."""
        conditions = self.to_dict()
        updated: Dict[str, Any] = {}
        for key, value in strat.items():
            if key not in STRAT_KEYS:
                updated[key] = copy.deepcopy(value)
            elif key in conditions:
                updated[key] = conditions[key]
        for key, value in conditions.items():
            updated.setdefault(key, value)
        return updated

    def is_valid(self) -> bool:
        return self.requires.is_valid() and self.entrance.is_valid() and self.exit.is_valid()

    def close(self) -> None:
        """Release the requires tree's data source subscriptions."""
        self.requires.remove(force=True)
