"""
Shared reference data for condition editing.

A DataSourceSnapshot is an immutable view of the lists leaf editors choose
from (items, events, techniques, room nodes, ...). The DataSourceBus holds the
current snapshot, replaces it wholesale on update and notifies subscribers
synchronously in subscription order.
"""

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[["DataSourceSnapshot"], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class NamedRef:
    """A named entry of a reference list (technique, helper, weapon, enemy...)."""

    name: str
    id: Optional[Union[int, str]] = None
    extension_techs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Union[str, Mapping[str, Any]]) -> "NamedRef":
        """Create from a plain name or a {id, name, extensionTechs} mapping."""
        if isinstance(data, str):
            return cls(name=data)
        extensions = data.get("extensionTechs") or ()
        return cls(
            name=str(data.get("name") or data.get("id") or ""),
            id=data.get("id"),
            extension_techs=tuple(
                str(ext.get("name") if isinstance(ext, Mapping) else ext)
                for ext in extensions
            ),
        )


@dataclass(frozen=True)
class RoomNode:
    """A node of the room being edited."""

    id: int
    name: str = ""
    node_type: str = ""
    node_sub_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoomNode":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            node_type=str(data.get("nodeType", data.get("node_type", ""))),
            node_sub_type=str(data.get("nodeSubType", data.get("node_sub_type", ""))),
        )

    @property
    def display_name(self) -> str:
        return f"{self.id}: {self.name}" if self.name else str(self.id)


@dataclass(frozen=True)
class EnemyGroup:
    """An enemy group of the room being edited."""

    id: str
    name: str = ""
    enemy: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnemyGroup":
        return cls(
            id=str(data["id"]),
            name=str(data.get("groupName", data.get("name", ""))),
            enemy=str(data.get("enemyName", data.get("enemy", ""))),
        )


def _named_refs(values: Optional[Iterable[Any]]) -> Tuple[NamedRef, ...]:
    return tuple(NamedRef.from_dict(value) for value in (values or ()))


def _categorized(values: Any) -> Dict[str, Tuple[NamedRef, ...]]:
    """Normalize a category -> entries mapping; a flat list becomes one category."""
    if not values:
        return {}
    if isinstance(values, Mapping):
        return {str(category): _named_refs(entries) for category, entries in values.items()}
    return {"": _named_refs(values)}


def _names(values: Any) -> Tuple[str, ...]:
    if isinstance(values, Mapping):
        return tuple(ref.name for refs in _categorized(values).values() for ref in refs)
    return tuple(ref.name for ref in _named_refs(values))


@dataclass(frozen=True)
class DataSourceSnapshot:
    """Immutable reference data consumed by leaf handlers."""

    items: Tuple[str, ...] = ()
    events: Tuple[str, ...] = ()
    weapons: Tuple[NamedRef, ...] = ()
    techniques: Dict[str, Tuple[NamedRef, ...]] = field(default_factory=dict)
    helpers: Dict[str, Tuple[NamedRef, ...]] = field(default_factory=dict)
    enemies: Tuple[NamedRef, ...] = ()
    room_nodes: Tuple[RoomNode, ...] = ()
    enemy_groups: Tuple[EnemyGroup, ...] = ()
    notables: Tuple[NamedRef, ...] = ()
    obstacles: Tuple[NamedRef, ...] = ()

    @classmethod
    def empty(cls) -> "DataSourceSnapshot":
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataSourceSnapshot":
        """Create a snapshot from the external (camelCase) reference data shape."""
        room_nodes = data.get("roomNodes", data.get("validRoomNodes")) or ()
        return cls(
            items=_names(data.get("items", data.get("itemList"))),
            events=_names(data.get("events", data.get("eventList"))),
            weapons=_named_refs(data.get("weapons", data.get("weaponList"))),
            techniques=_categorized(data.get("techniques", data.get("techMap"))),
            helpers=_categorized(data.get("helpers", data.get("helperMap"))),
            enemies=_named_refs(data.get("enemies", data.get("enemyList"))),
            room_nodes=tuple(RoomNode.from_dict(node) for node in room_nodes),
            enemy_groups=tuple(
                EnemyGroup.from_dict(group) for group in data.get("enemyGroups") or ()
            ),
            notables=_named_refs(data.get("notables")),
            obstacles=_named_refs(data.get("obstacles")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export in the external camelCase shape."""

        def ref(value: NamedRef) -> Dict[str, Any]:
            out: Dict[str, Any] = {"name": value.name}
            if value.id is not None:
                out["id"] = value.id
            if value.extension_techs:
                out["extensionTechs"] = [{"name": name} for name in value.extension_techs]
            return out

        return {
            "items": list(self.items),
            "events": list(self.events),
            "weapons": [ref(w) for w in self.weapons],
            "techniques": {c: [ref(t) for t in refs] for c, refs in self.techniques.items()},
            "helpers": {c: [ref(h) for h in refs] for c, refs in self.helpers.items()},
            "enemies": [ref(e) for e in self.enemies],
            "roomNodes": [
                {
                    "id": node.id,
                    "name": node.name,
                    "nodeType": node.node_type,
                    "nodeSubType": node.node_sub_type,
                }
                for node in self.room_nodes
            ],
            "enemyGroups": [
                {"id": g.id, "groupName": g.name, "enemyName": g.enemy}
                for g in self.enemy_groups
            ],
            "notables": [ref(n) for n in self.notables],
            "obstacles": [ref(o) for o in self.obstacles],
        }

    # === LOOKUPS ===

    def item_names(self) -> FrozenSet[str]:
        return frozenset(self.items)

    def event_names(self) -> FrozenSet[str]:
        return frozenset(self.events)

    def weapon_names(self) -> FrozenSet[str]:
        return frozenset(w.name for w in self.weapons)

    def enemy_names(self) -> FrozenSet[str]:
        return frozenset(e.name for e in self.enemies)

    def tech_names(self) -> FrozenSet[str]:
        """All technique names, extension techniques included."""
        names = set()
        for refs in self.techniques.values():
            for tech in refs:
                names.add(tech.name)
                names.update(tech.extension_techs)
        return frozenset(names)

    def helper_names(self) -> FrozenSet[str]:
        return frozenset(h.name for refs in self.helpers.values() for h in refs)

    def node_ids(self, node_type: Optional[str] = None) -> List[int]:
        """Room node ids, optionally restricted to one nodeType."""
        return [
            node.id
            for node in self.room_nodes
            if node_type is None or node.node_type == node_type
        ]

    def notable_names(self) -> FrozenSet[str]:
        return frozenset(n.name for n in self.notables if n.name)

    def obstacle_ids(self) -> List[str]:
        return [str(o.id if o.id is not None else o.name) for o in self.obstacles]

    def enemy_group_ids(self) -> List[str]:
        return [g.id for g in self.enemy_groups]

    def choices(self, source: str) -> List[Any]:
        """Sorted choice list for a named source, used by field specs."""
        lookups: Dict[str, Callable[[], Iterable[Any]]] = {
            "items": self.item_names,
            "events": self.event_names,
            "weapons": self.weapon_names,
            "enemies": self.enemy_names,
            "techniques": self.tech_names,
            "helpers": self.helper_names,
            "notables": self.notable_names,
            "obstacles": self.obstacle_ids,
            "enemy_groups": self.enemy_group_ids,
            "room_nodes": self.node_ids,
            "item_nodes": lambda: self.node_ids("item"),
        }
        lookup = lookups.get(source)
        if lookup is None:
            logger.warning(f"Unknown data source '{source}'")
            return []
        return sorted(lookup())


class DataSourceBus:
    """
    Holds the current DataSourceSnapshot and notifies subscribers on replacement.

    Notifications are synchronous and delivered in subscription order. A failing
    subscriber is logged and does not prevent delivery to the others.
    """

    def __init__(self, snapshot: Optional[DataSourceSnapshot] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._snapshot = snapshot if snapshot is not None else DataSourceSnapshot.empty()
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_token = 0

    @property
    def snapshot(self) -> DataSourceSnapshot:
        """Current snapshot (never mutated in place)."""
        return self._snapshot

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Register callback; returns an idempotent disposer."""
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def update_all(
        self, snapshot: Union[DataSourceSnapshot, Mapping[str, Any]]
    ) -> DataSourceSnapshot:
        """Replace the snapshot wholesale and notify every subscriber."""
        if not isinstance(snapshot, DataSourceSnapshot):
            snapshot = DataSourceSnapshot.from_dict(snapshot)
        self._snapshot = snapshot

        delivery = list(self._subscribers.items())
        self.logger.debug(f"Data sources updated, notifying {len(delivery)} subscribers")
        for token, callback in delivery:
            # Skip subscribers removed by an earlier callback of this delivery
            if token not in self._subscribers:
                continue
            try:
                callback(snapshot)
            except Exception:
                self.logger.exception("Data source subscriber failed")
        return snapshot
