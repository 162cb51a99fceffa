"""
Concrete leaf handlers for every condition kind.

Most kinds are data driven: their editable state is described by FieldSpec
tables and serialized through build_record, so a handler mostly declares its
fields and how the canonical value is shaped.
"""

from dataclasses import replace
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .fields import FieldSpec, build_record, default_values, record_values, validate_record
from .handlers import HandlerRegistry, LeafHandler
from .models import (
    AMMO_TYPES,
    ENERGY_TYPES,
    PLACEHOLDERS,
    RESOURCE_TYPES,
    SLOPE_FIELDS,
    CanonicalFragment,
    kind_info,
)

if TYPE_CHECKING:
    from .node import ConditionNode


def _uses_source(specs: Iterable[FieldSpec]) -> bool:
    return any(spec.choices_source or _uses_source(spec.fields) for spec in specs)


def _summarize(value: Any) -> str:
    if isinstance(value, Mapping):
        return ", ".join(f"{key} {_summarize(inner)}" for key, inner in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(_summarize(inner) for inner in value)
    return str(value)


class SpecHandler(LeafHandler):
    """Handler whose leaf state is edited through a FieldSpec table."""

    def __init__(self, specs: Sequence[FieldSpec]):
        super().__init__()
        self.specs: Tuple[FieldSpec, ...] = tuple(specs)
        self.uses_data_sources = _uses_source(self.specs)

    def field_specs(self, kind: str) -> Tuple[FieldSpec, ...]:
        return self.specs

    def initial_state(self, kind: str, initial: Any) -> Dict[str, Any]:
        state = default_values(self.specs)
        state.update(self.state_from_value(kind, initial))
        return state

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        """Editable values for a canonical inner value."""
        return record_values(self.specs, initial)

    def record(self, node: "ConditionNode") -> Optional[Dict[str, Any]]:
        return build_record(self.node_specs(node, node.kind), node.leaf_state, node.snapshot)

    def value(self, node: "ConditionNode", kind: str) -> Any:
        return self.record(node)

    def retain_state(
        self, node: "ConditionNode", kind: str, previous: Mapping[str, Any]
    ) -> None:
        """Carry the edited values over, including selections that no longer resolve.

        Stale values stay visible to editors but keep the record from
        serializing; stale entries of a multiple field are skipped by it.
        """
        for spec in self.node_specs(node, kind):
            raw = previous.get(spec.name)
            if raw is None:
                continue
            if spec.multiple and isinstance(raw, (list, tuple)):
                stale = [entry for entry in raw if spec.coerce([entry], node.snapshot) is None]
                if stale:
                    self.logger.debug(
                        f"Kept {len(stale)} stale selections of '{kind}.{spec.name}'"
                    )
                node.leaf_state[spec.name] = list(raw)
                continue
            if spec.resolve(raw, node.snapshot)[1] is not None:
                self.logger.debug(f"Kept stale value of '{kind}.{spec.name}': {raw!r}")
            node.leaf_state[spec.name] = raw

    def errors(self, node: "ConditionNode", kind: str) -> List[str]:
        errors = validate_record(self.node_specs(node, kind), node.leaf_state, node.snapshot)
        if not errors and self.extract_value(node, kind) is None:
            errors.append("Incomplete condition")
        return errors

    def describe(self, node: "ConditionNode", kind: str) -> str:
        label = kind_info(kind).label
        value = self.value(node, kind)
        if value is None:
            return f"{label} (incomplete)"
        summary = _summarize(value)
        return f"{label}: {summary}" if summary else label


# === SINGLE VALUE KINDS ===


class ChoiceHandler(SpecHandler):
    """One selection from a reference list (item, event, notable, node id...)."""

    def __init__(
        self,
        source: Optional[str] = None,
        choices: Sequence[Any] = (),
        label: str = "",
    ):
        super().__init__(
            (
                FieldSpec(
                    "value",
                    "choice",
                    required=True,
                    choices=tuple(choices),
                    choices_source=source,
                    label=label,
                ),
            )
        )

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        if isinstance(initial, Mapping):
            initial = initial.get("name", initial.get("id"))
        return {} if initial is None else {"value": initial}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        return None if record is None else record["value"]

    def describe(self, node: "ConditionNode", kind: str) -> str:
        value = self.value(node, kind)
        if value is None:
            return f"{kind_info(kind).label} (incomplete)"
        return f"{self.specs[0].display_label}: {value}"


class NumberHandler(SpecHandler):
    """A single frame or hit count."""

    def __init__(self, minimum: int = 1):
        super().__init__(
            (
                FieldSpec(
                    "value",
                    "int",
                    required=True,
                    minimum=minimum,
                    default=minimum,
                    label="Frames",
                ),
            )
        )

    def field_specs(self, kind: str) -> Tuple[FieldSpec, ...]:
        return (replace(self.specs[0], placeholder=PLACEHOLDERS.get(kind, "")),)

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        return {} if initial is None else {"value": initial}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        return None if record is None else record["value"]


class ConstantHandler(SpecHandler):
    """Kinds without properties: {kind: {}}."""

    def __init__(self) -> None:
        super().__init__(())

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        return {}

    def describe(self, node: "ConditionNode", kind: str) -> str:
        return kind_info(kind).label


# === MULTIPLE VALUE KINDS ===


class MultiChoiceHandler(SpecHandler):
    """
    Technique / helper selection.

    One selection serializes as {kind: name}; several are wrapped as
    {"and": [{kind: a}, {kind: b}]}.
    """

    def __init__(self, source: str, label: str = ""):
        super().__init__(
            (
                FieldSpec(
                    "values",
                    "choice",
                    required=True,
                    multiple=True,
                    choices_source=source,
                    label=label,
                ),
            )
        )

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        return {"values": self._names(kind, initial)}

    def _names(self, kind: str, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, Mapping):
            if kind in value:
                return self._names(kind, value[kind])
            if "and" in value:
                return self._names(kind, value["and"])
            return []
        names: List[str] = []
        for element in value:
            names.extend(self._names(kind, element))
        return names

    def unwrap(self, kind: str, fragment: Any) -> Any:
        return self._names(kind, fragment)

    def extract_value(self, node: "ConditionNode", kind: str) -> Optional[CanonicalFragment]:
        record = self.record(node)
        if record is None:
            return None
        values = record["values"]
        if len(values) == 1:
            return {kind: values[0]}
        return {"and": [{kind: value} for value in values]}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        return None if record is None else record["values"]


class ChoiceListHandler(SpecHandler):
    """
    A list of selections (refill resources, obstacles, reset room nodes).

    With lenient=True free text ids are accepted while the snapshot does not
    publish the source list at all.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        choices: Sequence[Any] = (),
        wrap_key: Optional[str] = None,
        label: str = "",
        lenient: bool = False,
    ):
        super().__init__(
            (
                FieldSpec(
                    "values",
                    "choice",
                    required=True,
                    multiple=True,
                    choices=tuple(choices),
                    choices_source=source,
                    label=label,
                ),
            )
        )
        self.source = source
        self.wrap_key = wrap_key
        self.lenient = lenient

    def node_specs(self, node: "ConditionNode", kind: str) -> Tuple[FieldSpec, ...]:
        if self.lenient and self.source and not node.snapshot.choices(self.source):
            return (replace(self.specs[0], type="text", choices_source=None),)
        return self.specs

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        if self.wrap_key and isinstance(initial, Mapping):
            initial = initial.get(self.wrap_key)
        if initial is None:
            return {}
        if not isinstance(initial, (list, tuple)):
            initial = [initial]
        return {"values": list(initial)}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        if record is None:
            return None
        return {self.wrap_key: record["values"]} if self.wrap_key else record["values"]


class ResourceListHandler(SpecHandler):
    """[{type, count}] resource thresholds."""

    def __init__(self, resource_types: Sequence[str] = RESOURCE_TYPES):
        super().__init__(
            (
                FieldSpec(
                    "entries",
                    "group",
                    required=True,
                    multiple=True,
                    label="Resources",
                    fields=(
                        FieldSpec("type", "choice", required=True, choices=tuple(resource_types)),
                        FieldSpec("count", "int", required=True, minimum=0, default=0),
                    ),
                ),
            )
        )

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        if isinstance(initial, Mapping):
            initial = [initial]
        return record_values(self.specs, {"entries": initial}) if initial else {}

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        return None if record is None else record["entries"]


# === RECORD KINDS ===


class RecordHandler(SpecHandler):
    """A fixed record of fields, serialized as {kind: {...}}."""


class EnemyKillHandler(SpecHandler):
    """
    Enemy kill requirement.

    Canonical enemies are a list of enemy group sets: [["e1", "e2"], ["e3"]].
    Editors see each set as {"members": [...]}.
    """

    def __init__(self) -> None:
        super().__init__(
            (
                FieldSpec(
                    "enemies",
                    "group",
                    required=True,
                    multiple=True,
                    label="Enemy group sets",
                    fields=(
                        FieldSpec(
                            "members",
                            "choice",
                            required=True,
                            multiple=True,
                            unique=False,
                            choices_source="enemy_groups",
                            label="Enemy groups",
                        ),
                    ),
                ),
                FieldSpec("explicitWeapons", "choice", multiple=True, choices_source="weapons"),
                FieldSpec("excludedWeapons", "choice", multiple=True, choices_source="weapons"),
                FieldSpec("farmableAmmo", "choice", multiple=True, choices=AMMO_TYPES),
            )
        )

    def state_from_value(self, kind: str, initial: Any) -> Dict[str, Any]:
        if not isinstance(initial, Mapping):
            return {}
        groups = initial.get("enemies") or []
        # a flat list of ids is a single group set
        if groups and all(isinstance(group, str) for group in groups):
            groups = [groups]
        state = record_values(self.specs[1:], initial)
        state["enemies"] = [
            {"members": list(group)} for group in groups if isinstance(group, (list, tuple))
        ]
        return state

    def value(self, node: "ConditionNode", kind: str) -> Any:
        record = self.record(node)
        if record is None:
            return None
        record["enemies"] = [entry["members"] for entry in record["enemies"]]
        return record


def _runway_specs(length_key: str) -> Tuple[FieldSpec, ...]:
    return (
        FieldSpec(length_key, "float", required=True, minimum=0, exclusive_minimum=True),
        FieldSpec("openEnd", "int", required=True, minimum=0, default=0),
    ) + tuple(
        FieldSpec(name, "int", minimum=0, default=0, omit_default=True) for name in SLOPE_FIELDS
    )


AMMO_SPECS = (
    FieldSpec("type", "choice", required=True, choices=AMMO_TYPES, default="Missile"),
    FieldSpec("count", "int", required=True, minimum=1, default=1),
)

PARTIAL_REFILL_SPECS = (
    FieldSpec("type", "choice", required=True, choices=RESOURCE_TYPES, default="Energy"),
    FieldSpec("limit", "int", required=True, minimum=0),
)

SHINESPARK_SPECS = (
    FieldSpec("frames", "int", required=True, minimum=0, default=0),
    FieldSpec("excessFrames", "int", minimum=0, default=0, omit_default=True),
)

ENEMY_DAMAGE_SPECS = (
    FieldSpec("enemy", "choice", required=True, choices_source="enemies"),
    FieldSpec("type", "text", required=True, label="Attack type"),
    FieldSpec("hits", "int", required=True, minimum=1, default=1),
)

AUTO_RESERVE_SPECS = (
    FieldSpec("minReserveEnergy", "int", minimum=0, default=1, omit_default=True),
    FieldSpec("maxReserveEnergy", "int", minimum=0, default=400, omit_default=True),
)

FRAMES_WITH_DROPS_SPECS = (
    FieldSpec("frames", "int", required=True, minimum=1, default=1),
    FieldSpec(
        "drops",
        "group",
        multiple=True,
        label="Enemy drops",
        fields=(
            FieldSpec("enemy", "choice", required=True, choices_source="enemies"),
            FieldSpec("count", "int", required=True, minimum=1, default=1),
        ),
    ),
)

RIDLEY_KILL_SPECS = (
    FieldSpec("powerBombs", "bool", default=True, omit_default=True, label="Power Bombs allowed"),
    FieldSpec("gMode", "bool", default=False, omit_default=True, label="G-Mode fight"),
    FieldSpec("stuck", "choice", choices=("top", "bottom")),
)

NUMBER_KINDS = (
    "acidFrames",
    "gravitylessAcidFrames",
    "electricityFrames",
    "cycleFrames",
    "simpleCycleFrames",
    "coldFrames",
    "heatFrames",
    "simpleColdFrames",
    "simpleHeatFrames",
    "gravitylessHeatFrames",
    "hibashiHits",
    "lavaFrames",
    "gravitylessLavaFrames",
    "samusEaterFrames",
    "metroidFrames",
    "spikeHits",
    "thornHits",
    "electricityHits",
)

RESOURCE_LIST_KINDS = (
    "resourceAtMost",
    "resourceCapacity",
    "resourceMaxCapacity",
    "resourceAvailable",
    "resourceMissingAtMost",
)


def default_registry() -> HandlerRegistry:
    """Registry with a handler for every known leaf kind."""
    registry = HandlerRegistry()

    registry.register("item", ChoiceHandler("items", label="Item"))
    registry.register("event", ChoiceHandler("events", label="Event"))
    registry.register("disableEquipment", ChoiceHandler("items", label="Equipment"))
    registry.register("notable", ChoiceHandler("notables", label="Notable"))

    registry.register("tech", MultiChoiceHandler("techniques", label="Techniques"))
    registry.register("helper", MultiChoiceHandler("helpers", label="Helpers"))

    registry.register("doorUnlockedAtNode", ChoiceHandler("room_nodes", label="Node"))
    registry.register(
        ["itemCollectedAtNode", "itemNotCollectedAtNode"],
        ChoiceHandler("item_nodes", label="Item node"),
    )
    registry.register(
        "resetRoom", ChoiceListHandler("room_nodes", wrap_key="nodes", label="Entry nodes")
    )
    registry.register(
        ["obstaclesCleared", "obstaclesNotCleared"],
        ChoiceListHandler("obstacles", label="Obstacles", lenient=True),
    )

    registry.register(RESOURCE_LIST_KINDS, ResourceListHandler())
    registry.register("resourceConsumed", ResourceListHandler(ENERGY_TYPES))

    registry.register(NUMBER_KINDS, NumberHandler(minimum=1))
    registry.register("shineChargeFrames", NumberHandler(minimum=0))

    registry.register(["ammo", "ammoDrain"], RecordHandler(AMMO_SPECS))
    registry.register("partialRefill", RecordHandler(PARTIAL_REFILL_SPECS))
    registry.register("refill", ChoiceListHandler(choices=RESOURCE_TYPES, label="Resources"))
    registry.register("shinespark", RecordHandler(SHINESPARK_SPECS))
    registry.register("enemyDamage", RecordHandler(ENEMY_DAMAGE_SPECS))
    registry.register("autoReserveTrigger", RecordHandler(AUTO_RESERVE_SPECS))
    registry.register(["canShineCharge", "getBlueSpeed"], RecordHandler(_runway_specs("usedTiles")))
    registry.register("speedBall", RecordHandler(_runway_specs("length")))
    registry.register("enemyKill", EnemyKillHandler())
    registry.register(
        ["heatFramesWithEnergyDrops", "coldFramesWithEnergyDrops", "lavaFramesWithEnergyDrops"],
        RecordHandler(FRAMES_WITH_DROPS_SPECS),
    )
    registry.register("ridleyKill", RecordHandler(RIDLEY_KILL_SPECS))

    registry.register(
        ["gainFlashSuit", "useFlashSuit", "noFlashSuit", "free", "never"], ConstantHandler()
    )

    return registry


@lru_cache(maxsize=None)
def shared_registry() -> HandlerRegistry:
    """Process-wide default registry; handlers are stateless so nodes share it."""
    return default_registry()
