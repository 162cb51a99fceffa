"""
Entrance and exit transition conditions for reqtree.

Transitions describe how a strat enters or leaves a room through a door.
Unlike condition trees they are a closed, flat set of kinds, each with a fixed
record of fields.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .fields import FieldSpec, build_record, default_values, record_values, validate_record
from .models import CanonicalFragment, ConditionError

FieldTable = Tuple[FieldSpec, ...]


class UnknownTransitionKind(ConditionError):
    """Raised for a transition kind outside the closed entrance/exit sets."""

    def __init__(self, kind: str, family: str = "transition"):
        super().__init__(f"Unknown {family} kind '{kind}'")
        self.kind = kind


# === SHARED FIELD GROUPS ===

SPEED_BOOSTER = FieldSpec(
    "speedBooster", "choice", required=True, choices=(True, False, "any"), default=True
)
MOVEMENT_TYPE = FieldSpec(
    "movementType",
    "choice",
    required=True,
    choices=("controlled", "uncontrolled", "any"),
    default="any",
)
EXTRA_RUN_SPEED: FieldTable = (
    FieldSpec("minExtraRunSpeed", "hex", placeholder="$4.0"),
    FieldSpec("maxExtraRunSpeed", "hex", placeholder="$F.8"),
)
SPARK_POSITION = FieldSpec("position", "choice", choices=("top", "bottom"))
DIRECTION = FieldSpec("direction", "choice", choices=("left", "right", "any"))
GRAPPLE_POSITION = FieldSpec(
    "position", "choice", required=True, choices=("left", "right", "any"), default="any"
)
FALL_SPEED = FieldSpec("fallSpeedInTiles", "int", required=True, minimum=0)
UNUSABLE_TILES = FieldSpec("unusableTiles", "float", required=True, minimum=0)
ADJACENT_MIN_TILES = FieldSpec("adjacentMinTiles", "float", minimum=0)
BLUE = FieldSpec("blue", "choice", choices=("yes", "no", "any"))

RUNWAY_BASE: FieldTable = (
    FieldSpec("length", "float", required=True, minimum=0),
    FieldSpec("openEnd", "int", required=True, minimum=0, default=0),
)


def _runway_group(name: str) -> FieldSpec:
    return FieldSpec(name, "group", required=True, fields=RUNWAY_BASE)


def _slopes(*names: str) -> FieldTable:
    return tuple(FieldSpec(name, "int", minimum=0, default=0, omit_default=True) for name in names)


TILES_RANGE: FieldTable = (
    SPEED_BOOSTER,
    FieldSpec("minTiles", "float", required=True, minimum=0),
    FieldSpec("maxTiles", "float", minimum=0, default=0, omit_default=True),
)

ENTRANCE_RUNWAY: FieldTable = RUNWAY_BASE + _slopes(
    "gentleUpTiles", "gentleDownTiles", "steepUpTiles", "steepDownTiles"
)

EXIT_RUNWAY: FieldTable = (
    RUNWAY_BASE
    + _slopes(
        "gentleUpTiles", "gentleDownTiles", "steepUpTiles", "steepDownTiles", "startingDownTiles"
    )
    + (
        EXTRA_RUN_SPEED[0],
        FieldSpec("heated", "bool", default=False, omit_default=True),
        FieldSpec("cold", "bool", default=False, omit_default=True),
    )
)

REMOTE_RUNWAY: FieldTable = (_runway_group("remoteRunway"),) + EXTRA_RUN_SPEED + (BLUE,)

ENTRANCE_FIELDS: Dict[str, FieldTable] = {
    "comeInNormally": (),
    "comeInRunning": TILES_RANGE,
    "comeInJumping": TILES_RANGE,
    "comeInSpaceJumping": TILES_RANGE,
    "comeInBlueSpaceJumping": EXTRA_RUN_SPEED,
    "comeInShinecharging": ENTRANCE_RUNWAY,
    "comeInGettingBlueSpeed": ENTRANCE_RUNWAY + EXTRA_RUN_SPEED,
    "comeInShinecharged": (),
    "comeInShinechargedJumping": (),
    "comeInWithSpark": (SPARK_POSITION,),
    "comeInStutterShinecharging": (FieldSpec("minTiles", "float", required=True, minimum=0),),
    "comeInWithBombBoost": (),
    "comeInWithDoorStuckSetup": (),
    "comeInSpeedballing": (_runway_group("runway"),) + EXTRA_RUN_SPEED,
    "comeInWithTemporaryBlue": (DIRECTION,),
    "comeInSpinning": (SPEED_BOOSTER, UNUSABLE_TILES) + EXTRA_RUN_SPEED,
    "comeInBlueSpinning": (UNUSABLE_TILES,) + EXTRA_RUN_SPEED,
    "comeInWithMockball": (SPEED_BOOSTER, ADJACENT_MIN_TILES),
    "comeInWithSpringBallBounce": (SPEED_BOOSTER, MOVEMENT_TYPE, ADJACENT_MIN_TILES),
    "comeInWithBlueSpringBallBounce": (MOVEMENT_TYPE,)
    + EXTRA_RUN_SPEED
    + (FieldSpec("minLandingTiles", "float", minimum=0),),
    "comeInWithStoredFallSpeed": (FALL_SPEED,),
    "comeInWithWallJumpBelow": (FieldSpec("minHeight", "float"),),
    "comeInWithSpaceJumpBelow": (FieldSpec("minHeight", "float"),),
    "comeInWithPlatformBelow": (
        FieldSpec("minHeight", "float"),
        FieldSpec("maxHeight", "float"),
        FieldSpec("maxLeftPosition", "float"),
        FieldSpec("minRightPosition", "float"),
    ),
    "comeInWithGrappleJump": (GRAPPLE_POSITION,),
    "comeInWithSuperSink": (),
}

EXIT_FIELDS: Dict[str, FieldTable] = {
    "leaveNormally": (),
    "leaveWithRunway": EXIT_RUNWAY,
    "leaveShinecharged": (),
    "leaveWithTemporaryBlue": (DIRECTION,),
    "leaveWithSpark": (SPARK_POSITION,),
    "leaveSpinning": REMOTE_RUNWAY,
    "leaveWithMockball": (_runway_group("remoteRunway"), _runway_group("landingRunway"))
    + EXTRA_RUN_SPEED
    + (BLUE,),
    "leaveWithSpringBallBounce": (
        _runway_group("remoteRunway"),
        _runway_group("landingRunway"),
        MOVEMENT_TYPE,
    )
    + EXTRA_RUN_SPEED
    + (BLUE,),
    "leaveSpaceJumping": REMOTE_RUNWAY,
    "leaveWithStoredFallSpeed": (FALL_SPEED,),
    "leaveWithDoorFrameBelow": (FieldSpec("height", "float", required=True),),
    "leaveWithPlatformBelow": (
        FieldSpec("height", "float", required=True),
        FieldSpec("leftPosition", "float", required=True),
        FieldSpec("rightPosition", "float", required=True),
    ),
    "leaveWithGrappleJump": (GRAPPLE_POSITION,),
    "leaveWithSuperSink": (),
}

TOILET_CHOICES: Tuple[str, ...] = ("no", "yes", "any")


def kind_label(kind: str) -> str:
    """'comeInWithMockball' -> 'Come In With Mockball'."""
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", kind)
    return words[:1].upper() + words[1:]


class TransitionCondition:
    """Base class for one entrance or exit condition being edited."""

    FIELDS: Dict[str, FieldTable] = {}
    FAMILY = "transition"
    EMPTY_LABEL = "(none)"

    def __init__(self, fragment: Optional[Mapping[str, Any]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.kind = ""
        self.values: Dict[str, Any] = {}
        self.dev_note: Optional[Any] = None
        if fragment:
            self.load(fragment)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind!r})"

    @classmethod
    def from_fragment(cls, fragment: Optional[Mapping[str, Any]]) -> "TransitionCondition":
        return cls(fragment)

    @classmethod
    def kinds(cls) -> List[str]:
        return list(cls.FIELDS)

    # === EDITING ===

    def field_specs(self, kind: Optional[str] = None) -> FieldTable:
        kind = self.kind if kind is None else kind
        return self.FIELDS.get(kind, ())

    def set_kind(self, kind: str) -> None:
        """Select a kind; field values reset to the kind's defaults."""
        if kind and kind not in self.FIELDS:
            raise UnknownTransitionKind(kind, self.FAMILY)
        self.kind = kind
        self.values = default_values(self.field_specs())

    def set_field(self, name: str, value: Any) -> None:
        if not any(spec.name == name for spec in self.field_specs()):
            raise ConditionError(f"'{self.kind or self.EMPTY_LABEL}' has no field '{name}'")
        self.values[name] = value

    def load(self, fragment: Mapping[str, Any]) -> None:
        """Replace the edited state with a canonical fragment."""
        if not isinstance(fragment, Mapping):
            raise ConditionError(f"{self.FAMILY.capitalize()} must be an object")
        kind = next((key for key in fragment if key not in self._extra_keys()), "")
        self.set_kind(kind)
        if kind:
            self.values.update(record_values(self.field_specs(), fragment[kind]))
        self.dev_note = fragment.get("devNote")
        self._load_extras(fragment)

    def _extra_keys(self) -> Tuple[str, ...]:
        return ("devNote",)

    def _load_extras(self, fragment: Mapping[str, Any]) -> None:
        pass

    def _dump_extras(self, result: Dict[str, Any]) -> None:
        pass

    # === SERIALIZATION ===

    def to_canonical(self) -> CanonicalFragment:
        """{kind: record, ...extras}, or None when empty or incomplete."""
        if not self.kind:
            return None
        record = build_record(self.field_specs(), self.values)
        if record is None:
            return None
        result: Dict[str, Any] = {self.kind: record}
        self._dump_extras(result)
        if self.dev_note:
            result["devNote"] = self.dev_note
        return result

    def is_valid(self) -> bool:
        return not self.kind or self.to_canonical() is not None

    def errors(self) -> List[str]:
        if not self.kind:
            return []
        return validate_record(self.field_specs(), self.values)

    def describe(self) -> str:
        if not self.kind:
            return self.EMPTY_LABEL
        label = kind_label(self.kind)
        value = self.to_canonical()
        if value is None:
            return f"{label} (incomplete)"
        record = value[self.kind]
        details = ", ".join(f"{key}={inner}" for key, inner in record.items())
        return f"{label} ({details})" if details else label


class EntranceCondition(TransitionCondition):
    """How a strat enters the room."""

    FIELDS = ENTRANCE_FIELDS
    FAMILY = "entrance"
    EMPTY_LABEL = "(no entrance condition)"

    def __init__(self, fragment: Optional[Mapping[str, Any]] = None):
        self._comes_through_toilet = "no"
        super().__init__(fragment)

    @property
    def comes_through_toilet(self) -> str:
        return self._comes_through_toilet

    @comes_through_toilet.setter
    def comes_through_toilet(self, value: str) -> None:
        if value not in TOILET_CHOICES:
            raise ConditionError(f"comesThroughToilet must be one of {', '.join(TOILET_CHOICES)}")
        self._comes_through_toilet = value

    @property
    def supports_toilet(self) -> bool:
        return bool(self.kind) and self.kind != "comeInNormally"

    def _extra_keys(self) -> Tuple[str, ...]:
        return ("devNote", "comesThroughToilet")

    def _load_extras(self, fragment: Mapping[str, Any]) -> None:
        toilet = fragment.get("comesThroughToilet", "no")
        if toilet not in TOILET_CHOICES:
            self.logger.warning(f"Ignoring comesThroughToilet value {toilet!r}")
            toilet = "no"
        self._comes_through_toilet = toilet

    def _dump_extras(self, result: Dict[str, Any]) -> None:
        if self.supports_toilet and self._comes_through_toilet != "no":
            result["comesThroughToilet"] = self._comes_through_toilet


class ExitCondition(TransitionCondition):
    """How a strat leaves the room."""

    FIELDS = EXIT_FIELDS
    FAMILY = "exit"
    EMPTY_LABEL = "(no exit condition)"
