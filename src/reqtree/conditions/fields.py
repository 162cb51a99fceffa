"""
Declarative field descriptions for record-shaped condition values.

Record leaves (ammo, runways, enemy damage...) and entrance/exit transitions
are described as tables of FieldSpec instead of one hand-written editor per
kind. The same coercion path drives serialization and validation hints.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .data_sources import DataSourceSnapshot

logger = logging.getLogger(__name__)

HEX_SPEED_PATTERN = re.compile(r"^\$[0-9A-Fa-f]+(\.[0-9A-Fa-f]+)?$")

FIELD_TYPES = ("int", "float", "hex", "choice", "bool", "text", "group")


def is_hex_speed(value: Any) -> bool:
    """Check a '$4.0' style hexadecimal speed string."""
    return isinstance(value, str) and bool(HEX_SPEED_PATTERN.match(value.strip()))


def _parse_number(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def _choice_candidates(raw: Any) -> List[Any]:
    """raw plus the typed values an editor string may stand for ('true', '12')."""
    candidates = [raw]
    if isinstance(raw, str):
        text = raw.strip()
        if text.lower() in ("true", "false"):
            candidates.append(text.lower() == "true")
        if text.lstrip("-").isdigit():
            candidates.append(int(text))
        if text != raw:
            candidates.append(text)
    return candidates


def _compact(number: float) -> Any:
    """Integral floats become ints so 5.0 serializes as 5."""
    return int(number) if float(number).is_integer() else number


@dataclass(frozen=True)
class FieldSpec:
    """One field of a record value."""

    name: str
    type: str = "int"
    required: bool = False
    default: Any = None
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    choices: Tuple[Any, ...] = ()
    choices_source: Optional[str] = None
    omit_default: bool = False
    multiple: bool = False
    # multiple scalar selections are a set unless repeats are allowed
    unique: bool = True
    label: str = ""
    placeholder: str = ""
    fields: Tuple["FieldSpec", ...] = ()

    def __post_init__(self) -> None:
        if self.type not in FIELD_TYPES:
            raise ValueError(f"Unknown field type '{self.type}' for field '{self.name}'")

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        # camelCase -> "Camel case"
        words = re.sub(r"(?<!^)(?=[A-Z])", " ", self.name).lower()
        return words[:1].upper() + words[1:]

    def choice_values(self, snapshot: Optional["DataSourceSnapshot"] = None) -> List[Any]:
        """Static choices, or the current snapshot's list for choices_source."""
        if self.choices_source:
            return snapshot.choices(self.choices_source) if snapshot is not None else []
        return list(self.choices)

    def resolve(
        self, raw: Any, snapshot: Optional["DataSourceSnapshot"] = None
    ) -> Tuple[Any, Optional[str]]:
        """Coerce raw to its canonical value.

        Returns (value, error). value is None when the field is absent or
        invalid; error is set only when a present value is invalid.
        """
        if self.multiple:
            return self._resolve_many(raw, snapshot)
        return self._resolve_one(raw, snapshot)

    def coerce(self, raw: Any, snapshot: Optional["DataSourceSnapshot"] = None) -> Any:
        return self.resolve(raw, snapshot)[0]

    def omit(self, value: Any) -> bool:
        """Whether value is pruned from the canonical record."""
        if value is None:
            return True
        if isinstance(value, (list, tuple)) and not value:
            return True
        if isinstance(value, dict) and not value and self.type == "group":
            return not self.required
        return self.omit_default and value == self.default

    def _resolve_many(
        self, raw: Any, snapshot: Optional["DataSourceSnapshot"]
    ) -> Tuple[Any, Optional[str]]:
        if raw is None or raw == "":
            return None, None
        if not isinstance(raw, (list, tuple)):
            raw = [raw]
        values: List[Any] = []
        for element in raw:
            value, error = self._resolve_one(element, snapshot)
            if error:
                logger.debug(f"Dropping entry of '{self.name}': {error}")
                continue
            if value is None:
                continue
            if self.type == "group" or not self.unique or value not in values:
                values.append(value)
        return (values or None), None

    def _resolve_one(
        self, raw: Any, snapshot: Optional["DataSourceSnapshot"]
    ) -> Tuple[Any, Optional[str]]:
        if raw is None or (isinstance(raw, str) and not raw.strip() and self.type != "bool"):
            return None, None

        if self.type in ("int", "float"):
            number = _parse_number(raw)
            if number is None:
                return None, f"{self.display_label} must be a number"
            if self.type == "int":
                if not number.is_integer():
                    return None, f"{self.display_label} must be a whole number"
                number = int(number)
            if self.minimum is not None:
                if self.exclusive_minimum and not number > self.minimum:
                    return None, f"{self.display_label} must be greater than {_compact(self.minimum)}"
                if not self.exclusive_minimum and number < self.minimum:
                    return None, f"{self.display_label} must be at least {_compact(self.minimum)}"
            return (number if self.type == "int" else _compact(number)), None

        if self.type == "hex":
            if not is_hex_speed(raw):
                return None, f"{self.display_label} must be a hex speed like $4.0"
            return raw.strip(), None

        if self.type == "choice":
            valid = self.choice_values(snapshot)
            for candidate in _choice_candidates(raw):
                # type check keeps True from matching 1
                if any(candidate == v and type(candidate) is type(v) for v in valid):
                    return candidate, None
            return None, f"{self.display_label}: '{raw}' is not available"

        if self.type == "bool":
            if isinstance(raw, str):
                return raw.strip().lower() in ("true", "1", "yes"), None
            return bool(raw), None

        if self.type == "text":
            text = str(raw).strip()
            return (text or None), None

        # group
        if not isinstance(raw, Mapping):
            return None, f"{self.display_label} must be an object"
        errors = validate_record(self.fields, raw, snapshot)
        if errors:
            return None, "; ".join(errors)
        return build_record(self.fields, raw, snapshot), None


def build_record(
    specs: Sequence[FieldSpec],
    values: Mapping[str, Any],
    snapshot: Optional["DataSourceSnapshot"] = None,
) -> Optional[Dict[str, Any]]:
    """Build the canonical record, or None when a field is missing or invalid."""
    record: Dict[str, Any] = {}
    for spec in specs:
        value, error = spec.resolve(values.get(spec.name), snapshot)
        if error:
            return None
        if spec.omit(value):
            if spec.required and value is None:
                return None
            continue
        record[spec.name] = value
    return record


def validate_record(
    specs: Sequence[FieldSpec],
    values: Mapping[str, Any],
    snapshot: Optional["DataSourceSnapshot"] = None,
) -> List[str]:
    """List the reasons build_record would return None (empty when valid)."""
    errors: List[str] = []
    for spec in specs:
        value, error = spec.resolve(values.get(spec.name), snapshot)
        if error:
            errors.append(error)
        elif spec.required and value is None:
            errors.append(f"{spec.display_label} is required")
    return errors


def record_values(specs: Sequence[FieldSpec], fragment: Any) -> Dict[str, Any]:
    """Pick the known fields of a canonical record as editable values."""
    if not isinstance(fragment, Mapping):
        return {}
    values: Dict[str, Any] = {}
    for spec in specs:
        if spec.name not in fragment:
            continue
        value = fragment[spec.name]
        if spec.type == "group" and spec.multiple and isinstance(value, (list, tuple)):
            value = [record_values(spec.fields, entry) for entry in value]
        elif spec.type == "group":
            value = record_values(spec.fields, value)
        elif spec.multiple and isinstance(value, (list, tuple)):
            value = list(value)
        values[spec.name] = value
    return values


def default_values(specs: Sequence[FieldSpec]) -> Dict[str, Any]:
    """Initial editor values for a fresh record."""
    values: Dict[str, Any] = {}
    for spec in specs:
        if spec.multiple:
            values[spec.name] = []
        elif spec.type == "group":
            values[spec.name] = default_values(spec.fields)
        elif spec.default is not None:
            values[spec.name] = spec.default
    return values
