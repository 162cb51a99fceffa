"""Tests for declarative record fields."""

from typing import Any


class TestFieldSpecResolve:
    """Test coercion of raw editor values."""

    def test_int_parses_strings(self) -> None:
        """Test whole numbers are accepted as numbers or strings."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("count", "int", minimum=1)
        assert spec.resolve("12") == (12, None)
        assert spec.resolve(3.0) == (3, None)

    def test_int_rejects_fractions_and_minimum(self) -> None:
        """Test fractional and too small values report an error."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("count", "int", minimum=1)
        assert spec.resolve(1.5) == (None, "Count must be a whole number")
        assert spec.resolve(0) == (None, "Count must be at least 1")
        assert spec.resolve("many") == (None, "Count must be a number")

    def test_float_exclusive_minimum(self) -> None:
        """Test exclusive minimums reject the bound itself."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("usedTiles", "float", minimum=0, exclusive_minimum=True)
        assert spec.resolve(0) == (None, "Used tiles must be greater than 0")
        assert spec.resolve("12.5") == (12.5, None)
        # integral floats are written as ints
        assert spec.resolve(20.0) == (20, None)

    def test_absent_values(self) -> None:
        """Test None and blank strings are absent, not invalid."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("count", "int", required=True)
        assert spec.resolve(None) == (None, None)
        assert spec.resolve("  ") == (None, None)

    def test_hex_speed(self) -> None:
        """Test hexadecimal speed strings."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("minExtraRunSpeed", "hex")
        assert spec.resolve("$4.0") == ("$4.0", None)
        assert spec.resolve(" $F ") == ("$F", None)
        value, error = spec.resolve("4.0")
        assert value is None
        assert error == "Min extra run speed must be a hex speed like $4.0"

    def test_choice_keeps_bool_and_int_apart(self) -> None:
        """Test editor strings map to typed choices without True matching 1."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("speedBooster", "choice", choices=(True, False, "any"))
        assert spec.resolve("true") == (True, None)
        assert spec.resolve("any") == ("any", None)
        assert spec.resolve(1)[0] is None

    def test_choice_from_snapshot(self, snapshot: Any) -> None:
        """Test choices_source reads the snapshot list."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("node", "choice", choices_source="room_nodes")
        assert spec.resolve("2", snapshot) == (2, None)
        assert spec.resolve(9, snapshot) == (None, "Node: '9' is not available")
        assert spec.choice_values(None) == []

    def test_bool_strings(self) -> None:
        """Test boolean strings."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("heated", "bool")
        assert spec.resolve("yes") == (True, None)
        assert spec.resolve("false") == (False, None)
        assert spec.resolve(0) == (False, None)

    def test_multiple_drops_invalid_and_duplicates(self) -> None:
        """Test multi-value fields keep valid unique selections in order."""
        from reqtree.conditions import FieldSpec

        spec = FieldSpec("values", "choice", multiple=True, choices=("a", "b"))
        assert spec.resolve(["b", "b", "c", "a"]) == (["b", "a"], None)
        assert spec.resolve(["c"]) == (None, None)
        assert spec.resolve("a") == (["a"], None)

    def test_unknown_type_rejected(self) -> None:
        """Test field types are checked on creation."""
        import pytest

        from reqtree.conditions import FieldSpec

        with pytest.raises(ValueError):
            FieldSpec("x", "date")

    def test_display_label(self) -> None:
        """Test camelCase names become labels unless a label is given."""
        from reqtree.conditions import FieldSpec

        assert FieldSpec("fallSpeedInTiles").display_label == "Fall speed in tiles"
        assert FieldSpec("gMode", "bool", label="G-Mode fight").display_label == "G-Mode fight"


class TestRecords:
    """Test building and validating records."""

    def test_build_record_prunes_defaults(self) -> None:
        """Test omit_default fields and absent optionals are left out."""
        from reqtree.conditions import FieldSpec, build_record

        specs = (
            FieldSpec("frames", "int", required=True, minimum=0),
            FieldSpec("excessFrames", "int", minimum=0, default=0, omit_default=True),
            FieldSpec("note", "text"),
        )
        assert build_record(specs, {"frames": 20, "excessFrames": 0}) == {"frames": 20}
        assert build_record(specs, {"frames": 20, "excessFrames": 5, "note": " x "}) == {
            "frames": 20,
            "excessFrames": 5,
            "note": "x",
        }

    def test_build_record_missing_or_invalid(self) -> None:
        """Test a missing required field or an invalid field gives None."""
        from reqtree.conditions import FieldSpec, build_record

        specs = (
            FieldSpec("frames", "int", required=True, minimum=0),
            FieldSpec("speed", "hex"),
        )
        assert build_record(specs, {}) is None
        assert build_record(specs, {"frames": 3, "speed": "fast"}) is None

    def test_validate_record_messages(self) -> None:
        """Test validation explains why a record is incomplete."""
        from reqtree.conditions import FieldSpec, validate_record

        specs = (
            FieldSpec("type", "choice", required=True, choices=("Missile",)),
            FieldSpec("limit", "int", required=True, minimum=0),
        )
        assert validate_record(specs, {"type": "Missile"}) == ["Limit is required"]
        assert validate_record(specs, {"type": "Bomb", "limit": -1}) == [
            "Type: 'Bomb' is not available",
            "Limit must be at least 0",
        ]
        assert validate_record(specs, {"type": "Missile", "limit": 0}) == []

    def test_group_fields(self) -> None:
        """Test nested group records."""
        from reqtree.conditions import FieldSpec, build_record

        runway = FieldSpec(
            "runway",
            "group",
            required=True,
            fields=(
                FieldSpec("length", "float", required=True, minimum=0),
                FieldSpec("openEnd", "int", required=True, minimum=0, default=0),
            ),
        )
        assert build_record((runway,), {"runway": {"length": 5, "openEnd": 1}}) == {
            "runway": {"length": 5, "openEnd": 1}
        }
        assert build_record((runway,), {"runway": {"openEnd": 1}}) is None

    def test_default_and_record_values(self) -> None:
        """Test editor values for fresh and loaded records."""
        from reqtree.conditions.fields import default_values, record_values
        from reqtree.conditions import FieldSpec

        specs = (
            FieldSpec("type", "choice", choices=("Missile", "Super"), default="Missile"),
            FieldSpec("count", "int", default=1),
            FieldSpec("weapons", "choice", multiple=True),
            FieldSpec("limit", "int"),
        )
        assert default_values(specs) == {"type": "Missile", "count": 1, "weapons": []}
        assert record_values(specs, {"type": "Super", "other": 1}) == {"type": "Super"}
        assert record_values(specs, "not a record") == {}
