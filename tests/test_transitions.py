"""Tests for entrance and exit conditions."""

import pytest


class TestTransitionTables:
    """Test the closed kind sets."""

    def test_kind_counts(self) -> None:
        """Test the entrance and exit kind sets."""
        from reqtree.conditions import EntranceCondition, ExitCondition

        assert len(EntranceCondition.kinds()) == 26
        assert len(ExitCondition.kinds()) == 14
        assert all(kind.startswith("comeIn") for kind in EntranceCondition.kinds())
        assert all(kind.startswith("leave") for kind in ExitCondition.kinds())

    def test_kind_label(self) -> None:
        """Test kind names become readable labels."""
        from reqtree.conditions.transitions import kind_label

        assert kind_label("comeInWithMockball") == "Come In With Mockball"

    def test_unknown_kind(self) -> None:
        """Test kinds outside the set are refused."""
        from reqtree.conditions import ConditionError, EntranceCondition, UnknownTransitionKind

        entrance = EntranceCondition()
        with pytest.raises(UnknownTransitionKind) as excinfo:
            entrance.set_kind("leaveNormally")

        assert excinfo.value.kind == "leaveNormally"
        assert isinstance(excinfo.value, ConditionError)
        assert "entrance" in str(excinfo.value)


class TestEntranceCondition:
    """Test entrance condition editing and serialization."""

    def test_empty(self) -> None:
        """Test no kind means no entrance condition."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition()

        assert entrance.to_canonical() is None
        assert entrance.is_valid()
        assert entrance.describe() == "(no entrance condition)"

    def test_come_in_normally(self) -> None:
        """Test kinds without fields serialize as an empty object."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition()
        entrance.set_kind("comeInNormally")

        assert entrance.to_canonical() == {"comeInNormally": {}}
        assert entrance.describe() == "Come In Normally"

    def test_come_in_running(self) -> None:
        """Test required and optional tile fields."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition()
        entrance.set_kind("comeInRunning")
        assert entrance.to_canonical() is None
        assert entrance.errors() == ["Min tiles is required"]
        assert entrance.describe() == "Come In Running (incomplete)"

        entrance.set_field("minTiles", "2")
        assert entrance.to_canonical() == {"comeInRunning": {"speedBooster": True, "minTiles": 2}}
        assert entrance.describe() == "Come In Running (speedBooster=True, minTiles=2)"

        entrance.set_field("maxTiles", 4.5)
        entrance.set_field("speedBooster", "any")
        assert entrance.to_canonical() == {
            "comeInRunning": {"speedBooster": "any", "minTiles": 2, "maxTiles": 4.5}
        }

    def test_set_kind_resets_values(self) -> None:
        """Test switching kind drops the previous fields."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition({"comeInJumping": {"speedBooster": False, "minTiles": 3}})
        entrance.set_kind("comeInWithSpark")

        assert entrance.values == {}
        assert entrance.to_canonical() == {"comeInWithSpark": {}}

    def test_set_unknown_field(self) -> None:
        """Test fields outside the kind's table are refused."""
        from reqtree.conditions import ConditionError, EntranceCondition

        entrance = EntranceCondition({"comeInNormally": {}})

        with pytest.raises(ConditionError):
            entrance.set_field("minTiles", 3)

    def test_toilet_and_dev_note(self) -> None:
        """Test sibling keys are carried through."""
        from reqtree.conditions import EntranceCondition

        fragment = {
            "comeInShinecharged": {},
            "comesThroughToilet": "any",
            "devNote": "Only with the door frame below.",
        }
        entrance = EntranceCondition(fragment)

        assert entrance.comes_through_toilet == "any"
        assert entrance.to_canonical() == fragment

    def test_toilet_omitted_when_no(self) -> None:
        """Test the default toilet value is not written."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition({"comeInShinecharged": {}, "comesThroughToilet": "no"})

        assert entrance.to_canonical() == {"comeInShinecharged": {}}

    def test_toilet_not_written_for_normal_entrance(self) -> None:
        """Test comeInNormally never carries the toilet flag."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition({"comeInNormally": {}})
        entrance.comes_through_toilet = "yes"

        assert not entrance.supports_toilet
        assert entrance.to_canonical() == {"comeInNormally": {}}

    def test_invalid_toilet_value(self) -> None:
        """Test toilet values are checked."""
        from reqtree.conditions import ConditionError, EntranceCondition

        entrance = EntranceCondition({"comeInShinecharged": {}, "comesThroughToilet": "maybe"})
        assert entrance.comes_through_toilet == "no"

        with pytest.raises(ConditionError):
            entrance.comes_through_toilet = "maybe"

    def test_invalid_hex_speed(self) -> None:
        """Test a malformed speed makes the entrance incomplete."""
        from reqtree.conditions import EntranceCondition

        entrance = EntranceCondition({"comeInBlueSpaceJumping": {"minExtraRunSpeed": "fast"}})

        assert entrance.to_canonical() is None
        assert entrance.errors() == ["Min extra run speed must be a hex speed like $4.0"]

        entrance.set_field("minExtraRunSpeed", "$2.C")
        assert entrance.to_canonical() == {"comeInBlueSpaceJumping": {"minExtraRunSpeed": "$2.C"}}

    def test_speedballing_runway_group(self) -> None:
        """Test nested runway records."""
        from reqtree.conditions import EntranceCondition

        fragment = {
            "comeInSpeedballing": {
                "runway": {"length": 10, "openEnd": 1},
                "maxExtraRunSpeed": "$3.0",
            }
        }

        assert EntranceCondition(fragment).to_canonical() == fragment

    def test_platform_below_allows_negative_heights(self) -> None:
        """Test unbounded position fields."""
        from reqtree.conditions import EntranceCondition

        fragment = {"comeInWithPlatformBelow": {"minHeight": -2, "maxLeftPosition": 1.5}}

        assert EntranceCondition(fragment).to_canonical() == fragment


class TestExitCondition:
    """Test exit condition editing and serialization."""

    def test_leave_with_runway(self) -> None:
        """Test runway defaults are pruned."""
        from reqtree.conditions import ExitCondition

        exit_condition = ExitCondition(
            {
                "leaveWithRunway": {
                    "length": 12,
                    "openEnd": 1,
                    "gentleUpTiles": 0,
                    "startingDownTiles": 2,
                    "heated": False,
                    "cold": True,
                }
            }
        )

        assert exit_condition.to_canonical() == {
            "leaveWithRunway": {"length": 12, "openEnd": 1, "startingDownTiles": 2, "cold": True}
        }

    def test_fresh_runway_needs_length(self) -> None:
        """Test a new runway is incomplete until a length is set."""
        from reqtree.conditions import ExitCondition

        exit_condition = ExitCondition()
        exit_condition.set_kind("leaveWithRunway")
        assert exit_condition.to_canonical() is None
        assert not exit_condition.is_valid()

        exit_condition.set_field("length", 5)
        assert exit_condition.to_canonical() == {"leaveWithRunway": {"length": 5, "openEnd": 0}}

    def test_leave_with_mockball(self) -> None:
        """Test remote and landing runways."""
        from reqtree.conditions import ExitCondition

        fragment = {
            "leaveWithMockball": {
                "remoteRunway": {"length": 8, "openEnd": 0},
                "landingRunway": {"length": 3, "openEnd": 1},
                "blue": "no",
            }
        }

        assert ExitCondition(fragment).to_canonical() == fragment

    def test_stored_fall_speed(self) -> None:
        """Test fall speed must be a whole number."""
        from reqtree.conditions import ExitCondition

        assert ExitCondition({"leaveWithStoredFallSpeed": {"fallSpeedInTiles": 1}}).to_canonical() == {
            "leaveWithStoredFallSpeed": {"fallSpeedInTiles": 1}
        }
        assert ExitCondition({"leaveWithStoredFallSpeed": {"fallSpeedInTiles": 1.5}}).to_canonical() is None

    def test_platform_below(self) -> None:
        """Test every platform field is required."""
        from reqtree.conditions import ExitCondition

        exit_condition = ExitCondition({"leaveWithPlatformBelow": {"height": 3, "leftPosition": -1}})

        assert exit_condition.to_canonical() is None
        assert exit_condition.errors() == ["Right position is required"]

    def test_exit_has_no_toilet(self) -> None:
        """Test exits ignore entrance only keys."""
        from reqtree.conditions import ExitCondition

        exit_condition = ExitCondition({"leaveNormally": {}, "devNote": "Door is grey."})

        assert exit_condition.to_canonical() == {"leaveNormally": {}, "devNote": "Door is grey."}
        assert exit_condition.describe() == "Leave Normally"

    def test_load_rejects_non_objects(self) -> None:
        """Test a transition must be an object."""
        from reqtree.conditions import ConditionError, ExitCondition

        exit_condition = ExitCondition()

        with pytest.raises(ConditionError):
            exit_condition.load(["leaveNormally"])  # type: ignore[arg-type]
