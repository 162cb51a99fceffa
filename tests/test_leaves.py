"""Tests for the concrete leaf condition kinds."""

from typing import Any


class TestReferenceLeaves:
    """Test item, event, notable and node reference kinds."""

    def test_item(self, bus: Any) -> None:
        """Test an available item serializes unchanged."""
        from reqtree.conditions import build_tree

        node = build_tree({"item": "Missile"}, bus)

        assert node.to_canonical() == {"item": "Missile"}
        assert node.describe() == "Item: Missile"
        assert node.errors() == []

    def test_unavailable_item(self, bus: Any) -> None:
        """Test an item missing from the reference data is incomplete."""
        from reqtree.conditions import build_tree

        node = build_tree({"item": "ScrewAttack"}, bus)

        assert node.to_canonical() is None
        assert node.errors() == ["Item: 'ScrewAttack' is not available"]

    def test_fresh_item_is_incomplete(self, bus: Any) -> None:
        """Test an item node without selection."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("item")

        assert node.to_canonical() is None
        assert node.errors() == ["Item is required"]
        assert node.choices("value") == sorted(bus.snapshot.items)

        node.set_leaf_field("value", "Gravity")
        assert node.to_canonical() == {"item": "Gravity"}

    def test_event_notable_and_equipment(self, bus: Any) -> None:
        """Test the other single reference kinds."""
        from reqtree.conditions import build_tree

        assert build_tree({"event": "f_DefeatedKraid"}, bus).to_canonical() == {
            "event": "f_DefeatedKraid"
        }
        assert build_tree({"notable": "Crumble Jump"}, bus).to_canonical() == {
            "notable": "Crumble Jump"
        }
        assert build_tree({"disableEquipment": "SpeedBooster"}, bus).to_canonical() == {
            "disableEquipment": "SpeedBooster"
        }
        assert build_tree({"event": "f_Unknown"}, bus).to_canonical() is None

    def test_door_node(self, bus: Any) -> None:
        """Test node references accept ids of the room."""
        from reqtree.conditions import build_tree

        assert build_tree({"doorUnlockedAtNode": 2}, bus).to_canonical() == {
            "doorUnlockedAtNode": 2
        }
        assert build_tree({"doorUnlockedAtNode": 9}, bus).to_canonical() is None

    def test_item_node_requires_item_type(self, bus: Any) -> None:
        """Test item collection kinds only accept item nodes."""
        from reqtree.conditions import build_tree

        assert build_tree({"itemCollectedAtNode": 3}, bus).to_canonical() == {
            "itemCollectedAtNode": 3
        }
        assert build_tree({"itemNotCollectedAtNode": 1}, bus).to_canonical() is None


class TestMultiReferenceLeaves:
    """Test tech and helper kinds."""

    def test_single_tech(self, bus: Any) -> None:
        """Test one technique serializes as a plain leaf."""
        from reqtree.conditions import build_tree

        node = build_tree({"tech": "canWalljump"}, bus)

        assert node.to_canonical() == {"tech": "canWalljump"}
        assert node.leaf_state == {"values": ["canWalljump"]}

    def test_several_techs_wrap_in_and(self, bus: Any) -> None:
        """Test several techniques serialize as an and of leaves."""
        from reqtree.conditions import build_tree

        node = build_tree({"tech": "canWalljump"}, bus)
        node.set_leaf_field("values", ["canWalljump", "canPreciseWalljump"])

        assert node.to_canonical() == {
            "and": [{"tech": "canWalljump"}, {"tech": "canPreciseWalljump"}]
        }

    def test_tech_list_input(self, bus: Any) -> None:
        """Test a list payload is accepted."""
        from reqtree.conditions import build_tree

        node = build_tree({"helper": ["h_canOpenGreenDoors", "h_canUsePowerBombs"]}, bus)

        assert node.to_canonical() == {
            "and": [{"helper": "h_canOpenGreenDoors"}, {"helper": "h_canUsePowerBombs"}]
        }

    def test_unknown_tech_is_dropped(self, bus: Any) -> None:
        """Test selections missing from the reference data are not saved."""
        from reqtree.conditions import build_tree

        node = build_tree({"tech": ["canIBJ", "canFly"]}, bus)

        assert node.to_canonical() == {"tech": "canIBJ"}
        assert build_tree({"tech": "canFly"}, bus).to_canonical() is None


class TestNumberLeaves:
    """Test frame and hit count kinds."""

    def test_frames(self, bus: Any) -> None:
        """Test a frame count round-trips."""
        from reqtree.conditions import build_tree

        assert build_tree({"heatFrames": 60}, bus).to_canonical() == {"heatFrames": 60}
        assert build_tree({"spikeHits": "2"}, bus).to_canonical() == {"spikeHits": 2}

    def test_frames_minimum(self, bus: Any) -> None:
        """Test counts below one are rejected except shinecharge frames."""
        from reqtree.conditions import build_tree

        node = build_tree({"heatFrames": 0}, bus)
        assert node.to_canonical() is None
        assert node.errors() == ["Frames must be at least 1"]

        assert build_tree({"shineChargeFrames": 0}, bus).to_canonical() == {
            "shineChargeFrames": 0
        }

    def test_fresh_number_defaults_to_minimum(self, bus: Any) -> None:
        """Test a new numeric node starts at its minimum."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("lavaFrames")

        assert node.to_canonical() == {"lavaFrames": 1}

    def test_placeholder(self, bus: Any) -> None:
        """Test numeric fields carry a kind specific placeholder."""
        from reqtree.conditions import build_tree

        spec = build_tree({"heatFrames": 60}, bus).field_specs()[0]

        assert spec.placeholder == "Heat damage frames"
        assert spec.label == "Frames"


class TestConstantLeaves:
    """Test kinds without properties."""

    def test_constants(self, bus: Any) -> None:
        """Test constant kinds serialize as an empty object."""
        from reqtree.conditions import build_tree

        for kind in ("free", "never", "gainFlashSuit", "useFlashSuit", "noFlashSuit"):
            assert build_tree({kind: {}}, bus).to_canonical() == {kind: {}}

    def test_sentinel_strings(self, bus: Any) -> None:
        """Test the free and never shorthands."""
        from reqtree.conditions import build_tree

        assert build_tree("free", bus).to_canonical() == {"free": {}}
        assert build_tree("never", bus).to_canonical() == {"never": {}}


class TestResourceLeaves:
    """Test resource and refill kinds."""

    def test_resource_list(self, bus: Any) -> None:
        """Test resource thresholds round-trip."""
        from reqtree.conditions import build_tree

        fragment = {"resourceAvailable": [{"type": "Energy", "count": 50}, {"type": "Missile", "count": 0}]}

        assert build_tree(fragment, bus).to_canonical() == fragment

    def test_single_resource_object(self, bus: Any) -> None:
        """Test a single object is accepted in place of a list."""
        from reqtree.conditions import build_tree

        node = build_tree({"resourceCapacity": {"type": "Super", "count": 10}}, bus)

        assert node.to_canonical() == {"resourceCapacity": [{"type": "Super", "count": 10}]}

    def test_resource_consumed_energy_only(self, bus: Any) -> None:
        """Test resourceConsumed only accepts energy types."""
        from reqtree.conditions import build_tree

        assert build_tree({"resourceConsumed": [{"type": "Missile", "count": 5}]}, bus).to_canonical() is None
        assert build_tree(
            {"resourceConsumed": [{"type": "ReserveEnergy", "count": 5}]}, bus
        ).to_canonical() == {"resourceConsumed": [{"type": "ReserveEnergy", "count": 5}]}

    def test_entry_without_type_dropped(self, bus: Any) -> None:
        """Test incomplete entries are left out."""
        from reqtree.conditions import build_tree

        node = build_tree({"resourceAtMost": [{"count": 5}, {"type": "Energy", "count": 1}]}, bus)

        assert node.to_canonical() == {"resourceAtMost": [{"type": "Energy", "count": 1}]}

    def test_refill(self, bus: Any) -> None:
        """Test refill lists resource types."""
        from reqtree.conditions import build_tree

        assert build_tree({"refill": ["Missile", "Energy"]}, bus).to_canonical() == {
            "refill": ["Missile", "Energy"]
        }
        assert build_tree({"refill": ["Bombs"]}, bus).to_canonical() is None

    def test_partial_refill(self, bus: Any) -> None:
        """Test partialRefill requires a limit."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("partialRefill")
        assert node.to_canonical() is None
        assert node.errors() == ["Limit is required"]

        node.set_leaf_field("limit", 0)
        assert node.to_canonical() == {"partialRefill": {"type": "Energy", "limit": 0}}

    def test_ammo_defaults(self, bus: Any) -> None:
        """Test a new ammo node spends one missile."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("ammo")

        assert node.to_canonical() == {"ammo": {"type": "Missile", "count": 1}}
        assert build_tree({"ammoDrain": {"type": "PowerBomb", "count": 3}}, bus).to_canonical() == {
            "ammoDrain": {"type": "PowerBomb", "count": 3}
        }
        assert build_tree({"ammo": {"type": "Energy", "count": 3}}, bus).to_canonical() is None


class TestRecordLeaves:
    """Test the remaining record shaped kinds."""

    def test_shinespark_prunes_excess(self, bus: Any) -> None:
        """Test excessFrames is omitted at zero."""
        from reqtree.conditions import build_tree

        assert build_tree({"shinespark": {"frames": 20, "excessFrames": 0}}, bus).to_canonical() == {
            "shinespark": {"frames": 20}
        }
        assert build_tree({"shinespark": {"frames": 20, "excessFrames": 4}}, bus).to_canonical() == {
            "shinespark": {"frames": 20, "excessFrames": 4}
        }

    def test_auto_reserve_trigger(self, bus: Any) -> None:
        """Test default reserve energies are pruned to an empty object."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("autoReserveTrigger")
        assert node.to_canonical() == {"autoReserveTrigger": {}}

        node = build_tree({"autoReserveTrigger": {"maxReserveEnergy": 200}}, bus)
        assert node.to_canonical() == {"autoReserveTrigger": {"maxReserveEnergy": 200}}

    def test_runway_kinds(self, bus: Any) -> None:
        """Test runway lengths must be positive and zero slopes are pruned."""
        from reqtree.conditions import build_tree

        fragment = {"canShineCharge": {"usedTiles": 15, "openEnd": 1, "gentleUpTiles": 0, "steepDownTiles": 2}}
        assert build_tree(fragment, bus).to_canonical() == {
            "canShineCharge": {"usedTiles": 15, "openEnd": 1, "steepDownTiles": 2}
        }

        node = build_tree({"getBlueSpeed": {"usedTiles": 0, "openEnd": 0}}, bus)
        assert node.to_canonical() is None
        assert node.errors() == ["Used tiles must be greater than 0"]

        assert build_tree({"speedBall": {"length": 12.5, "openEnd": 0}}, bus).to_canonical() == {
            "speedBall": {"length": 12.5, "openEnd": 0}
        }

    def test_enemy_damage(self, bus: Any) -> None:
        """Test enemy damage requires a known enemy and an attack type."""
        from reqtree.conditions import build_tree

        fragment = {"enemyDamage": {"enemy": "Geemer", "type": "contact", "hits": 2}}
        assert build_tree(fragment, bus).to_canonical() == fragment

        node = build_tree({"enemyDamage": {"enemy": "Geemer"}}, bus)
        assert node.to_canonical() is None
        assert node.errors() == ["Attack type is required"]

    def test_frames_with_energy_drops(self, bus: Any) -> None:
        """Test drops are optional and validated against enemies."""
        from reqtree.conditions import build_tree

        fragment = {"heatFramesWithEnergyDrops": {"frames": 200, "drops": [{"enemy": "Ripper", "count": 2}]}}
        assert build_tree(fragment, bus).to_canonical() == fragment

        assert build_tree({"lavaFramesWithEnergyDrops": {"frames": 50, "drops": []}}, bus).to_canonical() == {
            "lavaFramesWithEnergyDrops": {"frames": 50}
        }

    def test_ridley_kill(self, bus: Any) -> None:
        """Test Ridley flags are only written when they differ from the defaults."""
        from reqtree.conditions import build_tree

        node = build_tree(None, bus)
        node.set_kind("ridleyKill")
        assert node.to_canonical() == {"ridleyKill": {}}

        fragment = {"ridleyKill": {"powerBombs": False, "gMode": True, "stuck": "top"}}
        assert build_tree(fragment, bus).to_canonical() == fragment


class TestListLeaves:
    """Test reset room, obstacles and enemy kills."""

    def test_reset_room(self, bus: Any) -> None:
        """Test reset room nodes are wrapped in a nodes object."""
        from reqtree.conditions import build_tree

        assert build_tree({"resetRoom": {"nodes": [1, 2]}}, bus).to_canonical() == {
            "resetRoom": {"nodes": [1, 2]}
        }
        assert build_tree({"resetRoom": {"nodes": []}}, bus).to_canonical() is None

    def test_obstacles_filtered_by_snapshot(self, bus: Any) -> None:
        """Test obstacle ids are checked when the room lists obstacles."""
        from reqtree.conditions import build_tree

        assert build_tree({"obstaclesCleared": ["A", "Z"]}, bus).to_canonical() == {
            "obstaclesCleared": ["A"]
        }

    def test_obstacles_free_text_without_list(self, empty_bus: Any) -> None:
        """Test any obstacle id is accepted when none are published."""
        from reqtree.conditions import build_tree

        node = build_tree({"obstaclesNotCleared": ["Z"]}, empty_bus)

        assert node.to_canonical() == {"obstaclesNotCleared": ["Z"]}
        assert node.field_specs()[0].type == "text"

    def test_enemy_kill(self, bus: Any) -> None:
        """Test enemy kill group sets and weapon filters."""
        from reqtree.conditions import build_tree

        fragment = {
            "enemyKill": {
                "enemies": [["e1", "e2"], ["e3"]],
                "explicitWeapons": ["Wave", "Plasma"],
                "farmableAmmo": ["Missile"],
            }
        }
        assert build_tree(fragment, bus).to_canonical() == fragment

    def test_enemy_kill_flat_group(self, bus: Any) -> None:
        """Test a flat enemy list is a single group set."""
        from reqtree.conditions import build_tree

        node = build_tree({"enemyKill": {"enemies": ["e1", "e3"]}}, bus)

        assert node.to_canonical() == {"enemyKill": {"enemies": [["e1", "e3"]]}}

    def test_enemy_kill_repeated_member(self, bus: Any) -> None:
        """Test a group set may name the same enemy group twice."""
        from reqtree.conditions import build_tree

        fragment = {"enemyKill": {"enemies": [["e1", "e1"], ["e2"]]}}

        assert build_tree(fragment, bus).to_canonical() == fragment

    def test_weapon_selection_is_a_set(self, bus: Any) -> None:
        """Test repeated weapons collapse to one entry."""
        from reqtree.conditions import build_tree

        node = build_tree({"enemyKill": {"enemies": [["e1"]], "explicitWeapons": ["Wave", "Wave"]}}, bus)

        assert node.to_canonical() == {"enemyKill": {"enemies": [["e1"]], "explicitWeapons": ["Wave"]}}

    def test_enemy_kill_without_groups(self, bus: Any) -> None:
        """Test an enemy kill needs at least one group."""
        from reqtree.conditions import build_tree

        node = build_tree({"enemyKill": {"enemies": [["e9"]], "excludedWeapons": ["Wave"]}}, bus)

        assert node.to_canonical() is None
