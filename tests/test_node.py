"""Tests for condition tree nodes."""

from typing import Any, List

import pytest


class TestNormalizeFragment:
    """Test splitting fragments into kind and payload."""

    def test_empty_values(self, snapshot: Any) -> None:
        """Test every empty shape means no condition."""
        from reqtree.conditions import normalize_fragment

        for fragment in (None, "", {}, []):
            assert normalize_fragment(fragment, snapshot) == ("", None)

    def test_shorthand_strings(self, snapshot: Any) -> None:
        """Test plain strings are resolved by their naming convention."""
        from reqtree.conditions import normalize_fragment

        assert normalize_fragment("never", snapshot) == ("never", {})
        assert normalize_fragment("f_DefeatedKraid", snapshot) == ("event", "f_DefeatedKraid")
        assert normalize_fragment("h_canOpenGreenDoors", snapshot) == ("helper", "h_canOpenGreenDoors")
        assert normalize_fragment("Morph", snapshot) == ("item", "Morph")
        assert normalize_fragment("canIBJ", snapshot) == ("tech", "canIBJ")
        # without reference data unknown names fall back to techniques
        assert normalize_fragment("Morph") == ("tech", "Morph")

    def test_lists_and_dicts(self) -> None:
        """Test lists are an implicit and, dicts use their first key."""
        from reqtree.conditions import normalize_fragment

        assert normalize_fragment(["a", "b"]) == ("and", ["a", "b"])
        assert normalize_fragment({"item": "Morph"}) == ("item", "Morph")


class TestTreeConstruction:
    """Test building trees from fragments."""

    def test_build_tree_root(self, bus: Any) -> None:
        """Test the root node and its children."""
        from reqtree.conditions import build_tree

        root = build_tree({"or": [{"item": "Morph"}, {"and": ["canIBJ", "Varia"]}]}, bus)

        assert root.is_root
        assert root.kind == "or"
        assert [child.kind for child in root.children] == ["item", "and"]
        assert root.children[1].depth == 1
        assert root.children[1].children[1].depth == 2
        assert root.children[1].children[1].parent is root.children[1]

    def test_string_list_document(self, bus: Any) -> None:
        """Test a list of shorthand strings."""
        from reqtree.conditions import build_tree

        root = build_tree(["Morph", "f_ZebesAwake", "canWalljump"], bus)

        assert root.to_canonical() == {
            "and": [{"item": "Morph"}, {"event": "f_ZebesAwake"}, {"tech": "canWalljump"}]
        }

    def test_every_node_subscribes(self, bus: Any) -> None:
        """Test each live node holds one bus subscription."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}, {"or": [{"item": "Varia"}, "never"]}]}, bus)

        assert bus.subscriber_count == len(list(root.walk())) == 5

    def test_malformed_not_keeps_children(self, bus: Any) -> None:
        """Test extra children under not stay editable."""
        from reqtree.conditions import build_tree

        root = build_tree({"not": [{"free": {}}, {"never": {}}]}, bus)

        assert len(root.children) == 2


class TestTreeMutation:
    """Test editing operations."""

    def test_set_kind_discards_children(self, bus: Any) -> None:
        """Test switching kind tears down the old subtree."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}, {"item": "Varia"}]}, bus)
        old_children = list(root.children)

        root.set_kind("item")

        assert root.children == []
        assert all(child.removed for child in old_children)
        assert bus.subscriber_count == 1
        assert root.leaf_state == {}
        assert root.info.label == "Must have specific item"

    def test_set_kind_does_not_carry_leaf_state(self, bus: Any) -> None:
        """Test leaf values are rebuilt empty on a kind change."""
        from reqtree.conditions import build_tree

        root = build_tree({"heatFrames": 60}, bus)
        root.set_kind("lavaFrames")

        assert root.to_canonical() == {"lavaFrames": 1}

    def test_add_child(self, bus: Any) -> None:
        """Test appending children to logical nodes."""
        from reqtree.conditions import build_tree

        root = build_tree({"or": []}, bus)
        child = root.add_child({"item": "Morph"})

        assert child.parent is root
        assert child.depth == 1
        assert root.to_canonical() == {"or": [{"item": "Morph"}]}

    def test_add_child_to_leaf_refused(self, bus: Any) -> None:
        """Test leaves cannot have children."""
        from reqtree.conditions import ConditionError, build_tree

        root = build_tree({"item": "Morph"}, bus)

        with pytest.raises(ConditionError):
            root.add_child()

    def test_add_child_at_max_depth(self, bus: Any) -> None:
        """Test the depth guard returns an inert placeholder."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"and": [{"item": "Morph"}]}]}, bus, max_depth=1)
        inner = root.children[0]
        subscribers = bus.subscriber_count

        placeholder = inner.add_child({"item": "Varia"})

        assert placeholder.is_placeholder
        assert placeholder.to_canonical() is None
        assert placeholder.is_valid()
        assert placeholder.describe() == "No condition"
        assert placeholder not in inner.children
        assert bus.subscriber_count == subscribers
        assert not inner.can_add_child

    def test_deep_fragment_is_truncated(self, bus: Any) -> None:
        """Test loading never builds nodes below max_depth."""
        from reqtree.conditions import build_tree

        fragment: Any = {"item": "Morph"}
        for _ in range(5):
            fragment = {"and": [fragment]}

        root = build_tree(fragment, bus, max_depth=3)

        assert max(node.depth for node in root.walk()) == 3
        assert root.to_canonical() is None

    def test_remove_child_cascades(self, bus: Any) -> None:
        """Test removing a subtree unsubscribes and notifies every node once."""
        from reqtree.conditions import build_tree

        removed: List[str] = []
        root = build_tree({"and": [{"item": "Morph"}]}, bus)
        branch = root.add_child({"or": []}, on_remove=lambda: removed.append("branch"))
        branch.add_child({"item": "Varia"}, on_remove=lambda: removed.append("leaf"))

        assert bus.subscriber_count == 4
        assert root.remove_child(branch)

        assert bus.subscriber_count == 2
        assert sorted(removed) == ["branch", "leaf"]
        assert branch.removed
        assert branch.remove() is False
        assert removed.count("branch") == 1

    def test_remove_unknown_child(self, bus: Any) -> None:
        """Test removing a node that is not a child does nothing."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}]}, bus)
        other = build_tree({"item": "Varia"}, bus)

        assert root.remove_child(other) is False
        assert len(root.children) == 1

    def test_node_remove_detaches_from_parent(self, bus: Any) -> None:
        """Test a child removes itself from its parent."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}, {"item": "Varia"}]}, bus)

        assert root.children[0].remove()
        assert root.to_canonical() == {"and": [{"item": "Varia"}]}

    def test_root_removal_needs_force(self, bus: Any) -> None:
        """Test roots are only removed when forced."""
        from reqtree.conditions import build_tree

        calls: List[int] = []
        root = build_tree({"and": [{"item": "Morph"}]}, bus, on_remove=lambda: calls.append(1))

        assert root.remove() is False
        assert not root.removed
        assert root.remove(force=True)
        assert root.removed
        assert calls == [1]
        assert bus.subscriber_count == 0

    def test_removed_node_refuses_edits(self, bus: Any) -> None:
        """Test a removed node cannot change kind."""
        from reqtree.conditions import ConditionError, build_tree

        root = build_tree({"item": "Morph"}, bus)
        root.remove(force=True)

        with pytest.raises(ConditionError):
            root.set_kind("and")
        assert root.to_canonical() is None

    def test_set_leaf_field_on_logical_refused(self, bus: Any) -> None:
        """Test logical nodes have no fields."""
        from reqtree.conditions import ConditionError, build_tree

        root = build_tree({"and": []}, bus)

        with pytest.raises(ConditionError):
            root.set_leaf_field("value", "Morph")

    def test_toggle_collapse_is_presentation_only(self, bus: Any) -> None:
        """Test collapsing does not change the value."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}]}, bus)

        assert root.toggle_collapse() is True
        assert root.collapsed
        assert root.to_canonical() == {"and": [{"item": "Morph"}]}
        assert root.toggle_collapse() is False


class TestTraversal:
    """Test walking and addressing nodes."""

    def test_walk_path_and_find(self, bus: Any) -> None:
        """Test pre-order walking and path lookups."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}, {"or": [{"item": "Varia"}, {"item": "Gravity"}]}]}, bus)

        kinds = [node.kind for node in root.walk()]
        assert kinds == ["and", "item", "or", "item", "item"]

        gravity = root.children[1].children[1]
        assert gravity.path() == (1, 1)
        assert root.find((1, 1)) is gravity
        assert root.find((5,)) is None
        assert gravity.root() is root
        assert root.path() == ()


class TestChangeListeners:
    """Test change notification."""

    def test_changes_bubble_to_ancestors(self, bus: Any) -> None:
        """Test listeners see changes of descendants."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"or": [{"item": "Morph"}]}]}, bus)
        leaf = root.children[0].children[0]
        seen: List[Any] = []
        root.add_change_listener(seen.append)

        leaf.set_leaf_field("value", "Varia")

        assert seen == [leaf]

    def test_remove_listener(self, bus: Any) -> None:
        """Test the returned callable removes the listener."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": []}, bus)
        seen: List[Any] = []
        remove_listener = root.add_change_listener(seen.append)
        remove_listener()

        root.add_child({"item": "Morph"})

        assert seen == []


class TestDataSourceRefresh:
    """Test rebuilding leaves when reference data changes."""

    def test_refresh_keeps_available_selection(self, bus: Any, reference_data: Any) -> None:
        """Test a selection still in the reference data survives."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Missile"}, {"tech": ["canIBJ", "canWalljump"]}]}, bus)
        before = root.to_canonical()

        reference_data["items"].append("ScrewAttack")
        bus.update_all(reference_data)

        assert root.to_canonical() == before

    def test_refresh_keeps_removed_selection(self, bus: Any, reference_data: Any) -> None:
        """Test a removed selection stays in the state but no longer serializes."""
        from reqtree.conditions import build_tree

        root = build_tree({"item": "Missile"}, bus)

        reference_data["items"].remove("Missile")
        bus.update_all(reference_data)

        assert root.to_canonical() is None
        assert root.leaf_state["value"] == "Missile"
        assert root.errors() == ["Item: 'Missile' is not available"]

    def test_removed_selection_returns(self, bus: Any, reference_data: Any) -> None:
        """Test a kept selection serializes again once it is back in the data."""
        from reqtree.conditions import build_tree

        root = build_tree({"item": "Missile"}, bus)

        reference_data["items"].remove("Missile")
        bus.update_all(reference_data)
        reference_data["items"].append("Missile")
        bus.update_all(reference_data)

        assert root.to_canonical() == {"item": "Missile"}

    def test_refresh_filters_multi_selection(self, bus: Any, reference_data: Any) -> None:
        """Test only the removed technique disappears from the canonical value."""
        from reqtree.conditions import build_tree

        root = build_tree({"tech": ["canIBJ", "canWalljump"]}, bus)

        reference_data["techniques"]["Movement"] = ["canIBJ"]
        bus.update_all(reference_data)

        assert root.to_canonical() == {"tech": "canIBJ"}
        assert root.leaf_state["values"] == ["canIBJ", "canWalljump"]

    def test_incomplete_edit_keeps_stale_field(self, bus: Any, reference_data: Any) -> None:
        """Test an unfinished edit keeps a value that no longer resolves."""
        from reqtree.conditions import build_tree

        root = build_tree(None, bus)
        root.set_kind("enemyDamage")
        root.set_leaf_field("enemy", "Ripper")

        reference_data["enemies"] = ["Geemer"]
        bus.update_all(reference_data)

        assert root.leaf_state["enemy"] == "Ripper"
        assert root.to_canonical() is None

    def test_refresh_reaches_nested_nodes(self, bus: Any, reference_data: Any) -> None:
        """Test nested leaves refresh through their own subscription."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"or": [{"event": "f_DefeatedKraid"}, {"heatFrames": 50}]}]}, bus)

        reference_data["events"] = ["f_ZebesAwake"]
        bus.update_all(reference_data)

        assert root.to_canonical() == {"and": [{"or": [{"heatFrames": 50}]}]}

    def test_incomplete_edit_retained_when_still_valid(self, bus: Any) -> None:
        """Test unfinished fields that still resolve survive a refresh."""
        from reqtree.conditions import build_tree

        root = build_tree(None, bus)
        root.set_kind("enemyDamage")
        root.set_leaf_field("enemy", "Ripper")

        bus.update_all(bus.snapshot)

        assert root.leaf_state["enemy"] == "Ripper"
        root.set_leaf_field("type", "contact")
        assert root.to_canonical() == {"enemyDamage": {"enemy": "Ripper", "type": "contact", "hits": 1}}

    def test_removed_nodes_are_not_refreshed(self, bus: Any) -> None:
        """Test detached subtrees no longer receive updates."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}]}, bus)
        child = root.children[0]
        child.remove()
        calls: List[Any] = []
        child.add_change_listener(calls.append)

        bus.update_all({"items": []})

        assert calls == []
        assert bus.subscriber_count == 1

    def test_refresh_notifies_listeners(self, bus: Any) -> None:
        """Test data dependent leaves report the rebuild."""
        from reqtree.conditions import build_tree

        root = build_tree({"and": [{"item": "Morph"}, {"heatFrames": 60}]}, bus)
        seen: List[Any] = []
        root.add_change_listener(seen.append)

        bus.update_all(bus.snapshot)

        assert seen == [root.children[0]]
