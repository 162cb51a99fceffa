"""Shared fixtures for reqtree tests."""

import os
from typing import Any, Dict

import pytest

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


REFERENCE_DATA: Dict[str, Any] = {
    "items": ["Missile", "Super", "PowerBomb", "Morph", "SpeedBooster", "Gravity", "Varia"],
    "events": ["f_DefeatedKraid", "f_DefeatedPhantoon", "f_ZebesAwake"],
    "weapons": [
        {"id": 1, "name": "PowerBeam"},
        {"id": 2, "name": "Wave"},
        {"id": 3, "name": "Plasma"},
    ],
    "techniques": {
        "Movement": [
            {"id": 10, "name": "canWalljump", "extensionTechs": [{"name": "canPreciseWalljump"}]},
            "canIBJ",
        ],
        "Speed Booster": [{"id": 20, "name": "canShinespark"}],
    },
    "helpers": {
        "Doors": [{"name": "h_canOpenGreenDoors"}, {"name": "h_canOpenRedDoors"}],
        "Bombs": [{"name": "h_canUsePowerBombs"}],
    },
    "enemies": [{"id": 1, "name": "Geemer"}, {"id": 2, "name": "Ripper"}, "Sidehopper"],
    "roomNodes": [
        {"id": 1, "name": "Left Door", "nodeType": "door", "nodeSubType": "blue"},
        {"id": 2, "name": "Right Door", "nodeType": "door", "nodeSubType": "blue"},
        {"id": 3, "name": "Missile Pickup", "nodeType": "item", "nodeSubType": "visible"},
        {"id": 4, "name": "Junction", "nodeType": "junction", "nodeSubType": "junction"},
    ],
    "enemyGroups": [
        {"id": "e1", "groupName": "Top Geemers", "enemyName": "Geemer"},
        {"id": "e2", "groupName": "Bottom Geemers", "enemyName": "Geemer"},
        {"id": "e3", "groupName": "Ripper", "enemyName": "Ripper"},
    ],
    "notables": [{"id": 1, "name": "Crumble Jump"}, {"id": 2, "name": "Ceiling Clip"}],
    "obstacles": [{"id": "A", "name": "Bomb Blocks"}, {"id": "B", "name": "Shot Block"}],
}


@pytest.fixture
def reference_data() -> Dict[str, Any]:
    """A fresh copy of the reference data mapping."""
    import copy

    return copy.deepcopy(REFERENCE_DATA)


@pytest.fixture
def snapshot(reference_data: Dict[str, Any]) -> Any:
    """Snapshot built from the reference data."""
    from reqtree.conditions import DataSourceSnapshot

    return DataSourceSnapshot.from_dict(reference_data)


@pytest.fixture
def bus(snapshot: Any) -> Any:
    """Bus publishing the reference snapshot."""
    from reqtree.conditions import DataSourceBus

    return DataSourceBus(snapshot)


@pytest.fixture
def empty_bus() -> Any:
    """Bus without any reference data."""
    from reqtree.conditions import DataSourceBus

    return DataSourceBus()


@pytest.fixture
def registry() -> Any:
    """A private handler registry tests may modify."""
    from reqtree.conditions import default_registry

    return default_registry()
