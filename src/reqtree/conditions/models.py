"""
Condition kind metadata and shared constants for reqtree.

Every condition kind the editor knows about is listed in KIND_INFO together
with its display label, qtawesome icon name, header color and description.
The table is purely descriptive: behavior lives in the leaf handlers.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, TypeAlias

# JSON-compatible value produced by serialization (dict, list, str, int, float, bool)
CanonicalFragment: TypeAlias = Any

MAX_DEPTH = 10
INDENT_SIZE = 15

EMPTY_KIND = ""
LOGICAL_KINDS: Tuple[str, ...] = ("and", "or", "not")
SENTINEL_KINDS: Tuple[str, ...] = ("free", "never")

RESOURCE_TYPES: Tuple[str, ...] = (
    "Missile",
    "Super",
    "Ice Missile",
    "Diffusion",
    "PowerBomb",
    "RegularEnergy",
    "ReserveEnergy",
    "Energy",
)
AMMO_TYPES: Tuple[str, ...] = RESOURCE_TYPES[:5]
ENERGY_TYPES: Tuple[str, ...] = ("RegularEnergy", "ReserveEnergy", "Energy")

SLOPE_FIELDS: Tuple[str, ...] = (
    "gentleUpTiles",
    "gentleDownTiles",
    "steepUpTiles",
    "steepDownTiles",
    "startingDownTiles",
)

PLACEHOLDERS: Dict[str, str] = {
    "acidFrames": "Frames in acid",
    "gravitylessAcidFrames": "Frames in acid (no gravity)",
    "electricityFrames": "Frames of electricity",
    "shineChargeFrames": "Shinecharge frames (0-180)",
    "coldFrames": "Cold damage frames",
    "cycleFrames": "Cycle time frames",
    "simpleCycleFrames": "Simple cycle frames",
    "heatFrames": "Heat damage frames",
    "simpleHeatFrames": "Simple heat frames",
    "simpleColdFrames": "Simple cold frames",
    "gravitylessHeatFrames": "Heat frames (no gravity)",
    "hibashiHits": "Number of hibashi hits",
    "lavaFrames": "Frames in lava",
    "gravitylessLavaFrames": "Lava frames (no gravity)",
    "samusEaterFrames": "Samus eater frames",
    "metroidFrames": "Metroid drain frames",
    "spikeHits": "Number of spike hits",
    "thornHits": "Number of thorn hits",
    "electricityHits": "Number of electricity hits",
}


@dataclass(frozen=True)
class KindInfo:
    """Display metadata for one condition kind."""

    kind: str
    label: str
    icon: str
    color: str
    description: str
    category: str = "special"


def _table(category: str, rows: List[Tuple[str, str, str, str, str]]) -> Dict[str, KindInfo]:
    return {
        kind: KindInfo(kind, label, icon, color, description, category)
        for kind, label, icon, color, description in rows
    }


KIND_INFO: Dict[str, KindInfo] = {
    **_table("logic", [
        ("", "(no condition)", "mdi.circle-small", "#f5f5f5", "No condition required"),
        ("and", "All of these must be true", "mdi.set-center", "#a0c4e8",
         "Logical AND - all sub-conditions must be satisfied"),
        ("or", "Any of these can be true", "mdi.set-all", "#fff1b8",
         "Logical OR - at least one sub-condition must be satisfied"),
        ("not", "This must NOT be true", "mdi.cancel", "#f0a0a0",
         "Logical NOT - this condition must not be satisfied"),
    ]),
    **_table("requirement", [
        ("item", "Must have specific item", "mdi.bag-personal", "#d4b3ff",
         "Requires a specific item or upgrade"),
        ("tech", "Must perform technique", "mdi.book-open-variant", "#a0c4e8",
         "Requires execution of specific Tech Logical Requirement(s)"),
        ("helper", "Helper logical requirement", "mdi.book-open-page-variant", "#ebabb0",
         "Requires execution of specific Helper Logical Requirement(s)"),
        ("event", "Game event must have occurred", "mdi.flash", "#ffb3c4",
         "Requires a specific game event to have occurred"),
        ("free", "Always true", "mdi.infinity", "#a4d8a2", "This condition is always satisfied"),
        ("never", "Never true", "mdi.block-helper", "#e69a9a",
         "This condition can never be satisfied"),
    ]),
    **_table("ammo", [
        ("ammo", "Must spend ammunition", "mdi.ammunition", "#ffcc99",
         "Must spend specific amount of ammo"),
        ("ammoDrain", "Ammo drained if available", "mdi.water-minus", "#ccddff",
         "Ammo is drained if available"),
        ("enemyKill", "Must kill specified enemies", "mdi.sword-cross", "#ff9999",
         "Must kill specified enemies"),
        ("refill", "Refill resources to full", "mdi.battery-charging-100", "#99ff99",
         "Fully refills specified resources"),
        ("partialRefill", "Partial resource refill", "mdi.battery-charging-50", "#ccffcc",
         "Partially refills a resource to a limit"),
    ]),
    **_table("health", [
        ("shinespark", "Energy cost of shinespark", "mdi.lightning-bolt", "#ffff99",
         "Energy cost for shinesparking"),
        ("acidFrames", "Time in acid pool", "mdi.flask", "#99ff99", "Time spent in acid"),
        ("gravitylessAcidFrames", "Acid without Gravity Suit", "mdi.flask-outline", "#66ff66",
         "Acid damage without Gravity Suit"),
        ("electricityFrames", "Draygon turret electricity", "mdi.flash-alert", "#ffff66",
         "Electricity damage from Draygon turret"),
        ("enemyDamage", "Intentional enemy damage", "mdi.heart-broken", "#ffaa99",
         "Intentional damage from enemy"),
        ("resourceAtMost", "Resource capped at amount", "mdi.lock", "#ffccff",
         "Resource reduced to maximum value"),
        ("autoReserveTrigger", "Trigger auto-reserve tanks", "mdi.medical-bag", "#ff99cc",
         "Trigger auto-reserves"),
        ("cycleFrames", "Time for farming cycle", "mdi.autorenew", "#ccccff",
         "Time for farming cycle"),
        ("simpleCycleFrames", "Simple cycle time", "mdi.autorenew", "#ddddff",
         "Simple cycle time (no leniency)"),
        ("heatFrames", "Time in heated room", "mdi.fire", "#ff6666", "Time spent in heated room"),
        ("simpleHeatFrames", "Simple heat room time", "mdi.fire", "#ff9999",
         "Simple heat time (no leniency)"),
        ("heatFramesWithEnergyDrops", "Heat damage with energy drops", "mdi.fire-alert",
         "#ff99aa", "Heat damage with energy drops"),
        ("coldFrames", "Time in cold room", "mdi.snowflake", "#66ccff", "Time spent in cold room"),
        ("simpleColdFrames", "Simple cold room time", "mdi.snowflake", "#99ddff",
         "Simple cold time (no leniency)"),
        ("coldFramesWithEnergyDrops", "Cold damage with energy drops", "mdi.snowflake-alert",
         "#99ccff", "Cold damage with energy drops"),
        ("lavaFramesWithEnergyDrops", "Lava damage with energy drops", "mdi.lava-lamp",
         "#ff6600", "Lava damage with energy drops"),
        ("gravitylessHeatFrames", "Heat without Gravity Suit", "mdi.fire", "#ff3333",
         "Heat damage without Gravity Suit"),
        ("shineChargeFrames", "Shinecharge timer frames", "mdi.timer-sand", "#ffffaa",
         "Frames of shinecharge remaining"),
        ("hibashiHits", "Norfair flame pillar hits", "mdi.campfire", "#ff8800",
         "Norfair flame pillar hits"),
        ("lavaFrames", "Time in lava pool", "mdi.lava-lamp", "#ff4400", "Time spent in lava"),
        ("gravitylessLavaFrames", "Lava without Gravity Suit", "mdi.waves", "#ff2200",
         "Lava damage without Gravity Suit"),
        ("samusEaterFrames", "Samus Eater capture damage", "mdi.emoticon-devil", "#cc6699",
         "Damage from Samus Eater"),
        ("metroidFrames", "Metroid energy drain", "mdi.alien", "#9966cc",
         "Energy drained by Metroid"),
        ("spikeHits", "Spike damage hits", "mdi.pin", "#999999", "Damage from spikes"),
        ("thornHits", "Thorn damage hits", "mdi.leaf", "#669966", "Damage from thorns"),
        ("electricityHits", "Electricity damage hits", "mdi.flash-outline", "#6666ff",
         "Electricity damage"),
    ]),
    **_table("resource", [
        ("resourceCapacity", "Minimum resource capacity", "mdi.chart-bar", "#99ccff",
         "Must have minimum capacity"),
        ("resourceMaxCapacity", "Maximum resource capacity", "mdi.chart-bar-stacked", "#cc99ff",
         "Must not exceed capacity"),
        ("resourceAvailable", "Resource amount available", "mdi.trending-up", "#99ffcc",
         "Must have minimum amount"),
        ("resourceConsumed", "Resource amount consumed", "mdi.trending-down", "#ffcc99",
         "Must spend resource amount"),
        ("resourceMissingAtMost", "Nearly full resource", "mdi.gauge-full", "#ccffcc",
         "Missing at most X from full"),
    ]),
    **_table("momentum", [
        ("canShineCharge", "Can charge shinespark", "mdi.run-fast", "#ffff99",
         "Can charge shinespark"),
        ("getBlueSpeed", "Can gain blue speed", "mdi.weather-windy", "#99ccff",
         "Can gain blue speed"),
        ("speedBall", "Can perform speedball", "mdi.soccer", "#ffcc99", "Can perform speedball"),
    ]),
    **_table("room", [
        ("doorUnlockedAtNode", "Door must be unlocked", "mdi.door-open", "#cccc99",
         "Door must be unlocked"),
        ("obstaclesCleared", "Obstacles must be cleared", "mdi.check-circle", "#99ff99",
         "Obstacles must be cleared"),
        ("obstaclesNotCleared", "Obstacles must NOT be cleared", "mdi.close-circle", "#ff9999",
         "Obstacles must not be cleared"),
        ("resetRoom", "Room must be reset", "mdi.restore", "#cccccc", "Room must be reset"),
        ("itemNotCollectedAtNode", "Item must NOT be collected", "mdi.package-variant",
         "#ffcccc", "Item must not be collected"),
        ("itemCollectedAtNode", "Item must be collected", "mdi.package-variant-closed",
         "#ccffcc", "Item must be collected"),
    ]),
    **_table("flash", [
        ("gainFlashSuit", "Gain flash suit state", "mdi.flash-circle", "#ffffcc",
         "Gains a flash suit"),
        ("useFlashSuit", "Use flash suit state", "mdi.flash", "#ffff99",
         "Uses flash suit"),
        ("noFlashSuit", "Must not have flash suit", "mdi.flash-off", "#ffcccc",
         "Must not have flash suit"),
    ]),
    **_table("special", [
        ("notable", "Notable strat required", "mdi.star", "#ffddaa", "Requires notable strat"),
        ("disableEquipment", "Must disable equipment", "mdi.wrench", "#ccaaff",
         "Must disable equipment"),
        ("ridleyKill", "Must kill Ridley boss", "mdi.skull", "#ff6666", "Must kill Ridley"),
    ]),
}

UNKNOWN_KIND = KindInfo(
    "?", "Unknown condition", "mdi.help-circle-outline", "#dddddd",
    "This condition type is not supported by the editor", "special",
)


def kind_info(kind: str) -> KindInfo:
    """Return display metadata for kind, or a generic entry for unknown kinds."""
    info = KIND_INFO.get(kind)
    if info is None:
        return KindInfo(kind, f"{kind} (unsupported)", UNKNOWN_KIND.icon, UNKNOWN_KIND.color,
                        UNKNOWN_KIND.description, UNKNOWN_KIND.category)
    return info


def is_logical(kind: str) -> bool:
    return kind in LOGICAL_KINDS


def is_sentinel(kind: str) -> bool:
    return kind in SENTINEL_KINDS


def selectable_kinds(is_root: bool) -> List[str]:
    """Kinds offered by the kind picker.

    Sentinel kinds are only offered at a root node; already loaded nested
    sentinels are still accepted and serialized.
    """
    return [kind for kind in KIND_INFO if is_root or not is_sentinel(kind)]


class ConditionError(Exception):
    """Raised when a condition is edited in a way its kind does not allow."""
