"""
Weapon skill caps by class, skill and level.

Each skill has a maximum cap per class; below the maximum, the cap grows
with level as ``level * 5 + 5``. Levels outside 1-60 are clamped. A max
cap of 0 means the class cannot use that skill at all.

The simulator core never reads this table: callers use it to pick sensible
skill values (the UI shows the cap for the chosen weapon skill).
"""

from __future__ import annotations

from eqsim.types import SkillKey

LEVEL_MIN = 1
LEVEL_MAX = 60
PER_LEVEL_MUL = 5
PER_LEVEL_ADD = 5

CLASSES = (
    "WAR", "CLR", "PAL", "RNG", "SHD", "DRU", "MNK", "BRD",
    "ROG", "SHM", "NEC", "WIZ", "MAG", "ENC", "BST",
)

SKILLS: tuple[SkillKey, ...] = ("1hb", "1hs", "1hp", "2hb", "2hs", "h2h", "archery", "throwing")

CLASS_NAMES = {
    "warrior": 0, "cleric": 1, "paladin": 2, "ranger": 3, "shadowknight": 4,
    "druid": 5, "monk": 6, "bard": 7, "rogue": 8, "shaman": 9,
    "necromancer": 10, "wizard": 11, "magician": 12, "enchanter": 13, "beastlord": 14,
}

# Columns follow CLASSES order.
MAX_CAPS: dict[str, tuple[int, ...]] = {
    #           WAR  CLR  PAL  RNG  SHD  DRU  MNK  BRD  ROG  SHM  NEC  WIZ  MAG  ENC  BST
    "1hb":      (250, 175, 225, 250, 225, 175, 252, 250, 250, 200, 110, 110, 110, 110, 225),
    "1hs":      (250,   0, 225, 250, 225, 175,   0,   0, 250,   0,   0,   0,   0,   0,   0),
    "1hp":      (240,   0, 225, 240, 225,   0,   0, 110, 250, 200, 110, 225,   0,   0, 225),
    "2hb":      (250, 175, 225, 250, 225, 175, 252, 200,   0, 200, 110, 110, 225,   0, 225),
    "2hs":      (250,   0, 225, 250, 225,   0,   0,   0,   0,   0,   0,   0,   0,   0,   0),
    "h2h":      (100,  75, 100, 100, 100,  75, 252, 100, 100,  75,  75,  75,  75,  75, 250),
    "archery":  (240,   0, 240,  75, 240,   0,   0,   0, 240,   0,   0,   0,   0,   0,   0),
    "throwing": (200,   0, 200, 113, 250,   0, 200,  75, 250,   0,   0,   0,   0,   0,   0),
}


def resolve_class_index(class_id: int | str) -> int:
    """Map a class index, three-letter code or full class name to 0-14.

    Returns -1 for anything unrecognized.
    """
    if isinstance(class_id, int):
        return class_id if 0 <= class_id < len(CLASSES) else -1
    name = str(class_id).lower()
    if name in CLASS_NAMES:
        return CLASS_NAMES[name]
    code = str(class_id).upper()
    return CLASSES.index(code) if code in CLASSES else -1


def get_weapon_skill_cap(class_id: int | str, skill: str, level: int) -> int:
    """Effective skill cap: the smaller of the class max and the level cap."""
    index = resolve_class_index(class_id)
    if index < 0 or skill not in MAX_CAPS:
        return 0
    max_cap = MAX_CAPS[skill][index]
    if max_cap <= 0:
        return 0
    level = max(LEVEL_MIN, min(LEVEL_MAX, level))
    return min(max_cap, level * PER_LEVEL_MUL + PER_LEVEL_ADD)


def build_weapon_skill_cap_table() -> dict[str, list[list[int]]]:
    """Prebuild ``table[skill][class_index][level]`` for every skill.

    Index 0 of each level list is unused and left at 0.
    """
    table: dict[str, list[list[int]]] = {}
    for skill in SKILLS:
        table[skill] = [
            [0] + [get_weapon_skill_cap(c, skill, lvl) for lvl in range(LEVEL_MIN, LEVEL_MAX + 1)]
            for c in range(len(CLASSES))
        ]
    return table
