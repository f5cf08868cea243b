"""
Domain-specific type aliases for the eqsim combat simulator.

These aren't used for runtime type checking. They exist to make function
signatures self-documenting: a parameter typed as ClassId is one of the
recognized class names, not an arbitrary string.
"""

from typing import Literal, TypeAlias

# The combatant's class. The empty string stands for "other/unspecified",
# which gets none of the class-specific rules (no triple attack, no class
# crit bonus, no special attack).
ClassId: TypeAlias = Literal[
    "warrior",
    "monk",
    "rogue",
    "ranger",
    "bard",
    "beastlord",
    "paladin",
    "shadowknight",
    "",
]

# Elemental add-on damage types. Each one is resisted by the matching
# target resist (fr, cr, pr, dr, mr).
ElemType: TypeAlias = Literal["fire", "cold", "poison", "disease", "magic"]

# Weapon skills tracked by the skill cap table.
SkillKey: TypeAlias = Literal[
    "1hb",
    "1hs",
    "1hp",
    "2hb",
    "2hs",
    "h2h",
    "archery",
    "throwing",
]
