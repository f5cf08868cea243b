"""
Static rule tables consumed by the simulator.

SPECIAL_ATTACKS maps a class to the special attack it fires on cooldown when
special attacks are enabled. The engine treats the table as data: each
entry's ``kind`` picks the base-damage rule.

    "kick"      skill-based base damage (``base_damage``) with a level-based
                minimum of level * 4 / 5. No weapon damage involved.
    "backstab"  (backstab skill * 0.02 + 2) * primary weapon damage, with the
                backstab minimum-hit floor applied after crits, and a chance
                to chain a second backstab above level 54.
    "weapon"    primary weapon damage, optionally scaled by
                ``damage_multiplier``.

The weapon skill cap table lives in :mod:`eqsim.data.skill_caps`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SpecialAttack:
    """One class special attack definition."""

    name: str
    cooldown_decisec: int
    kind: Literal["kick", "backstab", "weapon"] = "weapon"
    from_behind_only: bool = False
    base_damage: int = 0
    """Skill base damage for "kick" attacks."""

    damage_multiplier: float | None = None
    """Optional scale on weapon damage for "weapon" attacks."""


SPECIAL_ATTACKS: dict[str, SpecialAttack] = {
    "monk": SpecialAttack(name="Flying Kick", cooldown_decisec=80, kind="kick", base_damage=29),
    "rogue": SpecialAttack(name="Backstab", cooldown_decisec=120, kind="backstab", from_behind_only=True),
}

FIST_DAMAGE = 9
"""Base damage of a fistweaving punch."""

DEFAULT_BACKSTAB_SKILL = 225
