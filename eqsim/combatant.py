"""
Derived attacker and defender stats.

Everything here is computed once per run from the configuration and then
reused for every swing: a fight never recomputes to-hit, offense rating,
avoidance or mitigation mid-loop.
"""

from __future__ import annotations

from dataclasses import dataclass

from eqsim.config import FightConfig, RangedFightConfig, Target
from eqsim.formulas import (
    clamp_skill,
    displayed_attack,
    get_avoidance_npc,
    get_double_attack_effective,
    get_dual_wield_chance,
    get_dual_wield_effective,
    get_mitigation,
    str_offense_bonus,
)

WEAPON_SKILL_FOR_TO_HIT = 252
"""Weapon (or archery) skill assumed in the to-hit formula."""

RANGED_DEFAULT_AC = 300


def base_to_hit(offense_skill: int) -> int:
    """To-hit before bonuses: 7 + offense skill + weapon skill."""
    return 7 + offense_skill + WEAPON_SKILL_FOR_TO_HIT


@dataclass
class Attacker:
    """The attacker's fixed per-run numbers."""

    to_hit: int
    offense_skill: int
    offense_rating: int
    str_bonus: int
    double_attack_effective: int = 0
    dual_wield_effective: int = 0

    @property
    def displayed_attack(self) -> int:
        return displayed_attack(self.offense_rating, self.to_hit)

    @property
    def dual_wield_chance(self) -> float:
        return get_dual_wield_chance(self.dual_wield_effective)

    @classmethod
    def for_melee(cls, config: FightConfig) -> Attacker:
        """Melee stats.

        When a legacy ``attack_rating`` is given and neither worn nor spell
        attack is, it replaces both the to-hit base and the offense skill
        plus attack part of offense rating. Otherwise to-hit comes from the
        offense skill and offense rating from skill + STR + worn + spell.
        """
        offense_skill = clamp_skill(config.offense_skill)
        str_bonus = str_offense_bonus(config.strength)
        to_hit_bonus = config.to_hit_bonus or 0
        if config.attack_rating is not None and config.worn_attack is None and config.spell_attack is None:
            to_hit = config.attack_rating + to_hit_bonus
            offense_rating = config.attack_rating + str_bonus
        else:
            to_hit = base_to_hit(offense_skill) + to_hit_bonus
            offense_rating = offense_skill + str_bonus + (config.worn_attack or 0) + (config.spell_attack or 0)
        return cls(
            to_hit=to_hit,
            offense_skill=offense_skill,
            offense_rating=offense_rating,
            str_bonus=str_bonus,
            double_attack_effective=get_double_attack_effective(config.level, config.double_attack_skill),
            dual_wield_effective=get_dual_wield_effective(config.level, config.dual_wield_skill, config.ambidexterity),
        )

    @classmethod
    def for_archery(cls, config: RangedFightConfig) -> Attacker:
        offense_skill = clamp_skill(config.offense_skill)
        str_bonus = str_offense_bonus(config.strength)
        return cls(
            to_hit=base_to_hit(offense_skill),
            offense_skill=offense_skill,
            offense_rating=offense_skill + str_bonus + (config.worn_attack or 0) + (config.spell_attack or 0),
            str_bonus=str_bonus,
        )


@dataclass
class Defender:
    """The target's avoidance (hit chance) and mitigation (damage roll)."""

    avoidance: int
    mitigation: int
    target: Target

    @classmethod
    def for_melee(cls, target: Target) -> Defender:
        return cls(
            avoidance=target.avoidance if target.avoidance is not None else get_avoidance_npc(target.mob_level),
            mitigation=get_mitigation(target.mob_level, target.target_ac, target.item_ac_bonus, target.spell_ac_bonus),
            target=target,
        )

    @classmethod
    def for_archery(cls, target: Target) -> Defender:
        """Archery ignores item and spell AC bonuses and assumes AC 300."""
        ac = target.target_ac if target.target_ac is not None else RANGED_DEFAULT_AC
        return cls(
            avoidance=target.avoidance if target.avoidance is not None else get_avoidance_npc(target.mob_level),
            mitigation=get_mitigation(target.mob_level, ac, 0, 0),
            target=target,
        )
