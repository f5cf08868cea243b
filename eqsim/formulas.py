"""
Combat formulas from the EQMac-era server combat code.

Every function here is stateless. Functions that need randomness take an
Rng (see :mod:`eqsim.rng`) as an argument instead of reaching for a global
generator, which is what keeps a seeded run reproducible.

Two defender stats are easy to mix up and must not be:

* avoidance decides whether a swing lands at all (hit chance only);
* mitigation decides how hard a landed swing hits (damage roll only).

Inputs are clamped rather than rejected: callers always get a number back.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from eqsim.rng import Rng

if TYPE_CHECKING:
    from eqsim.config import Target, Weapon


# -----------------------------------------------------------
# Hit chance
# -----------------------------------------------------------

TO_HIT_CAP = 550
"""Effective to-hit is capped here so huge attack values don't erase misses."""

AVOID_CHANCE_FROM_FRONT = 0.08
"""Combined block/parry/dodge/riposte chance for attacks from the front."""


def get_hit_chance(to_hit: float | None = 400, avoidance: float | None = 460) -> float:
    """Chance in [0, 1) that a swing gets past the defender's avoidance."""
    a = min(to_hit if to_hit is not None else 400, TO_HIT_CAP) + 10
    b = (avoidance if avoidance is not None else 460) + 10
    if a * 1.21 > b:
        chance = 1.0 - b / (a * 1.21 * 2.0)
    else:
        chance = (a * 1.21) / (b * 2.0)
    return max(0.0, min(1.0, chance))


def roll_hit(to_hit: float, avoidance: float, rng: Rng, from_behind: bool) -> bool:
    """Roll one swing against avoidance.

    From the front, a swing that passes the hit roll can still be blocked,
    parried, dodged or riposted. From behind only the hit roll applies.
    """
    if rng() >= get_hit_chance(to_hit, avoidance):
        return False
    if from_behind:
        return True
    return rng() >= AVOID_CHANCE_FROM_FRONT


def get_avoidance_npc(level: int | None = 60) -> int:
    """NPC avoidance: level * 9 + 5, capped at 400 up to level 50, else 460."""
    level = 60 if level is None else level
    avoidance = level * 9 + 5
    if level <= 50 and avoidance > 400:
        avoidance = 400
    elif avoidance > 460:
        avoidance = 460
    return max(1, avoidance)


# -----------------------------------------------------------
# Mitigation and the damage roll
# -----------------------------------------------------------


def get_mitigation(
    mob_level: int | None = 60,
    mob_ac: int | None = None,
    item_ac_bonus: int = 0,
    spell_ac_bonus: int = 0,
) -> int:
    """NPC mitigation for the damage roll.

    Level based and capped at 200; a capped mob with AC above 200 uses its
    AC instead. Item and spell AC bonuses are added on top.
    """
    level = 60 if mob_level is None else mob_level
    if level < 15:
        mit = level * 3
        if level < 3:
            mit += 2
    else:
        mit = level * 41 // 10 - 15
    if mit > 200:
        mit = 200
    if mit == 200 and mob_ac is not None and mob_ac > 200:
        mit = mob_ac
    mit += (4 * (item_ac_bonus or 0)) // 3 + (spell_ac_bonus or 0) // 4
    return max(1, mit)


def roll_d20(offense_rating: float, mitigation: float, rng: Rng) -> int:
    """Roll the 1-20 damage index: offense rating against mitigation."""
    atk_roll = math.floor(rng() * (offense_rating + 5))
    def_roll = math.floor(rng() * (mitigation + 5))
    avg = math.floor((offense_rating + mitigation + 10) / 2)
    if avg <= 0:
        return 1
    index = max(0, (atk_roll - def_roll) + avg // 2)
    index = math.floor(index * 20 / avg)
    return max(0, min(19, index)) + 1


def calc_melee_damage(base_damage: float, offense_rating: float, mitigation: float, rng: Rng, damage_bonus: int = 0) -> int:
    """Damage for a landed hit: (roll * base + 5) / 10, at least 1, plus bonus."""
    roll = roll_d20(offense_rating, mitigation, rng)
    damage = max(1, math.floor((roll * base_damage + 5) / 10))
    if damage_bonus:
        damage += damage_bonus
    return damage


# -----------------------------------------------------------
# Elemental add-on damage
# -----------------------------------------------------------

RESIST_FIELDS = {"fire": "fr", "cold": "cr", "poison": "pr", "disease": "dr", "magic": "mr"}
DEFAULT_RESIST = 35


def apply_elemental_resist(weapon_damage: int, resist: int, rng: Rng) -> int:
    """Portion of elemental damage that gets through the target's resist."""
    if resist > 200:
        return 0
    roll = math.floor(rng() * 201) + 1 - resist
    if roll < 1:
        return 0
    if roll <= 99:
        return weapon_damage * roll // 100
    return weapon_damage


def get_resist_for_elem_type(target: Target, elem_type: str | None) -> int:
    field = RESIST_FIELDS.get(elem_type or "")
    if field is None:
        return DEFAULT_RESIST
    value = getattr(target, field, None)
    return DEFAULT_RESIST if value is None else value


def add_elemental_to_damage(damage: int, weapon: Weapon | None, target: Target, rng: Rng) -> tuple[int, int]:
    """Add a weapon's elemental damage, if any. Returns (damage, added).

    No random number is drawn for weapons without elemental damage.
    """
    if weapon is None or not weapon.elem_type or not (weapon.elem_damage or 0) > 0:
        return damage, 0
    resist = get_resist_for_elem_type(target, weapon.elem_type)
    added = apply_elemental_resist(weapon.elem_damage, resist, rng)
    return damage + added, added


# -----------------------------------------------------------
# Damage multiplier (applied to every client swing)
# -----------------------------------------------------------


class DamageMultiplierParams(NamedTuple):
    roll_chance: int
    """Percent chance to roll a bonus multiplier."""

    max_extra: int
    """Upper bound of the multiplier roll, in percent."""

    minus_factor: int
    """Subtracted from offense rating before halving into the bonus range."""


def get_damage_multiplier_params(level: int, class_id: str) -> DamageMultiplierParams:
    monk = class_id == "monk"
    if monk and level >= 65:
        return DamageMultiplierParams(83, 300, 50)
    if level >= 65 or (monk and level >= 63):
        return DamageMultiplierParams(81, 295, 55)
    if level >= 63 or (monk and level >= 60):
        return DamageMultiplierParams(79, 290, 60)
    if level >= 60 or (monk and level >= 56):
        return DamageMultiplierParams(77, 285, 65)
    if level >= 56:
        return DamageMultiplierParams(72, 265, 70)
    if level >= 51 or monk:
        return DamageMultiplierParams(65, 245, 80)
    return DamageMultiplierParams(51, 210, 105)


def roll_damage_multiplier(
    offense_rating: float,
    damage: int,
    level: int,
    class_id: str,
    is_archery: bool,
    rng: Rng,
) -> tuple[int, bool]:
    """Maybe scale damage by a 100-300% roll. Returns (damage, multiplied).

    ``multiplied`` is True when the roll landed above 100%. Warriors at 55+
    get an extra point on multiplied melee hits.
    """
    params = get_damage_multiplier_params(level or 60, class_id or "")
    base_bonus = max(10, math.floor((offense_rating - params.minus_factor) / 2))

    if rng() * 100 < params.roll_chance:
        roll = min(params.max_extra, math.floor(rng() * (base_bonus + 1)) + 100)
        damage = damage * roll // 100
        if level >= 55 and damage > 1 and not is_archery and class_id == "warrior":
            damage += 1
        return max(1, damage), roll > 100
    return max(1, damage), False


# -----------------------------------------------------------
# Critical hits
# -----------------------------------------------------------

CRIT_MOD_NORMAL = 17
CRIT_MOD_CRIPPLING = 29


def get_crit_chance(
    level: int,
    class_id: str,
    dex: int | None,
    base_crit_chance: float = 0,
    crit_chance_mult: float = 0,
    is_archery: bool = False,
) -> float:
    """Critical hit chance in percent, 0-100.

    Warriors (12+), archery rangers (17+) and any other class with an AA
    crit bonus get a dex-scaled chance; dex above 255 adds a small extra.
    The AA bonus then scales the whole chance up by its percentage.
    """
    crit = base_crit_chance or 0
    dex_cap = min(255 if dex is None else dex, 255)
    over_cap = (dex - 255) / 400 if dex is not None and dex > 255 else 0

    if class_id == "warrior" and level >= 12:
        crit += 0.5 + dex_cap / 90 + over_cap
    elif is_archery and class_id == "ranger" and level > 16:
        crit += 1.35 + dex_cap / 34 + over_cap * 2
    elif class_id != "warrior" and crit_chance_mult:
        crit += 0.275 + dex_cap / 150 + over_cap

    if crit_chance_mult:
        crit += crit * crit_chance_mult / 100
    return max(0.0, min(100.0, crit))


def apply_crit_damage(damage: int, damage_bonus: int, crit_mod: int, crip_success: bool = False) -> int:
    """Critical damage; the damage bonus is carried over without scaling."""
    bonus = damage_bonus or 0
    dmg = math.floor(((damage - bonus) * crit_mod + 5) / 10) + 8 + bonus
    if crip_success:
        dmg += 2
    return max(1, dmg)


def roll_melee_crit(
    damage: int,
    damage_bonus: int,
    level: int,
    class_id: str,
    dex: int | None,
    crit_chance_mult: float,
    rng: Rng,
    is_archery: bool = False,
    is_berserk: bool = False,
    crippling_blow_chance: float = 0,
) -> tuple[int, bool]:
    """Roll for a crit on a landed hit. Returns (damage, is_crit).

    Berserkers always crippling-blow; otherwise a crit upgrades to a
    crippling blow with ``crippling_blow_chance`` percent.
    """
    chance = get_crit_chance(level, class_id, dex, 0, crit_chance_mult or 0, is_archery)
    if chance <= 0:
        return damage, False
    if rng() >= chance / 100:
        return damage, False

    crit_mod = CRIT_MOD_NORMAL
    crip_success = False
    if is_berserk or (crippling_blow_chance and rng() * 100 < crippling_blow_chance):
        crit_mod = CRIT_MOD_CRIPPLING
        crip_success = True
    return apply_crit_damage(damage, damage_bonus, crit_mod, crip_success), True


# -----------------------------------------------------------
# Double, triple and dual wield
# -----------------------------------------------------------

TRIPLE_ATTACK_CHANCE = 0.135
"""Chance of a third attack on a round that already doubled."""


def get_double_attack_effective(level: int, double_attack_skill: int) -> int:
    return (double_attack_skill or 0) + (level or 0)


def check_double_attack(effective: int, rng: Rng, class_id: str) -> bool:
    """1% per 5 effective points. Bards and beastlords never double attack."""
    if class_id in ("bard", "beastlord"):
        return False
    return effective > math.floor(rng() * 500)


def can_triple_attack(level: int | None, class_id: str) -> bool:
    return class_id in ("warrior", "monk") and (level or 0) >= 60


def check_triple_attack(rng: Rng, level: int | None, class_id: str) -> bool:
    """Roll the triple attack; no random number is used for other classes."""
    if not can_triple_attack(level, class_id):
        return False
    return rng() < TRIPLE_ATTACK_CHANCE


def get_dual_wield_effective(level: int, dual_wield_skill: int, ambidexterity: int = 0) -> int:
    return (dual_wield_skill or 0) + (level or 0) + (ambidexterity or 0)


def get_dual_wield_chance(effective: int) -> float:
    """Dual wield success chance as a percentage (used by off-hand procs)."""
    return effective / 375 * 100


def check_dual_wield(effective: int, rng: Rng) -> bool:
    """1% per 3.75 effective points."""
    return effective > math.floor(rng() * 375)


# -----------------------------------------------------------
# Damage bonus
# -----------------------------------------------------------


def is_warrior_class(class_id: str) -> bool:
    """Melee classes that use the warrior damage tables."""
    return class_id in ("warrior", "ranger", "paladin", "shadowknight", "bard")


def get_damage_bonus_client(level: int, class_id: str, delay: float | None, is_2h: bool) -> int:
    """Main-hand damage bonus for players, level 28 and up.

    One-handers only get the level term. Two-handers add level and delay
    dependent terms, except fast (delay 27 or less) two-handers which just
    get +1.
    """
    if level < 28:
        return 0
    delay = 1 if delay is None else delay
    bonus = 1 + (level - 28) // 3
    if not is_2h:
        return bonus

    if delay <= 27:
        return bonus + 1
    if level > 29:
        level_bonus = (level - 30) // 5 + 1
        if level > 50:
            level_bonus += 1
            level_bonus2 = level - 50
            if level > 67:
                level_bonus2 += 5
            elif level > 59:
                level_bonus2 += 4
            elif level > 58:
                level_bonus2 += 3
            elif level > 56:
                level_bonus2 += 2
            elif level > 54:
                level_bonus2 += 1
            level_bonus += math.floor(level_bonus2 * delay / 40)
        bonus += level_bonus
    if delay >= 40:
        delay_bonus = math.floor((delay - 40) / 3) + 1
        if delay >= 45:
            delay_bonus += 2
        elif delay >= 43:
            delay_bonus += 1
        bonus += delay_bonus
    return bonus


def get_damage_bonus_npc(min_dmg: int | None, max_dmg: int | None) -> int:
    """NPC damage bonus derived from its min/max hit."""
    if min_dmg is None or max_dmg is None:
        return 0
    if min_dmg > max_dmg:
        return min_dmg
    di1k = (max_dmg - min_dmg) * 1000 / 19
    di1k = math.floor((di1k + 50) / 100) * 100
    return math.floor((max_dmg * 1000 - di1k * 20) / 1000)


# -----------------------------------------------------------
# Haste, procs and attacker stats
# -----------------------------------------------------------

MIN_DELAY_DECISEC = 10


def effective_delay_decisec(delay: float, haste_percent: float | None = 0) -> float:
    """Hasted weapon delay in deciseconds, never below one second.

    Slows are negative haste; anything at or below -100% is rejected by
    config validation before it gets here.
    """
    return max(MIN_DELAY_DECISEC, delay / (1 + (haste_percent or 0) / 100))


def get_proc_chance_per_swing(
    effective_delay: float,
    is_offhand: bool,
    dual_wield_chance: float | None,
    dex: int | None,
) -> float:
    """Per-swing proc chance, scaling with dex and weapon delay.

    Off-hand procs are scaled by 50 / dual wield chance, so a weak dual
    wielder procs more often on the swings that do happen.
    """
    if effective_delay <= 0:
        return 0.0
    dex = 150 if dex is None else dex
    chance = (0.0004166667 + 1.1437908496732e-5 * dex) * effective_delay
    if is_offhand:
        chance *= 50 / max(1, 100 if dual_wield_chance is None else dual_wield_chance)
    return min(1.0, max(0.0, chance))


def check_proc(proc_chance: float, rng: Rng) -> bool:
    """Roll a proc. Nothing is drawn when the chance is zero."""
    return proc_chance > 0 and rng() < proc_chance


def clamp_skill(value: int | None, default: int = 252) -> int:
    return default if value is None else min(255, max(0, value))


def str_offense_bonus(strength: int) -> int:
    """Offense rating from STR: (2 * STR - 150) / 3 once STR reaches 75."""
    return (2 * strength - 150) // 3 if strength >= 75 else 0


def displayed_attack(offense_rating: int, to_hit: int) -> int:
    """The attack value a client shows: (offense rating + to-hit) * 1000 / 744."""
    return (offense_rating + to_hit) * 1000 // 744


# -----------------------------------------------------------
# Special attacks
# -----------------------------------------------------------


def backstab_effective_skill(skill: int, mod_percent: float = 0) -> int:
    return min(255, math.floor(skill * (100 + (mod_percent or 0)) / 100))


def backstab_base_damage(skill: int, mod_percent: float, weapon_damage: float) -> int:
    """(effective skill * 0.02 + 2) * weapon damage."""
    effective = backstab_effective_skill(skill, mod_percent)
    return math.floor((effective * 0.02 + 2) * weapon_damage)


def backstab_min_hit(level: int) -> int:
    """Minimum backstab damage: 2x level at 60+, 1.5x above 50, else level."""
    if level >= 60:
        return level * 2
    if level > 50:
        return level * 3 // 2
    return level


def kick_min_hit(level: int) -> int:
    return level * 4 // 5
