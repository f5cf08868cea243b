"""
Fight configuration types.

Every field has a documented default so callers only spell out what they
care about. ``validate()`` runs once at the simulator entry point and
returns an error message (or None); the engines never re-default values at
the point of use.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from eqsim.data import DEFAULT_BACKSTAB_SKILL
from eqsim.types import ClassId, ElemType


@dataclass(frozen=True)
class Weapon:
    """A weapon (or arrow). Immutable for the length of a run."""

    damage: float | None = None
    """Base damage. Required."""

    delay: float | None = None
    """Attack delay in deciseconds. Required for weapons, unused for arrows."""

    is_2h: bool = False
    proc_spell: str | None = None
    """Name of the on-hit proc. None means the weapon doesn't proc; bows
    also treat "" as no proc."""

    proc_spell_damage: int = 0
    elem_type: ElemType | None = None
    elem_damage: int = 0
    bane_damage: int = 0
    """Carried through for display; not used by the combat math."""

    name: str = ""

    @property
    def has_proc(self) -> bool:
        return self.proc_spell is not None


@dataclass
class Target:
    """The defender: level, AC and resists."""

    mob_level: int = 60
    target_ac: int | None = None
    """Only matters once level-based mitigation reaches its 200 cap."""

    avoidance: int | None = None
    """Overrides the level-based NPC avoidance when set."""

    item_ac_bonus: int = 0
    spell_ac_bonus: int = 0
    fr: int = 35
    cr: int = 35
    pr: int = 35
    dr: int = 35
    mr: int = 35


@dataclass
class FightConfig:
    """Melee fight configuration."""

    weapon1: Weapon | None = None
    weapon2: Weapon | None = None
    target: Target = field(default_factory=Target)

    level: int = 60
    class_id: ClassId = ""
    strength: int = 255
    """STR. From 75 up it adds to offense rating."""

    dex: int = 255
    offense_skill: int = 252
    """0-255, clamped. Feeds to-hit; offense rating adds STR and attack."""

    double_attack_skill: int = 0
    dual_wield_skill: int = 0
    ambidexterity: int = 0
    haste_percent: float = 0
    """Negative for slows; must stay above -100."""

    crit_chance_mult: float = 0
    """AA critical hit chance bonus, percent."""

    to_hit_bonus: int = 0
    worn_attack: int | None = None
    spell_attack: int | None = None
    attack_rating: int | None = None
    """Legacy override. Only used when worn_attack and spell_attack are
    both None, in which case it stands in for both to-hit and offense."""

    backstab_skill: int = DEFAULT_BACKSTAB_SKILL
    backstab_mod_percent: float = 0
    berserk: bool = False
    crippling_blow_chance: float = 0

    fight_duration_sec: float = 60
    from_behind: bool = False
    special_attacks: bool = False
    fistweaving: bool = False
    seed: int | None = None

    def validate(self) -> str | None:
        w1 = self.weapon1
        if w1 is None or w1.damage is None or w1.delay is None:
            return "Missing weapon1 (damage, delay)"
        if w1.delay <= 0:
            return "weapon1 delay must be positive"
        w2 = self.weapon2
        if w2 is not None and (w2.damage is None or w2.delay is None or w2.delay <= 0):
            return "weapon2 needs damage and a positive delay"
        if (self.haste_percent or 0) <= -100:
            return "haste_percent must be above -100"
        if self.fight_duration_sec is None or self.fight_duration_sec <= 0:
            return "fight_duration_sec must be positive"
        return None


@dataclass
class RangedFightConfig:
    """Ranged (archery) fight configuration."""

    ranged_weapon: Weapon | None = None
    arrow: Weapon | None = None
    target: Target = field(default_factory=Target)

    level: int = 60
    strength: int = 255
    """STR. From 75 up it adds to offense rating."""

    dex: int = 255
    offense_skill: int = 252
    worn_attack: int = 0
    spell_attack: int = 0
    haste_percent: float = 0
    crit_chance_mult: float = 0
    archery_mastery: int = 2
    """Archery Mastery AA rank 1-3 (clamped)."""

    mob_stationary: bool = False
    use_walled_mob_penalty: bool = False

    fight_duration_sec: float = 60
    seed: int | None = None

    def validate(self) -> str | None:
        bow, arrow = self.ranged_weapon, self.arrow
        if bow is None or bow.damage is None or bow.delay is None or arrow is None or arrow.damage is None:
            return "Missing ranged_weapon (damage, delay) or arrow (damage)"
        if bow.delay <= 0:
            return "Ranged weapon delay must be positive"
        if (self.haste_percent or 0) <= -100:
            return "haste_percent must be above -100"
        if self.fight_duration_sec is None or self.fight_duration_sec <= 0:
            return "fight_duration_sec must be positive"
        return None
