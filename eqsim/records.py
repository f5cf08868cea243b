"""Structured fight reports.

A fight produces one of these records, built fresh per run and left alone
once the run loop and the statistics pass are done. The TextRenderer turns
them into the human-readable report; the Streamlit UI reads them directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HitStats:
    """Descriptive statistics over a list of hit magnitudes."""

    min: int | None = None
    max: int | None = None
    mean: float | None = None
    median: float | None = None
    mode: int | None = None


@dataclass
class WeaponRecord:
    """Swing and hit tallies for one hand."""

    swings: int = 0
    """Every attack attempted, including doubles and triples."""

    hits: int = 0
    total_damage: int = 0
    max_damage: int = 0
    min_damage: int | None = None
    """None until the first hit lands."""

    hit_list: list[int] = field(default_factory=list)
    procs: int = 0
    proc_damage_total: int = 0
    rounds: int = 0
    """Combat rounds: one per weapon timer (per successful dual wield
    check for the off hand), however many attacks each round had."""

    single: int = 0
    double: int = 0
    triple: int = 0
    hit_stats: HitStats = field(default_factory=HitStats)

    def record_hit(self, damage: int) -> None:
        self.swings += 1
        self.hits += 1
        self.total_damage += damage
        self.max_damage = max(self.max_damage, damage)
        self.min_damage = damage if self.min_damage is None else min(self.min_damage, damage)
        self.hit_list.append(damage)

    def record_miss(self) -> None:
        self.swings += 1

    def record_round(self, attacks: int) -> None:
        if attacks == 1:
            self.single += 1
        elif attacks == 2:
            self.double += 1
        else:
            self.triple += 1


@dataclass
class SpecialRecord:
    """Tallies for a class special attack (Flying Kick, Backstab, ...)."""

    name: str
    attempts: int = 0
    hits: int = 0
    count: int = 0
    total_damage: int = 0
    max_damage: int = 0
    hit_list: list[int] = field(default_factory=list)
    double_backstabs: int | None = None
    """Rogues only; None for other classes."""

    backstab_skill: int | None = None
    backstab_mod_percent: float | None = None
    hit_stats: HitStats = field(default_factory=HitStats)

    def record_hit(self, damage: int) -> None:
        self.hits += 1
        self.count += 1
        self.total_damage += damage
        self.max_damage = max(self.max_damage, damage)
        self.hit_list.append(damage)


@dataclass
class FistweavingRecord:
    """Tallies for the monk's off-hand punches alongside a two-hander."""

    rounds: int = 0
    swings: int = 0
    hits: int = 0
    total_damage: int = 0
    max_damage: int = 0
    single: int = 0
    double: int = 0
    hit_list: list[int] = field(default_factory=list)
    hit_stats: HitStats = field(default_factory=HitStats)

    def record_hit(self, damage: int) -> None:
        self.swings += 1
        self.hits += 1
        self.total_damage += damage
        self.max_damage = max(self.max_damage, damage)
        self.hit_list.append(damage)

    def record_miss(self) -> None:
        self.swings += 1


@dataclass
class FightReport:
    """Result of a melee fight."""

    duration_sec: float
    weapon1: WeaponRecord = field(default_factory=WeaponRecord)
    weapon2: WeaponRecord = field(default_factory=WeaponRecord)
    special: SpecialRecord | None = None
    fistweaving: FistweavingRecord | None = None
    total_damage: int = 0
    elemental_damage_total: int = 0
    damage_bonus: int = 0
    """Main-hand damage bonus added to every main-hand hit."""

    damage_bonus_total: int = 0
    calculated_to_hit: int = 0
    offense_skill: int = 0
    offense_rating: int = 0
    offense_rating_from_str: int = 0
    displayed_attack: int = 0
    crit_hits: int = 0
    crit_damage_gain: int = 0
    """Extra damage from crits over what those hits would have done."""

    @property
    def dps(self) -> float:
        return self.total_damage / self.duration_sec


@dataclass
class RangedRecord:
    """Shot and hit tallies for a bow."""

    swings: int = 0
    hits: int = 0
    total_damage: int = 0
    max_damage: int = 0
    min_damage: int | None = None
    hit_list: list[int] = field(default_factory=list)
    procs: int = 0
    proc_damage_total: int = 0
    hit_stats: HitStats = field(default_factory=HitStats)

    def record_hit(self, damage: int) -> None:
        self.hits += 1
        self.total_damage += damage
        self.max_damage = max(self.max_damage, damage)
        self.min_damage = damage if self.min_damage is None else min(self.min_damage, damage)
        self.hit_list.append(damage)


@dataclass
class RangedFightReport:
    """Result of a ranged fight."""

    duration_sec: float
    ranged: RangedRecord = field(default_factory=RangedRecord)
    total_damage: int = 0
    elemental_damage_total: int = 0
    crit_hits: int = 0
    crit_damage_gain: int = 0
    wall_penalty_damage_lost: int | None = None
    """None unless the walled-mob penalty is enabled."""

    calculated_to_hit: int = 0
    offense_skill: int = 0
    offense_rating: int = 0
    displayed_attack: int = 0

    @property
    def dps(self) -> float:
        return self.total_damage / self.duration_sec


@dataclass
class FightError:
    """Returned instead of a report when the configuration can't be run."""

    error: str
