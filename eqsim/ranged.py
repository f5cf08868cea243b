"""
Ranged (archery) fight engine.

One timer, advanced by the bow's hasted delay. Shots never chain, and they
are never blocked, parried, dodged or riposted: every shot rolls as if from
behind. A landed shot goes through the same damage roll, multiplier and
crit pipeline as melee, using the ranger archery crit rules, then the
stationary-target and walled-mob modifiers, the bow proc and the bow and
arrow elemental add-ons.
"""

from __future__ import annotations

import logging
import math

from eqsim.combatant import Attacker, Defender
from eqsim.config import RangedFightConfig
from eqsim.formulas import (
    add_elemental_to_damage,
    calc_melee_damage,
    check_proc,
    effective_delay_decisec,
    get_proc_chance_per_swing,
    roll_damage_multiplier,
    roll_hit,
    roll_melee_crit,
)
from eqsim.records import FightError, RangedFightReport
from eqsim.rng import RANGED_PROC_OFFSET, create_rng, stream_seed
from eqsim.stats import hit_stats

logger = logging.getLogger(__name__)

ARCHERY_MASTERY_MULTIPLIERS = {1: 1.30, 2: 1.60, 3: 2.00}

WALL_PENALTY_CHANCE = 0.35
WALL_PENALTY_FACTOR = 0.5

ARCHERY_CLASS = "ranger"
"""Multiplier and crit rules always use the ranger archery path."""


def mastery_multiplier(archery_mastery: int | None) -> float:
    rank = 2 if archery_mastery is None else max(1, min(3, math.floor(archery_mastery)))
    return ARCHERY_MASTERY_MULTIPLIERS[rank]


def shot_base_damage(config: RangedFightConfig) -> float:
    """(bow damage + arrow damage) * Archery Mastery multiplier."""
    bow, arrow = config.ranged_weapon, config.arrow
    return ((bow.damage or 0) + (arrow.damage or 0)) * mastery_multiplier(config.archery_mastery)


def check_config(config: RangedFightConfig) -> str | None:
    """Config validation plus the base damage floor; an error message or None."""
    error = config.validate()
    if error:
        return error
    if shot_base_damage(config) < 1:
        return "Ranged weapon + arrow damage must be at least 1"
    return None


class RangedEngine:
    """Runs one ranged fight from a validated RangedFightConfig."""

    def __init__(self, config: RangedFightConfig) -> None:
        self.config = config
        self.rng = create_rng(config.seed)
        self.proc_rng = create_rng(stream_seed(config.seed, RANGED_PROC_OFFSET))
        self.messages: list[str] = []

        self.attacker = Attacker.for_archery(config)
        self.defender = Defender.for_archery(config.target)

        bow = config.ranged_weapon
        self.base_damage = shot_base_damage(config)
        self.delay = effective_delay_decisec(bow.delay, config.haste_percent)
        self.proc_chance = get_proc_chance_per_swing(self.delay, False, 0, config.dex) if bow.proc_spell else 0.0

        self.report = RangedFightReport(
            duration_sec=config.fight_duration_sec,
            wall_penalty_damage_lost=0 if config.use_walled_mob_penalty else None,
            calculated_to_hit=self.attacker.to_hit,
            offense_skill=self.attacker.offense_skill,
            offense_rating=self.attacker.offense_rating,
            displayed_attack=self.attacker.displayed_attack,
        )

    def log(self, message: str) -> None:
        self.messages.append(message)
        logger.debug(message)

    def shot_damage(self) -> int:
        """Damage for one landed shot, before the bow proc and elementals."""
        c, report = self.config, self.report
        rating = self.attacker.offense_rating

        damage = max(1, calc_melee_damage(self.base_damage, rating, self.defender.mitigation, self.rng, 0))
        damage, _ = roll_damage_multiplier(rating, damage, c.level, ARCHERY_CLASS, True, self.rng)
        before = damage
        damage, is_crit = roll_melee_crit(damage, 0, c.level, ARCHERY_CLASS, c.dex, c.crit_chance_mult, self.rng, is_archery=True)
        if is_crit:
            report.crit_hits += 1
            report.crit_damage_gain += damage - before

        if c.mob_stationary:
            damage *= 2
        if c.use_walled_mob_penalty and self.rng() < WALL_PENALTY_CHANCE:
            penalized = max(1, math.floor(damage * WALL_PENALTY_FACTOR))
            report.wall_penalty_damage_lost += damage - penalized
            damage = penalized
        return damage

    def shot(self) -> None:
        c, report = self.config, self.report
        rec = report.ranged
        rec.swings += 1
        if not roll_hit(self.attacker.to_hit, self.defender.avoidance, self.rng, True):
            return

        damage = self.shot_damage()
        if check_proc(self.proc_chance, self.proc_rng):
            proc_damage = int(c.ranged_weapon.proc_spell_damage or 0)
            rec.procs += 1
            rec.proc_damage_total += proc_damage
            damage += proc_damage
        for weapon in (c.ranged_weapon, c.arrow):
            damage, added = add_elemental_to_damage(damage, weapon, self.defender.target, self.rng)
            report.elemental_damage_total += added

        rec.record_hit(damage)
        report.total_damage += damage

    def fight(self) -> RangedFightReport:
        self.log(
            f"to-hit {self.attacker.to_hit}, offense rating {self.attacker.offense_rating}, "
            f"base damage {self.base_damage:g}, delay {self.delay:g}"
        )
        duration = math.floor(self.config.fight_duration_sec * 10)
        next_ranged_at = 0.0
        while next_ranged_at < duration:
            self.shot()
            next_ranged_at += self.delay

        rec = self.report.ranged
        rec.hit_stats = hit_stats(rec.hit_list)
        self.log(f"{self.report.total_damage} total damage over {self.report.duration_sec}s")
        return self.report


def run_ranged_fight(config: RangedFightConfig) -> RangedFightReport | FightError:
    """Simulate a ranged fight. Bad configuration comes back as a FightError."""
    error = check_config(config)
    if error:
        return FightError(error)
    return RangedEngine(config).fight()
