"""
Melee fight engine: a decisecond clock driving the attack timers.

Each tick of the clock the engine checks, in order:

1. the class special attack cooldown (Flying Kick, Backstab, ...);
2. the main-hand timer, which runs one combat round of up to three attacks
   (double attack, then triple attack), followed by a fistweaving round for
   monks swinging a two-hander;
3. the off-hand timer, which first needs a successful dual wield check and
   then runs a round of up to two attacks.

Timers reschedule themselves to ``t + delay`` whether the round hit or not,
so the number of rounds depends only on the clock, never on the dice.
Every landed attack goes through the same pipeline: damage roll against
mitigation, damage multiplier, crit, elemental add-on, then a proc check on
its own RNG stream.
"""

from __future__ import annotations

import logging
import math

from eqsim.combatant import Attacker, Defender
from eqsim.config import FightConfig, Weapon
from eqsim.data import FIST_DAMAGE, SPECIAL_ATTACKS, SpecialAttack
from eqsim.formulas import (
    add_elemental_to_damage,
    backstab_base_damage,
    backstab_min_hit,
    calc_melee_damage,
    check_double_attack,
    check_dual_wield,
    check_proc,
    check_triple_attack,
    effective_delay_decisec,
    get_damage_bonus_client,
    get_proc_chance_per_swing,
    kick_min_hit,
    roll_damage_multiplier,
    roll_hit,
    roll_melee_crit,
)
from eqsim.records import FightError, FightReport, FistweavingRecord, SpecialRecord, WeaponRecord
from eqsim.rng import MELEE_PROC_OFFSET, create_rng, stream_seed
from eqsim.stats import hit_stats

logger = logging.getLogger(__name__)

NO_DUAL_WIELD_CLASSES = ("paladin", "shadowknight")


class Engine:
    """Runs one melee fight from a validated FightConfig.

    All per-run numbers (to-hit, offense rating, avoidance, mitigation,
    hasted delays, proc chances, damage bonus) are worked out here once and
    never recomputed inside the loop.
    """

    def __init__(self, config: FightConfig, special_attacks: dict[str, SpecialAttack] | None = None) -> None:
        self.config = config
        self.rng = create_rng(config.seed)
        self.proc_rng = create_rng(stream_seed(config.seed, MELEE_PROC_OFFSET))
        self.messages: list[str] = []

        self.attacker = Attacker.for_melee(config)
        self.defender = Defender.for_melee(config.target)

        w1, w2 = config.weapon1, config.weapon2
        self.damage_bonus = get_damage_bonus_client(config.level, config.class_id, w1.delay, w1.is_2h)
        self.dual_wielding = (
            w2 is not None
            and (config.dual_wield_skill or 0) > 0
            and config.class_id not in NO_DUAL_WIELD_CLASSES
        )
        self.delay1 = effective_delay_decisec(w1.delay, config.haste_percent)
        self.delay2 = effective_delay_decisec(w2.delay, config.haste_percent) if w2 is not None else 0

        dw_chance = self.attacker.dual_wield_chance
        self.proc_chance1 = get_proc_chance_per_swing(self.delay1, False, dw_chance, config.dex) if w1.has_proc else 0.0
        self.proc_chance2 = (
            get_proc_chance_per_swing(self.delay2, True, dw_chance, config.dex)
            if w2 is not None and w2.has_proc
            else 0.0
        )

        table = SPECIAL_ATTACKS if special_attacks is None else special_attacks
        special = table.get(config.class_id) if config.special_attacks else None
        if special is not None and special.from_behind_only and not config.from_behind:
            special = None
        self.special = special

        self.report = self._new_report()

    def _new_report(self) -> FightReport:
        config = self.config
        special_rec = None
        if self.special is not None:
            special_rec = SpecialRecord(name=self.special.name)
            if self.special.kind == "backstab":
                special_rec.double_backstabs = 0
                special_rec.backstab_skill = min(255, config.backstab_skill)
                special_rec.backstab_mod_percent = config.backstab_mod_percent or 0
        fistweaving = None
        if config.class_id == "monk" and config.weapon1.is_2h and config.fistweaving:
            fistweaving = FistweavingRecord()
        return FightReport(
            duration_sec=config.fight_duration_sec,
            special=special_rec,
            fistweaving=fistweaving,
            damage_bonus=self.damage_bonus,
            calculated_to_hit=self.attacker.to_hit,
            offense_skill=self.attacker.offense_skill,
            offense_rating=self.attacker.offense_rating,
            offense_rating_from_str=self.attacker.str_bonus,
            displayed_attack=self.attacker.displayed_attack,
        )

    def log(self, message: str) -> None:
        self.messages.append(message)
        logger.debug(message)

    # -------------------------------------------------------
    # Attack resolution
    # -------------------------------------------------------

    def hit(self) -> bool:
        return roll_hit(self.attacker.to_hit, self.defender.avoidance, self.rng, self.config.from_behind)

    def crit(self, damage: int, damage_bonus: int) -> int:
        """Roll a crit on a landed hit and tally it."""
        c = self.config
        before = damage
        damage, is_crit = roll_melee_crit(
            damage, damage_bonus, c.level, c.class_id, c.dex, c.crit_chance_mult, self.rng,
            is_berserk=c.berserk, crippling_blow_chance=c.crippling_blow_chance,
        )
        damage = max(damage, 1 + damage_bonus)
        if is_crit:
            self.report.crit_hits += 1
            self.report.crit_damage_gain += damage - before
        return damage

    def elemental(self, damage: int, weapon: Weapon | None) -> int:
        damage, added = add_elemental_to_damage(damage, weapon, self.defender.target, self.rng)
        self.report.elemental_damage_total += added
        return damage

    def attack(
        self,
        record: WeaponRecord | FistweavingRecord,
        base_damage: float,
        weapon: Weapon | None,
        damage_bonus: int = 0,
        proc_chance: float = 0.0,
    ) -> None:
        """One attack: hit roll, then damage, multiplier, crit, elemental, proc.

        ``weapon`` supplies the elemental add-on and proc damage; fistweaving
        punches pass None and get neither.
        """
        c = self.config
        if not self.hit():
            record.record_miss()
            return

        damage = calc_melee_damage(base_damage, self.attacker.offense_rating, self.defender.mitigation, self.rng, 0)
        damage, _ = roll_damage_multiplier(self.attacker.offense_rating, damage, c.level, c.class_id, False, self.rng)
        damage = max(damage + damage_bonus, 1 + damage_bonus)
        damage = self.crit(damage, damage_bonus)
        damage = self.elemental(damage, weapon)

        record.record_hit(damage)
        self.report.total_damage += damage
        self.report.damage_bonus_total += damage_bonus

        if check_proc(proc_chance, self.proc_rng):
            proc_damage = int(weapon.proc_spell_damage or 0)
            record.procs += 1
            record.proc_damage_total += proc_damage
            self.report.total_damage += proc_damage

    def special_damage(self) -> int:
        """Base damage for one landed special attack, before multiplier."""
        c, special = self.config, self.special
        rating, mitigation = self.attacker.offense_rating, self.defender.mitigation
        if special.kind == "backstab":
            base = backstab_base_damage(c.backstab_skill, c.backstab_mod_percent, c.weapon1.damage)
            return max(1, calc_melee_damage(base, rating, mitigation, self.rng, 0))
        if special.kind == "kick":
            damage = calc_melee_damage(special.base_damage, rating, mitigation, self.rng, 0)
            return max(1, damage, kick_min_hit(c.level))
        damage = calc_melee_damage(c.weapon1.damage, rating, mitigation, self.rng)
        if special.damage_multiplier:
            damage = math.floor(damage * special.damage_multiplier)
        return max(1, damage)

    def special_hit(self) -> None:
        c = self.config
        rec = self.report.special
        damage, _ = roll_damage_multiplier(
            self.attacker.offense_rating, self.special_damage(), c.level, c.class_id, False, self.rng,
        )
        damage = self.crit(damage, 0)
        if self.special.kind == "backstab":
            damage = max(damage, backstab_min_hit(c.level))
        damage = self.elemental(damage, c.weapon1)
        rec.record_hit(damage)
        self.report.weapon1.total_damage += damage
        self.report.total_damage += damage

    def special_attack(self) -> None:
        """Fire the special attack; backstabs above 54 may chain a second."""
        c = self.config
        rec = self.report.special
        rec.attempts += 1
        if not self.hit():
            return
        self.special_hit()

        if (
            self.special.kind == "backstab"
            and c.level > 54
            and check_double_attack(self.attacker.double_attack_effective, self.rng, c.class_id)
            and self.hit()
        ):
            rec.double_backstabs += 1
            self.special_hit()

    # -------------------------------------------------------
    # Rounds
    # -------------------------------------------------------

    def main_hand_round(self) -> None:
        c = self.config
        rec = self.report.weapon1
        rec.rounds += 1

        def attack() -> None:
            self.attack(rec, c.weapon1.damage, c.weapon1, self.damage_bonus, self.proc_chance1)

        attacks = 1
        attack()
        if check_double_attack(self.attacker.double_attack_effective, self.rng, c.class_id):
            attacks = 2
            attack()
            if check_triple_attack(self.rng, c.level, c.class_id):
                attacks = 3
                attack()
        rec.record_round(attacks)

        if self.report.fistweaving is not None:
            self.fistweaving_round()

    def fistweaving_round(self) -> None:
        """A punch round alongside a two-hander: 9 base, no proc, no triple."""
        rec = self.report.fistweaving
        rec.rounds += 1
        self.attack(rec, FIST_DAMAGE, None)
        if check_double_attack(self.attacker.double_attack_effective, self.rng, self.config.class_id):
            self.attack(rec, FIST_DAMAGE, None)
            rec.double += 1
        else:
            rec.single += 1

    def off_hand_round(self) -> None:
        c = self.config
        if not check_dual_wield(self.attacker.dual_wield_effective, self.rng):
            return
        rec = self.report.weapon2
        rec.rounds += 1
        attacks = 1
        self.attack(rec, c.weapon2.damage, c.weapon2, 0, self.proc_chance2)
        if check_double_attack(self.attacker.double_attack_effective, self.rng, c.class_id):
            attacks = 2
            self.attack(rec, c.weapon2.damage, c.weapon2, 0, self.proc_chance2)
        rec.record_round(attacks)

    def fight(self) -> FightReport:
        """Run the clock for the whole fight and return the finished report."""
        report = self.report
        self.log(
            f"to-hit {self.attacker.to_hit}, offense rating {self.attacker.offense_rating}, "
            f"avoidance {self.defender.avoidance}, mitigation {self.defender.mitigation}"
        )
        duration = math.floor(self.config.fight_duration_sec * 10)
        next_swing1 = 0.0
        next_swing2 = math.floor(self.rng() * self.delay2) if self.dual_wielding else math.inf
        next_special_at = 0

        for t in range(duration):
            if self.special is not None and t >= next_special_at:
                self.special_attack()
                next_special_at = t + self.special.cooldown_decisec

            if t >= next_swing1:
                next_swing1 = t + self.delay1
                self.main_hand_round()

            if self.dual_wielding and t >= next_swing2:
                next_swing2 = t + self.delay2
                self.off_hand_round()

        for rec in (report.weapon1, report.weapon2, report.special, report.fistweaving):
            if rec is not None:
                rec.hit_stats = hit_stats(rec.hit_list)
        self.log(f"{report.total_damage} total damage over {report.duration_sec}s")
        return report


def run_fight(config: FightConfig, special_attacks: dict[str, SpecialAttack] | None = None) -> FightReport | FightError:
    """Simulate a melee fight. Bad configuration comes back as a FightError."""
    error = config.validate()
    if error:
        return FightError(error)
    return Engine(config, special_attacks).fight()
