"""Renderers that turn fight reports into text.

The TextRenderer produces the plain-text combat report. Other front ends
(the Streamlit page in ui/app.py) read the same report records directly.
"""

from __future__ import annotations

from eqsim.formulas import backstab_effective_skill
from eqsim.records import FightReport, HitStats, RangedFightReport, WeaponRecord

MISSING = "—"


def format_stat(value: float | None) -> str:
    """Whole numbers print bare, anything else to two decimals."""
    if value is None:
        return MISSING
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def pct(part: float, whole: float) -> str:
    return f"{part / whole * 100:.1f}%"


class TextRenderer:
    """Renders fight reports to lists of text lines."""

    def render_fight(self, report: FightReport, label1: str | None = None, label2: str | None = None) -> list[str]:
        dur = report.duration_sec
        lines = [
            "--- Combat Report ---",
            f"Duration: {dur} seconds",
            f"Calculated To Hit: {report.calculated_to_hit}",
            f"Offense skill (0–255, used in to-hit): {report.offense_skill}",
            f"Offense rating (for damage): {report.offense_rating}  (skill + STR + worn + spell)",
            f"Offense rating from stats (STR): {report.offense_rating_from_str}",
            f"Displayed Attack: {report.displayed_attack}  ( (offense rating + toHit) * 1000 / 744 )",
            f"Main hand damage bonus: {report.damage_bonus}",
        ]
        if report.damage_bonus_total > 0:
            lines.append(f"Damage from bonus: {report.damage_bonus_total}")
        lines.append(f"Critical hits: {report.crit_hits}")
        if report.crit_damage_gain >= 0:
            lines.append(f"Net DPS from criticals (vs normal): {report.crit_damage_gain / dur:.2f}")

        lines.extend(self.render_weapon(report.weapon1, label1 or "Weapon 1", triple=True))
        if report.weapon2.swings > 0:
            lines.append("")
            lines.extend(self.render_weapon(report.weapon2, label2 or "Weapon 2", triple=False))
        lines.extend(self.render_special(report))
        lines.extend(self.render_fistweaving(report))

        if report.elemental_damage_total > 0:
            lines.extend(["", f"Elemental damage: {report.elemental_damage_total}"])
        lines.extend(["", f"Total damage: {report.total_damage}", f"DPS: {report.total_damage / dur:.2f}"])
        return lines

    def render_weapon(self, rec: WeaponRecord, label: str, triple: bool) -> list[str]:
        lines = [label, f"  Combat rounds: {rec.rounds}"]
        if rec.rounds > 0:
            if triple:
                lines.append(
                    "  Single / Double / Triple (% of rounds): "
                    f"{pct(rec.single, rec.rounds)} / {pct(rec.double, rec.rounds)} / {pct(rec.triple, rec.rounds)}"
                )
            else:
                lines.append(
                    f"  Single / Double (% of rounds): {pct(rec.single, rec.rounds)} / {pct(rec.double, rec.rounds)}"
                )
        lines.append(f"  Single attacks: {rec.single}")
        lines.append(f"  Double attacks: {rec.double}")
        if triple:
            lines.append(f"  Triple attacks: {rec.triple}")
        lines.append(f"  Swings: {rec.swings}")
        lines.append(f"  Hits: {rec.hits}")
        if rec.swings > 0:
            lines.append(f"  Overall accuracy: {pct(rec.hits, rec.swings)}")
        lines.append(f"  Total damage: {rec.total_damage}")
        lines.extend(self.render_hit_stats(rec.hit_stats, rec.max_damage))
        lines.append(f"  Procs: {rec.procs}")
        if rec.proc_damage_total > 0:
            lines.append(f"  Proc spell damage: {rec.proc_damage_total}")
        return lines

    def render_hit_stats(self, stats: HitStats, max_damage: int | None = None) -> list[str]:
        return [
            f"  Max hit: {format_stat(stats.max if stats.max is not None else max_damage)}",
            f"  Min hit: {format_stat(stats.min)}",
            f"  Mean hit: {format_stat(stats.mean)}",
            f"  Median hit: {format_stat(stats.median)}",
            f"  Mode hit: {format_stat(stats.mode)}",
        ]

    def render_special(self, report: FightReport) -> list[str]:
        sp = report.special
        if sp is None or (sp.count == 0 and sp.attempts == 0):
            return []
        accuracy = pct(sp.hits, sp.attempts) if sp.attempts > 0 else "0%"
        lines = [
            "",
            sp.name,
            f"  Count: {sp.count}",
            f"  Attempts: {sp.attempts}",
            f"  Accuracy: {accuracy}",
            f"  Total damage: {sp.total_damage}",
            f"  Max hit: {sp.max_damage}",
            f"  DPS: {sp.total_damage / report.duration_sec:.2f}",
        ]
        if sp.double_backstabs is not None:
            lines.append(f"  Double backstabs: {sp.double_backstabs}")
            mod = sp.backstab_mod_percent or 0
            if mod != 0 and sp.backstab_skill is not None:
                effective = backstab_effective_skill(sp.backstab_skill, mod)
                lines.append(f"  Effective backstab skill: {effective} (skill + {format_stat(mod)}% mod, cap 255)")
        return lines

    def render_fistweaving(self, report: FightReport) -> list[str]:
        fw = report.fistweaving
        if fw is None or fw.rounds == 0:
            return []
        accuracy = f"{fw.hits / fw.swings * 100:.1f}" if fw.swings > 0 else "0"
        return [
            "",
            "Fistweaving (9 dmg, no proc)",
            f"  Rounds: {fw.rounds}",
            f"  Single / Double: {fw.single} / {fw.double}",
            f"  Swings: {fw.swings}",
            f"  Hits: {fw.hits}",
            f"  Accuracy: {accuracy}%",
            f"  Total damage: {fw.total_damage}",
            f"  Max hit: {fw.max_damage}",
            f"  DPS: {fw.total_damage / report.duration_sec:.2f}",
        ]

    def render_ranged(self, report: RangedFightReport) -> list[str]:
        dur = report.duration_sec
        r = report.ranged
        lines = [
            "--- Ranged Combat Report ---",
            f"Duration: {dur} seconds",
            f"Calculated To Hit: {report.calculated_to_hit}",
            f"Offense rating (for damage): {report.offense_rating}",
            f"Displayed Attack: {report.displayed_attack}  ( (offense rating + toHit) * 1000 / 744 )",
            "",
            "Ranged",
            f"  Shots: {r.swings}",
            f"  Hits: {r.hits}",
        ]
        if r.swings > 0:
            lines.append(f"  Accuracy: {pct(r.hits, r.swings)}")
        lines.append(f"  Total damage: {r.total_damage}")
        lines.extend(self.render_hit_stats(r.hit_stats, r.max_damage if r.hits else None))
        lines.append(f"  Procs: {r.procs}")
        if r.proc_damage_total > 0:
            lines.append(f"  Proc spell damage: {r.proc_damage_total}")
        lines.append("")
        lines.append(f"Critical hits: {report.crit_hits}")
        lines.append(f"Net DPS from criticals: {report.crit_damage_gain / dur:.2f}")
        if report.wall_penalty_damage_lost is not None:
            lines.append(f"Damage lost to wall penalty: {report.wall_penalty_damage_lost}")
        if report.elemental_damage_total > 0:
            lines.append(f"Elemental damage: {report.elemental_damage_total}")
        lines.append(f"Total damage: {report.total_damage}")
        lines.append(f"DPS: {report.total_damage / dur:.2f}")
        return lines


def format_report(report: FightReport, label1: str | None = None, label2: str | None = None) -> str:
    """The melee report as one multi-line string."""
    return "\n".join(TextRenderer().render_fight(report, label1, label2))


def format_ranged_report(report: RangedFightReport) -> str:
    """The ranged report as one multi-line string."""
    return "\n".join(TextRenderer().render_ranged(report))
