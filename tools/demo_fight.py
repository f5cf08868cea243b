#!/usr/bin/env python3
"""Run a quick demo fight and print the combat report.

Usage:
    python tools/demo_fight.py [--class monk] [--damage 20 --delay 30] [--seed 1]
    python tools/demo_fight.py --ranged --damage 30 --delay 40 --arrow 10
    python tools/demo_fight.py --runs 100 --workers 4
"""

from __future__ import annotations

import argparse
import logging

from eqsim import (
    FightConfig,
    FightError,
    RangedFightConfig,
    Target,
    Weapon,
    format_ranged_report,
    format_report,
    run_batch,
    run_fight,
    run_ranged_fight,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Simulate a fight and print DPS.")
    p.add_argument("--class", dest="class_id", default="warrior")
    p.add_argument("--level", type=int, default=60)
    p.add_argument("--damage", type=float, default=20)
    p.add_argument("--delay", type=float, default=30)
    p.add_argument("--two-handed", action="store_true")
    p.add_argument("--offhand-damage", type=float, default=0)
    p.add_argument("--offhand-delay", type=float, default=20)
    p.add_argument("--double-attack", type=int, default=245)
    p.add_argument("--dual-wield", type=int, default=245)
    p.add_argument("--haste", type=float, default=0)
    p.add_argument("--mob-level", type=int, default=60)
    p.add_argument("--mob-ac", type=int, default=300)
    p.add_argument("--duration", type=float, default=60)
    p.add_argument("--behind", action="store_true")
    p.add_argument("--specials", action="store_true")
    p.add_argument("--fistweaving", action="store_true")
    p.add_argument("--ranged", action="store_true", help="archery fight; --damage/--delay describe the bow")
    p.add_argument("--arrow", type=float, default=10, help="arrow damage for --ranged")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--runs", type=int, default=1, help="average DPS over this many runs")
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def make_config(args: argparse.Namespace) -> FightConfig | RangedFightConfig:
    target = Target(mob_level=args.mob_level, target_ac=args.mob_ac)
    if args.ranged:
        return RangedFightConfig(
            ranged_weapon=Weapon(damage=args.damage, delay=args.delay, name="Bow"),
            arrow=Weapon(damage=args.arrow, name="Arrow"),
            target=target,
            level=args.level,
            haste_percent=args.haste,
            fight_duration_sec=args.duration,
            seed=args.seed,
        )
    offhand = None
    if args.offhand_damage:
        offhand = Weapon(damage=args.offhand_damage, delay=args.offhand_delay)
    return FightConfig(
        weapon1=Weapon(damage=args.damage, delay=args.delay, is_2h=args.two_handed),
        weapon2=offhand,
        target=target,
        level=args.level,
        class_id=args.class_id,
        double_attack_skill=args.double_attack,
        dual_wield_skill=args.dual_wield,
        haste_percent=args.haste,
        fight_duration_sec=args.duration,
        from_behind=args.behind,
        special_attacks=args.specials,
        fistweaving=args.fistweaving,
        seed=args.seed,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = make_config(args)
    report = run_ranged_fight(config) if args.ranged else run_fight(config)
    if isinstance(report, FightError):
        parser.exit(1, f"error: {report.error}\n")
    print(format_ranged_report(report) if args.ranged else format_report(report))

    if args.runs > 1:
        batch = run_batch(config, args.runs, args.workers)
        print(
            f"\n{batch.runs} runs: mean {batch.mean_dps:.2f} DPS"
            f" (min {batch.min_dps:.2f}, max {batch.max_dps:.2f}, sd {batch.stdev_dps:.2f})"
        )


if __name__ == "__main__":
    main()
