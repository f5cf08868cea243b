"""
DPS simulator for EQMac-era melee and archery combat.

``run_fight`` and ``run_ranged_fight`` take a config and return a report
(or a FightError for configs they can't run); ``format_report`` and
``format_ranged_report`` turn reports into text. The combat formulas are
importable on their own from :mod:`eqsim.formulas`.
"""

from eqsim.batch import BatchResult, run_batch
from eqsim.config import FightConfig, RangedFightConfig, Target, Weapon
from eqsim.engine import run_fight
from eqsim.ranged import run_ranged_fight
from eqsim.records import FightError, FightReport, RangedFightReport
from eqsim.renderers import format_ranged_report, format_report

__all__ = [
    "BatchResult",
    "FightConfig",
    "FightError",
    "FightReport",
    "RangedFightConfig",
    "RangedFightReport",
    "Target",
    "Weapon",
    "format_ranged_report",
    "format_report",
    "run_batch",
    "run_fight",
    "run_ranged_fight",
]
