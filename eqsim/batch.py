"""
Monte-Carlo batches: run the same fight many times and average the DPS.

Runs are independent. Each one builds its own RNG streams from its own seed
(``seed + i`` for a seeded config, unseeded otherwise), so a batch can be
spread over worker processes without any coordination, and a seeded batch
gives the same numbers however many workers it uses.
"""

from __future__ import annotations

import concurrent.futures
import statistics
from dataclasses import dataclass, field, replace

from eqsim.config import FightConfig, RangedFightConfig
from eqsim.engine import run_fight
from eqsim.ranged import check_config, run_ranged_fight
from eqsim.records import FightError


@dataclass
class BatchResult:
    """DPS of every run, in run order, plus summary numbers."""

    dps: list[float] = field(default_factory=list)

    @property
    def runs(self) -> int:
        return len(self.dps)

    @property
    def mean_dps(self) -> float:
        return statistics.fmean(self.dps)

    @property
    def min_dps(self) -> float:
        return min(self.dps)

    @property
    def max_dps(self) -> float:
        return max(self.dps)

    @property
    def stdev_dps(self) -> float:
        """Sample standard deviation; 0 for a single run."""
        return statistics.stdev(self.dps) if len(self.dps) > 1 else 0.0


def run_once(config: FightConfig | RangedFightConfig) -> float:
    """DPS of a single, already validated run."""
    if isinstance(config, RangedFightConfig):
        report = run_ranged_fight(config)
    else:
        report = run_fight(config)
    return report.dps


def run_batch(
    config: FightConfig | RangedFightConfig,
    runs: int,
    max_workers: int | None = None,
) -> BatchResult | FightError:
    """Run ``runs`` fights and collect their DPS.

    With fewer than two workers the runs happen in this process, one after
    another; otherwise they go to a process pool.
    """
    error = check_config(config) if isinstance(config, RangedFightConfig) else config.validate()
    if error:
        return FightError(error)
    if runs < 1:
        return FightError("runs must be at least 1")

    configs = [replace(config, seed=None if config.seed is None else config.seed + i) for i in range(runs)]

    if max_workers is None or max_workers < 2:
        return BatchResult(dps=[run_once(c) for c in configs])

    with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
        return BatchResult(dps=list(executor.map(run_once, configs)))
