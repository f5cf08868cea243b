"""
Random number streams for the simulator.

Every random decision in a fight (hit rolls, damage rolls, multipliers,
crits, double attacks, procs, elemental resists) draws a uniform float in
[0, 1) from an Rng. An Rng is any zero-argument callable returning such a
float, so tests can substitute a list-backed fake and the engines never
touch the module-global random generator.

Seeded streams use a small linear congruential generator so that the same
seed and the same consumption order always give the same sequence. Each run
creates two streams, one for the main roll sequence and one for proc checks,
seeded ``seed`` and ``seed + offset`` so they never line up.
"""

from __future__ import annotations

import random
from typing import Protocol

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2**31 - 1

MELEE_PROC_OFFSET = 12345
"""Seed offset for the melee proc stream."""

RANGED_PROC_OFFSET = 9999
"""Seed offset for the ranged proc stream."""


class Rng(Protocol):
    """A source of uniform floats in [0, 1)."""

    def __call__(self) -> float: ...


class LcgRng:
    """Deterministic linear congruential generator.

    ``state = (state * A + C) mod M`` and each call returns ``state / M``.
    Since the state is always below M, the result is always below 1.
    """

    def __init__(self, seed: int) -> None:
        self.state = int(seed) % LCG_MODULUS

    def __call__(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS


def create_rng(seed: int | None = None) -> Rng:
    """Return a reproducible stream for a seed, or a fresh random one.

    Unseeded streams come from their own ``random.Random`` instance so that
    parallel runs never share generator state.
    """
    if seed is None:
        return random.Random().random
    return LcgRng(seed)


def stream_seed(seed: int | None, offset: int) -> int | None:
    """Seed for a secondary stream, or None when the run is unseeded."""
    return None if seed is None else seed + offset
