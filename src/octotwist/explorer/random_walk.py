from __future__ import annotations

import logging
import math
import random

from octotwist.core.geometry import OCTANTS
from octotwist.core.puzzle import PuzzleConfig, PuzzleState

logger = logging.getLogger(__name__)


def _visit_entropy(visit_counts: dict[str, int]) -> float:
    """Shannon entropy (bits) of state visit distribution."""
    total = sum(visit_counts.values())
    if total == 0:
        return 0.0
    h = 0.0
    for c in visit_counts.values():
        p = c / total
        h -= p * math.log2(p)
    return h


def explore_random(
    steps: int,
    seed: int = 0,
    init_seed: int | None = None,
    representation: str = "array",
) -> dict:
    if steps < 0:
        raise ValueError("steps must be >= 0")

    rng = random.Random(seed)
    puzzle = PuzzleState(PuzzleConfig(representation=representation))
    if init_seed is not None:
        puzzle.randomize(init_seed)

    first_seen_step: dict[str, int] = {}
    visit_counts: dict[str, int] = {}

    h0 = puzzle.hash()
    first_seen_step[h0] = 0
    visit_counts[h0] = 1

    first_repeat_step: int | None = None
    cycle_length: int | None = None
    solved_visits = 0

    for step in range(1, steps + 1):
        octant = rng.randrange(OCTANTS)
        inverse = rng.random() < 0.5
        puzzle.twist(octant, inverse)
        puzzle.audit()

        if puzzle.is_solved():
            solved_visits += 1

        h = puzzle.hash()
        visit_counts[h] = visit_counts.get(h, 0) + 1
        if first_repeat_step is None and h in first_seen_step:
            first_repeat_step = step
            cycle_length = step - first_seen_step[h]
        else:
            first_seen_step.setdefault(h, step)

    logger.debug(
        "random walk: steps=%d seed=%d unique=%d first_repeat=%s",
        steps,
        seed,
        len(first_seen_step),
        first_repeat_step,
    )

    return {
        "steps": steps,
        "seed": seed,
        "init_seed": init_seed,
        "representation": representation,
        "first_repeat_step": first_repeat_step,
        "estimated_cycle_length": cycle_length,
        "unique_state_count": len(first_seen_step),
        "solved_visits": solved_visits,
        "entropy_bits": _visit_entropy(visit_counts),
        "final_hash": puzzle.hash(),
    }
