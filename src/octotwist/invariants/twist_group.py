from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from octotwist.core.geometry import OCTANTS
from octotwist.core.permutation import Permutation
from octotwist.core.puzzle import CutFamily, compose, identity_permutation, make_permutation


@dataclass(frozen=True, slots=True)
class TwistGroup:
    family: str
    generators: tuple[Permutation, ...]
    twist_orders: tuple[int, ...]


def build_twist_group(family: CutFamily, representation: str = "array") -> TwistGroup:
    gens = tuple(make_permutation(family.twist_map(o), representation) for o in range(OCTANTS))
    orders = tuple(g.order() for g in gens)
    for o, g in enumerate(gens):
        # the inverse twist must be the algebraic inverse of the forward one
        inv = make_permutation(family.twist_map(o, inverse=True), representation)
        if inv != g.invert():
            raise AssertionError(f"{family.name} twist {o}: inverse map disagrees with invert()")
    return TwistGroup(family=family.name, generators=gens, twist_orders=orders)


def generated_order(generators: Sequence[Permutation], identity: Permutation, limit: int = 100_000) -> int:
    """Size of the group generated by `generators` (breadth-first closure)."""
    seen = {identity}
    queue = deque([identity])
    while queue:
        p = queue.popleft()
        for g in generators:
            r = compose(p, g)
            if r in seen:
                continue
            seen.add(r)
            if len(seen) > limit:
                raise ValueError(f"group order exceeds limit {limit}")
            queue.append(r)
    return len(seen)


def twist_group_order(family: CutFamily, representation: str = "array", limit: int = 100_000) -> int:
    grp = build_twist_group(family, representation)
    return generated_order(grp.generators, identity_permutation(family.size, representation), limit)
