from __future__ import annotations

import hashlib
import logging
import random
import struct
from dataclasses import dataclass

from .geometry import (
    EDGE_POSITIONS,
    OCTANT_NORMALS,
    OCTANTS,
    SQUARE_NORMALS,
    Matrix3,
    Vec3,
    dot,
    inverse_twist_matrix,
    mat_vec,
    octant_normal,
    twist_matrix,
)
from .permutation import ArrayPermutation, Permutation, SparsePermutation

logger = logging.getLogger(__name__)

SQUARE_LABELS = ("White", "Yellow", "Blue", "Green", "Red", "Orange")
TRIANGLE_LABELS = ("White", "Pink", "Red", "Blue", "Yellow", "Silver", "Orange", "Green")

REPRESENTATIONS = ("array", "sparse")

LastAction = tuple[str, int, bool]


def _is_edge(position) -> bool:
    return isinstance(position[0], tuple)


def _piece_normal(position) -> Vec3:
    # edge facets travel with the square piece they sit on
    return position[0] if _is_edge(position) else position


def _rotate(m: Matrix3, position):
    if _is_edge(position):
        square, octant = position
        return (mat_vec(m, square), mat_vec(m, octant))
    return mat_vec(m, position)


@dataclass(frozen=True, slots=True)
class CutFamily:
    """A set of facet positions tracked by one permutation."""

    name: str
    positions: tuple
    labels: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.positions)

    def twist_map(self, octant: int, inverse: bool = False) -> list[int]:
        """Return mapping position -> position for a center twist on `octant`.

        Positions whose piece lies on the positive side of the octant normal
        turn with it; all others stay put.
        """
        normal = octant_normal(octant)
        m = inverse_twist_matrix(octant) if inverse else twist_matrix(octant)
        index = {p: i for i, p in enumerate(self.positions)}
        mp = list(range(self.size))
        for i, p in enumerate(self.positions):
            if dot(_piece_normal(p), normal) <= 0:
                continue
            try:
                mp[i] = index[_rotate(m, p)]
            except KeyError as e:
                raise AssertionError(f"twist maps {self.name} position out of domain: {p}") from e
        if len(set(mp)) != self.size:
            raise AssertionError(f"{self.name} twist map is not a bijection")
        return mp


def standard_families() -> tuple[CutFamily, ...]:
    edge_labels = tuple(
        f"{SQUARE_LABELS[SQUARE_NORMALS.index(s)]}/{TRIANGLE_LABELS[OCTANT_NORMALS.index(o)]}"
        for s, o in EDGE_POSITIONS
    )
    return (
        CutFamily("squares", tuple(SQUARE_NORMALS), SQUARE_LABELS),
        CutFamily("triangles", tuple(OCTANT_NORMALS), TRIANGLE_LABELS),
        CutFamily("edges", tuple(EDGE_POSITIONS), edge_labels),
    )


@dataclass(frozen=True)
class PuzzleConfig:
    representation: str = "array"

    def __post_init__(self) -> None:
        if self.representation not in REPRESENTATIONS:
            raise ValueError(f"representation must be one of {REPRESENTATIONS}, got {self.representation!r}")


def make_permutation(images: list[int], representation: str) -> Permutation:
    if representation == "array":
        return ArrayPermutation.from_images(images)
    if representation == "sparse":
        return SparsePermutation.from_mapping(dict(enumerate(images)))
    raise ValueError(f"unknown representation {representation!r}")


def identity_permutation(size: int, representation: str) -> Permutation:
    if representation == "array":
        return ArrayPermutation.identity(size)
    if representation == "sparse":
        return SparsePermutation.identity()
    raise ValueError(f"unknown representation {representation!r}")


def compose(p: Permutation, q: Permutation) -> Permutation:
    """Apply `p`, then `q`. Both must use the same representation."""
    return type(p).compose(p, q)


@dataclass(slots=True)
class PuzzleState:
    """Combinatorial state of the truncated octahedron.

    Each family state maps a home slot (label index) to the position the
    facet currently occupies, so the solved puzzle is the identity and a twist
    `t` is applied as ``compose(state, t)``.
    """

    config: PuzzleConfig
    families: tuple[CutFamily, ...]
    states: dict[str, Permutation]
    twist_perms: dict[tuple[str, bool], list[Permutation]]
    last_action: LastAction | None

    def __init__(self, config: PuzzleConfig | None = None):
        self.config = config or PuzzleConfig()
        self.families = standard_families()
        self.twist_perms = self._build_twist_perms()
        self.states = {}
        self.last_action = None
        self.reset()

    def _build_twist_perms(self) -> dict[tuple[str, bool], list[Permutation]]:
        rep = self.config.representation
        perms: dict[tuple[str, bool], list[Permutation]] = {}
        for fam in self.families:
            for inverse in (False, True):
                perms[(fam.name, inverse)] = [
                    make_permutation(fam.twist_map(o, inverse), rep) for o in range(OCTANTS)
                ]
        return perms

    def family(self, name: str) -> CutFamily:
        for fam in self.families:
            if fam.name == name:
                return fam
        raise ValueError(f"unknown cut family {name!r}")

    def reset(self) -> None:
        rep = self.config.representation
        self.states = {fam.name: identity_permutation(fam.size, rep) for fam in self.families}
        self.last_action = None

    def randomize(self, seed: int, moves: int = 30) -> None:
        if moves < 0:
            raise ValueError("moves must be >= 0")
        rng = random.Random(seed)
        for _ in range(moves):
            self.twist(rng.randrange(OCTANTS), inverse=rng.random() < 0.5)
        logger.debug("randomized with seed=%d moves=%d -> %s", seed, moves, self.hash()[:12])
        self.last_action = None

    def twist(self, octant: int, inverse: bool = False) -> None:
        if not (0 <= octant < OCTANTS):
            raise ValueError("octant must be in [0..7]")
        for fam in self.families:
            t = self.twist_perms[(fam.name, inverse)][octant]
            self.states[fam.name] = compose(self.states[fam.name], t)
        self.last_action = ("twist", octant, inverse)
        logger.debug("twist octant=%d inverse=%s", octant, inverse)

    def inverse_twist(self, octant: int, inverse: bool = False) -> tuple[int, bool]:
        if not (0 <= octant < OCTANTS):
            raise ValueError("octant must be in [0..7]")
        return (octant, not inverse)

    def facet_at(self, family: str, position: int) -> int:
        """Label index of the facet currently sitting at `position`."""
        fam = self.family(family)
        if not (0 <= position < fam.size):
            raise ValueError(f"position must be in [0..{fam.size - 1}]")
        return self.states[family].invert().permute(position)

    def layout(self, family: str) -> list[str]:
        fam = self.family(family)
        inv = self.states[family].invert()
        return [fam.labels[inv.permute(k)] for k in range(fam.size)]

    def is_solved(self) -> bool:
        return all(p.is_identity() for p in self.states.values())

    def _dense(self, name: str) -> tuple[int, ...]:
        p = self.states[name]
        if isinstance(p, SparsePermutation):
            return p.to_array(self.family(name).size).images
        return p.images

    def state(self) -> dict:
        return {
            "representation": self.config.representation,
            "families": {fam.name: list(self._dense(fam.name)) for fam in self.families},
            "last_action": self.last_action,
        }

    def _canonical_bytes(self) -> bytes:
        # per family, little-endian: uint16 size, then one byte per image
        out = bytearray()
        for fam in self.families:
            dense = self._dense(fam.name)
            out += struct.pack("<H" + "B" * len(dense), len(dense), *dense)
        return bytes(out)

    def hash(self) -> str:
        return hashlib.sha256(self._canonical_bytes()).hexdigest()

    def audit(self) -> None:
        # NON-MUTATING: must restore exactly.
        before_states = dict(self.states)
        before_action = self.last_action
        before_hash = self.hash()

        try:
            self._audit_permutations()
            self._audit_twist_perms()
            self._audit_inverse_roundtrip()
        finally:
            self.states = before_states
            self.last_action = before_action
            if self.hash() != before_hash:
                raise AssertionError("audit() mutated puzzle state (hash mismatch)")

    def _audit_permutations(self) -> None:
        for fam in self.families:
            p = self.states[fam.name]
            if isinstance(p, SparsePermutation):
                if not p.is_canonical():
                    raise AssertionError(f"{fam.name} state stores a fixed point")
                if any(k < 0 or k >= fam.size for k in p.images):
                    raise AssertionError(f"{fam.name} state moves an index out of range")
            elif p.size != fam.size:
                raise AssertionError(f"{fam.name} state length mismatch")
            dense = self._dense(fam.name)
            if set(dense) != set(range(fam.size)) or len(dense) != fam.size:
                raise AssertionError(f"{fam.name} state is not a bijection")

    def _audit_twist_perms(self) -> None:
        if self.last_action is None:
            octants = range(OCTANTS)
        else:
            octants = [self.last_action[1]]

        for fam in self.families:
            for o in octants:
                t = self.twist_perms[(fam.name, False)][o]
                t_inv = self.twist_perms[(fam.name, True)][o]
                if t.order() != 3:
                    raise AssertionError(f"{fam.name} twist {o} does not have order 3")
                if not compose(t, t_inv).is_identity():
                    raise AssertionError(f"{fam.name} twist {o} inverse mismatch")

    def _audit_inverse_roundtrip(self) -> None:
        if self.last_action is None:
            return

        snap = self._canonical_bytes()
        _, octant, inverse = self.last_action
        inv_octant, inv_inverse = self.inverse_twist(octant, inverse)
        self.twist(octant, inverse)
        self.twist(inv_octant, inv_inverse)

        if self._canonical_bytes() != snap:
            raise AssertionError("twist(o); twist(inverse) did not restore state")
