"""Permutations of small index sets (0..255).

Two value types share one contract:

- `SparsePermutation` stores only displaced points; an absent index is fixed.
- `ArrayPermutation` stores every image in a tuple whose length is fixed at
  construction.

Composition convention (both types): ``compose(p, q)`` applies ``p`` first and
then ``q``, i.e. ``compose(p, q).permute(k) == q.permute(p.permute(k))``.
``p * q`` is shorthand for the same thing.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

MAX_SIZE = 256


def _check_index(k: object) -> int:
    if not isinstance(k, int) or isinstance(k, bool):
        raise ValueError(f"index must be an int, got {type(k).__name__}")
    if not (0 <= k < MAX_SIZE):
        raise ValueError(f"index {k} out of range [0..{MAX_SIZE - 1}]")
    return k


def _cycle_pairs(cycles: Iterable[Iterable[int]]) -> dict[int, int]:
    """Flatten disjoint cycles into an index -> image mapping."""
    mapping: dict[int, int] = {}
    for cycle in cycles:
        cycle = [_check_index(i) for i in cycle]
        for i, j in zip(cycle, cycle[1:] + cycle[:1]):
            if i in mapping:
                raise ValueError(f"cycles are not disjoint: {i} appears twice")
            mapping[i] = j
    return mapping


def _cycles(support: Iterable[int], image: Callable[[int], int]) -> list[tuple[int, ...]]:
    seen: set[int] = set()
    out: list[tuple[int, ...]] = []
    for start in sorted(support):
        if start in seen:
            continue
        cycle = [start]
        seen.add(start)
        cursor = image(start)
        while cursor != start:
            cycle.append(cursor)
            seen.add(cursor)
            cursor = image(cursor)
        out.append(tuple(cycle))
    return out


def _power(p, e: int, identity):
    # exponentiation by squaring; negative exponents go through the inverse
    if e < 0:
        p = p.invert()
        e = -e
    result = identity
    base = p
    while e:
        if e & 1:
            result = result * base
        e >>= 1
        if e:
            base = base * base
    return result


@dataclass(frozen=True, slots=True)
class SparsePermutation:
    """Permutation stored as a mapping of its non-fixed points.

    The constructor trusts its argument; untrusted data goes through
    `from_mapping` or `from_cycles`, which validate and canonicalise it.
    Canonical form: no entry maps a key to itself.
    """

    images: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # private copy behind a read-only view
        object.__setattr__(self, "images", MappingProxyType(dict(self.images)))

    def __hash__(self) -> int:
        return hash(frozenset(self.images.items()))

    # construction

    @classmethod
    def identity(cls) -> SparsePermutation:
        return cls({})

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, int]) -> SparsePermutation:
        images: dict[int, int] = {}
        for k, v in mapping.items():
            _check_index(k)
            _check_index(v)
            if k != v:
                images[k] = v
        if set(images.values()) != set(images):
            raise ValueError("mapping is not a bijection")
        return cls(images)

    @classmethod
    def from_cycles(cls, *cycles: Iterable[int]) -> SparsePermutation:
        return cls.from_mapping(_cycle_pairs(cycles))

    # group operations

    def permute(self, k: int) -> int:
        return self.images.get(k, k)

    def invert(self) -> SparsePermutation:
        return SparsePermutation({v: k for k, v in self.images.items()})

    @staticmethod
    def compose(p: SparsePermutation, q: SparsePermutation) -> SparsePermutation:
        """Apply `p`, then `q`."""
        result = dict(p.images)
        rest = dict(q.images)
        for k, v in p.images.items():
            qv = q.permute(v)
            if qv == k:
                del result[k]
            else:
                result[k] = qv
            # v is a key of p as well, so it is already handled above
            rest.pop(v, None)
        result.update(rest)
        return SparsePermutation(result)

    def __mul__(self, other: SparsePermutation) -> SparsePermutation:
        if not isinstance(other, SparsePermutation):
            return NotImplemented
        return SparsePermutation.compose(self, other)

    def power(self, e: int) -> SparsePermutation:
        return _power(self, e, SparsePermutation.identity())

    # inspection

    def is_identity(self) -> bool:
        return not self.images

    def is_canonical(self) -> bool:
        return all(k != v for k, v in self.images.items())

    def support(self) -> list[int]:
        return sorted(self.images)

    def cycles(self) -> list[tuple[int, ...]]:
        return _cycles(self.images, self.permute)

    def order(self) -> int:
        return math.lcm(1, *map(len, self.cycles()))

    def sign(self) -> int:
        return -1 if sum(len(c) - 1 for c in self.cycles()) % 2 else 1

    def to_array(self, n: int) -> ArrayPermutation:
        if self.images and max(self.images) >= n:
            raise ValueError(f"permutation moves index {max(self.images)}, cannot fit size {n}")
        base = ArrayPermutation.identity(n)
        return ArrayPermutation(tuple(self.permute(k) for k in base.images))


@dataclass(frozen=True, slots=True)
class ArrayPermutation:
    """Permutation of ``0..size-1`` stored as a dense image tuple.

    `images[k]` is the image of `k`. The size is fixed when the value is
    built and every operation preserves it.
    """

    images: tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.images)

    # construction

    @classmethod
    def identity(cls, n: int) -> ArrayPermutation:
        if not isinstance(n, int) or not (1 <= n <= MAX_SIZE):
            raise ValueError(f"size must be in [1..{MAX_SIZE}], got {n!r}")
        return cls(tuple(range(n)))

    @classmethod
    def from_images(cls, images: Sequence[int]) -> ArrayPermutation:
        n = len(images)
        if not (1 <= n <= MAX_SIZE):
            raise ValueError(f"size must be in [1..{MAX_SIZE}], got {n}")
        for v in images:
            _check_index(v)
        if sorted(images) != list(range(n)):
            raise ValueError("images are not a permutation of 0..size-1")
        return cls(tuple(images))

    @classmethod
    def from_cycles(cls, n: int, *cycles: Iterable[int]) -> ArrayPermutation:
        mapping = _cycle_pairs(cycles)
        if mapping and max(mapping) >= n:
            raise ValueError(f"cycle index {max(mapping)} out of range for size {n}")
        base = cls.identity(n)
        return cls.from_images([mapping.get(k, k) for k in base.images])

    # group operations

    def permute(self, k: int) -> int:
        if not (0 <= k < len(self.images)):
            raise IndexError(f"index {k} out of range for size {len(self.images)}")
        return self.images[k]

    def invert(self) -> ArrayPermutation:
        result = [0] * len(self.images)
        for k, v in enumerate(self.images):
            result[v] = k
        return ArrayPermutation(tuple(result))

    @staticmethod
    def compose(p: ArrayPermutation, q: ArrayPermutation) -> ArrayPermutation:
        """Apply `p`, then `q`."""
        if p.size != q.size:
            raise ValueError(f"cannot compose permutations of size {p.size} and {q.size}")
        qi = q.images
        return ArrayPermutation(tuple(qi[v] for v in p.images))

    def __mul__(self, other: ArrayPermutation) -> ArrayPermutation:
        if not isinstance(other, ArrayPermutation):
            return NotImplemented
        return ArrayPermutation.compose(self, other)

    def power(self, e: int) -> ArrayPermutation:
        return _power(self, e, ArrayPermutation.identity(self.size))

    # inspection

    def is_identity(self) -> bool:
        return all(k == v for k, v in enumerate(self.images))

    def support(self) -> list[int]:
        return [k for k, v in enumerate(self.images) if k != v]

    def cycles(self) -> list[tuple[int, ...]]:
        return _cycles(self.support(), self.images.__getitem__)

    def order(self) -> int:
        return math.lcm(1, *map(len, self.cycles()))

    def sign(self) -> int:
        return -1 if sum(len(c) - 1 for c in self.cycles()) % 2 else 1

    def to_sparse(self) -> SparsePermutation:
        return SparsePermutation({k: v for k, v in enumerate(self.images) if k != v})


Permutation = SparsePermutation | ArrayPermutation
