from __future__ import annotations

import random

import pytest

from octotwist.core.permutation import ArrayPermutation, SparsePermutation

N = 8


def _random_images(rng: random.Random, n: int = N) -> list[int]:
    images = list(range(n))
    rng.shuffle(images)
    return images


def _make(kind: str, images: list[int]):
    if kind == "array":
        return ArrayPermutation.from_images(images)
    return SparsePermutation.from_mapping(dict(enumerate(images)))


def _identity(kind: str, n: int = N):
    return ArrayPermutation.identity(n) if kind == "array" else SparsePermutation.identity()


def _samples(kind: str, count: int = 20, seed: int = 0):
    rng = random.Random(seed)
    return [_make(kind, _random_images(rng)) for _ in range(count)]


KINDS = ["array", "sparse"]


@pytest.mark.parametrize("kind", KINDS)
def test_identity_law(kind: str):
    e = _identity(kind)
    for p in _samples(kind):
        assert type(p).compose(p, e) == p
        assert type(p).compose(e, p) == p


@pytest.mark.parametrize("kind", KINDS)
def test_inverse_law(kind: str):
    for p in _samples(kind):
        assert type(p).compose(p, p.invert()).is_identity()
        assert type(p).compose(p.invert(), p).is_identity()


@pytest.mark.parametrize("kind", KINDS)
def test_inverse_is_involution(kind: str):
    for p in _samples(kind):
        assert p.invert().invert() == p


@pytest.mark.parametrize("kind", KINDS)
def test_associativity(kind: str):
    ps = _samples(kind, count=6, seed=1)
    for p in ps:
        for q in ps:
            for r in ps:
                assert (p * q) * r == p * (q * r)


@pytest.mark.parametrize("kind", KINDS)
def test_compose_applies_left_operand_first(kind: str):
    rng = random.Random(5)
    for _ in range(20):
        p = _make(kind, _random_images(rng))
        q = _make(kind, _random_images(rng))
        r = type(p).compose(p, q)
        for k in range(N):
            assert r.permute(k) == q.permute(p.permute(k))


def test_sparse_identity_round_trip_is_empty():
    for p in _samples("sparse"):
        assert SparsePermutation.compose(p, p.invert()).images == {}
    e = SparsePermutation.identity()
    assert SparsePermutation.compose(e, e).images == {}


def test_sparse_canonical_form_preserved():
    ps = _samples("sparse", count=10, seed=3)
    for p in ps:
        assert p.is_canonical()
        assert p.invert().is_canonical()
        for q in ps:
            r = SparsePermutation.compose(p, q)
            assert all(k != v for k, v in r.images.items())


def test_sparse_from_mapping_drops_fixed_points():
    p = SparsePermutation.from_mapping({0: 1, 1: 0, 2: 2})
    assert p.images == {0: 1, 1: 0}
    assert p.permute(2) == 2
    assert p.permute(200) == 200


def test_sparse_from_mapping_rejects_non_bijection():
    with pytest.raises(ValueError):
        SparsePermutation.from_mapping({0: 1, 1: 1})
    with pytest.raises(ValueError):
        SparsePermutation.from_mapping({0: 1})
    with pytest.raises(ValueError):
        SparsePermutation.from_mapping({0: 256, 256: 0})


def test_array_from_images_rejects_bad_input():
    with pytest.raises(ValueError):
        ArrayPermutation.from_images([0, 0, 1])
    with pytest.raises(ValueError):
        ArrayPermutation.from_images([1, 2, 3])
    with pytest.raises(ValueError):
        ArrayPermutation.from_images([])
    with pytest.raises(ValueError):
        ArrayPermutation.identity(257)


def test_array_permute_out_of_range():
    p = ArrayPermutation.identity(4)
    with pytest.raises(IndexError):
        p.permute(4)
    with pytest.raises(IndexError):
        p.permute(-1)


def test_array_compose_size_mismatch():
    with pytest.raises(ValueError):
        ArrayPermutation.compose(ArrayPermutation.identity(4), ArrayPermutation.identity(5))


def test_array_identity_images():
    assert ArrayPermutation.identity(6).images == (0, 1, 2, 3, 4, 5)
    assert ArrayPermutation.identity(256).images[255] == 255


def test_cross_representation_equivalence():
    rng = random.Random(11)
    for _ in range(20):
        a_images = _random_images(rng)
        b_images = _random_images(rng)
        a = ArrayPermutation.from_images(a_images)
        b = ArrayPermutation.from_images(b_images)
        sa = a.to_sparse()
        sb = b.to_sparse()
        for dense, sparse in (
            (a, sa),
            (a.invert(), sa.invert()),
            (a * b, sa * sb),
        ):
            for k in range(N):
                assert dense.permute(k) == sparse.permute(k)
            assert sparse.to_array(N) == dense


def test_swap_scenario():
    p = SparsePermutation.from_mapping({0: 1, 1: 0})
    q = SparsePermutation.from_mapping({2: 3, 3: 2})
    pq = SparsePermutation.compose(p, q)
    assert pq.images == {0: 1, 1: 0, 2: 3, 3: 2}
    assert p.invert() == p
    assert SparsePermutation.compose(p, p.invert()).images == {}

    pa = ArrayPermutation.from_images([1, 0, 2, 3])
    qa = ArrayPermutation.from_images([0, 1, 3, 2])
    assert ArrayPermutation.compose(pa, qa).images == (1, 0, 3, 2)
    assert pa.invert() == pa
    assert ArrayPermutation.compose(pa, pa.invert()).images == (0, 1, 2, 3)


@pytest.mark.parametrize("kind", KINDS)
def test_three_cycle_scenario(kind: str):
    p = _make(kind, [1, 2, 0, 3, 4])
    pp = type(p).compose(p, p)
    assert [pp.permute(k) for k in range(3)] == [2, 0, 1]
    assert type(p).compose(p, pp).is_identity()
    assert p.order() == 3
    assert p.power(3).is_identity()
    assert p.power(-1) == p.invert()


def test_from_cycles_and_cycles():
    p = SparsePermutation.from_cycles([3, 1, 2], [5, 4])
    assert p.cycles() == [(1, 2, 3), (4, 5)]
    assert p.order() == 6
    assert p.sign() == -1
    assert p.support() == [1, 2, 3, 4, 5]

    a = ArrayPermutation.from_cycles(6, [3, 1, 2], [5, 4])
    assert a.to_sparse() == p
    assert a.cycles() == p.cycles()
    assert a.sign() == -1

    with pytest.raises(ValueError):
        SparsePermutation.from_cycles([0, 1], [1, 2])
    with pytest.raises(ValueError):
        ArrayPermutation.from_cycles(3, [0, 5])


def test_identity_properties():
    e = SparsePermutation.identity()
    assert e.order() == 1
    assert e.sign() == 1
    assert e.cycles() == []
    assert ArrayPermutation.identity(3).is_identity()


def test_values_are_hashable():
    p = SparsePermutation.from_cycles([0, 1, 2])
    q = SparsePermutation.from_mapping({2: 0, 0: 1, 1: 2})
    assert hash(p) == hash(q)
    assert len({p, q, SparsePermutation.identity()}) == 2
    assert len({ArrayPermutation.identity(3), ArrayPermutation.from_images([0, 1, 2])}) == 1


def test_to_array_rejects_small_size():
    with pytest.raises(ValueError):
        SparsePermutation.from_cycles([0, 9]).to_array(5)


def test_sparse_images_are_read_only():
    p = SparsePermutation.from_cycles([0, 1])
    seen = {p}
    with pytest.raises(TypeError):
        p.images[0] = 0  # type: ignore[index]
    assert p in seen
    assert p.is_canonical()


def test_sparse_constructor_copies_its_argument():
    source = {0: 1, 1: 0}
    p = SparsePermutation(source)
    source[0] = 0
    assert p.permute(0) == 1
    assert p == SparsePermutation.from_cycles([0, 1])


def test_array_from_images_rejects_non_int_images():
    with pytest.raises(ValueError):
        ArrayPermutation.from_images([1.0, 0.0, 2.0])
    with pytest.raises(ValueError):
        ArrayPermutation.from_images([True, False])
