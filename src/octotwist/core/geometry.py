from __future__ import annotations

Vec3 = tuple[int, int, int]
Matrix3 = tuple[tuple[int, int, int], tuple[int, int, int], tuple[int, int, int]]

OCTANTS = 8


def det3(m: Matrix3) -> int:
    (a, b, c), (d, e, f), (g, h, i) = m
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def mat_mul(a: Matrix3, b: Matrix3) -> Matrix3:
    # integer 3x3 multiply
    out = []
    for r in range(3):
        row = []
        for c in range(3):
            s = 0
            for k in range(3):
                s += a[r][k] * b[k][c]
            row.append(s)
        out.append(tuple(row))
    return (out[0], out[1], out[2])  # type: ignore[return-value]


def mat_vec(m: Matrix3, v: Vec3) -> Vec3:
    x, y, z = v
    return (
        m[0][0] * x + m[0][1] * y + m[0][2] * z,
        m[1][0] * x + m[1][1] * y + m[1][2] * z,
        m[2][0] * x + m[2][1] * y + m[2][2] * z,
    )


def transpose(m: Matrix3) -> Matrix3:
    return (
        (m[0][0], m[1][0], m[2][0]),
        (m[0][1], m[1][1], m[2][1]),
        (m[0][2], m[1][2], m[2][2]),
    )


def dot(a: Vec3, b: Vec3) -> int:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def octant_normal(octant: int) -> Vec3:
    """Body diagonal of an octant.

    Bit 0 selects x, bit 1 y, bit 2 z; a set bit is the positive direction.
    """
    if not (0 <= octant < OCTANTS):
        raise ValueError("octant must be in [0..7]")
    return (
        1 if octant & 1 else -1,
        1 if octant & 2 else -1,
        1 if octant & 4 else -1,
    )


# (x, y, z) -> (z, x, y): a third of a turn about (1, 1, 1)
_CYCLE: Matrix3 = ((0, 0, 1), (1, 0, 0), (0, 1, 0))


def twist_matrix(octant: int) -> Matrix3:
    """120 degree rotation about the octant normal.

    Built as S * C * S with S = diag(normal), which conjugates the (1, 1, 1)
    turn onto the requested diagonal.
    """
    sx, sy, sz = octant_normal(octant)
    s: Matrix3 = ((sx, 0, 0), (0, sy, 0), (0, 0, sz))
    m = mat_mul(mat_mul(s, _CYCLE), s)
    if det3(m) != 1:
        raise AssertionError("twist matrix is not a proper rotation")
    return m


def inverse_twist_matrix(octant: int) -> Matrix3:
    return transpose(twist_matrix(octant))  # orthonormal => inverse == transpose


def _square_normals() -> list[Vec3]:
    normals: list[Vec3] = []
    for axis in range(3):
        for sign in (1, -1):
            v = [0, 0, 0]
            v[axis] = sign
            normals.append((v[0], v[1], v[2]))
    normals.sort()
    return normals


SQUARE_NORMALS: list[Vec3] = _square_normals()
OCTANT_NORMALS: list[Vec3] = [octant_normal(o) for o in range(OCTANTS)]

# An edge facet sits on a square, next to one of the four hexagons touching it.
EdgePosition = tuple[Vec3, Vec3]
EDGE_POSITIONS: list[EdgePosition] = [
    (s, o) for s in SQUARE_NORMALS for o in OCTANT_NORMALS if dot(s, o) > 0
]

if len(EDGE_POSITIONS) != 24:
    raise AssertionError(f"expected 24 edge positions, got {len(EDGE_POSITIONS)}")
