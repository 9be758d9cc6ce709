from __future__ import annotations

import matplotlib.pyplot as plt

from octotwist.core.puzzle import PuzzleState


def _anchor(position) -> tuple[float, float, float]:
    # edge facets sit between their square and their hexagon
    if isinstance(position[0], tuple):
        (sx, sy, sz), (ox, oy, oz) = position
        return ((sx + ox) / 2, (sy + oy) / 2, (sz + oz) / 2)
    return (float(position[0]), float(position[1]), float(position[2]))


def plot_family(puzzle: PuzzleState, family: str, *, ax=None, title: str | None = None):
    """3D scatter of a cut family's positions colored by the label sitting there."""
    fam = puzzle.family(family)
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")

    points = [_anchor(p) for p in fam.positions]
    xs = [c[0] for c in points]
    ys = [c[1] for c in points]
    zs = [c[2] for c in points]
    colors = [puzzle.facet_at(family, k) for k in range(fam.size)]

    sc = ax.scatter(xs, ys, zs, c=colors, cmap="tab20", vmin=0, vmax=max(fam.size - 1, 1), s=60)
    plt.colorbar(sc, ax=ax, shrink=0.7, pad=0.1)

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")
    ax.set_title(title or f"{fam.name} ({puzzle.config.representation})")
    ax.set_box_aspect((1, 1, 1))
    return ax
