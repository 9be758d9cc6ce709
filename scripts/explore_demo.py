from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from octotwist import explore_random  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Random twist walk on the truncated octahedron.")
    ap.add_argument("--steps", type=int, default=10_000)
    ap.add_argument("--seeds", type=int, default=5)
    ap.add_argument("--init-seed", type=int, default=None)
    ap.add_argument("--representation", choices=["array", "sparse"], default="array")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()
    if args.seeds < 1:
        ap.error("--seeds must be >= 1")
    if args.steps < 0:
        ap.error("--steps must be >= 0")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    runs = [
        explore_random(args.steps, seed=seed, init_seed=args.init_seed, representation=args.representation)
        for seed in range(args.seeds)
    ]
    print(
        json.dumps(
            {
                "steps": args.steps,
                "representation": args.representation,
                "runs": runs,
                "min_unique": min(r["unique_state_count"] for r in runs),
                "max_unique": max(r["unique_state_count"] for r in runs),
                "avg_entropy_bits": sum(r["entropy_bits"] for r in runs) / len(runs),
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
