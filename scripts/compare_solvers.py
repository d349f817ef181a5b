#!/usr/bin/env python3
"""
Command-line comparison of the Barnes-Hut tree against direct summation.

Generates a body distribution, computes accelerations with both solvers and
reports the relative error, wall times and tree statistics.

Usage:
    python scripts/compare_solvers.py
    python scripts/compare_solvers.py --bodies 5000 --theta 0.7 --model plummer
    python scripts/compare_solvers.py --config galaxy.yaml --json
    python scripts/compare_solvers.py --help
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path if running from repository root
src_path = Path(__file__).parent.parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from celestial.config import OctreeConfig, load_config
from celestial.ICs import PlummerSphere, UniformSphere
from celestial.io import compare_with_direct


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare Barnes-Hut and direct-summation gravity",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("--bodies", "-n", type=int, default=1000,
                        help="Number of bodies")
    parser.add_argument("--model", choices=["uniform", "plummer"], default="uniform",
                        help="Initial body distribution")
    parser.add_argument("--radius", type=float, default=1.0,
                        help="Sphere radius (uniform) or scale radius (plummer)")
    parser.add_argument("--theta", type=float, default=None,
                        help="Opening angle (overrides config)")
    parser.add_argument("--softening", type=float, default=None,
                        help="Plummer softening length (overrides config)")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="YAML/JSON octree configuration file")
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed")
    parser.add_argument("--json", action="store_true",
                        help="Print results as JSON")
    return parser


def main(argv=None) -> int:
    """Main entrypoint."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.theta is not None:
        overrides["theta"] = args.theta
    if args.softening is not None:
        overrides["softening"] = args.softening

    if args.config:
        config = load_config(args.config, **overrides)
    else:
        config = OctreeConfig(**overrides)

    if args.model == "plummer":
        generator = PlummerSphere(scale_radius=args.radius, random_seed=args.seed)
    else:
        generator = UniformSphere(radius=args.radius, random_seed=args.seed)
    positions, _, masses = generator.generate(args.bodies)

    result = compare_with_direct(positions, masses, config=config)

    if args.json:
        print(json.dumps(result.as_dict(), indent=2))
        return 0

    print(f"Bodies:          {result.n_bodies} ({args.model})")
    print(f"Theta:           {result.theta}")
    print(f"Tree:            {result.node_count} nodes, depth {result.tree_depth}")
    print(f"Max rel. error:  {result.max_relative_error:.3e}")
    print(f"Mean rel. error: {result.mean_relative_error:.3e}")
    print(f"Tree time:       {result.tree_time:.3f} s")
    print(f"Direct time:     {result.direct_time:.3f} s")
    print(f"Speedup:         {result.speedup:.2f}x")
    return 0


if __name__ == "__main__":
    sys.exit(main())
