"""
Lenia Field - Headless Entry Point

Usage:
    python -m lenia_field [species] [options]

Examples:
    python -m lenia_field
    python -m lenia_field Microbia --size 256
    python -m lenia_field Orbium --steps 500 --speed 2 --every 50
    python -m lenia_field Helix --mode pattern --seed 7

Options:
    --size N         Square field size (default 512)
    --steps N        Frames to run (default 200)
    --speed N        Ticks per frame (default 1)
    --dt X           Time step (default 0.1)
    --mode M         Initial seeding: clear, seed, random, species, pattern
    --seed N         Random seed for the initializer
    --backend B      Convolution backend: fft (default) or direct
    --every N        Print stats every N frames (default 20)
    --verbose        Debug logging
    --list           List species and exit

Use --list to see all available species.
"""

import logging
import sys

from .config import CATEGORIES
from .errors import LeniaError
from .logging_config import setup_logging
from .presets import CATALOG
from .simulator import LeniaSimulator


def run(species, size, steps, speed, dt, mode, seed, backend, every):
    """Headless mode: seed, run N frames, print field statistics."""
    try:
        sim = LeniaSimulator(species, size=size, backend=backend, seed=seed)
    except LeniaError as exc:
        print(f"Could not start simulation: {exc}")
        return 1
    if not sim.set_runtime_params(speed=speed, dt=dt, init=mode):
        print("Invalid run parameters, see log for details")
        return 1

    p = sim.params
    print(f"  Species: {sim.species.name}  R={p.R} mu={p.mu} sigma={p.sigma} "
          f"kernel_sigma={p.kernel_sigma} beta={list(p.beta)}")
    print(f"  Field: {size}x{size}, dt={dt}, speed={speed}, mode={mode}")
    print()

    for frame in range(1, steps + 1):
        sim.step_frame()
        if frame % every == 0 or frame == steps:
            s = sim.stats
            print(f"  gen {s['generation']:6d}  mass {s['mass']:12.2f}  "
                  f"mean {s['mean']:.4f}  max {s['max']:.4f}  "
                  f"alive {s['alive_pct']:5.1f}%")
    return 0


def list_species():
    print("\nAvailable species:")
    for category in CATEGORIES:
        entries = CATALOG.list_species(category)
        if not entries:
            continue
        print(f"\n  [{category}]")
        for name, _, desc in entries:
            sp = CATALOG.get(name)
            print(f"    {name:20s} R={sp.R:<3d} {desc}")
    print()


def main(argv=None):
    species = CATALOG.default.name
    size = 512
    steps = 200
    speed = 1
    dt = 0.1
    mode = "species"
    seed = None
    backend = "fft"
    every = 20
    level = logging.WARNING

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                size = int(args[i + 1])
                i += 2
            elif arg == "--steps" and i + 1 < len(args):
                steps = int(args[i + 1])
                i += 2
            elif arg == "--speed" and i + 1 < len(args):
                speed = int(args[i + 1])
                i += 2
            elif arg == "--dt" and i + 1 < len(args):
                dt = float(args[i + 1])
                i += 2
            elif arg == "--mode" and i + 1 < len(args):
                mode = args[i + 1]
                i += 2
            elif arg == "--seed" and i + 1 < len(args):
                seed = int(args[i + 1])
                i += 2
            elif arg == "--backend" and i + 1 < len(args):
                backend = args[i + 1]
                i += 2
            elif arg == "--every" and i + 1 < len(args):
                every = max(1, int(args[i + 1]))
                i += 2
            elif arg == "--verbose":
                level = logging.DEBUG
                i += 1
            elif arg == "--list":
                list_species()
                return 0
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            elif arg in CATALOG:
                species = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available species")
                return 2
    except ValueError as exc:
        print(f"Bad value for {args[i]}: {exc}")
        return 2

    setup_logging(level)
    print("Running Lenia headless")
    return run(species, size, steps, speed, dt, mode, seed, backend, every)


if __name__ == "__main__":
    sys.exit(main())
