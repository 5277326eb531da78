# settings_generator.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Sequence

from permutation import ALPHABET
from utilities import WheelBox, load_wheels

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def make_settings(
    box: WheelBox,
    rng: Random | SystemRandom,
    *,
    n_rot: int = 3,
    n_pairs: int = 10,
) -> dict:
    names = box.rotor_names()
    if not 1 <= n_rot <= len(names):
        raise ValueError(f"Can pick 1–{len(names)} rotors, not {n_rot}")

    rotors = rng.sample(names, n_rot)
    return {
        "rotors": rotors,
        "reflector": rng.choice(box.reflector_names()),
        "plugs": choose_pairs(ALPHABET, n_pairs, rng),
        "positions": "".join(rng.choices(ALPHABET, k=n_rot)),
    }


def parse_cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate daily machine settings")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--rotors", type=int, default=3, help="How many rotors (default 3)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default 10)")
    p.add_argument("--wheels", type=Path, help="Extra wheel table (json from wheel_generator.py)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("enigma_config.json"),
        help="Destination JSON file (default: enigma_config.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_cli(argv)

    box = WheelBox()
    if args.wheels:
        box = box.merge(load_wheels(args.wheels))

    rng = build_rng(args.seed)
    try:
        cfg = make_settings(box, rng, n_rot=args.rotors, n_pairs=args.pairs)
    except ValueError as e:
        raise SystemExit(f"❌  {e}")
    if args.wheels:
        cfg["wheels"] = str(args.wheels)

    args.outfile.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    print(f"✅  Wrote {args.outfile}\n"
        f"   rotors      : {cfg['rotors']}\n"
        f"   reflector   : {cfg['reflector']}\n"
        f"   positions   : {cfg['positions']}\n"
        f"   plug pairs  : {len(cfg['plugs'])}")


if __name__ == "__main__":
    main()
