# wheel_generator.py
from __future__ import annotations

import argparse
import csv
import io
import json
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Sequence, Tuple

from permutation import ALPHABET
from rotor_and_reflector import Reflector

RotorRow = Tuple[str, str, int]

# ─── helpers ────────────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Return deterministic RNG when *seed* is given, else CSPRNG."""
    return Random(seed) if seed is not None else SystemRandom()  # CSPRNG


def make_rotor(rng: Random | SystemRandom) -> Tuple[str, int]:
    """Return a random permutation of the alphabet and a notch."""
    chars = list(ALPHABET)
    rng.shuffle(chars)
    return "".join(chars), rng.randrange(len(ALPHABET))


def make_reflector(rng: Random | SystemRandom) -> str:
    """Return an involutory reflector wiring (no self-maps)."""
    remaining = list(ALPHABET)
    rng.shuffle(remaining)
    wiring = [""] * len(ALPHABET)

    while remaining:
        a, b = remaining.pop(), remaining.pop()
        ia, ib = ALPHABET.index(a), ALPHABET.index(b)
        wiring[ia], wiring[ib] = b, a

    result = "".join(wiring)
    Reflector(result)       # raises if the pairing went wrong
    return result


def generate(
    n_rotors: int, n_reflectors: int, seed: int | None = None
) -> Tuple[List[RotorRow], List[Tuple[str, str]]]:
    rng_rot = build_rng(seed)
    rng_ref = build_rng(None if seed is None else seed + 100_000)

    rotors = []
    for i in range(n_rotors):
        wiring, notch = make_rotor(rng_rot)
        rotors.append((f"L{i + 1}", wiring, notch))

    reflectors = [(f"R{i + 1}", make_reflector(rng_ref)) for i in range(n_reflectors)]
    return rotors, reflectors


# ─── output formatters ─────────────────────────────────────────────────


def emit_python(rotors: Sequence[RotorRow], reflectors: Sequence[Tuple[str, str]]) -> str:
    """Return Python source for ROTOR_SPECS / REFLECTOR_SPECS entries."""
    lines: List[str] = ["ROTOR_SPECS.update({"]
    for name, wiring, notch in rotors:
        lines.append(f'    "{name}": ("{wiring}", "{ALPHABET[notch]}"),')
    lines.append("})")
    lines.append("")
    lines.append("REFLECTOR_SPECS.update({")
    for name, wiring in reflectors:
        lines.append(f'    "{name}": "{wiring}",')
    lines.append("})")
    lines.append("")  # trailing NL
    return "\n".join(lines)


def emit_json(rotors: Sequence[RotorRow], reflectors: Sequence[Tuple[str, str]]) -> str:
    payload = {
        "alphabet": ALPHABET,
        "rotors": {name: {"wiring": wiring, "notch": notch} for name, wiring, notch in rotors},
        "reflectors": {name: wiring for name, wiring in reflectors},
    }
    return json.dumps(payload, indent=2)


def emit_csv(rotors: Sequence[RotorRow], reflectors: Sequence[Tuple[str, str]]) -> str:
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(["type", "name", "wiring", "notch"])
    for name, wiring, notch in rotors:
        writer.writerow(["rotor", name, wiring, notch])
    for name, wiring in reflectors:
        writer.writerow(["reflector", name, wiring, ""])
    return out.getvalue()


FORMATTERS = {"py": emit_python, "json": emit_json, "csv": emit_csv}


# ─── CLI ───────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate random rotor and reflector wirings.")
    p.add_argument("--rotors", type=int, default=5, help="How many rotors (default 5)")
    p.add_argument(
        "--reflectors", type=int, default=2, help="How many reflectors (default 2)"
    )
    p.add_argument(
        "--seed",
        type=int,
        help="Integer seed for deterministic output "
        "(omit for cryptographically strong randomness)",
    )
    p.add_argument(
        "--format",
        choices=sorted(FORMATTERS),
        default="json",
        help="Output format (default json, the format the machine loads)",
    )
    p.add_argument(
        "--outfile",
        type=Path,
        help="Write to this file (stdout if omitted)",
    )
    return p.parse_args(argv)


# ─── main ──────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    rotors, reflectors = generate(args.rotors, args.reflectors, args.seed)
    text = FORMATTERS[args.format](rotors, reflectors)

    if args.outfile:
        args.outfile.write_text(text, encoding="utf-8")
        print(f"Wrote {args.outfile} ({args.format}, {len(text)} bytes)")
    else:
        sys.stdout.write(text)


if __name__ == "__main__":
    main()
