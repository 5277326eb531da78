# main.py
from __future__ import annotations

import argparse, json
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from debug import COMPONENTS, Debug
from keyboard_and_plugboard import Plugboard
from machine import Machine
from permutation import ALPHABET
from utilities import (
    WheelBox,
    get_settings,
    group_blocks,
    load_wheels,
    parse_positions,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()

DEFAULT_CONFIG = Path("enigma_config.json")


@dataclass(slots=True)
class Config:
    """Runtime switches for the text pipeline around the machine."""

    passthrough: bool = True            # non-alphabet chars out unchanged, no step
    uppercase: bool = True              # fold a-z into the alphabet
    block: int = 0                      # display group size (0 = no grouping)
    turnover_on_arrival: bool = True    # carry when landing on a notch


# ────────────────────────────────────────────────────────────────────────
#  1. JSON loading helpers
# ────────────────────────────────────────────────────────────────────────


def load_config(path: str | Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    required = {"rotors", "reflector"}
    missing = required - data.keys()
    if missing:
        raise ValueError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not data["rotors"]:
        raise ValueError("Config lists no rotors")
    if not isinstance(data["rotors"], list) or not all(isinstance(n, str) for n in data["rotors"]):
        raise ValueError(f"Config rotors must be a list of names, got {data['rotors']!r}")
    if not isinstance(data["reflector"], str):
        raise ValueError(f"Config reflector must be a name, got {data['reflector']!r}")
    if not isinstance(data.get("notch_map", {}), dict):
        raise ValueError("Config notch_map must map rotor names to notches")

    # a relative wheel table is found next to the config file
    wheels = data.get("wheels")
    if wheels and not Path(wheels).is_absolute():
        data["wheels"] = str(Path(path).parent / wheels)

    debug.log("config", f"Loaded {path}: rotors={data['rotors']} reflector={data['reflector']}")
    return data


def wheel_box_for(cfg: dict) -> WheelBox:
    box = WheelBox()
    if cfg.get("wheels"):
        box = box.merge(load_wheels(cfg["wheels"]))
    return box


# ────────────────────────────────────────────────────────────────────────
#  2. MachineContext – wraps a Machine & reset logic
# ────────────────────────────────────────────────────────────────────────


class MachineContext:
    """A thin wrapper so we do not pass the settings around separately."""

    def __init__(self, machine: Machine, start: Sequence[int], settings: dict) -> None:
        self.machine = machine
        self.start: list[int] = list(start)
        self.settings = settings

    @classmethod
    def from_config(cls, cfg: dict, *, on_arrival: bool = True) -> "MachineContext":
        """Build a MachineContext from a saved JSON dictionary."""
        box = wheel_box_for(cfg)
        notch_map = {k.upper(): v for k, v in cfg.get("notch_map", {}).items()}

        # fresh wheel objects, fastest rotor first
        rotors = [box.rotor(name, notch_map.get(name.upper())) for name in cfg["rotors"]]
        reflector = box.reflector(cfg["reflector"])
        plugboard = Plugboard(cfg.get("plugs", []))

        machine = Machine(rotors, reflector, plugboard, on_arrival=on_arrival)
        if cfg.get("positions") is not None:
            machine.set_positions(parse_positions(cfg["positions"]))

        return cls(machine, machine.get_positions(), cfg)

    @classmethod
    def interactive(cls, box: WheelBox | None = None, *, on_arrival: bool = True) -> "MachineContext":
        cfg = get_settings(box or WheelBox())
        return cls.from_config(cfg, on_arrival=on_arrival)

    # ––– helpers ––––––––––––––––––––––––––––––––––––––––––––––––

    def rewind(self) -> None:
        """Reset the machine to the session's start positions."""
        self.machine.set_positions(self.start)

    def encipher_block(self, text: str, *, passthrough: bool = True) -> str:
        """Rewind, then run *text*; non-alphabet chars pass if allowed."""
        self.rewind()
        out = []
        for ch in text:
            if ch in ALPHABET:
                out.append(self.machine.encrypt_char(ch))
            elif passthrough:
                out.append(ch)
            else:
                raise ValueError(f"Invalid character {ch!r} for current alphabet.")
        return "".join(out)


# ────────────────────────────────────────────────────────────────────────
#  3. CipherPipeline – the high‑level encrypt/decrypt API
# ────────────────────────────────────────────────────────────────────────


class CipherPipeline:
    """Encrypt / decrypt using the configured pipeline."""

    def __init__(self, ctx: MachineContext, cfg: Config | None = None) -> None:
        self.ctx = ctx
        self.cfg = cfg or Config()
        self.ctx.machine.on_arrival = self.cfg.turnover_on_arrival

    def _run(self, text: str) -> str:
        clean = preprocess_message(
            text, uppercase=self.cfg.uppercase, passthrough=self.cfg.passthrough
        )
        return self.ctx.encipher_block(clean, passthrough=self.cfg.passthrough)

    # ––– public API ––––––––––––––––––––––––––––––––––––––––––––

    def encrypt(self, msg: str) -> str:
        return self._run(msg)

    def decrypt(self, cipher: str) -> str:
        # the machine is its own inverse from the same start positions
        return self._run(cipher)

    def display(self, text: str) -> str:
        return group_blocks(text, self.cfg.block)


# ────────────────────────────────────────────────────────────────────────
#  4. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("-m", "--message", metavar="TEXT", help="Text to process. If omitted, an interactive REPL starts.")
    p.add_argument("--decrypt", action="store_true", help="Treat --message as ciphertext (same operation, no round-trip line).")
    p.add_argument("--config", metavar="FILE", help=f"Load machine settings from JSON (default: {DEFAULT_CONFIG} if present).")
    p.add_argument("--interactive", action="store_true", help="Ignore any JSON file and run the interactive prompt chain.")
    p.add_argument("--strip", action="store_true", help="Drop non-alphabet characters instead of passing them through.")
    p.add_argument("--block", type=int, default=0, help="Print output in groups of N letters. Default: 0 (no grouping)")
    p.add_argument("--turnover-on-leave", dest="turnover_on_arrival", action="store_false", help="Carry into the next rotor when leaving a notch instead of landing on it.")
    p.add_argument("--debug", action="append", default=[], choices=COMPONENTS, metavar="COMPONENT", help=f"Log a component ({', '.join(COMPONENTS)}); repeatable.")
    return p.parse_args(argv)


def build_context(args: argparse.Namespace) -> MachineContext:
    """Where do we get the machine settings?"""
    on_arrival = args.turnover_on_arrival
    cfg_path = Path(args.config) if args.config else DEFAULT_CONFIG

    if not args.interactive and cfg_path.exists():
        return MachineContext.from_config(load_config(cfg_path), on_arrival=on_arrival)
    if args.config and not args.interactive:
        raise FileNotFoundError(f"Config file {cfg_path} not found")
    return MachineContext.interactive(on_arrival=on_arrival)


# ────────────────────────────────────────────────────────────────────────
#  5. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if args.debug:
        debug.enable(*args.debug)

    try:
        ctx = build_context(args)
    except (OSError, ValueError) as e:
        raise SystemExit(f"❌  Failed to load configuration: {e}")

    cfg = Config(
        passthrough=not args.strip,
        block=args.block,
        turnover_on_arrival=args.turnover_on_arrival,
    )
    crypto = CipherPipeline(ctx, cfg)

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        if args.decrypt:
            print("Decrypted:", crypto.display(crypto.decrypt(args.message)))
            return
        cipher = crypto.encrypt(args.message)
        print("Encrypted:", crypto.display(cipher))
        print("Decrypted:", crypto.decrypt(cipher))
        return

    # interactive REPL ---------------------------------------------------
    print(f"\nMachine ready, window {ctx.machine.window}.")
    print("Type blank line to quit.\n")
    while True:
        txt = input("\nMessage: ")
        if not txt.strip():
            break
        cipher = crypto.encrypt(txt)
        print("\nEncrypted:", crypto.display(cipher))
        print("\nDecrypted:", crypto.decrypt(cipher))


if __name__ == "__main__":
    main()
