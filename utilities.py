# utilities.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, List, Set, Tuple

from debug import Debug
from errors import InvalidWiringError
from permutation import ALPHABET, to_signal
from rotor_and_reflector import Reflector, Rotor

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_num_re = re.compile(r"^([A-Za-z]+)(\d+)$")
_roman_re = re.compile(r"^[IVX]+$")
MAX_PAIRS = len(ALPHABET) // 2
_ROMAN = {"I": 1, "V": 5, "X": 10}


def ask(prompt: str) -> str:
    """Read & normalise an operator’s response (uppercase, trimmed)."""
    return input(prompt).strip().upper()


def _roman_value(name: str) -> int:
    total = 0
    for ch, nxt in zip(name, name[1:] + " "):
        v = _ROMAN[ch]
        total += -v if _ROMAN.get(nxt, 0) > v else v
    return total


def _nat_key(name: str):
    """Natural‑sort rotor names so I, II, …, V, L1, L2, …, L10"""
    if _roman_re.match(name):
        return (0, "", _roman_value(name))
    m = _num_re.match(name)
    if m:
        prefix, num = m.groups()
        return (1, prefix, int(num))
    return (2, name, 0)


# ────────────────────────────────────────────────────────────────────────
#  1. Wheel database
# ────────────────────────────────────────────────────────────────────────
# Notches are the window letter a rotor lands on when it turns the
# next one over (I turns on Q→R, so its notch is R).

ROTOR_SPECS: Dict[str, Tuple[str, str | int]] = {
    "I":   ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "R"),
    "II":  ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "F"),
    "III": ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "W"),
    "IV":  ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "K"),
    "V":   ("VZBRGITYUPSDNHLXAWMJQOFECK", "A"),
}

REFLECTOR_SPECS: Dict[str, str] = {
    "A": "EJMZALYXVBWFCRQUONTSPIKHGD",
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
}


class WheelBox:
    """Named wheel tables; hands out a *fresh* Rotor on every request."""

    def __init__(
        self,
        rotors: Dict[str, Tuple[str, str | int]] | None = None,
        reflectors: Dict[str, str] | None = None,
    ) -> None:
        self.rotors: Dict[str, Tuple[str, str | int]] = dict(
            ROTOR_SPECS if rotors is None else rotors
        )
        self.reflectors: Dict[str, str] = dict(
            REFLECTOR_SPECS if reflectors is None else reflectors
        )

    def rotor(self, name: str, notch: str | int | None = None) -> Rotor:
        try:
            wiring, default_notch = self.rotors[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown rotor {name!r}; have {self.rotor_names()}")
        return Rotor(wiring, default_notch if notch is None else notch)

    def reflector(self, name: str) -> Reflector:
        try:
            wiring = self.reflectors[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown reflector {name!r}; have {self.reflector_names()}")
        return Reflector(wiring)

    def rotor_names(self) -> List[str]:
        return sorted(self.rotors, key=_nat_key)

    def reflector_names(self) -> List[str]:
        return sorted(self.reflectors)

    def merge(self, other: "WheelBox") -> "WheelBox":
        return WheelBox({**self.rotors, **other.rotors}, {**self.reflectors, **other.reflectors})


def load_wheels(path: str | Path) -> WheelBox:
    """Read a wheel table written by wheel_generator.py (json format).

    Every wheel is built once here so a bad table fails at load time.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    alphabet = data.get("alphabet", ALPHABET)
    if alphabet != ALPHABET:
        raise InvalidWiringError(f"Wheel table alphabet {alphabet!r} is not {ALPHABET!r}")

    rotors: Dict[str, Tuple[str, str | int]] = {}
    for name, entry in data.get("rotors", {}).items():
        if isinstance(entry, str):
            raise InvalidWiringError(f"Rotor {name!r} has no notch")
        rotors[name.upper()] = (entry["wiring"], entry["notch"])

    reflectors = {name.upper(): wiring for name, wiring in data.get("reflectors", {}).items()}

    box = WheelBox(rotors, reflectors)
    for name in box.rotors:
        box.rotor(name)
    for name in box.reflectors:
        box.reflector(name)

    debug.log("config", f"Loaded {len(rotors)} rotors, {len(reflectors)} reflectors from {path}")
    return box


# ────────────────────────────────────────────────────────────────────────
#  2. Interactive question helpers
# ────────────────────────────────────────────────────────────────────────


def get_rotor_selection(box: WheelBox) -> List[str]:
    names = box.rotor_names()
    print("\nAvailable Rotors:", " ".join(names))
    while True:
        sel = ask("Select rotors, fastest first (e.g. I II III): ").split()
        if sel and len(set(sel)) == len(sel) and all(r in box.rotors for r in sel):
            return sel
        print("❌  Need one or more distinct, valid rotor names.")


def get_reflector_selection(box: WheelBox) -> str:
    print("\nAvailable Reflectors: ", ", ".join(box.reflector_names()))
    while True:
        ref = ask("Select reflector: ")
        if ref in box.reflectors:
            return ref
        print("❌  Not a valid reflector.")


# ––– plugboard helpers –––––––––––––––––––––––––––––––––––––––––––

def _validate_pair(pair: str, valid: Set[str], used: Set[str]) -> Tuple[bool, str | None]:
    if len(pair) != 2:
        return False, f"❌ Pair '{pair}' must be exactly 2 characters."
    a, b = pair
    if a == b:
        return False, f"❌ Pair '{pair}' cannot map to itself."
    if {a, b} - valid:
        invalid = ({a, b} - valid).pop()
        return False, f"❌ Invalid char '{invalid}' in pair '{pair}'."
    if {a, b} & used:
        dup = ({a, b} & used).pop()
        return False, f"❌ Char '{dup}' already used."
    return True, None


def get_plugboard() -> List[str]:
    """Return a list of *validated* plugboard pairs (e.g. ["AB", "CD"])."""
    valid = set(ALPHABET)

    print(f"\nPlugboard pairs (≤{MAX_PAIRS}, e.g. AB CD EF):")
    while True:
        used: Set[str] = set()
        raw = ask("Pairs (Enter for none): ")
        if not raw:
            return []

        pairs = raw.split()
        if len(pairs) > MAX_PAIRS:
            print(f"❌  Too many pairs (max {MAX_PAIRS}).")
            continue

        for p in pairs:
            ok, err = _validate_pair(p, valid, used)
            if not ok:
                print(err)
                break
            used.update(p)
        else:  # only executes if no break occurred
            return pairs


def get_start_positions(count: int) -> str | None:
    """Window letters for each rotor; None keeps every rotor on its notch."""
    valid = set(ALPHABET)
    while True:
        key = ask(f"Start positions ({count} letters, Enter = notches): ")
        if not key:
            return None
        if len(key) == count and set(key) <= valid:
            return key
        print(f"❌ Must be exactly {count} letters.")


def get_settings(box: WheelBox) -> dict:
    """Collect settings from the operator, shaped like a config file."""
    rotors = get_rotor_selection(box)
    cfg: dict = {
        "rotors": rotors,
        "reflector": get_reflector_selection(box),
        "plugs": get_plugboard(),
    }
    positions = get_start_positions(len(rotors))
    if positions is not None:
        cfg["positions"] = positions
    return cfg


# ────────────────────────────────────────────────────────────────────────
#  3. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, *, uppercase: bool = True, passthrough: bool = True) -> str:
    """Upper‑case if asked, then keep or drop the non‑alphabet characters."""
    text = msg.upper() if uppercase else msg
    if passthrough:
        return text
    return "".join(ch for ch in text if ch in ALPHABET)


def group_blocks(text: str, block: int) -> str:
    if block <= 0:
        return text
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


def parse_positions(raw: str | List[int | str]) -> List[int]:
    """``"AQZ"`` or ``[0, "Q", 25]`` → signals."""
    try:
        return [to_signal(p) for p in raw]
    except ValueError as exc:
        raise ValueError(f"Bad start positions {raw!r}: {exc}") from exc


__all__ = [
    "ROTOR_SPECS",
    "REFLECTOR_SPECS",
    "WheelBox",
    "load_wheels",
    "get_settings",
    "preprocess_message",
    "group_blocks",
    "parse_positions",
]
