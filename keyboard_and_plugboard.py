# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Iterable, Mapping

from debug import Debug
from errors import InvalidPlugboardError
from permutation import ALPHABET, symbolic, to_signal

debug = Debug()
debug.disable("keyboard", "plugboard")


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    def __init__(self, alphabet: str = ALPHABET) -> None:
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            sig = self.alpha_to_index[letter]
        except KeyError:
            raise ValueError(
                f"Invalid character {letter!r} for current alphabet."
            )
        debug.log("keyboard", f"{letter}->{sig}")
        return sig

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise ValueError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]

    def __contains__(self, letter: object) -> bool:
        return letter in self.alpha_to_index


# ── Plugboard ─────────────────────────────────────────────────────
class Plugboard:
    """Symmetric partial pairing of symbols, applied on the way in and out.

    *pairs* may be ``["AZ", "BY"]``, ``[("A", "Z"), (1, 24)]`` or a swap map
    ``{"A": "Z", "Z": "A"}``; a map must list both directions.
    """

    def __init__(self, pairs: Iterable[str | tuple] | Mapping[str | int, str | int] = ()) -> None:
        if isinstance(pairs, Mapping):
            pairs = self._pairs_from_map(pairs)

        self.swaps: dict[int, int] = {}

        for raw in pairs:
            # normalise to (a, b)
            if isinstance(raw, str) and len(raw) != 2:
                raise InvalidPlugboardError(f"Pair {raw!r} must be exactly 2 symbols")
            try:
                a, b = raw
            except (TypeError, ValueError):
                raise InvalidPlugboardError(f"Pair {raw!r} must be exactly 2 symbols")
            try:
                a, b = to_signal(a), to_signal(b)
            except ValueError as exc:
                raise InvalidPlugboardError(str(exc)) from exc

            if a == b:
                raise InvalidPlugboardError(
                    f"Plugboard cannot map a symbol to itself: {ALPHABET[a]}"
                )
            if a in self.swaps or b in self.swaps:
                dup = a if a in self.swaps else b
                raise InvalidPlugboardError(
                    f"Character {ALPHABET[dup]!r} already used in plugboard"
                )

            # passed validation → commit swap
            self.swaps[a], self.swaps[b] = b, a

    @staticmethod
    def _pairs_from_map(mapping: Mapping[str | int, str | int]) -> list[tuple[int, int]]:
        try:
            sig_map = {to_signal(k): to_signal(v) for k, v in mapping.items()}
        except ValueError as exc:
            raise InvalidPlugboardError(str(exc)) from exc

        pairs = []
        for a, b in sig_map.items():
            if sig_map.get(b) != a:
                raise InvalidPlugboardError(
                    f"Swap {ALPHABET[a]}->{ALPHABET[b]} has no matching "
                    f"{ALPHABET[b]}->{ALPHABET[a]}"
                )
            if a < b:
                pairs.append((a, b))
            elif a == b:
                pairs.append((a, b))      # rejected as a self-pair below
        return pairs

    # one method does the job for both directions
    @symbolic
    def swap(self, signal: int) -> int:
        out = self.swaps.get(signal, signal)
        debug.log("plugboard", f"{signal}->{out}")
        return out

    def pairs(self) -> list[str]:
        return [ALPHABET[a] + ALPHABET[b] for a, b in sorted(self.swaps.items()) if a < b]

    def __len__(self) -> int:
        return len(self.swaps) // 2

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {' '.join(self.pairs())}>"

